from datetime import datetime, timezone
from xml.etree import ElementTree

import pytest

from job_sitemap.models import JobRecord, StaticPage
from job_sitemap.renderer import (
    SITEMAP_NAMESPACE,
    build_url_entries,
    escape_xml,
    format_priority,
    format_timestamp,
    render,
)
from job_sitemap.static_pages import STATIC_PAGES

NOW = datetime(2024, 3, 5, 12, 30, 45, 123456, tzinfo=timezone.utc)
NS = {"sm": SITEMAP_NAMESPACE}
ROOT_ONLY = (StaticPage("", "daily", 1.0),)


def _locs(xml: str) -> list[str]:
    root = ElementTree.fromstring(xml.encode("utf-8"))
    return [loc.text or "" for loc in root.findall("sm:url/sm:loc", NS)]


def test_escape_xml_replaces_all_five_metacharacters() -> None:
    assert escape_xml("""a&b<c>d"e'f""") == "a&amp;b&lt;c&gt;d&quot;e&apos;f"


@pytest.mark.parametrize("value", [None, ""])
def test_escape_xml_turns_missing_values_into_empty_string(value) -> None:
    assert escape_xml(value) == ""


def test_format_timestamp_uses_millisecond_utc() -> None:
    assert format_timestamp(NOW) == "2024-03-05T12:30:45.123Z"
    assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"


def test_scenario_one_static_page_and_one_valid_job() -> None:
    jobs = [
        JobRecord(id="a", slug="engineer-x", updated_at="2024-01-01T00:00:00Z"),
        JobRecord(id="b", slug=None),
    ]

    result = render(ROOT_ONLY, jobs, "https://hiredup.me", NOW)

    assert result.xml.count("<url>") == 2
    assert _locs(result.xml) == ["https://hiredup.me", "https://hiredup.me/jobs/engineer-x"]
    assert result.metadata.valid_jobs == 1
    assert result.metadata.total_jobs == 2
    assert result.metadata.static_pages == 1
    assert result.metadata.total_urls == 2


def test_records_without_slug_never_render() -> None:
    jobs = [
        JobRecord(id="1", slug="keep-me"),
        JobRecord(id="2", slug=""),
        JobRecord(id="3"),
        JobRecord(id="4", slug="also-kept"),
    ]

    result = render((), jobs, "https://hiredup.me", NOW)

    assert _locs(result.xml) == [
        "https://hiredup.me/jobs/keep-me",
        "https://hiredup.me/jobs/also-kept",
    ]
    assert result.metadata.valid_jobs == 2
    assert result.metadata.total_jobs == 4


def test_render_is_byte_identical_for_identical_input() -> None:
    jobs = [JobRecord(id=str(i), slug=f"job-{i}", created_at="2024-02-01T00:00:00.000+00:00") for i in range(5)]

    first = render(STATIC_PAGES, jobs, "https://hiredup.me", NOW)
    second = render(STATIC_PAGES, list(jobs), "https://hiredup.me", NOW)

    assert first.xml == second.xml
    assert first.metadata == second.metadata


def test_slug_escaping_round_trips_through_xml_parser() -> None:
    slug = """dev&ops-<lead>-"quoted"-'single'"""

    result = render((), [JobRecord(id="x", slug=slug)], "https://hiredup.me", NOW)

    assert "&amp;ops-&lt;lead&gt;-&quot;quoted&quot;-&apos;single&apos;" in result.xml
    assert _locs(result.xml) == [f"https://hiredup.me/jobs/{slug}"]


def test_static_entries_come_first_in_declared_order() -> None:
    jobs = [JobRecord(id="z", slug="zeta"), JobRecord(id="a", slug="alpha")]

    result = render(STATIC_PAGES, jobs, "https://hiredup.me", NOW)
    locs = _locs(result.xml)

    assert locs[: len(STATIC_PAGES)] == [f"https://hiredup.me{page.path}" for page in STATIC_PAGES]
    assert locs[len(STATIC_PAGES):] == ["https://hiredup.me/jobs/zeta", "https://hiredup.me/jobs/alpha"]


def test_lastmod_prefers_updated_then_created_then_now() -> None:
    jobs = [
        JobRecord(id="1", slug="a", created_at="2024-01-01T00:00:00Z", updated_at="2024-01-02T00:00:00Z"),
        JobRecord(id="2", slug="b", created_at="2024-01-03T00:00:00Z"),
        JobRecord(id="3", slug="c"),
    ]

    entries = build_url_entries(ROOT_ONLY, jobs, "https://hiredup.me", "NOW")

    assert [entry.last_modified for entry in entries] == [
        "NOW",
        "2024-01-02T00:00:00Z",
        "2024-01-03T00:00:00Z",
        "NOW",
    ]


def test_url_elements_follow_sitemap_protocol() -> None:
    result = render(ROOT_ONLY, [JobRecord(id="1", slug="a")], "https://hiredup.me/", NOW)
    root = ElementTree.fromstring(result.xml.encode("utf-8"))

    assert result.xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n')
    assert root.tag == f"{{{SITEMAP_NAMESPACE}}}urlset"
    static_url, job_url = root.findall("sm:url", NS)
    assert static_url.findtext("sm:loc", namespaces=NS) == "https://hiredup.me"
    assert static_url.findtext("sm:lastmod", namespaces=NS) == "2024-03-05T12:30:45.123Z"
    assert static_url.findtext("sm:changefreq", namespaces=NS) == "daily"
    assert static_url.findtext("sm:priority", namespaces=NS) == "1.0"
    assert job_url.findtext("sm:changefreq", namespaces=NS) == "daily"
    assert job_url.findtext("sm:priority", namespaces=NS) == "0.8"


def test_metadata_size_counts_utf8_bytes() -> None:
    result = render((), [JobRecord(id="1", slug="café-barista")], "https://hiredup.me", NOW)

    assert result.metadata.sitemap_size == len(result.xml.encode("utf-8"))
    assert result.metadata.sitemap_size > len(result.xml)
    assert result.metadata.generated_at == "2024-03-05T12:30:45.123Z"


def test_static_pages_are_valid_and_unique() -> None:
    paths = [page.path for page in STATIC_PAGES]
    assert paths[0] == ""
    assert len(paths) == len(set(paths))


def test_static_page_rejects_out_of_range_values() -> None:
    with pytest.raises(ValueError):
        StaticPage("/x", "daily", 1.5)
    with pytest.raises(ValueError):
        StaticPage("/x", "fortnightly", 0.5)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("priority", "expected"),
    [(1.0, "1.0"), (0.8, "0.8"), (0.25, "0.25"), (0.05, "0.05"), (0.0, "0.0"), (1, "1.0"), (1e-05, "0.00001")],
)
def test_format_priority_keeps_exact_value(priority, expected) -> None:
    assert format_priority(priority) == expected


def test_static_priorities_render_without_rounding() -> None:
    pages = (
        StaticPage("/a", "daily", 0.25),
        StaticPage("/b", "daily", 0.75),
        StaticPage("/c", "daily", 0.05),
    )

    result = render(pages, [], "https://hiredup.me", NOW)
    root = ElementTree.fromstring(result.xml.encode("utf-8"))

    priorities = [float(node.text or "") for node in root.findall("sm:url/sm:priority", NS)]
    assert priorities == [0.25, 0.75, 0.05]

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

from job_sitemap.models import (
    ChangeFrequency,
    JobRecord,
    RenderResult,
    RunMetadata,
    StaticPage,
    UrlEntry,
)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
JOB_PATH_PREFIX = "/jobs/"
JOB_CHANGE_FREQUENCY: ChangeFrequency = "daily"
JOB_PRIORITY = 0.8

_XML_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(value: object) -> str:
    if value is None or value == "":
        return ""
    text = str(value)
    # "&" first so the other entities are not double-escaped.
    for char, entity in _XML_ENTITIES:
        text = text.replace(char, entity)
    return text


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_priority(priority: float) -> str:
    """Shortest exact decimal form, never scientific notation: 1.0, 0.8, 0.25."""
    return format(Decimal(repr(float(priority))), "f")


def valid_jobs(jobs: Sequence[JobRecord]) -> list[JobRecord]:
    return [job for job in jobs if job.has_slug]


def build_url_entries(
    static_pages: Sequence[StaticPage],
    jobs: Sequence[JobRecord],
    base_url: str,
    generated_at: str,
) -> list[UrlEntry]:
    entries = [
        UrlEntry(
            location=f"{base_url}{page.path}",
            last_modified=generated_at,
            change_frequency=page.change_frequency,
            priority=page.priority,
        )
        for page in static_pages
    ]
    entries.extend(
        UrlEntry(
            location=f"{base_url}{JOB_PATH_PREFIX}{job.slug}",
            last_modified=job.last_modified(generated_at),
            change_frequency=JOB_CHANGE_FREQUENCY,
            priority=JOB_PRIORITY,
        )
        for job in valid_jobs(jobs)
    )
    return entries


def _render_entry(entry: UrlEntry) -> str:
    return "\n".join(
        (
            "  <url>",
            f"    <loc>{escape_xml(entry.location)}</loc>",
            f"    <lastmod>{escape_xml(entry.last_modified)}</lastmod>",
            f"    <changefreq>{entry.change_frequency}</changefreq>",
            f"    <priority>{format_priority(entry.priority)}</priority>",
            "  </url>",
        )
    )


def render_sitemap(entries: Sequence[UrlEntry]) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
        *(_render_entry(entry) for entry in entries),
        "</urlset>",
    ]
    return "\n".join(lines) + "\n"


def render(
    static_pages: Sequence[StaticPage],
    jobs: Sequence[JobRecord],
    base_url: str,
    now: datetime,
) -> RenderResult:
    """Render the sitemap and its metadata.

    ``now`` is captured once by the caller so every static entry, and every
    job lacking timestamps, shares the same ``lastmod`` within a run.
    """
    generated_at = format_timestamp(now)
    base = base_url.rstrip("/")
    entries = build_url_entries(static_pages, jobs, base, generated_at)
    xml = render_sitemap(entries)

    valid_count = len(entries) - len(static_pages)
    metadata = RunMetadata(
        generated_at=generated_at,
        total_jobs=len(jobs),
        valid_jobs=valid_count,
        static_pages=len(static_pages),
        total_urls=len(entries),
        sitemap_size=len(xml.encode("utf-8")),
    )
    return RenderResult(xml=xml, metadata=metadata)

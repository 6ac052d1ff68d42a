from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from job_sitemap.appwrite import AppwriteJobStore
from job_sitemap.config import Settings, assert_required_settings
from job_sitemap.errors import EmptyResultError
from job_sitemap.fetcher import PageLister, fetch_all_jobs
from job_sitemap.models import FetchResult, PipelineResult, StaticPage
from job_sitemap.output import write_artifacts
from job_sitemap.renderer import render
from job_sitemap.static_pages import STATIC_PAGES

logger = logging.getLogger(__name__)


def _fetch(settings: Settings, list_page: PageLister | None) -> FetchResult:
    if list_page is not None:
        return fetch_all_jobs(list_page)
    with AppwriteJobStore(settings) as store:
        return fetch_all_jobs(store.list_jobs)


def run_pipeline(
    settings: Settings,
    *,
    list_page: PageLister | None = None,
    static_pages: Sequence[StaticPage] = STATIC_PAGES,
    now_utc: datetime | None = None,
) -> PipelineResult:
    run_at_utc = now_utc or datetime.now(timezone.utc)
    assert_required_settings(settings)

    fetched = _fetch(settings, list_page)
    if not fetched.records:
        raise EmptyResultError("No jobs fetched from Appwrite; refusing to publish an empty sitemap")

    result = render(static_pages, fetched.records, settings.base_url, run_at_utc)
    logger.info(
        "Rendered %d job URLs and %d static pages",
        result.metadata.valid_jobs,
        result.metadata.static_pages,
    )

    paths = write_artifacts(settings.output_dir, result)
    logger.info("Wrote %s and %s", paths.sitemap_path, paths.metadata_path)

    metadata = result.metadata
    return PipelineResult(
        total_jobs=metadata.total_jobs,
        valid_jobs=metadata.valid_jobs,
        static_pages=metadata.static_pages,
        total_urls=metadata.total_urls,
        sitemap_size=metadata.sitemap_size,
        batch_count=fetched.batch_count,
        stop_reason=fetched.stop_reason,
        sitemap_path=paths.sitemap_path,
        metadata_path=paths.metadata_path,
    )

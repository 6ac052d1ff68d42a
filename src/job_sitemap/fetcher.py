from __future__ import annotations

import logging
from collections.abc import Callable

from job_sitemap.models import DocumentPage, FetchResult, JobRecord, StopReason

logger = logging.getLogger(__name__)

PageLister = Callable[[int, int], DocumentPage]

PAGE_SIZE = 100
MAX_RECORDS = 100_000
MAX_OFFSET = 200_000
MAX_EMPTY_BATCH_STREAK = 3
PROGRESS_LOG_EVERY = 10


def fetch_all_jobs(
    list_page: PageLister,
    *,
    page_size: int = PAGE_SIZE,
    max_records: int = MAX_RECORDS,
    max_offset: int = MAX_OFFSET,
    max_empty_streak: int = MAX_EMPTY_BATCH_STREAK,
) -> FetchResult:
    """Page through the store by offset until it runs dry.

    Offsets drift when the collection changes mid-run, so records are
    deduplicated by id and the loop gives up after ``max_empty_streak``
    consecutive pages that add nothing new. Errors raised by ``list_page``
    propagate untouched.
    """
    records: list[JobRecord] = []
    seen_ids: set[str] = set()
    offset = 0
    batch_count = 0
    empty_streak = 0
    stop_reason: StopReason = "exhausted"

    logger.info("Fetching jobs (page size %d)", page_size)

    while True:
        if offset >= max_offset:
            logger.warning("Offset ceiling %d reached; keeping %d jobs", max_offset, len(records))
            stop_reason = "max_offset"
            break

        page = list_page(offset, page_size)
        batch_count += 1
        if not page.records:
            logger.info("Batch %d: empty page, no more documents", batch_count)
            break

        added = 0
        for record in page.records:
            if record.id in seen_ids:
                continue
            seen_ids.add(record.id)
            records.append(record)
            added += 1

        offset += len(page.records)
        empty_streak = 0 if added else empty_streak + 1
        logger.debug(
            "Batch %d: %d returned, %d new (total %d, offset %d)",
            batch_count,
            len(page.records),
            added,
            len(records),
            offset,
        )
        if batch_count % PROGRESS_LOG_EVERY == 0:
            logger.info("Batch %d: %d jobs so far", batch_count, len(records))

        if len(records) >= max_records:
            del records[max_records:]
            logger.warning("Record ceiling %d reached; stopping fetch", max_records)
            stop_reason = "max_records"
            break
        if empty_streak >= max_empty_streak:
            logger.warning(
                "%d consecutive batches without new jobs; stopping at offset %d",
                empty_streak,
                offset,
            )
            stop_reason = "duplicate_streak"
            break

    logger.info("Finished fetching: %d jobs in %d batches (%s)", len(records), batch_count, stop_reason)
    return FetchResult(records=records, batch_count=batch_count, stop_reason=stop_reason)

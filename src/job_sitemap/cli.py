from __future__ import annotations

import argparse
import logging
import sys
import tempfile

from job_sitemap.config import (
    RUN_REQUIRED_ENVS,
    assert_required_envs,
    load_settings,
    mask_secret,
    missing_envs,
)
from job_sitemap.errors import ConfigError
from job_sitemap.logging_setup import LOGGER_NAME, configure_logging
from job_sitemap.pipeline import run_pipeline

logger = logging.getLogger(LOGGER_NAME)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="job-sitemap")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Fetch jobs from Appwrite and write sitemap.xml + metadata.json")
    subparsers.add_parser("healthcheck", help="Validate config and output directory without network calls")

    return parser


def _cmd_run() -> int:
    assert_required_envs(RUN_REQUIRED_ENVS)
    settings = load_settings()
    configure_logging(settings.log_level)

    logger.info("=== Sitemap generation started ===")
    logger.info(
        "Project %s, key %s, collection %s",
        settings.appwrite_project_id,
        mask_secret(settings.appwrite_api_key),
        settings.collection_id,
    )
    result = run_pipeline(settings)

    print(
        "run summary:",
        f"total_jobs={result.total_jobs}",
        f"valid_jobs={result.valid_jobs}",
        f"static_pages={result.static_pages}",
        f"total_urls={result.total_urls}",
        f"sitemap_kb={result.sitemap_size / 1024:.2f}",
        f"batches={result.batch_count}",
        f"stop_reason={result.stop_reason}",
    )
    print(f"saved to: {result.sitemap_path}")
    return 0


def _cmd_healthcheck() -> int:
    missing = missing_envs(RUN_REQUIRED_ENVS)
    if missing:
        print("missing required env vars:", ", ".join(missing), file=sys.stderr)
        return 1

    settings = load_settings()
    try:
        settings.output_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryFile(dir=settings.output_dir):
            pass
    except OSError as exc:
        print(f"output dir check failed: {exc}", file=sys.stderr)
        return 1

    print(f"output dir ready: {settings.output_dir}")
    print("healthcheck passed")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    try:
        if args.command in (None, "run"):
            return _cmd_run()
        if args.command == "healthcheck":
            return _cmd_healthcheck()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("=== ERROR ===")
        logger.exception("%s", exc)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

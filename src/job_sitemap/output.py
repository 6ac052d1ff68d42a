from __future__ import annotations

import json
from pathlib import Path

from job_sitemap.models import ArtifactPaths, RenderResult

SITEMAP_FILENAME = "sitemap.xml"
METADATA_FILENAME = "metadata.json"


def _staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.tmp")


def write_artifacts(output_dir: Path | str, result: RenderResult) -> ArtifactPaths:
    """Write both artifacts, replacing the previous pair only once both are on disk."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    sitemap_path = directory / SITEMAP_FILENAME
    metadata_path = directory / METADATA_FILENAME
    contents = {
        sitemap_path: result.xml,
        metadata_path: json.dumps(result.metadata.to_dict(), indent=2),
    }

    staged: list[tuple[Path, Path]] = []
    try:
        for target, text in contents.items():
            staging = _staging_path(target)
            staged.append((staging, target))
            staging.write_text(text, encoding="utf-8")
    except OSError:
        for staging, _ in staged:
            staging.unlink(missing_ok=True)
        raise

    for staging, target in staged:
        staging.replace(target)

    return ArtifactPaths(sitemap_path=sitemap_path, metadata_path=metadata_path)

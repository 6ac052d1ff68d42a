from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping

ChangeFrequency = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]
CHANGE_FREQUENCIES: frozenset[str] = frozenset(
    ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")
)

StopReason = Literal["exhausted", "duplicate_streak", "max_records", "max_offset"]


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


@dataclass(frozen=True)
class JobRecord:
    id: str
    slug: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> JobRecord:
        # Appwrite system attributes carry a "$" prefix; plain keys are accepted for fixtures.
        record_id = document.get("$id", document.get("id"))
        if record_id is None or str(record_id) == "":
            raise ValueError("document has no id")
        return cls(
            id=str(record_id),
            slug=_optional_str(document.get("slug")),
            created_at=_optional_str(document.get("$createdAt", document.get("createdAt"))),
            updated_at=_optional_str(document.get("$updatedAt", document.get("updatedAt"))),
        )

    @property
    def has_slug(self) -> bool:
        return bool(self.slug)

    def last_modified(self, fallback: str) -> str:
        return self.updated_at or self.created_at or fallback


@dataclass(frozen=True)
class StaticPage:
    path: str
    change_frequency: ChangeFrequency
    priority: float

    def __post_init__(self) -> None:
        if self.change_frequency not in CHANGE_FREQUENCIES:
            raise ValueError(f"invalid change frequency: {self.change_frequency!r}")
        if not 0.0 <= self.priority <= 1.0:
            raise ValueError(f"priority must be within [0, 1], got {self.priority}")


@dataclass(frozen=True)
class UrlEntry:
    location: str
    last_modified: str
    change_frequency: ChangeFrequency
    priority: float


@dataclass(frozen=True)
class DocumentPage:
    records: list[JobRecord]
    total: int | None = None


@dataclass(frozen=True)
class FetchResult:
    records: list[JobRecord]
    batch_count: int
    stop_reason: StopReason


@dataclass(frozen=True)
class RunMetadata:
    generated_at: str
    total_jobs: int
    valid_jobs: int
    static_pages: int
    total_urls: int
    sitemap_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "totalJobs": self.total_jobs,
            "validJobs": self.valid_jobs,
            "staticPages": self.static_pages,
            "totalUrls": self.total_urls,
            "sitemapSize": self.sitemap_size,
        }


@dataclass(frozen=True)
class RenderResult:
    xml: str
    metadata: RunMetadata


@dataclass(frozen=True)
class ArtifactPaths:
    sitemap_path: Path
    metadata_path: Path


@dataclass(frozen=True)
class PipelineResult:
    total_jobs: int
    valid_jobs: int
    static_pages: int
    total_urls: int
    sitemap_size: int
    batch_count: int
    stop_reason: StopReason
    sitemap_path: Path
    metadata_path: Path

from __future__ import annotations

import json
import logging
from contextlib import AbstractContextManager
from typing import Any

import httpx

from job_sitemap.config import Settings, assert_required_settings
from job_sitemap.errors import StoreError
from job_sitemap.models import DocumentPage, JobRecord

logger = logging.getLogger(__name__)

RESPONSE_FORMAT = "1.5.0"
USER_AGENT = "job-sitemap/0.1"


def order_desc(attribute: str) -> str:
    return json.dumps({"method": "orderDesc", "attribute": attribute})


def limit_query(limit: int) -> str:
    return json.dumps({"method": "limit", "values": [limit]})


def offset_query(offset: int) -> str:
    return json.dumps({"method": "offset", "values": [offset]})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


class AppwriteJobStore(AbstractContextManager["AppwriteJobStore"]):
    """Lists job documents from one Appwrite collection over the REST API."""

    def __init__(self, settings: Settings, *, transport: httpx.BaseTransport | None = None):
        assert_required_settings(settings)
        self.database_id = settings.database_id
        self.collection_id = settings.collection_id
        self.client = httpx.Client(
            base_url=settings.appwrite_endpoint,
            headers={
                "X-Appwrite-Project": settings.appwrite_project_id,
                "X-Appwrite-Key": settings.appwrite_api_key,
                "X-Appwrite-Response-Format": RESPONSE_FORMAT,
                "User-Agent": USER_AGENT,
            },
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    @property
    def documents_path(self) -> str:
        return f"/databases/{self.database_id}/collections/{self.collection_id}/documents"

    def list_jobs(self, offset: int, limit: int) -> DocumentPage:
        queries = [order_desc("$createdAt"), limit_query(limit)]
        if offset:
            queries.append(offset_query(offset))
        params = [("queries[]", query) for query in queries]
        logger.debug("GET %s offset=%d limit=%d", self.documents_path, offset, limit)

        try:
            response = self.client.get(self.documents_path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = _error_message(exc.response)
            raise StoreError(
                f"Appwrite request failed ({status}) at offset {offset}: {message}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise StoreError(f"Appwrite request error at offset {offset}: {exc}") from exc

        try:
            body: dict[str, Any] = response.json()
            documents = body["documents"]
            records = [JobRecord.from_document(document) for document in documents]
            raw_total = body.get("total")
            total = int(raw_total) if raw_total is not None else None
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise StoreError(f"Malformed Appwrite response at offset {offset}: {exc}") from exc

        return DocumentPage(records=records, total=total)

    def close(self) -> None:
        self.client.close()

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()

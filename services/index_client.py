"""HTTP client for a Typesense-style document index.

Declares collections and upserts newline-delimited JSON batches. Every
request carries the static API key header. Transient failures are retried
with exponential backoff; everything else surfaces as a TransportError kind.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote

import requests
from pydantic import BaseModel

from config.settings import Settings
from errors import AuthError, SchemaError, TransportError
from models.collection_schema import CollectionSchema
from services.json_stream import encode_ndjson


RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}


@dataclass
class BatchResult:
    sent: int = 0
    imported: int = 0
    unserializable: int = 0
    rejected: List[Tuple[Dict[str, Any], str]] = field(default_factory=list)


class IndexClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        api_key_header: str = "X-TYPESENSE-API-KEY",
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        max_retries: int = 0,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not base_url or not api_key:
            raise ValueError("Index URL and API key must be set")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        url: Optional[str] = None,
        key: Optional[str] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> "IndexClient":
        return cls(
            url or settings.index_url or "",
            key or settings.index_api_key or "",
            api_key_header=settings.index_api_key_header,
            session=session,
            timeout=settings.http_timeout_seconds,
            max_retries=settings.max_retries if max_retries is None else max_retries,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    def _status_error(self, method: str, path: str, resp: requests.Response) -> TransportError:
        msg = f"{method} {path} returned {resp.status_code}: {resp.text[:200]}"
        if resp.status_code in (401, 403):
            return AuthError(msg, status_code=resp.status_code)
        return TransportError(msg, status_code=resp.status_code, retryable=resp.status_code in RETRYABLE_STATUS)

    def _request(
        self,
        method: str,
        path: str,
        *,
        accept: Sequence[int] = (),
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        all_headers = {self.api_key_header: self.api_key}
        if headers:
            all_headers.update(headers)

        for attempt in range(self.max_retries + 1):
            try:
                resp = self.session.request(method, url, headers=all_headers, timeout=self.timeout, **kwargs)
            except requests.exceptions.RequestException as e:
                err = TransportError(f"{method} {path} failed: {e}", retryable=True)
            else:
                if resp.status_code < 400 or resp.status_code in accept:
                    return resp
                err = self._status_error(method, path, resp)
                if not err.retryable:
                    raise err

            if attempt < self.max_retries:
                delay = self.backoff_seconds * (2 ** attempt)
                logging.warning(
                    f"Request error on attempt {attempt + 1}, retrying in {delay:.1f}s",
                    extra={"step": "http", "status": "retry", "error": err.message},
                )
                self.sleep(delay)
        raise err

    def create_collection(self, schema: CollectionSchema) -> bool:
        """Declare the collection. Returns False when it already exists."""
        try:
            resp = self._request("POST", "/collections", json=schema.to_payload(), accept=(409,))
        except AuthError:
            raise
        except TransportError as e:
            if e.status_code is not None and 400 <= e.status_code < 500 and not e.retryable:
                raise SchemaError(f"Collection '{schema.name}' was refused: {e.message}") from e
            raise
        if resp.status_code == 409:
            logging.info(
                f"Collection '{schema.name}' already exists; importing into it",
                extra={"step": "declare", "status": "exists"},
            )
            return False
        logging.info(f"Created collection '{schema.name}'", extra={"step": "declare", "status": "created"})
        return True

    def import_documents(self, collection: str, records: Iterable[BaseModel]) -> BatchResult:
        """Upsert one batch as newline-delimited JSON."""
        body, documents, dropped = encode_ndjson(records, with_id=True)
        result = BatchResult(sent=len(documents), unserializable=dropped)
        if dropped:
            logging.debug(f"Dropped {dropped} unserializable record(s) from batch", extra={"step": "import"})
        if not documents:
            return result

        resp = self._request(
            "POST",
            f"/collections/{quote(collection, safe='')}/documents/import",
            params={"action": "upsert"},
            data=body.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )
        result.rejected = _rejected_documents(resp.text, documents)
        result.imported = result.sent - len(result.rejected)
        return result


def _rejected_documents(text: str, documents: List[Dict[str, Any]]) -> List[Tuple[Dict[str, Any], str]]:
    # One JSON status line per submitted document, in order
    rejected: List[Tuple[Dict[str, Any], str]] = []
    for i, line in enumerate((text or "").splitlines()):
        if i >= len(documents) or not line.strip():
            continue
        try:
            status = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(status, dict) and status.get("success") is False:
            rejected.append((documents[i], str(status.get("error") or "rejected")))
    return rejected

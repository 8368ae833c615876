"""
Shared plumbing for the read-only provider API clients.

Every client fails soft: a non-2xx response, a transport error or an
unreadable body is logged and turned into a FetchResult carrying the error.
The public list methods on each client collapse that into an empty list, so
the sync engine only ever sees data or no data.
"""

import httpx
from dataclasses import dataclass
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import logging

from cloud_tracker.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass
class FetchResult(Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProviderClient:
    """Base class: one authenticated httpx.Client per provider credential."""

    provider = "provider"

    def __init__(
        self,
        token: Optional[str],
        base_url: str,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token
        self.http = httpx.Client(
            base_url=base_url,
            headers=self._headers(),
            timeout=timeout if timeout is not None else settings.provider_http_timeout,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> FetchResult[Any]:
        """GET a JSON document. Never raises."""
        try:
            response = self.http.get(path, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"{self.provider} request to {path} failed: {e}")
            return FetchResult(error=str(e))

        if not response.is_success:
            logger.error(f"{self.provider} API error: {response.status_code} {response.reason_phrase} ({path})")
            return FetchResult(error=f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{self.provider} returned non-JSON body for {path}: {e}")
            return FetchResult(error="invalid JSON", status_code=response.status_code)

        return FetchResult(data=payload, status_code=response.status_code)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def parse_records(model: Type[M], items: Any, source: str) -> List[M]:
    """Validate a list of raw provider records, skipping (and logging) malformed ones."""
    if not isinstance(items, list):
        if items is not None:
            logger.warning(f"Expected a list of {source} records, got {type(items).__name__}")
        return []
    records = []
    for item in items:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {source} record: {e.error_count()} validation error(s)")
    return records

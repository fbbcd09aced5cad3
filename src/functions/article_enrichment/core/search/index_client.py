"""Minimal Meilisearch REST client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..config import SearchConfig

logger = logging.getLogger(__name__)

PRIMARY_KEY = "id"


class SearchIndexError(RuntimeError):
    """Raised when Meilisearch rejects a request or cannot be reached."""


class MeilisearchIndexClient:
    """Talk to one Meilisearch index over HTTP.

    Write endpoints return an enqueued task; the client does not wait for it.
    """

    def __init__(self, config: SearchConfig, *, http_client: Optional[httpx.Client] = None) -> None:
        if not config.enabled:
            raise ValueError("MEILISEARCH_URL must be set to use the search index")
        self.config = config
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = http_client or httpx.Client(
            base_url=config.url.rstrip("/"),
            headers=headers,
            timeout=config.timeout_seconds,
        )

    @property
    def _index_path(self) -> str:
        return f"/indexes/{self.config.index_uid}"

    def update_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"{self._index_path}/settings", json=settings)

    def add_documents(self, documents: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"{self._index_path}/documents",
            json=list(documents),
            params={"primaryKey": PRIMARY_KEY},
        )

    def delete_document(self, document_id: Any) -> Dict[str, Any]:
        return self._request("DELETE", f"{self._index_path}/documents/{document_id}")

    def delete_all_documents(self) -> Dict[str, Any]:
        return self._request("DELETE", f"{self._index_path}/documents")

    def search(
        self,
        query: str,
        *,
        limit: int = 20,
        sort: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"q": query, "limit": limit}
        if sort:
            payload["sort"] = sort
        result = self._request("POST", f"{self._index_path}/search", json=payload)
        return list(result.get("hits", []))

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SearchIndexError(
                f"Meilisearch {method} {path} failed with {exc.response.status_code}: "
                f"{exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SearchIndexError(f"Meilisearch {method} {path} failed: {exc}") from exc

        if not response.content:
            return {}
        return response.json()

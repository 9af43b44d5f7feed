"""
RevCat Search Client

Thin async client for the RevCat GraphQL API. Only the vector search query
is used: given a query embedding it returns the closest catalogue documents,
ranked by similarity (highest first).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from ..config import settings
from .models import Fragment

logger = logging.getLogger("revcatgpt.revcat")


VECTOR_SEARCH_QUERY = """
query VectorSearchShort($vector: [Float!]!, $first: Int) {
  vectorSearch(vector: $vector, first: $first) {
    edges {
      id
      signature
      title { lang value translated }
      abstract { lang value translated }
      series
      place
      date
      category
      url
      persons { name role }
      media { name type mimetype uri width height }
    }
  }
}
"""


class SearchError(RuntimeError):
    """Raised when the vector search request fails or returns garbage."""


class RevcatClient:
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        insecure: Optional[bool] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint or settings.revcat_endpoint
        self.api_key = api_key if api_key is not None else settings.revcat_api_key.get_secret_value()
        self.verify = not (insecure if insecure is not None else settings.revcat_insecure)
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def _request(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with httpx.AsyncClient(
            timeout=self.timeout,
            verify=self.verify,
            transport=self._transport,
        ) as client:
            try:
                resp = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
                resp.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error("RevCat request failed (%s): %s", type(exc).__name__, exc)
                raise SearchError(f"search request failed: {type(exc).__name__}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise SearchError("search response is not valid JSON") from exc

        if data.get("errors"):
            messages = "; ".join(str(e.get("message", e)) for e in data["errors"])
            raise SearchError(f"search returned errors: {messages}")
        return data.get("data") or {}

    async def search(self, embedding: Sequence[float], limit: int) -> List[Fragment]:
        """
        Return up to ``limit`` documents closest to ``embedding``, best first.

        Raises
        ------
        SearchError
            On transport errors, GraphQL errors or malformed results.
        """
        data = await self._request(
            VECTOR_SEARCH_QUERY,
            {"vector": [float(v) for v in embedding], "first": limit},
        )

        edges = (data.get("vectorSearch") or {}).get("edges") or []
        try:
            return [Fragment.model_validate(edge) for edge in edges]
        except ValidationError as exc:
            raise SearchError(f"malformed search result: {exc.error_count()} validation errors") from exc

"""
Embedding Client

This module implements the embedding provider client used to turn a chat
query into a vector. It talks to the OpenAI embeddings API (or any compatible
provider) and is responsible for:

- Network and transport error isolation
- Strict response validation
- Returning vectors in the provider's native single precision

The class performs no caching; the context pipeline owns the query cache.
"""

from __future__ import annotations

from typing import List, Optional
import logging

import httpx
import numpy as np

from ..config import settings

logger = logging.getLogger("revcatgpt.embedder")


class EmbeddingError(RuntimeError):
    """Raised when embedding generation fails."""


class Embedder:
    """
    Asynchronous embedding generator for single query strings.

    Stateless and safe to reuse across requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize an Embedder.

        Parameters
        ----------
        api_key : Optional[str]
            Optional override for the API key. Defaults to settings.openai_api_key.

        model : Optional[str]
            Optional override for the embedding model. Defaults to settings.embedding_model.

        base_url : Optional[str]
            API base URL; ``/embeddings`` is appended. Defaults to settings.openai_base_url.

        timeout : Optional[float]
            HTTP timeout for each request. Defaults to settings.request_timeout.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, used by tests to intercept requests.
        """
        self.api_key = api_key or settings.openai_api_key.get_secret_value()
        self.model = model or settings.embedding_model
        self.url = (base_url or settings.openai_base_url).rstrip("/") + "/embeddings"
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> np.ndarray:
        """
        Generate the embedding for one input text.

        Returns
        -------
        np.ndarray
            A one-dimensional float32 vector. Empty if the provider returned
            no embedding at all.

        Raises
        ------
        EmbeddingError
            If the request fails or the response is malformed.
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = {
            "model": self.model,
            "input": [text],
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self.url,
                    json=payload,
                    headers=headers,
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error(
                    "Embedding request failed (%s): model=%s, error=%s",
                    type(exc).__name__,
                    self.model,
                    str(exc),
                )
                raise EmbeddingError(
                    f"Embedding generation failed: {type(exc).__name__}"
                ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise EmbeddingError("Embedding response is not valid JSON.") from exc

        embeddings = self._extract_embeddings(data)
        if not embeddings:
            return np.empty(0, dtype=np.float32)
        return np.asarray(embeddings[0], dtype=np.float32)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_embeddings(data: dict) -> List[List[float]]:
        """
        Parse and validate embedding output format.

        OpenAI returns:
            { "data": [ {"embedding": [...]}, ... ] }

        Raises
        ------
        EmbeddingError
            If the API returns unexpected structure.
        """
        if not isinstance(data, dict) or "data" not in data:
            raise EmbeddingError("Embedding response missing 'data' field.")

        records = data["data"]
        if not isinstance(records, list):
            raise EmbeddingError("'data' field must be a list.")

        embeddings: List[List[float]] = []

        for index, record in enumerate(records):
            if not isinstance(record, dict) or "embedding" not in record:
                raise EmbeddingError(
                    f"Malformed embedding record at index {index}: {record!r}"
                )

            emb = record["embedding"]
            if not isinstance(emb, list) or not all(
                isinstance(x, (float, int)) for x in emb
            ):
                raise EmbeddingError(
                    f"Invalid embedding vector at index {index}: must be float list."
                )

            embeddings.append([float(x) for x in emb])

        return embeddings

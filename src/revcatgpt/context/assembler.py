"""
Context Assembler

Turns a free-text chat query into a block of supporting evidence for a GPT
prompt. One ``assemble`` call runs these steps in order:

1. Reject empty queries.
2. Detect the query language, falling back to the default language.
3. Resolve the query embedding from the cache, or from the embedding
   provider on a miss (and cache it).
4. Run the similarity search with the embedding.
5. Render the ranked fragments one by one, in search order, until the token
   budget is exceeded.

Every failure raises a ``ContextError`` subclass; partial context is never
returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterator, List, Optional

import numpy as np

from ..cache.embedding_cache import EmbeddingCache
from ..clients.embedder import Embedder, EmbeddingError
from ..clients.models import Fragment
from ..clients.revcat import RevcatClient, SearchError
from ..core.errors import BadRequestError, NotFoundError, RenderError, UpstreamError
from ..language.bundle import parse_language
from ..language.detector import LanguageDetector
from ..render.renderer import ContextRenderer, TemplateRenderError
from .budget import take_within_budget
from .tokens import DEFAULT_MODEL, estimate_tokens

logger = logging.getLogger("revcatgpt.context")

SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class AssembledContext:
    text: str
    tokens: int
    language: str
    fragment_count: int


class ContextAssembler:
    """
    Request-independent pipeline; a single instance serves concurrent requests.

    The embedding cache is the only shared mutable state and is passed in,
    so its lifetime is owned by whoever builds the assembler.
    """

    def __init__(
        self,
        detector: LanguageDetector,
        cache: EmbeddingCache,
        embedder: Embedder,
        search_client: RevcatClient,
        renderer: ContextRenderer,
        default_language: str = "en",
        search_limit: int = 30,
        token_budget: int = 3000,
        token_model: str = DEFAULT_MODEL,
        estimate: Optional[Callable[[str], int]] = None,
    ) -> None:
        self.detector = detector
        self.cache = cache
        self.embedder = embedder
        self.search_client = search_client
        self.renderer = renderer
        self.default_language = default_language
        self.search_limit = search_limit
        self.token_budget = token_budget
        self.estimate = estimate or partial(estimate_tokens, model=token_model)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def assemble(self, query: str) -> AssembledContext:
        """
        Build the context text for ``query``.

        Raises
        ------
        BadRequestError
            Empty query, or a detected language that cannot be parsed.
        UpstreamError
            Embedding provider or search failure, or no embedding returned.
        NotFoundError
            The search matched no documents.
        RenderError
            A fragment could not be rendered.
        """
        if not query:
            raise BadRequestError("query is empty")

        lang = self.detect_language(query)
        embedding = await self.resolve_embedding(query)
        fragments = await self.search(query, embedding)

        parts: List[str] = []
        tokens = 0
        for item in take_within_budget(
            self._render_all(query, fragments, lang),
            self.token_budget,
            self.estimate,
        ):
            parts.append(item.text + SEPARATOR)
            tokens = item.total

        logger.info("tokens: %d (%d of %d fragments, lang=%s)", tokens, len(parts), len(fragments), lang)
        return AssembledContext(
            text="".join(parts),
            tokens=tokens,
            language=lang,
            fragment_count=len(parts),
        )

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def detect_language(self, query: str) -> str:
        detected = self.detector.detect(query)
        if detected is None:
            return self.default_language
        try:
            return parse_language(detected)
        except ValueError as exc:
            raise BadRequestError(f"cannot parse language {detected}") from exc

    async def resolve_embedding(self, query: str) -> np.ndarray:
        key = self.cache.key_for(query)
        cached = self.cache.get(key)
        if cached is not None and len(cached) > 0:
            logger.debug("Embedding cache hit for %s", key)
            return cached

        try:
            embedding = await self.embedder.embed(query)
        except EmbeddingError as exc:
            raise UpstreamError(f"cannot create embedding for query {query} - {exc}") from exc

        if embedding is None or len(embedding) == 0:
            raise UpstreamError(f"no embedding returned for query {query}")

        return self.cache.put(key, embedding)

    async def search(self, query: str, embedding: np.ndarray) -> List[Fragment]:
        # Search takes double precision; float32 -> float64 is exact.
        vector = np.asarray(embedding, dtype=np.float32).astype(np.float64)
        try:
            fragments = await self.search_client.search(vector, self.search_limit)
        except SearchError as exc:
            raise UpstreamError(f"cannot search for query {query}: {exc}") from exc

        if not fragments:
            raise NotFoundError(f"no documents found for query {query}")
        return list(fragments)

    def _render_all(self, query: str, fragments: List[Fragment], lang: str) -> Iterator[str]:
        for fragment in fragments:
            try:
                yield self.renderer.render(fragment, lang)
            except TemplateRenderError as exc:
                raise RenderError(f"cannot execute template for query {query}: {exc}") from exc

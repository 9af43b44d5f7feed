from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ..config import settings
from ..cache.embedding_cache import EmbeddingCache
from ..clients.embedder import Embedder
from ..clients.revcat import RevcatClient
from ..context.assembler import ContextAssembler
from ..language.bundle import MessageBundle
from ..language.detector import LanguageDetector
from ..render.functions import TemplateFunctions
from ..render.renderer import ContextRenderer

# Process-wide singletons: built on first use, kept until shutdown.


@lru_cache
def get_message_bundle() -> MessageBundle:
    return MessageBundle.load(
        settings.locale_folder,
        settings.locale_available,
        settings.locale_default,
    )


@lru_cache
def get_language_detector() -> LanguageDetector:
    return LanguageDetector(get_message_bundle().languages)


@lru_cache
def get_embedding_cache() -> EmbeddingCache:
    return EmbeddingCache(capacity=settings.cache_size)


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


@lru_cache
def get_search_client() -> RevcatClient:
    return RevcatClient()


@lru_cache
def get_renderer() -> ContextRenderer:
    return ContextRenderer(
        TemplateFunctions.for_bundle(get_message_bundle()),
        templates_dir=settings.templates_dir,
    )


def get_context_assembler(
    detector: Annotated[LanguageDetector, Depends(get_language_detector)],
    cache: Annotated[EmbeddingCache, Depends(get_embedding_cache)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
    search_client: Annotated[RevcatClient, Depends(get_search_client)],
    renderer: Annotated[ContextRenderer, Depends(get_renderer)],
) -> ContextAssembler:
    return ContextAssembler(
        detector=detector,
        cache=cache,
        embedder=embedder,
        search_client=search_client,
        renderer=renderer,
        default_language=settings.locale_default,
        search_limit=settings.search_limit,
        token_budget=settings.token_budget,
        token_model=settings.token_model,
    )

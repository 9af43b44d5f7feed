from typing import Annotated

from fastapi import APIRouter, Depends

from .models import HealthResponse
from .dependencies import get_embedding_cache, get_message_bundle
from ..cache.embedding_cache import EmbeddingCache
from ..language.bundle import MessageBundle

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(
    bundle: Annotated[MessageBundle, Depends(get_message_bundle)],
    cache: Annotated[EmbeddingCache, Depends(get_embedding_cache)],
) -> HealthResponse:
    return HealthResponse(
        default_language=bundle.default_language,
        languages=bundle.languages,
        cache=cache.stats(),
    )

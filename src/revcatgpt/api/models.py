"""
API Models

Pydantic models for the JSON responses of the HTTP API. The context endpoint
itself answers with ``text/plain`` and only uses ``HTTPResultMessage`` for
failures.
"""

from __future__ import annotations

from typing import List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict


class HTTPResultMessage(BaseModel):
    """
    Error payload returned by every failing request.
    """
    message: str

    model_config = ConfigDict(extra="forbid")


class HealthResponse(BaseModel):
    """
    Liveness information plus the state of the embedding cache.
    """
    status: str = "ok"
    default_language: str
    languages: List[str] = Field(default_factory=list)
    cache: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

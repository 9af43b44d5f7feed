"""
Search Result Models

Canonical representation of one catalogue document returned by the RevCat
vector search. Each ``Fragment`` is rendered into one unit of GPT context.

The backend owns this schema, so unknown fields are ignored rather than
rejected.
"""

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class MultiLangFragment(BaseModel):
    """
    One language variant of a text value.
    """
    lang: str = Field(..., description="Language tag of this variant.")
    value: str = Field(..., description="Text in that language.")
    translated: bool = Field(
        default=False,
        description="True if machine/human translated, False for the original.",
    )

    model_config = ConfigDict(extra="ignore", frozen=True)


class Person(BaseModel):
    name: str = Field(..., min_length=1)
    role: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class MediaRef(BaseModel):
    """
    Reference to a media item (image, video, document) attached to a fragment.
    """
    name: str = ""
    type: Optional[str] = None
    mimetype: Optional[str] = None
    uri: str = Field(..., min_length=1)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="ignore", frozen=True)


class Fragment(BaseModel):
    """
    A matched catalogue document, as returned by the similarity search.
    """
    id: str = Field(..., min_length=1)
    signature: Optional[str] = None
    title: List[MultiLangFragment] = Field(default_factory=list)
    abstract: List[MultiLangFragment] = Field(default_factory=list)
    series: Optional[str] = None
    place: Optional[str] = None
    date: Optional[str] = None
    category: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    persons: List[Person] = Field(default_factory=list)
    media: List[MediaRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("title", "abstract", "category", "persons", "media", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        # GraphQL returns null for absent lists.
        return [] if value is None else value

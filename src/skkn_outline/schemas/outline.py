"""Outline output model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from skkn_outline.schemas.sections import SectionNode


class OutlineResult(BaseModel):
    """Final outline output."""

    summary: str
    sections_tree: str
    content: str
    sections: list[SectionNode] = Field(default_factory=list)

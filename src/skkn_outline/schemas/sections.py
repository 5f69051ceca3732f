"""Section tree models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SectionNode(BaseModel):
    """One node of a flat, parent-linked section outline.

    Attributes:
        id: Identifier, unique within one outline.
        title: First line of the heading span.
        level: Structural depth; 1 is the top level.
        parent_id: Id of an earlier node with a smaller level, None for roots.
        content: Body text owned by this node, without the title line.
        refined_content: Rewritten body attached downstream by id.
        start: Offset of the raw span in the source text (local nodes only).
        end: Exclusive end offset of the raw span (local nodes only).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    level: int = Field(..., ge=1)
    parent_id: str | None = Field(default=None, alias="parentId")
    content: str = ""
    refined_content: str = Field(default="", alias="refinedContent")
    start: int | None = Field(default=None, ge=0)
    end: int | None = Field(default=None, ge=0)


class ExternalSection(BaseModel):
    """A section as proposed by the structure extraction service.

    Every field is optional; malformed values degrade to "absent" instead of
    failing validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    title: str = ""
    level: int = 1
    parent_id: str | None = Field(default=None, alias="parentId")
    content: str = ""

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("title", "content", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> int:
        try:
            level = int(value)
        except (TypeError, ValueError):
            return 1
        return max(level, 1)

    def to_section_node(self, node_id: str, parent_id: str | None) -> SectionNode:
        """Build a SectionNode using an already de-duplicated id."""
        return SectionNode(
            id=node_id,
            title=self.title.strip(),
            level=self.level,
            parent_id=parent_id,
            content=self.content.strip(),
        )

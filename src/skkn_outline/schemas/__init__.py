"""Shared schemas for skkn_outline."""

from skkn_outline.schemas.outline import OutlineResult
from skkn_outline.schemas.sections import ExternalSection, SectionNode

__all__ = ["ExternalSection", "OutlineResult", "SectionNode"]

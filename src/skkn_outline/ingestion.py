"""Outline pipeline: raw report text -> reconciled section outline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from skkn_outline.exceptions import SkknOutlineError
from skkn_outline.extraction_client import extract_remote_structure
from skkn_outline.output_formatter import format_outline
from skkn_outline.reconcile import reconcile_with_rule
from skkn_outline.schemas import OutlineResult, SectionNode
from skkn_outline.sections import filter_sections
from skkn_outline.tree_builder import extract_local_structure

logger = logging.getLogger(__name__)

_TOC_TITLES = ("mục lục",)


@dataclass
class OutlineOptions:
    """Options for outline extraction.

    Attributes:
        use_external: If True, ask the structure extraction service for a
            second proposal and reconcile it with the local outline.
        remove_toc: If True, drop the document's own table of contents
            section (MỤC LỤC) and leave the generated one out of the content.
        section_filter_mode: Mode for section filtering ("include" or "exclude").
        sections: List of section titles to include or exclude.
    """

    use_external: bool = True
    remove_toc: bool = False
    section_filter_mode: Literal["include", "exclude"] = "exclude"
    sections: list[str] = field(default_factory=list)


async def build_outline(
    text: str,
    *,
    options: OutlineOptions | None = None,
    title: str | None = None,
) -> tuple[OutlineResult, dict[str, Any]]:
    """Extract, reconcile, filter and format the outline of ``text``.

    A failing structure extraction service never fails the pipeline: the
    error is logged and the external proposal is treated as empty, which
    leaves the local outline in place.

    Args:
        text: Raw report text.
        options: Processing options. Uses defaults if None.
        title: Optional document title for the summary.

    Returns:
        Tuple of (result, metadata) where metadata records the source of the
        outline, the trust rule applied and the section counts.
    """
    opts = options or OutlineOptions()
    local = extract_local_structure(text)
    external: list[SectionNode] = []
    external_error: str | None = None

    if opts.use_external:
        try:
            external = await extract_remote_structure(text)
        except SkknOutlineError as exc:
            external_error = str(exc)
            logger.warning("Structure extraction service unavailable, using local outline: %s", exc)

    if opts.use_external:
        sections, trust_rule = reconcile_with_rule(local, external)
        rule = trust_rule.name
        source = "merged"
    else:
        rule = None
        sections = local
        source = "local"

    sections = filter_sections(sections, mode=opts.section_filter_mode, selected=opts.sections)
    if opts.remove_toc:
        sections = filter_sections(sections, mode="exclude", selected=_TOC_TITLES)

    result = format_outline(title=title, sections=sections, include_toc=not opts.remove_toc)

    metadata: dict[str, Any] = {
        "source": source,
        "rule": rule,
        "local_count": len(local),
        "external_count": len(external),
        "external_error": external_error,
    }
    return result, metadata

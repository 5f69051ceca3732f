"""Build a parent-linked section outline from heading candidates."""

from __future__ import annotations

import logging

from skkn_outline.headings import (
    HeadingCandidate,
    detect_headings,
    fallback_headings,
    reconcile_candidates,
)
from skkn_outline.schemas import SectionNode

logger = logging.getLogger(__name__)

PREAMBLE_ID = "preamble"
DOCUMENT_ID = "document"


def build_tree(text: str, candidates: list[HeadingCandidate]) -> list[SectionNode]:
    """Slice ``text`` at each candidate and infer parents from levels.

    ``candidates`` must already be sorted by offset and de-duplicated. Each
    node owns the text from its heading up to the next heading. Parents come
    from a stack of open ``(id, level)`` pairs: entries at the same or a deeper
    level are closed before a node is pushed, so the remaining top is the
    nearest shallower heading. Skipped levels are allowed (a level 3 node
    directly under a level 1 node).

    Non-blank text before the first heading becomes a standalone root node
    with id ``preamble``; blank leading text is folded into the first span so
    the raw spans always cover the whole input.
    """
    if not candidates:
        return []

    nodes: list[SectionNode] = []
    first_start = candidates[0].offset
    if text[:first_start].strip():
        nodes.append(_make_node(PREAMBLE_ID, text, 0, first_start, level=1, parent_id=None))
    else:
        first_start = 0

    stack: list[tuple[str, int]] = []
    for index, candidate in enumerate(candidates):
        start = first_start if index == 0 else candidate.offset
        end = candidates[index + 1].offset if index + 1 < len(candidates) else len(text)

        while stack and stack[-1][1] >= candidate.level:
            stack.pop()
        parent_id = stack[-1][0] if stack else None

        node_id = f"{candidate.tag}-{len(nodes) + 1}"
        nodes.append(
            _make_node(node_id, text, start, end, level=candidate.level, parent_id=parent_id)
        )
        stack.append((node_id, candidate.level))

    return nodes


def extract_local_structure(text: str) -> list[SectionNode]:
    """Deterministically extract the section outline of ``text``.

    Falls back to the canonical ``PHẦN`` markers when no heading family
    matches, and to a single ``document`` node when even that finds nothing.
    Blank text yields an empty outline.
    """
    candidates = reconcile_candidates(detect_headings(text))
    if not candidates:
        candidates = fallback_headings(text)
        if candidates:
            logger.debug("Heading families found nothing; using %d fallback markers", len(candidates))

    if candidates:
        return build_tree(text, candidates)

    if not text.strip():
        return []
    logger.debug("No headings detected; treating the whole text as one section")
    return [_make_node(DOCUMENT_ID, text, 0, len(text), level=1, parent_id=None)]


def _make_node(
    node_id: str,
    text: str,
    start: int,
    end: int,
    *,
    level: int,
    parent_id: str | None,
) -> SectionNode:
    title_line, _, body = text[start:end].lstrip().partition("\n")
    return SectionNode(
        id=node_id,
        title=title_line.strip(),
        level=level,
        parent_id=parent_id,
        content=body.strip(),
        start=start,
        end=end,
    )

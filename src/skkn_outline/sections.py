"""Section filtering and utilities for flat, parent-linked outlines."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from skkn_outline.schemas import ExternalSection, SectionNode

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(
    r"^(?:(?:phần|chương)\s+[ivxlc\d]+|[ivx]+\.|\d+(?:\.\d+)*\.?|[a-zđ]\))\s*[.:\-–]?\s*"
)


@dataclass
class NestedSection:
    """A section together with its direct children, for rendering."""

    section: SectionNode
    children: list[NestedSection] = field(default_factory=list)


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison.

    Lowercases, drops a leading numbering marker (``PHẦN II.``, ``2.1``,
    ``a)``...) and collapses whitespace.
    """
    title = " ".join(title.split()).lower()
    title = _MARKER_RE.sub("", title, count=1)
    return title.strip()


def sections_from_external(items: Iterable[SectionNode | Mapping[str, Any]]) -> list[SectionNode]:
    """Coerce raw service output into sections.

    Non-mapping items are skipped. Missing or repeated ids are replaced with
    ``section-<n>``. A parent reference is kept only if it names an earlier
    section with a smaller level.
    """
    sections: list[SectionNode] = []
    id_map: dict[str, str] = {}
    levels: dict[str, int] = {}

    for index, item in enumerate(items, start=1):
        if isinstance(item, SectionNode):
            proposal = ExternalSection(
                id=item.id,
                title=item.title,
                level=item.level,
                parent_id=item.parent_id,
                content=item.content,
            )
        elif isinstance(item, Mapping):
            try:
                proposal = ExternalSection.model_validate(dict(item))
            except ValidationError as exc:
                logger.debug("Skipping malformed external section %d: %s", index, exc)
                continue
        else:
            logger.debug("Skipping non-object external section %d: %r", index, item)
            continue

        node_id = proposal.id if proposal.id and proposal.id not in levels else f"section-{index}"
        while node_id in levels:
            node_id = f"{node_id}-{index}"
        parent_id = id_map.get(proposal.parent_id) if proposal.parent_id else None
        if parent_id is not None and levels[parent_id] >= proposal.level:
            parent_id = None
        if proposal.id:
            id_map.setdefault(proposal.id, node_id)

        sections.append(proposal.to_section_node(node_id, parent_id))
        levels[node_id] = proposal.level

    return sections


def drop_invalid_parents(sections: Iterable[SectionNode]) -> list[SectionNode]:
    """Clear parent links that do not name an earlier, shallower section.

    Everything else on the sections is kept as is.
    """
    result: list[SectionNode] = []
    levels: dict[str, int] = {}
    for section in sections:
        parent_level = levels.get(section.parent_id) if section.parent_id else None
        if section.parent_id and (parent_level is None or parent_level >= section.level):
            logger.debug("Dropping invalid parent %r of section %r", section.parent_id, section.id)
            section = section.model_copy(update={"parent_id": None})
        result.append(section)
        levels.setdefault(section.id, section.level)
    return result


def children_of(sections: Iterable[SectionNode], parent_id: str | None) -> list[SectionNode]:
    """Return the direct children of ``parent_id`` (roots for None)."""
    return [section for section in sections if section.parent_id == parent_id]


def leaf_sections(sections: list[SectionNode]) -> list[SectionNode]:
    """Return sections that no other section names as its parent."""
    parents = {section.parent_id for section in sections if section.parent_id}
    return [section for section in sections if section.id not in parents]


def nest_sections(sections: list[SectionNode]) -> list[NestedSection]:
    """Turn a flat outline into a tree, keeping the outline order.

    Sections whose parent is missing from the list are treated as roots.
    """
    nodes = {section.id: NestedSection(section) for section in sections}
    roots: list[NestedSection] = []
    for section in sections:
        parent = nodes.get(section.parent_id) if section.parent_id else None
        if parent is None or parent.section is section:
            roots.append(nodes[section.id])
        else:
            parent.children.append(nodes[section.id])
    return roots


def filter_sections(
    sections: list[SectionNode],
    *,
    mode: str = "exclude",
    selected: Iterable[str] | None = None,
) -> list[SectionNode]:
    """Filter sections by title using include or exclude mode.

    Exclude drops each selected section together with its descendants.
    Include keeps each selected section, its descendants and its ancestors.
    """
    selected_titles = {normalize_section_title(title) for title in (selected or []) if title.strip()}
    if not selected_titles:
        return sections

    by_id = {section.id: section for section in sections}
    matched = {
        section.id
        for section in sections
        if normalize_section_title(section.title) in selected_titles
    }

    subtree: set[str] = set()
    for section in sections:
        if section.id in matched or (section.parent_id and section.parent_id in subtree):
            subtree.add(section.id)

    if mode != "include":
        return [section for section in sections if section.id not in subtree]

    keep = set(subtree)
    for section_id in matched:
        parent_id = by_id[section_id].parent_id
        while parent_id and parent_id in by_id and parent_id not in keep:
            keep.add(parent_id)
            parent_id = by_id[parent_id].parent_id
    return [section for section in sections if section.id in keep]


def apply_refined_content(
    sections: list[SectionNode], refined: Mapping[str, str]
) -> list[SectionNode]:
    """Return copies of ``sections`` with rewritten content attached by id.

    Only ``refined_content`` changes; ids, levels and parents are untouched.
    Unknown ids in ``refined`` are ignored.
    """
    return [
        section.model_copy(update={"refined_content": refined[section.id]})
        if section.id in refined
        else section.model_copy()
        for section in sections
    ]

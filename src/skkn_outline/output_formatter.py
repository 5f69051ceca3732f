"""Format an outline into summary, tree, and content outputs."""

from __future__ import annotations

from skkn_outline.schemas import OutlineResult, SectionNode
from skkn_outline.sections import NestedSection, nest_sections


def format_outline(
    *,
    title: str | None,
    sections: list[SectionNode],
    include_toc: bool,
) -> OutlineResult:
    """Create summary, section tree, and content."""
    nested = nest_sections(sections)
    tree = "Sections:\n" + _create_sections_tree(nested)
    content = _render_content(nested, include_toc=include_toc)

    summary_lines = []
    if title:
        summary_lines.append(f"Title: {title}")
    summary_lines.append(f"Sections: {len(sections)}")
    summary_lines.append(f"Top-level sections: {count_top_level(sections)}")
    summary_lines.append(f"Words: {count_words(sections)}")
    summary = "\n".join(summary_lines)

    return OutlineResult(
        summary=summary,
        sections_tree=tree,
        content=content,
        sections=sections,
    )


def count_top_level(sections: list[SectionNode]) -> int:
    """Count sections without a parent."""
    return sum(1 for section in sections if section.parent_id is None)


def count_words(sections: list[SectionNode]) -> int:
    """Count words across titles and the content that will be rendered."""
    total = 0
    for section in sections:
        total += len(section.title.split())
        total += len(_section_body(section).split())
    return total


def _section_body(section: SectionNode) -> str:
    return section.refined_content or section.content


def _render_content(nested: list[NestedSection], *, include_toc: bool) -> str:
    blocks: list[str] = []
    if include_toc:
        toc = _render_toc(nested)
        if toc:
            blocks.append("## Mục lục\n" + toc)

    for item in nested:
        blocks.extend(_render_section(item))

    return "\n\n".join(block for block in blocks if block).strip()


def _render_section(item: NestedSection) -> list[str]:
    blocks: list[str] = []
    heading_prefix = "#" * min(item.section.level, 6)
    blocks.append(f"{heading_prefix} {item.section.title}")
    body = _section_body(item.section)
    if body:
        blocks.append(body)
    for child in item.children:
        blocks.extend(_render_section(child))
    return blocks


def _render_toc(nested: list[NestedSection], indent: int = 0) -> str:
    lines: list[str] = []
    for item in nested:
        prefix = "  " * indent + "- "
        lines.append(prefix + item.section.title)
        if item.children:
            lines.append(_render_toc(item.children, indent + 1))
    return "\n".join(lines)


def _create_sections_tree(nested: list[NestedSection], indent: int = 0) -> str:
    lines: list[str] = []
    for item in nested:
        lines.append(" " * (indent * 4) + item.section.title)
        if item.children:
            lines.append(_create_sections_tree(item.children, indent + 1))
    return "\n".join(lines)

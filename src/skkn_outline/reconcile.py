"""Reconcile the local outline with an outline proposed by the extraction service.

The local outline is deterministic but shallow; the external one may carry
better titles but is untrusted and sometimes nearly empty. The trust policy
below is an ordered decision table: the first rule whose predicate holds
decides how the two outlines are combined. Every merging rule appends
sections missing from the base outline instead of dropping anything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from skkn_outline.config import SKKN_OUTLINE_FUZZY_PREFIX_CHARS
from skkn_outline.schemas import SectionNode
from skkn_outline.sections import drop_invalid_parents, sections_from_external

logger = logging.getLogger(__name__)

_EXTERNAL_PREFIX = "ext-"
_LOCAL_PREFIX = "local-"
_SPARSE_EXTERNAL_MAX = 3
_MISSING_SECTIONS_MARGIN = 2


@dataclass(frozen=True)
class TrustRule:
    """One row of the trust policy."""

    name: str
    applies: Callable[[list[SectionNode], list[SectionNode]], bool]
    merge: Callable[[list[SectionNode], list[SectionNode]], list[SectionNode]]


def titles_match(
    first: str, second: str, *, prefix_chars: int = SKKN_OUTLINE_FUZZY_PREFIX_CHARS
) -> bool:
    """Return True if either title prefix contains the other.

    Both titles are whitespace-collapsed, casefolded and cut to
    ``prefix_chars`` before comparison. Blank titles match nothing.
    """
    left = _title_key(first, prefix_chars)
    right = _title_key(second, prefix_chars)
    if not left or not right:
        return False
    return left in right or right in left


def find_matching_section(title: str, sections: Iterable[SectionNode]) -> SectionNode | None:
    """Return the first section whose title fuzzy-matches ``title``."""
    for section in sections:
        if titles_match(title, section.title):
            return section
    return None


def backfill_content(
    external: list[SectionNode], local: list[SectionNode]
) -> list[SectionNode]:
    """Copy local content into external sections that arrived without any.

    A local section with the same id and a matching title is preferred over
    the first title match.
    """
    result: list[SectionNode] = []
    for node in external:
        if not node.content:
            source = next(
                (
                    candidate
                    for candidate in local
                    if candidate.id == node.id and titles_match(candidate.title, node.title)
                ),
                None,
            ) or find_matching_section(node.title, local)
            if source is not None and source.content:
                node = node.model_copy(update={"content": source.content})
        result.append(node)
    return result


def _count_level(sections: list[SectionNode], level: int) -> int:
    return sum(1 for section in sections if section.level == level)


def _external_failed(local: list[SectionNode], external: list[SectionNode]) -> bool:
    return len(external) <= _SPARSE_EXTERNAL_MAX and len(local) > len(external)


def _external_missing_top_level(local: list[SectionNode], external: list[SectionNode]) -> bool:
    return _count_level(external, 1) < _count_level(local, 1)


def _external_missing_sections(local: list[SectionNode], external: list[SectionNode]) -> bool:
    return len(local) - len(external) > _MISSING_SECTIONS_MARGIN


def _always(local: list[SectionNode], external: list[SectionNode]) -> bool:
    return True


def _prefer_local(local: list[SectionNode], external: list[SectionNode]) -> list[SectionNode]:
    return _append_unmatched(local, external, id_prefix=_EXTERNAL_PREFIX, match_against=local)


def _merge_into_external(local: list[SectionNode], external: list[SectionNode]) -> list[SectionNode]:
    return _append_unmatched(external, local, id_prefix=_LOCAL_PREFIX)


def _accept_external(local: list[SectionNode], external: list[SectionNode]) -> list[SectionNode]:
    return list(external)


TRUST_RULES: tuple[TrustRule, ...] = (
    TrustRule("external_failed", _external_failed, _prefer_local),
    TrustRule("external_missing_top_level", _external_missing_top_level, _merge_into_external),
    TrustRule("external_missing_sections", _external_missing_sections, _merge_into_external),
    TrustRule("accept_external", _always, _accept_external),
)


def select_trust_rule(
    local: list[SectionNode],
    external: list[SectionNode],
    rules: tuple[TrustRule, ...] = TRUST_RULES,
) -> TrustRule:
    """Return the first rule that applies to the two outlines."""
    for rule in rules:
        if rule.applies(local, external):
            return rule
    return rules[-1]


def reconcile_structures(
    local: list[SectionNode],
    external: Iterable[SectionNode | Mapping[str, Any]] | None,
) -> list[SectionNode]:
    """Merge the local outline with the external proposal.

    ``external`` may be None or empty (extraction failed), and may contain raw
    mappings straight from the service; those are coerced leniently. Neither
    input is mutated.
    """
    sections, _ = reconcile_with_rule(local, external)
    return sections


def reconcile_with_rule(
    local: list[SectionNode],
    external: Iterable[SectionNode | Mapping[str, Any]] | None,
) -> tuple[list[SectionNode], TrustRule]:
    """Like ``reconcile_structures``, also returning the rule that was applied."""
    local_nodes = list(local or [])
    external_nodes = backfill_content(_as_sections(external), local_nodes)
    rule = select_trust_rule(local_nodes, external_nodes)
    logger.info(
        "Reconciling outlines with rule %s (local=%d, external=%d)",
        rule.name,
        len(local_nodes),
        len(external_nodes),
    )
    return rule.merge(local_nodes, external_nodes), rule


def _as_sections(
    external: Iterable[SectionNode | Mapping[str, Any]] | None,
) -> list[SectionNode]:
    items = list(external or [])
    if all(isinstance(item, SectionNode) for item in items):
        return drop_invalid_parents(items)
    return sections_from_external(items)


def _append_unmatched(
    base: list[SectionNode],
    extra: list[SectionNode],
    *,
    id_prefix: str,
    match_against: list[SectionNode] | None = None,
) -> list[SectionNode]:
    """Append the ``extra`` sections whose titles match nothing.

    Titles are compared against ``match_against`` when given, otherwise
    against the growing result. Appended sections keep their relative order;
    their parent is remapped to the appended copy of the parent or to the
    section that matched it, and dropped when that section is not shallower.
    With ``match_against`` every appended id gets ``id_prefix``; otherwise
    only ids that collide do.
    """
    result = list(base)
    levels = {section.id: section.level for section in result}
    id_map: dict[str, str] = {}

    for node in extra:
        reference = match_against if match_against is not None else result
        match = find_matching_section(node.title, reference)
        if match is not None:
            id_map.setdefault(node.id, match.id)
            continue

        new_id = node.id
        if match_against is not None or new_id in levels:
            new_id = _unique_id(f"{id_prefix}{node.id}", levels)
        id_map[node.id] = new_id

        parent_id = id_map.get(node.parent_id) if node.parent_id else None
        if parent_id is not None and levels.get(parent_id, node.level) >= node.level:
            parent_id = None

        result.append(node.model_copy(update={"id": new_id, "parent_id": parent_id}))
        levels[new_id] = node.level

    return result


def _unique_id(candidate: str, taken: Mapping[str, Any]) -> str:
    unique = candidate
    suffix = 2
    while unique in taken:
        unique = f"{candidate}-{suffix}"
        suffix += 1
    return unique


def _title_key(title: str, prefix_chars: int) -> str:
    return " ".join(title.split()).casefold()[:prefix_chars]

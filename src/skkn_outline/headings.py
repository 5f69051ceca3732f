"""Pattern-based heading detection for SKKN-style reports.

Three steps turn raw text into an ordered list of heading candidates:

1. ``detect_headings`` runs every heading family over the whole text. The
   families are independent and overlap freely.
2. ``reconcile_candidates`` sorts by offset and collapses detections that sit
   within a few characters of each other, keeping the most specific level.
3. ``fallback_headings`` is only consulted when nothing survives step 2; it
   looks for the canonical ``PHẦN I`` .. ``PHẦN VIII`` markers anywhere in
   the text, even when they are not at the start of a line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from skkn_outline.config import (
    SKKN_OUTLINE_FALLBACK_MAX_TITLE_CHARS,
    SKKN_OUTLINE_MIN_TITLE_CHARS,
    SKKN_OUTLINE_PROXIMITY_THRESHOLD,
)


@dataclass(frozen=True)
class HeadingCandidate:
    """A level-tagged heading position, before reconciliation."""

    offset: int
    raw_title: str
    level: int
    tag: str


@dataclass(frozen=True)
class HeadingFamily:
    """One marker convention: every line matching ``pattern`` is a heading."""

    level: int
    tag: str
    pattern: re.Pattern[str]

    def find(self, text: str) -> list[HeadingCandidate]:
        return [
            HeadingCandidate(
                offset=match.start(),
                raw_title=match.group(0).strip(),
                level=self.level,
                tag=self.tag,
            )
            for match in self.pattern.finditer(text)
        ]


_NAMED_SECTIONS = (
    "MỤC LỤC",
    "TÀI LIỆU THAM KHẢO",
    "PHỤ LỤC",
    "LỜI CẢM ƠN",
    "KẾT LUẬN VÀ KIẾN NGHỊ",
    "KẾT LUẬN VÀ ĐỀ XUẤT",
    "PHẦN MỞ ĐẦU",
    "PHẦN NỘI DUNG",
    "PHẦN KẾT LUẬN",
)

_SOLUTION_MARKERS = ("GIẢI PHÁP", "BIỆN PHÁP", "BƯỚC")


def build_heading_families(min_title_chars: int = SKKN_OUTLINE_MIN_TITLE_CHARS) -> tuple[HeadingFamily, ...]:
    """Build the heading family table.

    ``min_title_chars`` guards the bare ``1.`` and ``a)`` markers: the title
    after the marker must start with a letter and be at least this long, which
    keeps page numbers and empty bullets out.
    """
    tail = max(min_title_chars - 1, 0)
    titled = rf"[^\W\d_][^\n]{{{tail},}}"
    named = "|".join(re.escape(name) for name in _NAMED_SECTIONS)
    solution = "|".join(re.escape(marker) for marker in _SOLUTION_MARKERS)

    return (
        # PHẦN I. Mở đầu
        HeadingFamily(1, "part", re.compile(r"^[ \t]*PHẦN[ \t]+[IVXLC]+\b[^\n]*", re.M | re.I)),
        # IV. KẾT QUẢ
        HeadingFamily(1, "roman", re.compile(r"^[ \t]*[IVX]+\.[ \t]+\S[^\n]*", re.M)),
        # CHƯƠNG 2: ...
        HeadingFamily(1, "chapter", re.compile(r"^[ \t]*CHƯƠNG[ \t]+\d{1,2}\b[^\n]*", re.M | re.I)),
        HeadingFamily(1, "named", re.compile(rf"^[ \t]*(?:{named})\b[^\n]*", re.M | re.I)),
        # 1. Lý do chọn đề tài
        HeadingFamily(2, "item", re.compile(rf"^[ \t]*\d{{1,2}}\.[ \t]+{titled}", re.M)),
        # 4.2 / 4.2.1.
        HeadingFamily(3, "sub", re.compile(r"^[ \t]*\d{1,2}(?:\.\d{1,2})+\.?[ \t]+\S[^\n]*", re.M)),
        # Giải pháp 1: ...
        HeadingFamily(3, "solution", re.compile(rf"^[ \t]*(?:{solution})[ \t]+\d{{1,2}}\b[^\n]*", re.M | re.I)),
        # a) Mục tiêu
        HeadingFamily(3, "letter", re.compile(rf"^[ \t]*[a-zđ]\)[ \t]*{titled}", re.M)),
    )


HEADING_FAMILIES = build_heading_families()

_FALLBACK_NUMERALS = ("I", "II", "III", "IV", "V", "VI", "VII", "VIII")
_FALLBACK_MARKERS = tuple(
    re.compile(rf"PHẦN[ \t]+{numeral}(?![IVXLC])", re.I) for numeral in _FALLBACK_NUMERALS
)


def detect_headings(
    text: str, families: tuple[HeadingFamily, ...] = HEADING_FAMILIES
) -> list[HeadingCandidate]:
    """Run every heading family over ``text``.

    The result is unordered across families and may hold several candidates
    for the same physical heading.
    """
    candidates: list[HeadingCandidate] = []
    for family in families:
        candidates.extend(family.find(text))
    return candidates


def reconcile_candidates(
    candidates: list[HeadingCandidate],
    *,
    threshold: int = SKKN_OUTLINE_PROXIMITY_THRESHOLD,
) -> list[HeadingCandidate]:
    """Sort candidates by offset and collapse near-duplicates.

    A candidate within ``threshold`` characters of the last accepted one is a
    competing detection of the same heading: the higher level wins, and on a
    tie the candidate accepted first is kept.
    """
    accepted: list[HeadingCandidate] = []
    for candidate in sorted(candidates, key=lambda item: item.offset):
        if accepted and abs(candidate.offset - accepted[-1].offset) <= threshold:
            if candidate.level > accepted[-1].level:
                accepted[-1] = candidate
            continue
        accepted.append(candidate)
    return accepted


def fallback_headings(
    text: str, *, max_title_chars: int = SKKN_OUTLINE_FALLBACK_MAX_TITLE_CHARS
) -> list[HeadingCandidate]:
    """Find canonical ``PHẦN <roman>`` markers anywhere in ``text``.

    Only the first occurrence of each marker is used. The title runs from the
    marker to the end of its line, capped at ``max_title_chars``.
    """
    found: list[HeadingCandidate] = []
    for marker in _FALLBACK_MARKERS:
        match = marker.search(text)
        if not match:
            continue
        offset = match.start()
        line_end = text.find("\n", offset)
        if line_end == -1 or line_end - offset > max_title_chars:
            line_end = min(len(text), offset + max_title_chars)
        found.append(
            HeadingCandidate(
                offset=offset,
                raw_title=text[offset:line_end].strip(),
                level=1,
                tag="fallback",
            )
        )
    return sorted(found, key=lambda item: item.offset)

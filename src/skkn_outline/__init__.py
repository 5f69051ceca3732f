"""skkn_outline: recover the section outline of SKKN reports."""

from skkn_outline.exceptions import (
    DocumentLoadError,
    ExtractionServiceError,
    FetchError,
    MissingApiKeyError,
    ParseError,
    SkknOutlineError,
)
from skkn_outline.headings import (
    HeadingCandidate,
    detect_headings,
    fallback_headings,
    reconcile_candidates,
)
from skkn_outline.ingestion import OutlineOptions, build_outline
from skkn_outline.reconcile import reconcile_structures
from skkn_outline.schemas import OutlineResult, SectionNode
from skkn_outline.tree_builder import build_tree, extract_local_structure

__all__ = [
    "DocumentLoadError",
    "ExtractionServiceError",
    "FetchError",
    "HeadingCandidate",
    "MissingApiKeyError",
    "OutlineOptions",
    "OutlineResult",
    "ParseError",
    "SectionNode",
    "SkknOutlineError",
    "build_outline",
    "build_tree",
    "detect_headings",
    "extract_local_structure",
    "fallback_headings",
    "reconcile_candidates",
    "reconcile_structures",
]

"""Command-line entry point: ``python -m skkn_outline REPORT``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from skkn_outline.exceptions import SkknOutlineError
from skkn_outline.ingestion import OutlineOptions, build_outline
from skkn_outline.text_loader import load_document_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skkn_outline",
        description="Recover the section outline of an SKKN report.",
    )
    parser.add_argument("path", type=Path, help="Report file (.txt, .html, .xml, .docx)")
    parser.add_argument(
        "--local-only",
        action="store_true",
        help="Skip the structure extraction service",
    )
    parser.add_argument(
        "--remove-toc",
        action="store_true",
        help="Drop the table of contents section",
    )
    parser.add_argument(
        "--section",
        action="append",
        default=[],
        dest="sections",
        help="Section title to filter (repeatable)",
    )
    parser.add_argument(
        "--include",
        action="store_true",
        help="Keep only --section titles instead of excluding them",
    )
    parser.add_argument("--json", action="store_true", help="Print sections as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = OutlineOptions(
        use_external=not args.local_only,
        remove_toc=args.remove_toc,
        section_filter_mode="include" if args.include else "exclude",
        sections=args.sections,
    )

    try:
        text = load_document_text(args.path)
        result, metadata = asyncio.run(build_outline(text, options=options, title=args.path.stem))
    except SkknOutlineError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Outline source: %s (rule: %s)", metadata["source"], metadata["rule"])
    if args.json:
        sections = [section.model_dump(by_alias=True) for section in result.sections]
        print(json.dumps(sections, ensure_ascii=False, indent=2))
    else:
        print(result.summary)
        print()
        print(result.sections_tree)
        print()
        print(result.content)
    return 0


if __name__ == "__main__":
    sys.exit(main())

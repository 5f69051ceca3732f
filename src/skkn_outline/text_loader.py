"""Read uploaded report files into plain text."""

from __future__ import annotations

import unicodedata
import zipfile
from pathlib import Path

from skkn_outline.exceptions import DocumentLoadError

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise DocumentLoadError(
        "BeautifulSoup4 is required for HTML/DOCX parsing (pip install beautifulsoup4)."
    ) from exc


_TEXT_SUFFIXES = {".txt", ".md"}
_HTML_SUFFIXES = {".html", ".htm"}
_DOCX_BODY = "word/document.xml"


def load_document_text(path: Path) -> str:
    """Load a report file as NFC-normalized plain text.

    Supported formats: plain text (``.txt``, ``.md``), HTML, raw XML and
    ``.docx``. Paragraph boundaries become newlines so that line-anchored
    heading detection keeps working.

    Raises:
        DocumentLoadError: If the file is missing, unreadable or of an
            unsupported type.
    """
    if not path.is_file():
        raise DocumentLoadError(f"Document not found: {path}")

    suffix = path.suffix.lower()
    if suffix in _TEXT_SUFFIXES:
        text = path.read_text(encoding="utf-8", errors="replace")
    elif suffix in _HTML_SUFFIXES:
        text = html_to_text(path.read_text(encoding="utf-8", errors="replace"))
    elif suffix == ".xml":
        text = xml_to_text(path.read_bytes())
    elif suffix == ".docx":
        text = _read_docx(path)
    else:
        raise DocumentLoadError(f"Unsupported document type: {suffix or path.name}")

    return unicodedata.normalize("NFC", text)


def html_to_text(html: str) -> str:
    """Extract visible text from HTML, one block element per line."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)


def xml_to_text(xml: str | bytes) -> str:
    """Extract text from WordprocessingML, or from any XML as a last resort.

    Pass bytes when the document carries an encoding declaration.
    """
    soup = BeautifulSoup(xml, "xml")
    paragraphs = soup.find_all("p")
    if not paragraphs:
        return " ".join(soup.get_text(" ").split())

    lines: list[str] = []
    for paragraph in paragraphs:
        runs = paragraph.find_all("t")
        lines.append("".join(run.get_text() for run in runs).strip())
    return "\n".join(lines).strip()


def _read_docx(path: Path) -> str:
    try:
        with zipfile.ZipFile(path) as archive:
            xml = archive.read(_DOCX_BODY)
    except (zipfile.BadZipFile, KeyError) as exc:
        raise DocumentLoadError(f"Not a valid .docx file: {path}") from exc
    return xml_to_text(xml)

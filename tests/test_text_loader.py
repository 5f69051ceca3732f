"""Tests for report file loading."""

from __future__ import annotations

import unicodedata
import zipfile
from pathlib import Path

import pytest

from skkn_outline.exceptions import DocumentLoadError
from skkn_outline.text_loader import html_to_text, load_document_text, xml_to_text

_W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

_DOCUMENT_XML = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="{_W_NS}">
  <w:body>
    <w:p><w:r><w:t>PHẦN I. </w:t></w:r><w:r><w:t>ĐẶT VẤN ĐỀ</w:t></w:r></w:p>
    <w:p><w:r><w:t>1. Lý do chọn đề tài</w:t></w:r></w:p>
  </w:body>
</w:document>
"""


def _write_docx(path: Path, document_xml: str = _DOCUMENT_XML) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("word/document.xml", document_xml)
    return path


class TestLoadDocumentText:
    """Tests for load_document_text function."""

    def test_plain_text(self, tmp_path: Path) -> None:
        path = tmp_path / "report.txt"
        path.write_text("PHẦN I. Mở đầu\nNội dung", encoding="utf-8")

        assert load_document_text(path) == "PHẦN I. Mở đầu\nNội dung"

    def test_text_is_nfc_normalized(self, tmp_path: Path) -> None:
        decomposed = unicodedata.normalize("NFD", "PHẦN I. Đặt vấn đề")
        path = tmp_path / "report.md"
        path.write_text(decomposed, encoding="utf-8")

        result = load_document_text(path)

        assert result == "PHẦN I. Đặt vấn đề"
        assert result != decomposed

    def test_html(self, tmp_path: Path) -> None:
        path = tmp_path / "report.html"
        path.write_text(
            "<html><head><style>p {}</style></head><body>"
            "<h1>PHẦN I. Mở đầu</h1><p>Nội dung</p><script>x()</script>"
            "</body></html>",
            encoding="utf-8",
        )

        assert load_document_text(path) == "PHẦN I. Mở đầu\nNội dung"

    def test_docx(self, tmp_path: Path) -> None:
        path = _write_docx(tmp_path / "report.docx")

        assert load_document_text(path) == "PHẦN I. ĐẶT VẤN ĐỀ\n1. Lý do chọn đề tài"

    def test_invalid_docx(self, tmp_path: Path) -> None:
        path = tmp_path / "report.docx"
        path.write_bytes(b"not a zip archive")

        with pytest.raises(DocumentLoadError, match="Not a valid .docx"):
            load_document_text(path)

    def test_docx_without_body(self, tmp_path: Path) -> None:
        path = tmp_path / "report.docx"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("[Content_Types].xml", "<Types/>")

        with pytest.raises(DocumentLoadError):
            load_document_text(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="not found"):
            load_document_text(tmp_path / "missing.txt")

    def test_unsupported_type(self, tmp_path: Path) -> None:
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.7")

        with pytest.raises(DocumentLoadError, match="Unsupported document type: .pdf"):
            load_document_text(path)


class TestMarkupToText:
    """Tests for html_to_text and xml_to_text."""

    def test_html_drops_blank_lines(self) -> None:
        assert html_to_text("<div>  A  </div>\n\n<div></div><div>B</div>") == "A\nB"

    def test_xml_paragraphs_become_lines(self) -> None:
        assert xml_to_text(_DOCUMENT_XML.encode("utf-8")).splitlines() == [
            "PHẦN I. ĐẶT VẤN ĐỀ",
            "1. Lý do chọn đề tài",
        ]

    def test_xml_without_paragraphs(self) -> None:
        assert xml_to_text("<root><a>Một</a>\n<b>Hai</b></root>") == "Một Hai"

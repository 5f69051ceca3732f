"""Tests for outline tree building and local structure extraction."""

from __future__ import annotations

import pytest

from skkn_outline.headings import HeadingCandidate
from skkn_outline.schemas import SectionNode
from skkn_outline.tree_builder import build_tree, extract_local_structure


def _assert_partition(text: str, nodes: list[SectionNode]) -> None:
    assert "".join(text[node.start : node.end] for node in nodes) == text


def _assert_ancestry(nodes: list[SectionNode]) -> None:
    position = {node.id: index for index, node in enumerate(nodes)}
    for index, node in enumerate(nodes):
        if node.parent_id is None:
            continue
        parent_index = position[node.parent_id]
        assert parent_index < index
        assert nodes[parent_index].level < node.level


class TestExtractLocalStructure:
    """Tests for extract_local_structure function."""

    def test_two_parts(self) -> None:
        """Two PHẦN headings become two top-level sections with their bodies."""
        text = "PHẦN I. Mở đầu\nAAA\nPHẦN II. Nội dung\nBBB"

        nodes = extract_local_structure(text)

        assert [(n.title, n.level, n.content, n.parent_id) for n in nodes] == [
            ("PHẦN I. Mở đầu", 1, "AAA", None),
            ("PHẦN II. Nội dung", 1, "BBB", None),
        ]
        _assert_partition(text, nodes)

    def test_sample_report_outline(self, sample_report: str) -> None:
        nodes = extract_local_structure(sample_report)
        by_title = {node.title: node for node in nodes}

        assert [node.level for node in nodes] == [1, 1, 2, 2, 1, 2, 2, 3, 3, 3, 1, 1, 2]
        assert nodes[0].id == "preamble"
        assert nodes[0].title == "SÁNG KIẾN KINH NGHIỆM"
        assert by_title["1. Lý do chọn đề tài"].parent_id == by_title["PHẦN I. ĐẶT VẤN ĐỀ"].id
        assert (
            by_title["Giải pháp 1: Tổ chức trò chơi học tập"].parent_id
            == by_title["2. Các giải pháp thực hiện"].id
        )
        assert by_title["Giải pháp 1: Tổ chức trò chơi học tập"].content == "Nội dung giải pháp 1."
        assert by_title["1. Sách giáo khoa Toán 6"].parent_id == by_title["TÀI LIỆU THAM KHẢO"].id
        assert by_title["PHẦN III. KẾT LUẬN VÀ KIẾN NGHỊ"].parent_id is None

    def test_sample_report_invariants(self, sample_report: str) -> None:
        nodes = extract_local_structure(sample_report)

        _assert_partition(sample_report, nodes)
        _assert_ancestry(nodes)
        assert len({node.id for node in nodes}) == len(nodes)

    def test_level_jump_parents_to_nearest_shallower(self) -> None:
        """A level 3 heading right after a level 1 heading hangs off it."""
        text = "PHẦN I. Mở đầu\n1.1 Khái niệm cơ bản\nNội dung"

        nodes = extract_local_structure(text)

        assert [node.level for node in nodes] == [1, 3]
        assert nodes[1].parent_id == nodes[0].id

    def test_blank_preamble_is_folded_into_first_span(self) -> None:
        text = "\n\n  PHẦN I. Mở đầu\nabc\n"

        nodes = extract_local_structure(text)

        assert len(nodes) == 1
        assert nodes[0].start == 0
        assert nodes[0].title == "PHẦN I. Mở đầu"
        assert nodes[0].content == "abc"
        _assert_partition(text, nodes)

    def test_uses_fallback_markers_when_no_family_matches(self) -> None:
        text = "Báo cáo PHẦN I Mở đầu nội dung PHẦN II Kết quả"

        nodes = extract_local_structure(text)

        assert [node.id for node in nodes] == ["preamble", "fallback-2", "fallback-3"]
        assert nodes[1].title == "PHẦN I Mở đầu nội dung"
        assert nodes[2].title == "PHẦN II Kết quả"
        assert all(node.level == 1 for node in nodes)
        _assert_partition(text, nodes)

    def test_single_document_node_when_nothing_is_detected(self) -> None:
        text = "\nChỉ có một đoạn văn.\nDòng hai.\n"

        nodes = extract_local_structure(text)

        assert len(nodes) == 1
        assert nodes[0].id == "document"
        assert nodes[0].title == "Chỉ có một đoạn văn."
        assert nodes[0].content == "Dòng hai."
        _assert_partition(text, nodes)

    @pytest.mark.parametrize("text", ["", "   \n\t\n"])
    def test_blank_text_yields_empty_outline(self, text: str) -> None:
        assert extract_local_structure(text) == []

    def test_is_deterministic(self, sample_report: str) -> None:
        assert extract_local_structure(sample_report) == extract_local_structure(sample_report)


class TestBuildTree:
    """Tests for build_tree function."""

    def test_empty_candidates(self) -> None:
        assert build_tree("", []) == []
        assert build_tree("some text", []) == []

    def test_title_comes_from_span_not_match(self) -> None:
        """A candidate that captured only a marker still gets the full line."""
        text = "PHẦN I. Mở đầu\nNội dung"
        candidates = [HeadingCandidate(0, "PHẦN I", 1, "part")]

        nodes = build_tree(text, candidates)

        assert nodes[0].title == "PHẦN I. Mở đầu"

    def test_levels_are_not_renumbered(self) -> None:
        text = "A heading\nx\nB heading\ny\nC heading\nz"
        candidates = [
            HeadingCandidate(0, "A", 2, "item"),
            HeadingCandidate(text.index("B"), "B", 3, "sub"),
            HeadingCandidate(text.index("C"), "C", 2, "item"),
        ]

        nodes = build_tree(text, candidates)

        assert [node.level for node in nodes] == [2, 3, 2]
        assert [node.parent_id for node in nodes] == [None, "item-1", None]

    def test_ids_are_unique_and_tagged(self) -> None:
        text = "a\nb\nc"
        candidates = [
            HeadingCandidate(0, "a", 1, "part"),
            HeadingCandidate(2, "b", 1, "part"),
            HeadingCandidate(4, "c", 2, "item"),
        ]

        nodes = build_tree(text, candidates)

        assert [node.id for node in nodes] == ["part-1", "part-2", "item-3"]

    def test_preamble_is_not_a_parent(self) -> None:
        """Sections after the preamble never hang off it."""
        text = "Bìa báo cáo\n1. Lý do chọn đề tài\nabc"
        candidates = [HeadingCandidate(text.index("1."), "1.", 2, "item")]

        nodes = build_tree(text, candidates)

        assert [node.id for node in nodes] == ["preamble", "item-2"]
        assert nodes[1].parent_id is None
        _assert_partition(text, nodes)

"""Test setup for skkn_outline."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from skkn_outline.schemas import SectionNode  # noqa: E402


SAMPLE_REPORT = """\
SÁNG KIẾN KINH NGHIỆM
Đề tài: Một số biện pháp nâng cao hứng thú học Toán
PHẦN I. ĐẶT VẤN ĐỀ
1. Lý do chọn đề tài
Trong những năm gần đây, học sinh ngại học Toán.
2. Mục đích nghiên cứu
Giúp học sinh yêu thích môn học.
PHẦN II. GIẢI QUYẾT VẤN ĐỀ
1. Cơ sở lý luận
Theo lý luận dạy học hiện đại.
2. Các giải pháp thực hiện
Giải pháp 1: Tổ chức trò chơi học tập
Nội dung giải pháp 1.
a) Mục tiêu của trò chơi
Tạo hứng thú cho học sinh.
Giải pháp 2: Ứng dụng công nghệ thông tin
Nội dung giải pháp 2.
PHẦN III. KẾT LUẬN VÀ KIẾN NGHỊ
Kết luận chung của đề tài.
TÀI LIỆU THAM KHẢO
1. Sách giáo khoa Toán 6
"""


@pytest.fixture
def sample_report() -> str:
    """A small but complete SKKN report."""
    return SAMPLE_REPORT


def _make_node(
    node_id: str,
    title: str,
    level: int = 1,
    parent_id: str | None = None,
    content: str = "",
) -> SectionNode:
    """Shorthand for building section nodes in tests."""
    return SectionNode(
        id=node_id,
        title=title,
        level=level,
        parent_id=parent_id,
        content=content,
    )


@pytest.fixture
def make_node():
    """Factory for section nodes."""
    return _make_node

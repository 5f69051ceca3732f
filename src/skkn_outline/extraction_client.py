"""Client for the remote structure extraction service.

The service is a Gemini-style ``generateContent`` endpoint asked to return a
JSON list of sections. Its output is a proposal only: it is parsed leniently
and later cross-checked against the local outline by ``reconcile``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from skkn_outline import config
from skkn_outline.exceptions import (
    ExtractionServiceError,
    FetchError,
    MissingApiKeyError,
    ParseError,
)
from skkn_outline.http_utils import post_json_with_retries
from skkn_outline.schemas import SectionNode
from skkn_outline.sections import sections_from_external

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = """\
Bạn là chuyên gia phân tích cấu trúc Sáng kiến Kinh nghiệm (SKKN) Việt Nam.

Tách văn bản dưới đây thành các mục lớn và mục con:
1. Mục lớn: "PHẦN I", "PHẦN II", "CHƯƠNG 1", "I.", "PHẦN MỞ ĐẦU", "MỤC LỤC", "TÀI LIỆU THAM KHẢO", "PHỤ LỤC"...
2. Mục con: "1.", "2.1", "a)", "Giải pháp 1", "Biện pháp 2"... mỗi mục con là một mục riêng.
3. Không bỏ sót nội dung nào.
4. "id" duy nhất, dạng "section-1", "section-2-1".
5. "parentId" rỗng với mục lớn, là id của mục cha với mục con.
6. "title" chép đúng tiêu đề trong văn bản gốc.
7. "content" là nội dung riêng của mục, không gồm nội dung các mục con.

VĂN BẢN:
\"\"\"
{text}
\"\"\"
"""

_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "STRING"},
            "title": {"type": "STRING"},
            "level": {"type": "INTEGER", "description": "1 = top-level section"},
            "parentId": {"type": "STRING", "description": "Empty for top-level sections"},
            "content": {"type": "STRING"},
        },
        "required": ["id", "title", "level"],
    },
}


def build_request(text: str, *, max_chars: int | None = None) -> dict[str, Any]:
    """Build the ``generateContent`` request body for ``text``.

    The text is cut to ``max_chars`` (``SKKN_OUTLINE_EXTERNAL_MAX_CHARS`` by
    default) before it is embedded in the prompt.
    """
    limit = config.SKKN_OUTLINE_EXTERNAL_MAX_CHARS if max_chars is None else max_chars
    prompt = _PROMPT_TEMPLATE.format(text=text[:limit])
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": _RESPONSE_SCHEMA,
        },
    }


def parse_response(data: Any) -> list[SectionNode]:
    """Extract the proposed sections from a ``generateContent`` response.

    Raises:
        ParseError: If the response has no text part or the text is not a
            JSON list.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ParseError("Structure service response has no text part") from exc

    try:
        items = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Structure service returned invalid JSON: {exc}") from exc

    if isinstance(items, dict):
        items = items.get("sections", [])
    if not isinstance(items, list):
        raise ParseError("Structure service did not return a list of sections")
    return sections_from_external(items)


async def extract_remote_structure(
    text: str,
    *,
    api_key: str | None = None,
    models: tuple[str, ...] | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[SectionNode]:
    """Ask the structure extraction service for an outline of ``text``.

    Models are tried in order; the first one that returns a parseable
    proposal wins.

    Args:
        text: Raw document text; truncated before sending.
        api_key: Service key. Defaults to ``SKKN_OUTLINE_API_KEY``.
        models: Model fallback chain. Defaults to ``SKKN_OUTLINE_MODELS``.
        client: Optional shared httpx.AsyncClient.

    Returns:
        The proposed sections, possibly empty.

    Raises:
        MissingApiKeyError: If no API key is available.
        ExtractionServiceError: If every model in the chain fails.
    """
    key = api_key or config.SKKN_OUTLINE_API_KEY
    if not key:
        raise MissingApiKeyError("No API key configured for the structure extraction service")

    chain = models or config.SKKN_OUTLINE_MODELS
    if not chain:
        raise ExtractionServiceError("No structure extraction models configured")

    payload = build_request(text)
    headers = {"x-goog-api-key": key}
    last_error: Exception | None = None

    for model in chain:
        url = f"{config.SKKN_OUTLINE_SERVICE_URL}/models/{model}:generateContent"
        try:
            data = await post_json_with_retries(url, payload, headers=headers, client=client)
            sections = parse_response(data)
        except (FetchError, ParseError) as exc:
            last_error = exc
            logger.warning("Structure extraction with model %s failed, trying next: %s", model, exc)
            continue
        logger.debug("Model %s proposed %d sections", model, len(sections))
        return sections

    raise ExtractionServiceError(
        f"All structure extraction models failed: {last_error}"
    ) from last_error

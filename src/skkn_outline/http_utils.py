"""HTTP utilities for calling JSON APIs with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import httpx

from skkn_outline.config import (
    SKKN_OUTLINE_FETCH_BACKOFF_S,
    SKKN_OUTLINE_FETCH_MAX_RETRIES,
    SKKN_OUTLINE_FETCH_TIMEOUT_S,
    SKKN_OUTLINE_USER_AGENT,
)
from skkn_outline.exceptions import FetchError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


async def post_json_with_retries(
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """POST a JSON payload and return the decoded JSON response.

    Transient failures (connection errors and the status codes in
    ``RETRY_STATUS_CODES``) are retried with exponential backoff. Other
    error statuses fail immediately.

    Args:
        url: The endpoint to call.
        payload: JSON-serializable request body.
        headers: Extra request headers (for example an API key).
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The decoded JSON body.

    Raises:
        FetchError: If the call fails after all retries, returns a
            non-retryable error status, or returns a body that is not JSON.
    """
    timeout = httpx.Timeout(SKKN_OUTLINE_FETCH_TIMEOUT_S)
    base_headers = {"User-Agent": SKKN_OUTLINE_USER_AGENT}
    last_exc: Exception | None = None

    async def do_post(http_client: httpx.AsyncClient) -> Any:
        nonlocal last_exc

        for attempt in range(SKKN_OUTLINE_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.post(url, json=payload, headers=headers)

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise FetchError(f"Invalid JSON from {url}: {exc}") from exc
            except httpx.HTTPStatusError as exc:
                raise FetchError(
                    f"HTTP {exc.response.status_code} from {url}"
                ) from exc
            except httpx.RequestError as exc:
                last_exc = exc

            if attempt < SKKN_OUTLINE_FETCH_MAX_RETRIES:
                backoff = SKKN_OUTLINE_FETCH_BACKOFF_S * (2**attempt)
                logger.debug("Retrying %s in %.2fs after: %s", url, backoff, last_exc)
                await asyncio.sleep(backoff)

        raise FetchError(f"Failed to call {url}: {last_exc}")

    if client is not None:
        return await do_post(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=base_headers,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_post(new_client)

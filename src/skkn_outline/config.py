"""Local configuration for skkn_outline."""

from __future__ import annotations

import os


DEFAULT_PROXIMITY_THRESHOLD = 5
DEFAULT_MIN_TITLE_CHARS = 5
DEFAULT_FUZZY_PREFIX_CHARS = 30
DEFAULT_FALLBACK_MAX_TITLE_CHARS = 100
DEFAULT_EXTERNAL_MAX_CHARS = 12000
DEFAULT_SERVICE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODELS = "gemini-2.5-flash,gemini-2.5-pro"
DEFAULT_FETCH_TIMEOUT_S = 60.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "skkn-outline/0.1"

# Heading detection.
SKKN_OUTLINE_PROXIMITY_THRESHOLD = int(
    os.getenv("SKKN_OUTLINE_PROXIMITY_THRESHOLD", str(DEFAULT_PROXIMITY_THRESHOLD))
)
SKKN_OUTLINE_MIN_TITLE_CHARS = int(
    os.getenv("SKKN_OUTLINE_MIN_TITLE_CHARS", str(DEFAULT_MIN_TITLE_CHARS))
)
SKKN_OUTLINE_FALLBACK_MAX_TITLE_CHARS = int(
    os.getenv("SKKN_OUTLINE_FALLBACK_MAX_TITLE_CHARS", str(DEFAULT_FALLBACK_MAX_TITLE_CHARS))
)

# Reconciliation.
SKKN_OUTLINE_FUZZY_PREFIX_CHARS = int(
    os.getenv("SKKN_OUTLINE_FUZZY_PREFIX_CHARS", str(DEFAULT_FUZZY_PREFIX_CHARS))
)

# Structure extraction service.
SKKN_OUTLINE_EXTERNAL_MAX_CHARS = int(
    os.getenv("SKKN_OUTLINE_EXTERNAL_MAX_CHARS", str(DEFAULT_EXTERNAL_MAX_CHARS))
)
SKKN_OUTLINE_SERVICE_URL = os.getenv("SKKN_OUTLINE_SERVICE_URL", DEFAULT_SERVICE_URL).rstrip("/")
SKKN_OUTLINE_API_KEY = os.getenv("SKKN_OUTLINE_API_KEY") or None
SKKN_OUTLINE_MODELS = tuple(
    model.strip()
    for model in os.getenv("SKKN_OUTLINE_MODELS", DEFAULT_MODELS).split(",")
    if model.strip()
)
SKKN_OUTLINE_FETCH_TIMEOUT_S = float(
    os.getenv("SKKN_OUTLINE_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S))
)
SKKN_OUTLINE_FETCH_MAX_RETRIES = int(
    os.getenv("SKKN_OUTLINE_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES))
)
SKKN_OUTLINE_FETCH_BACKOFF_S = float(
    os.getenv("SKKN_OUTLINE_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S))
)
SKKN_OUTLINE_USER_AGENT = os.getenv("SKKN_OUTLINE_USER_AGENT", DEFAULT_USER_AGENT)

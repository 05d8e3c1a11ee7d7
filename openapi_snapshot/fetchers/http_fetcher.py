# openapi_snapshot/fetchers/http_fetcher.py
from __future__ import annotations

import logging
import os
import time
from typing import Optional, Sequence

import requests
from requests.structures import CaseInsensitiveDict

from ..config import USER_AGENT, parse_header
from ..errors import NetworkError

log = logging.getLogger(__name__)

# --- env-driven knobs (safe defaults) ---
BACKOFF_BASE_MS = int(os.getenv("OPENAPI_SNAPSHOT_BACKOFF_BASE_MS", "250"))
BACKOFF_MAX_MS = int(os.getenv("OPENAPI_SNAPSHOT_BACKOFF_MAX_MS", "2000"))
MAX_ATTEMPTS = 3
SNIPPET_LIMIT = 200

_RETRYABLE_EXC = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


class _Retryable(Exception):
    """Internal marker: the attempt failed in a way worth repeating."""

    def __init__(self, error: NetworkError):
        super().__init__(str(error))
        self.error = error


def build_headers(raw_headers: Optional[Sequence[str]] = None) -> CaseInsensitiveDict:
    """Defaults first, caller headers override by (case-insensitive) name."""
    headers = CaseInsensitiveDict({"Accept": "application/json", "User-Agent": USER_AGENT})
    for raw in raw_headers or ():
        name, value = parse_header(raw)
        headers[name] = value
    return headers


def is_retryable_status(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def body_snippet(text: str, limit: int = SNIPPET_LIMIT) -> str:
    body = (text or "").strip()
    if not body:
        return "<empty body>"
    if len(body) > limit:
        return body[:limit] + "..."
    return body


def next_delay(current_ms: int) -> int:
    return min(current_ms * 2, BACKOFF_MAX_MS)


def _attempt(url: str, headers: CaseInsensitiveDict, timeout_ms: int) -> bytes:
    try:
        resp = requests.get(url, headers=headers, timeout=timeout_ms / 1000.0)
    except _RETRYABLE_EXC as e:
        raise _Retryable(NetworkError(f"request failed: {e}")) from e
    except requests.RequestException as e:
        # invalid URL, missing schema, too many redirects...
        raise NetworkError(f"request failed: {e}") from e

    sc = resp.status_code
    if 200 <= sc < 300:
        return resp.content

    error = NetworkError(f"unexpected status {sc}: {body_snippet(resp.text)}")
    if is_retryable_status(sc):
        raise _Retryable(error)
    raise error


def fetch_openapi(url: str, headers: Optional[Sequence[str]] = None, timeout_ms: int = 10_000) -> bytes:
    """
    GET the OpenAPI document and return the raw body.
    Transport errors, 429 and 5xx are retried with doubling delay up to
    MAX_ATTEMPTS; everything else raises immediately.
    """
    request_headers = build_headers(headers)
    delay_ms = BACKOFF_BASE_MS
    last_error: Optional[NetworkError] = None

    for attempt in range(1, MAX_ATTEMPTS + 1):
        log.debug("GET %s (attempt %d/%d)", url, attempt, MAX_ATTEMPTS)
        try:
            body = _attempt(url, request_headers, timeout_ms)
            log.debug("<- %s: %d bytes", url, len(body))
            return body
        except _Retryable as r:
            last_error = r.error
            if attempt == MAX_ATTEMPTS:
                break
            log.debug("retryable failure (%s); sleeping %d ms", r.error, delay_ms)
            time.sleep(delay_ms / 1000.0)
            delay_ms = next_delay(delay_ms)

    raise NetworkError(f"{last_error} (gave up after {MAX_ATTEMPTS} attempts)")

"""Response error extraction for load test observability.

Parses fulfillment API error responses into human-readable messages.
Every error is rendered as ``{"error": {"code": ..., "message": ..., "details": ...}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        code = error.get("code", "UNKNOWN")
        message = error.get("message", "")
        details = error.get("details")
        if isinstance(details, list):
            fields = " | ".join(f"{d.get('field')}: {d.get('message')}" for d in details if isinstance(d, dict))
            return f"{code}: {message} ({fields})" if fields else f"{code}: {message}"
        return f"{code}: {message}"

    # Unknown shape: stringify and truncate
    return str(body)[:300]


def error_code(response: Response) -> str | None:
    """The stable error code of a failed response, if it carries one."""
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        return None
    return error.get("code") if isinstance(error, dict) else None

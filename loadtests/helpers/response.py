"""Response error extraction for load test observability.

Parses Storefront API error responses into human-readable messages.
Handles two response shapes:

- Operational errors (400/404/409): {"code": "...", "message": "...", "errors": {...}}
- Domain rule violations (400): {"message": "..."}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message from an API error response."""
    try:
        body = response.json()
    except ValueError:
        # Not JSON — return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "message" not in body:
        return str(body)[:300]

    detail = body["message"]
    if body.get("code"):
        detail = f"{body['code']}: {detail}"
    errors = body.get("errors") or {}
    if errors:
        detail += " | " + " | ".join(f"{field}: {', '.join(messages)}" for field, messages in errors.items())
    return detail

"""
Conversion of API failures into the single message shown in the error banner.
"""

import httpx


def describe_error(exc: BaseException, fallback: str) -> str:
    """
    Turn a failed API call into a human-readable message.

    HTTP status errors collapse to their status code; anything else keeps
    its own text. Empty messages fall back to the action-specific default.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        return f"Request failed with status code {exc.response.status_code}"

    message = str(exc).strip()
    return message or fallback

"""
Text sanitizing and acceptance of decoded attachment payloads.
"""

from __future__ import annotations

import json
from typing import Union

BYTE_ORDER_MARK = "\ufeff"


def sanitize_text(payload: Union[bytes, str]) -> str:
    """
    Decode (UTF-8, malformed sequences replaced) and trim a payload.

    Surrounding whitespace is removed. A leading byte-order mark that
    survives the trim is dropped, together with any whitespace after it.
    """
    if isinstance(payload, (bytes, bytearray)):
        text = bytes(payload).decode("utf-8", errors="replace")
    else:
        text = payload

    text = text.strip()
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):].lstrip()
    return text


def _parses_as(text: str, expected: type) -> bool:
    try:
        return isinstance(json.loads(text), expected)
    except (ValueError, RecursionError):
        return False


def is_acceptable_text(text: str, declared_mime_type: str = "") -> bool:
    """
    Decide whether sanitized text is a usable payload.

    Non-empty text is accepted when the declared MIME type mentions JSON,
    or when it parses as a JSON object ('{') or array ('['). Anything
    else is rejected without attempting a parse.
    """
    if not text:
        return False

    if "json" in (declared_mime_type or "").lower():
        return True

    head = text.lstrip()[:1]
    if head == "{":
        return _parses_as(text, dict)
    if head == "[":
        return _parses_as(text, list)
    return False

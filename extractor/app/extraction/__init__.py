from .payload_codec import PayloadKind, classify_payload, decode_container
from .text_sanitizer import is_acceptable_text, sanitize_text
from .attachment_locator import decode_specification, find_embedded_text
from .page_text import extract_pages
from .text_pages import extract_text_pages

__all__ = [
    "PayloadKind",
    "classify_payload",
    "decode_container",
    "sanitize_text",
    "is_acceptable_text",
    "decode_specification",
    "find_embedded_text",
    "extract_pages",
    "extract_text_pages",
]

"""Helpers for page selection, document text extraction and XML payloads."""

from .extraction import extract_text
from .page_range import format_page_range
from .page_range import resolve_page_range
from .xml_payload import build_simple_properties_xml

__all__ = [
    "build_simple_properties_xml",
    "extract_text",
    "format_page_range",
    "resolve_page_range",
]

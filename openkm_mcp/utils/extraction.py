"""Plain-text extraction from paginated documents (PDF)."""

from __future__ import annotations

import asyncio
import io
import logging

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ..exceptions import ExtractionError
from .page_range import resolve_page_range

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


def open_document(raw: bytes) -> PdfReader:
    """Parse raw bytes as a PDF.

    Raises:
        ExtractionError: The bytes are not a readable PDF, or the PDF is
            encrypted with a non-empty password.
    """
    try:
        reader = PdfReader(io.BytesIO(raw))
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError("Document is encrypted")
        # Touch the page tree so structural corruption surfaces here.
        len(reader.pages)
    except ExtractionError:
        raise
    except (PyPdfError, ValueError, KeyError, TypeError, OSError) as e:
        raise ExtractionError(f"Invalid or unsupported document: {e}") from e
    return reader


async def extract_text(raw: bytes, page_range: str) -> str:
    """Extract the text of the pages selected by ``page_range``.

    Pages are emitted in ascending page order, separated by a blank line. The
    coroutine yields to the event loop between pages.

    Returns:
        The concatenated page text, or a diagnostic naming the range and the
        real page count when the range selects no page.

    Raises:
        ExtractionError: The document cannot be parsed, or a page cannot be read.
    """
    reader = open_document(raw)
    num_pages = len(reader.pages)
    pages = resolve_page_range(page_range, num_pages)
    if not pages:
        return f'No valid pages selected (range: "{page_range}", total pages: {num_pages})'

    logger.debug("Extracting pages %s of %d", pages, num_pages)
    texts: list[str] = []
    for page_number in pages:
        try:
            texts.append(reader.pages[page_number - 1].extract_text() or "")
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise ExtractionError(f"Could not read page {page_number}: {e}") from e
        await asyncio.sleep(0)
    return PAGE_SEPARATOR.join(texts)

"""
Text Extractor
==============
Reads the text layer of a PDF with PyMuPDF (fitz) and concatenates the
pages into the single blob the parser consumes:

    "\\n\\n=== PAGE 1 ===\\n<text>\\n\\n=== PAGE 2 ===\\n<text>..."

Only the first `max_pages` pages are read.
"""

from __future__ import annotations

import logging
import time
from typing import Union

import fitz  # PyMuPDF

from .models import ExtractedText, PageText

logger = logging.getLogger(__name__)

MIN_PAGES = 1
MAX_PAGES = 10
DEFAULT_MAX_PAGES = 1

PAGE_MARKER = "\n\n=== PAGE {page} ===\n"


class PdfExtractionError(RuntimeError):
    """PDF could not be opened or read. `code` is a stable identifier."""

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


def clamp_pages(value, default: int = DEFAULT_MAX_PAGES) -> int:
    """Clamp a requested page count to 1..10; unparseable values use default."""
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(MIN_PAGES, min(MAX_PAGES, number))


def join_pages(pages: list[PageText]) -> str:
    return "".join(PAGE_MARKER.format(page=p.page) + p.text for p in pages)


class TextExtractor:
    """
    Extracts per-page plain text from PDF bytes or a PDF path.
    Holds no state between calls.
    """

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES):
        self.max_pages = clamp_pages(max_pages)

    def _open(self, source: Union[bytes, str]) -> fitz.Document:
        try:
            if isinstance(source, (bytes, bytearray)):
                doc = fitz.open(stream=bytes(source), filetype="pdf")
            else:
                doc = fitz.open(source)
        except Exception as e:
            raise PdfExtractionError("pdf_load_failed", f"pdf_load_failed: {e}") from e

        if doc.needs_pass:
            doc.close()
            raise PdfExtractionError("pdf_password_protected")
        return doc

    def extract(self, source: Union[bytes, str]) -> ExtractedText:
        """
        Extract text from up to `max_pages` pages.

        Raises:
            PdfExtractionError: The PDF is unreadable or password protected.
        """
        with self._open(source) as doc:
            total_pages = doc.page_count
            pages_to_read = min(total_pages, self.max_pages)
            pages: list[PageText] = []

            for page_idx in range(pages_to_read):
                t0 = time.perf_counter()
                try:
                    text = doc[page_idx].get_text("text")
                except Exception as e:
                    raise PdfExtractionError(
                        "pdf_load_page_failed",
                        f"pdf_load_page_failed:{page_idx + 1}: {e}",
                    ) from e
                pages.append(PageText(
                    page=page_idx + 1,
                    text=text,
                    ms=int((time.perf_counter() - t0) * 1000),
                ))

        logger.info(f"Extracted {pages_to_read} of {total_pages} pages")

        return ExtractedText(
            raw_text=join_pages(pages),
            pages=pages,
            total_pages=total_pages,
            extracted_pages=pages_to_read,
        )

    def get_page_count(self, source: Union[bytes, str]) -> int:
        with self._open(source) as doc:
            return doc.page_count

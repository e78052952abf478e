"""
Event Brief Parser Engine
=========================
Orchestrator that combines text extraction, normalization, and the
extraction core into a complete pipeline.

Usage:
    engine = BriefParserEngine(ParserConfig(max_pages=2))
    result = engine.parse_pdf(pdf_bytes)       # or a path
    result = engine.parse_text(extracted_text)
    result.parsed          # ParsedBrief
    result.canonical_text  # normalized text the record was derived from

Architecture:
    PDF → TextExtractor → raw text → normalize → assemble →
    ParsedBrief (+ canonical text, pages, timings)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .assembler import assemble
from .models import ExtractedText, ExtractionResult, Timings
from .normalizer import normalize
from .text_extractor import DEFAULT_MAX_PAGES, TextExtractor, clamp_pages

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Extraction
    max_pages: int = DEFAULT_MAX_PAGES

    # Output
    include_raw: bool = False
    include_pages: bool = False

    # Label slicing: cut blocks at unrecognized all-caps "LABEL:" lines
    trim_unknown_labels: bool = True

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        self.max_pages = clamp_pages(self.max_pages)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class BriefParserEngine:
    """
    Main Event Brief parsing engine.

    Orchestrates:
        1. Text extraction (PDF input only)
        2. Normalization
        3. Segmentation, field extraction, and scoring
        4. Result packaging with timings

    Holds only its config; safe to share between threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("eventbrief")
        package_logger.setLevel(log_level)

        if not any(
            isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
            for h in package_logger.handlers
        ):
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            package_logger.addHandler(console)

        if self.config.log_file:
            log_path = Path(self.config.log_file).absolute()
            already = any(
                isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path
                for h in package_logger.handlers
            )
            if not already:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
                package_logger.addHandler(file_handler)

    def parse_text(self, raw_text: Optional[str]) -> ExtractionResult:
        """Parse already-extracted text (page markers optional)."""
        t0 = time.perf_counter()
        canonical = normalize(raw_text)
        parsed = assemble(canonical, self.config.trim_unknown_labels)
        parse_ms = _elapsed_ms(t0)

        logger.info(
            f"Parsed brief {parsed.booking_number or '(no booking #)'}: "
            f"{len(parsed.sites)} sites, {len(parsed.contacts)} contacts, "
            f"{parsed.flight_count} flights, confidence {parsed.confidence.overall}%"
        )

        return ExtractionResult(
            parsed=parsed,
            canonical_text=canonical,
            timings=Timings(parse_ms=parse_ms, total_ms=parse_ms),
        )

    def parse_pdf(
        self,
        source: Union[bytes, str],
        read_ms: int = 0,
    ) -> ExtractionResult:
        """
        Extract the text layer of a PDF and parse it.

        Args:
            source: PDF bytes or a path to a PDF file.
            read_ms: Time the caller spent reading the input, for the report.

        Raises:
            FileNotFoundError: `source` is a path that does not exist.
            PdfExtractionError: The PDF could not be read.
        """
        if isinstance(source, str) and not Path(source).exists():
            raise FileNotFoundError(f"PDF not found: {source}")

        t0 = time.perf_counter()
        extracted: ExtractedText = TextExtractor(self.config.max_pages).extract(source)
        extract_ms = _elapsed_ms(t0)

        result = self.parse_text(extracted.raw_text)
        result.pages = extracted.pages
        result.total_pages = extracted.total_pages
        result.extracted_pages = extracted.extracted_pages
        result.timings = Timings(
            read_ms=read_ms,
            extract_ms=extract_ms,
            parse_ms=result.timings.parse_ms,
            total_ms=read_ms + extract_ms + result.timings.parse_ms,
        )
        return result

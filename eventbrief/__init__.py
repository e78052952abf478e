"""
Event Brief Parser
==================
Structured extraction for Event Brief documents delivered as extracted
PDF text of variable layout.

Architecture:
    - Text Normalizer: Canonical whitespace form for all matchers
    - Heading Segmenter: Splits text into named sections (repeats kept)
    - Label-Block Slicer: Slices a section into labeled sub-blocks
    - Field Extractors: Phone, email, date, confirmation, and friends
    - Contact / Flight Parsers: People and flight legs from their blocks
    - Confidence Scorer: Fixed-checklist coverage score
    - Record Assembler: Composes everything into a ParsedBrief

Version: 1.0.0
"""

__version__ = "1.0.0"

from .assembler import parse_event_brief  # noqa: E402
from .normalizer import normalize  # noqa: E402

__all__ = ["parse_event_brief", "normalize", "__version__"]

"""
Site Parser
===========
Turns an EVENT SITE / HOTEL SITE label block into a Site record.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from . import fields
from .models import HotelDetails, Site, SiteType

logger = logging.getLogger(__name__)

# "Phone:", "Check-in date:", "Confirmation number:" ...
FIELD_LINE_PATTERN = re.compile(r"^[A-Za-z][\w /'#.-]{0,40}:")
NIGHTS_LINE_PATTERN = re.compile(r"\bnights?\b", re.IGNORECASE)

MAX_ADDRESS_LINES = 4
MAX_ADDRESS_LINE_LENGTH = 80


def _is_address_line(line: str) -> bool:
    """Short line that is not a labeled field, contact value, or stay note."""
    return (
        len(line) <= MAX_ADDRESS_LINE_LENGTH
        and not FIELD_LINE_PATTERN.match(line)
        and "@" not in line
        and not fields.ANY_PHONE_PATTERN.fullmatch(line)
        and not NIGHTS_LINE_PATTERN.search(line)
    )


def _split_name_and_address(lines: list[str]) -> tuple[Optional[str], Optional[str]]:
    if not lines or FIELD_LINE_PATTERN.match(lines[0]):
        return None, None

    name = lines[0]
    address_lines = []
    for line in lines[1:1 + MAX_ADDRESS_LINES]:
        if not _is_address_line(line):
            break
        address_lines.append(line)

    return name, ", ".join(address_lines) or None


def parse_hotel_details(block: str) -> Optional[HotelDetails]:
    """Stay details found in a site block, or None when there are none."""
    details = HotelDetails(
        check_in=fields.match_first(block, fields.CHECK_IN_PATTERN),
        check_out=fields.match_first(block, fields.CHECK_OUT_PATTERN),
        confirmation=fields.match_first(block, fields.CONFIRMATION_PATTERN),
        room_type=fields.match_first(block, fields.ROOM_TYPE_PATTERN),
        nights=fields.extract_nights(block),
        rate=fields.match_first(block, fields.RATE_PATTERN),
        notes=(
            fields.extract_text_until_label(block, "Notes")
            or fields.match_first(block, fields.NOTES_PATTERN)
        ),
    )
    return None if details.is_empty else details


def parse_site(site_type: SiteType, block: str) -> Site:
    lines = [line.strip() for line in block.split("\n") if line.strip()]
    name, address = _split_name_and_address(lines)

    site = Site(
        type=site_type,
        name=name,
        address=address,
        phone=fields.extract_phone(block),
        email=fields.extract_email(block),
        hotel_details=parse_hotel_details(block),
        raw=block,
    )
    logger.debug(f"Parsed {site_type.value} site: {site.name}")
    return site

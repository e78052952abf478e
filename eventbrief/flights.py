"""
Flight / Schedule Parser
========================
Finds flight legs in the SCHEDULE OF EVENTS section.

A leg starts at an airline token followed by a flight number ("AA 1234",
"Delta 2210") and runs until the next blank line, the next leg, or the
end of the section. Reservation code and seat come from that span.
Legs are kept in text order and never deduplicated.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable

from . import fields
from .models import FlightLeg, Schedule, SectionSpan
from .normalizer import normalize

logger = logging.getLogger(__name__)

# Two-letter carrier code, or one to three capitalized words
FLIGHT_ANCHOR_PATTERN = re.compile(
    r"\b(?P<airline>[A-Z]{2}|[A-Z][a-z]{1,20}(?: (?!Flight\b)[A-Z][a-z]{1,20}){0,2})"
    r"\s+(?:Flight\s+|#\s?)?(?P<number>\d{2,5})\b(?![:/.]\d)"
)

# Capitalized words that precede numbers in schedules but are not carriers
NON_CARRIER_WORDS = frozenset({
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
    "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep", "Sept",
    "Oct", "Nov", "Dec",
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
    "Sunday",
    "Suite", "Ste", "Room", "Floor", "Gate", "Terminal", "Seat", "Row",
    "Booth", "Table", "Hall", "Unit", "Building", "Exit", "Route",
    "Highway", "Box", "Page", "Booking", "Confirmation", "Rate", "Fee",
    "Total", "Depart", "Departs", "Arrive", "Arrives", "Return", "Returns",
    "Flight", "Flights",
})

NON_CARRIER_CODES = frozenset({"AM", "PM", "ET", "CT", "MT", "PT", "ST"})

BLANK_LINE = "\n\n"

FlightPredicate = Callable[[re.Match], bool]


def is_flight_anchor(match: re.Match) -> bool:
    """True when an airline+number match plausibly names a flight."""
    airline = match.group("airline")
    if len(airline) == 2 and airline.isupper():
        return airline not in NON_CARRIER_CODES
    return not any(word in NON_CARRIER_WORDS for word in airline.split())


def find_flight_anchors(
    text: str,
    predicate: FlightPredicate = is_flight_anchor,
) -> list[re.Match]:
    """
    Accepted airline+number matches. A rejected match is rescanned from
    its next character so "Depart Delta 512" still yields "Delta 512".
    """
    anchors: list[re.Match] = []
    pos = 0
    while True:
        m = FLIGHT_ANCHOR_PATTERN.search(text, pos)
        if not m:
            break
        if predicate(m):
            anchors.append(m)
            pos = m.end()
        else:
            pos = m.start() + 1
    return anchors


def parse_flights(
    text: str,
    predicate: FlightPredicate = is_flight_anchor,
) -> list[FlightLeg]:
    """Flight legs in `text`, in order of appearance."""
    if not text:
        return []

    anchors = find_flight_anchors(text, predicate)
    legs: list[FlightLeg] = []

    for i, anchor in enumerate(anchors):
        stop = anchors[i + 1].start() if i + 1 < len(anchors) else len(text)
        blank = text.find(BLANK_LINE, anchor.end(), stop)
        if blank != -1:
            stop = blank

        raw = normalize(text[anchor.start():stop])
        legs.append(FlightLeg(
            airline=anchor.group("airline"),
            flight_number=anchor.group("number"),
            reservation_code=fields.match_first(raw, fields.RESERVATION_CODE_PATTERN),
            seat=fields.match_first(raw, fields.SEAT_PATTERN),
            raw=raw,
        ))

    return legs


def parse_schedule(spans: Iterable[SectionSpan]) -> Schedule:
    """Schedule built from every SCHEDULE OF EVENTS span, in order."""
    spans = list(spans)
    flights = [leg for span in spans for leg in parse_flights(span.text)]
    raw = "\n\n".join(span.text.strip() for span in spans if span.text.strip())

    logger.debug(f"Found {len(flights)} flight legs in {len(spans)} schedule spans")
    return Schedule(flights=flights, raw=raw)

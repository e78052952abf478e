"""
Data Models
===========
Pydantic models for structured Event Brief output.
All models are serializable to JSON for transport by the request layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator


# ─── Enums ────────────────────────────────────────────────────────────────────


class Heading(str, Enum):
    """Top-level section headings recognized in an Event Brief."""
    CONTACT_INFORMATION = "contact_information"
    SCHEDULE_OF_EVENTS = "schedule_of_events"
    EVENT_DETAILS = "event_details"
    CLIENT_DETAILS = "client_details"
    TALENT_INTRODUCTION = "talent_introduction"
    EMERGENCY_TRAVEL_NUMBERS = "emergency_travel_numbers"


class SiteType(str, Enum):
    """Kind of site listed under CONTACT INFORMATION."""
    EVENT = "event"
    HOTEL = "hotel"


class ContactGroup(str, Enum):
    """Which contact label a person was listed under."""
    CLIENT_ONSITE = "client_onsite"
    LAI_ONSITE = "lai_onsite"
    LAI_CONTACTS = "lai_contacts"
    TALENT = "talent"
    TALENT_COMPANION = "talent_companion"


# ─── Base ─────────────────────────────────────────────────────────────────────


class BriefModel(BaseModel):
    """
    Base for every extracted record.

    Leaf strings are stripped; blank strings collapse to None so that
    absence is never represented by "".
    """

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


# ─── Sections ─────────────────────────────────────────────────────────────────


class SectionSpan(BaseModel):
    """
    One occurrence of a heading and the untouched text that follows it.
    `text` is always `canonical_text[start:end]`.
    """
    heading: Heading
    heading_start: int = Field(ge=0, description="Offset of the heading match")
    start: int = Field(ge=0, description="Offset just past the heading match")
    end: int = Field(ge=0)
    text: str


# ─── Sites ────────────────────────────────────────────────────────────────────


class HotelDetails(BriefModel):
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    confirmation: Optional[str] = None
    room_type: Optional[str] = None
    nights: Optional[int] = Field(default=None, ge=0)
    rate: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class Site(BriefModel):
    """An event venue or hotel block."""
    type: SiteType
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    hotel_details: Optional[HotelDetails] = None
    raw: Optional[str] = None


# ─── Contacts ─────────────────────────────────────────────────────────────────


class Contact(BriefModel):
    group: ContactGroup
    name: Optional[str] = None
    title: Optional[str] = None
    office: Optional[str] = None
    cell: Optional[str] = None
    email: Optional[str] = None
    raw: Optional[str] = None


class EmergencyTravel(BriefModel):
    phones: list[str] = Field(default_factory=list)
    raw: Optional[str] = None


# ─── Schedule ─────────────────────────────────────────────────────────────────


class FlightLeg(BriefModel):
    airline: str
    flight_number: str
    reservation_code: Optional[str] = None
    seat: Optional[str] = None
    raw: Optional[str] = None


class Schedule(BriefModel):
    flights: list[FlightLeg] = Field(default_factory=list)
    raw: Optional[str] = None


# ─── Header / Confidence ──────────────────────────────────────────────────────


class HeaderFacts(BriefModel):
    talent_name: Optional[str] = None
    client_name: Optional[str] = None
    event_title: Optional[str] = None
    event_date_text: Optional[str] = None


class Confidence(BaseModel):
    """
    Coverage of the fixed checklist: booking number, four header facts,
    at least one site, at least one contact.
    """
    overall: int = Field(ge=0, le=100)
    has_booking_number: bool = False
    has_header: bool = False
    has_sites: bool = False
    has_contacts: bool = False
    missing: list[str] = Field(default_factory=list)


# ─── Root ─────────────────────────────────────────────────────────────────────


def _empty_sections() -> dict[Heading, list[SectionSpan]]:
    return {heading: [] for heading in Heading}


class ParsedBrief(BriefModel):
    """
    Complete structured record for one Event Brief.
    Every key is always present; absent sub-structures are None.
    """
    booking_number: Optional[str] = None
    header: HeaderFacts = Field(default_factory=HeaderFacts)
    sites: list[Site] = Field(default_factory=list)
    contacts: list[Contact] = Field(default_factory=list)
    schedule: Optional[Schedule] = None
    emergency_travel: Optional[EmergencyTravel] = None
    sections: dict[Heading, list[SectionSpan]] = Field(
        default_factory=_empty_sections
    )
    confidence: Confidence = Field(
        default_factory=lambda: Confidence(overall=0)
    )

    @computed_field
    @property
    def flight_count(self) -> int:
        return len(self.schedule.flights) if self.schedule else 0


# ─── Transport Envelope ───────────────────────────────────────────────────────


class PageText(BaseModel):
    """Text of one extracted PDF page."""
    page: int = Field(ge=1)
    text: str = ""
    ms: int = 0


class ExtractedText(BaseModel):
    """Output of the PDF text-layer extractor."""
    raw_text: str = ""
    pages: list[PageText] = Field(default_factory=list)
    total_pages: int = 0
    extracted_pages: int = 0


class Timings(BaseModel):
    read_ms: int = 0
    extract_ms: int = 0
    parse_ms: int = 0
    total_ms: int = 0


class ExtractionResult(BaseModel):
    """
    Engine output: the parsed record plus the canonical text it was
    derived from. The caller decides which parts to transport.
    """
    parsed: ParsedBrief
    canonical_text: str = ""
    pages: list[PageText] = Field(default_factory=list)
    total_pages: int = 0
    extracted_pages: int = 0
    timings: Timings = Field(default_factory=Timings)

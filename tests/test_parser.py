"""
Test Suite for Event Brief Parser
=================================
Unit and integration tests for the extraction core.
"""

from __future__ import annotations

import logging
import time

import pytest

from eventbrief.assembler import (
    assemble,
    is_date_line,
    parse_emergency_travel,
    parse_event_brief,
    parse_header,
)
from eventbrief.contacts import (
    dedupe_contacts,
    is_new_person_line,
    parse_contacts,
    split_people,
)
from eventbrief.fields import (
    CONFIRMATION_PATTERN,
    OFFICE_PATTERN,
    extract_cell,
    extract_email,
    extract_nights,
    extract_phone,
    extract_text_until_label,
    match_first,
    parse_int,
)
from eventbrief.flights import find_flight_anchors, is_flight_anchor, parse_flights
from eventbrief.models import (
    Contact,
    ContactGroup,
    Heading,
    HeaderFacts,
    ParsedBrief,
    Site,
    SiteType,
)
from eventbrief.normalizer import normalize
from eventbrief.scorer import ConfidenceScorer
from eventbrief.segmenter import (
    CONTACT_LABELS,
    SITE_LABELS,
    label_patterns,
    segment_headings,
    slice_labels,
)
from eventbrief.sites import parse_site


SCENARIO_ONE = (
    "Booking # 123456\n- - -\nJane Doe\nAcme Corp\nAnnual Gala\n"
    "Friday, June 1, 2024\nCONTACT INFORMATION\nEVENT SITE: Grand Hall\n"
    "123 Main St\nPhone: (555) 123-4567\nCLIENT ONSITE CONTACT: John Smith, Manager\n"
    "Office: (555) 987-6543\nSCHEDULE OF EVENTS\n"
    "AA 1234 Reservation Code: ABCDEF Seat 12A\n- - -\nEVENT DETAILS\nSetup at noon."
)

FULL_BRIEF = """

=== PAGE 1 ===
LEADING AUTHORITIES   EVENT BRIEF
Booking # 7654321
- - -
Dr. Maya Patel
Northwind Health
Leadership Summit 2024
Thursday, October 17, 2024
CONTACT INFORMATION
EVENT/HOTEL SITE: The Willard Hotel
1401 Pennsylvania Ave NW
Washington, DC 20004
Phone: (202) 628-9100
2 nights stay
Check-in date: 10/16/2024
Check-out date: 10/18/2024
Confirmation number: 88812345
Room and tax billed to master account.
CLIENT ONSITE CONTACT: Laura Chen, Director of Events
Office: (312) 555-0100
Cell: (312) 555-0199
Email: lchen@northwind.example
LEADING AUTHORITIES CONTACTS: Tom Becker, Account Executive
Office: (202) 555-0142
Cell: (202) 555-0143
Sara Ruiz, Logistics Manager
Office: (202) 555-0150
TALENT CONTACT: Maya Patel
Cell: (415) 555-0111
Maya will be accompanied by her husband, Raj Patel.
Raj's Cell: (415) 555-0112
EMERGENCY TRAVEL NUMBERS: Phone: (800) 555-0177


=== PAGE 2 ===
SCHEDULE OF EVENTS
Wednesday, October 16, 2024
UA 1127 Reservation Code: QX7TLM Seat 3C
Depart SFO 8:05 AM Arrive IAD 4:31 PM

Thursday, October 17, 2024
Keynote at 9:00 AM

Friday, October 18, 2024
Delta 2210 Reservation Code: QX7TLM Seat 4A
- - -
EVENT DETAILS
Keynote for 300 attendees.
- - -
CLIENT DETAILS
Northwind Health is a regional provider.
- - -
TALENT INTRODUCTION
Please welcome Dr. Maya Patel.
"""


# ═══════════════════════════════════════════════════════════════════════════════
# NORMALIZER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestNormalizer:
    """Test canonical whitespace form."""

    def test_collapses_whitespace(self):
        assert normalize("a \t  b\r\nc") == "a b\nc"

    def test_trims_padding_around_newlines(self):
        assert normalize("line one  \n   line two") == "line one\nline two"

    def test_collapses_blank_runs(self):
        assert normalize("a\n\n\n\n\nb") == "a\n\nb"
        assert normalize("a\n \n \n b") == "a\n\nb"

    def test_empty_and_none(self):
        assert normalize("") == ""
        assert normalize(None) == ""
        assert normalize("   \n\t ") == ""

    @pytest.mark.parametrize("text", [
        "",
        "plain",
        SCENARIO_ONE,
        FULL_BRIEF,
        "  x \r\n\r\n\r\n y\t\tz \n",
        "a  b \n\n\n\n c\x0b\n",
    ])
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once


# ═══════════════════════════════════════════════════════════════════════════════
# SEGMENTER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestHeadingSegmenter:
    """Test heading-based segmentation."""

    def test_no_headings(self):
        assert segment_headings("Booking # 999999\nNothing else here") == {}

    def test_spans_between_headings(self):
        text = "intro\nCONTACT INFORMATION\nbody one\nSCHEDULE OF EVENTS\nbody two"
        sections = segment_headings(text)

        assert set(sections) == {Heading.CONTACT_INFORMATION, Heading.SCHEDULE_OF_EVENTS}
        assert sections[Heading.CONTACT_INFORMATION][0].text == "\nbody one\n"
        assert sections[Heading.SCHEDULE_OF_EVENTS][0].text == "\nbody two"

    def test_repeated_heading_keeps_both_spans(self):
        text = "EVENT DETAILS\nfirst body\nCLIENT DETAILS\nx\nEVENT DETAILS\nsecond body"
        spans = segment_headings(text)[Heading.EVENT_DETAILS]

        assert len(spans) == 2
        assert spans[0].text.strip() == "first body"
        assert spans[1].text.strip() == "second body"
        assert spans[0].start < spans[1].start

    def test_case_insensitive_word_boundary(self):
        sections = segment_headings("Contact Information\nabc\nRECONTACT INFORMATIONAL")
        assert len(sections[Heading.CONTACT_INFORMATION]) == 1

    def test_synonym_maps_to_same_heading(self):
        sections = segment_headings("TRAVEL ITINERARY\nUA 100")
        assert sections[Heading.SCHEDULE_OF_EVENTS][0].text == "\nUA 100"

    def test_spans_reslice_canonical_text(self):
        text = normalize(FULL_BRIEF)
        for spans in segment_headings(text).values():
            for span in spans:
                assert text[span.start:span.end] == span.text
                assert span.heading_start < span.start

    def test_tied_headings_segment_independently(self):
        spellings = [
            (Heading.EVENT_DETAILS, "EVENT DETAILS"),
            (Heading.CLIENT_DETAILS, "EVENT DETAILS"),
        ]
        sections = segment_headings("EVENT DETAILS\nbody", spellings)

        assert sections[Heading.EVENT_DETAILS][0].text == "\nbody"
        assert sections[Heading.CLIENT_DETAILS][0].text == "\nbody"


class TestLabelSlicer:
    """Test label-driven block slicing."""

    def _labels(self):
        return label_patterns([*SITE_LABELS, *CONTACT_LABELS])

    def test_empty_input(self):
        assert slice_labels("", self._labels()) == []

    def test_synonyms_resolve_to_category(self):
        text = "EVENT/HOTEL SITE: Hotel A\nHOTEL SITE: Hotel B\nEVENT SITE: Hall C"
        blocks = slice_labels(text, self._labels())

        assert [b.category for b in blocks] == [SiteType.EVENT, SiteType.HOTEL, SiteType.EVENT]
        assert [b.text for b in blocks] == ["Hotel A", "Hotel B", "Hall C"]

    def test_blocks_bounded_by_next_label(self):
        text = "CLIENT ONSITE CONTACT: Ann Lee, VP\nOffice: 555-0100\nTALENT CONTACT: Bo Ray"
        blocks = slice_labels(text, self._labels())

        assert blocks[0].category == ContactGroup.CLIENT_ONSITE
        assert blocks[0].text == "Ann Lee, VP\nOffice: 555-0100"
        assert blocks[1].category == ContactGroup.TALENT

    def test_unknown_label_trims_block(self):
        text = "EVENT SITE: Grand Hall\n123 Main St\nPARKING NOTES: Use lot B"
        trimmed = slice_labels(text, self._labels())
        kept = slice_labels(text, self._labels(), trim_unknown_labels=False)

        assert trimmed[0].text == "Grand Hall\n123 Main St"
        assert "PARKING NOTES" in kept[0].text


# ═══════════════════════════════════════════════════════════════════════════════
# FIELD EXTRACTOR TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestFieldExtractors:
    """Test single-value extractors."""

    def test_phone(self):
        assert extract_phone("Phone: (555) 123-4567\nnext") == "(555) 123-4567"
        assert extract_phone("Phone: 555-123-4567") == "555-123-4567"
        assert extract_phone("no phone here") is None

    def test_cell_ignores_possessive(self):
        block = "Raj's Cell: (415) 555-0112"
        assert extract_cell(block) is None
        assert extract_cell("Cell: (415) 555-0111\n" + block) == "(415) 555-0111"

    def test_email(self):
        assert extract_email("Email: a.b@example.com") == "a.b@example.com"
        assert extract_email("reach me at x@y.org today") == "x@y.org"
        assert extract_email("no address") is None

    def test_confirmation(self):
        assert match_first("Confirmation number: 88812345", CONFIRMATION_PATTERN) == "88812345"
        assert match_first("Confirmation #: AB12CD", CONFIRMATION_PATTERN) == "AB12CD"
        assert match_first("Confirmation number: to follow", CONFIRMATION_PATTERN) is None

    def test_nights(self):
        assert extract_nights("2 nights stay") == 2
        assert extract_nights("Nights: 3") == 3
        assert extract_nights("Nights: TBD") is None
        assert extract_nights("no stay") is None

    def test_parse_int(self):
        assert parse_int("12") == 12
        assert parse_int(None) is None
        assert parse_int("12A") is None
        assert parse_int("-1") is None

    def test_blank_match_is_absent(self):
        assert match_first("", OFFICE_PATTERN) is None
        assert match_first(None, OFFICE_PATTERN) is None

    def test_text_until_label(self):
        block = "Notes: bring badge\nand id\nParking: lot B"
        assert extract_text_until_label(block, "Notes") == "bring badge\nand id"
        assert extract_text_until_label(block, "Missing") is None

    def test_email_needs_token_start(self):
        assert extract_email("Email: ann@example.com") == "ann@example.com"
        assert extract_email("x" * 100 + "@example.com") is None

    def test_long_tokens_scan_quickly(self):
        token = "x" * 40000
        t0 = time.perf_counter()

        assert extract_email("Jane Doe, VP\n" + token) is None
        assert extract_email(token + "@" + token) is None
        assert extract_phone("Phone: " + token) is None
        assert extract_nights(token) is None
        assert match_first(token, CONFIRMATION_PATTERN) is None

        assert time.perf_counter() - t0 < 1.0


# ═══════════════════════════════════════════════════════════════════════════════
# SITE TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestSiteParser:
    """Test site block parsing."""

    def test_event_site(self):
        site = parse_site(SiteType.EVENT, "Grand Hall\n123 Main St\nPhone: (555) 123-4567")
        assert site.name == "Grand Hall"
        assert site.address == "123 Main St"
        assert site.phone == "(555) 123-4567"
        assert site.hotel_details is None

    def test_hotel_details(self):
        block = (
            "The Willard Hotel\n1401 Pennsylvania Ave NW\nWashington, DC 20004\n"
            "Phone: (202) 628-9100\n2 nights stay\nCheck-in date: 10/16/2024\n"
            "Check-out date: 10/18/2024\nConfirmation number: 88812345\n"
            "Room and tax billed to master account."
        )
        site = parse_site(SiteType.HOTEL, block)

        assert site.address == "1401 Pennsylvania Ave NW, Washington, DC 20004"
        details = site.hotel_details
        assert details.nights == 2
        assert details.check_in == "10/16/2024"
        assert details.check_out == "10/18/2024"
        assert details.confirmation == "88812345"
        assert details.notes == "Room and tax billed to master account."

    def test_malformed_nights_is_absent(self):
        site = parse_site(SiteType.HOTEL, "Inn\nNights: TBD\nCheck-in date: 1/2/2025")
        assert site.hotel_details.nights is None
        assert site.hotel_details.check_in == "1/2/2025"

    def test_labeled_notes_win(self):
        block = "Inn\nConfirmation number: 12345\nNotes: Late arrival\nParking: lot B"
        details = parse_site(SiteType.HOTEL, block).hotel_details
        assert details.notes == "Late arrival"
        assert details.confirmation == "12345"

    def test_long_block_parses_quickly(self):
        t0 = time.perf_counter()
        site = parse_site(SiteType.HOTEL, "Grand Hall\nNotes: " + "a" * 40000)
        assert time.perf_counter() - t0 < 1.0
        assert site.email is None
        assert len(site.hotel_details.notes) == 40000

    def test_empty_block(self):
        site = parse_site(SiteType.EVENT, "")
        assert site.name is None
        assert site.address is None
        assert site.raw is None


# ═══════════════════════════════════════════════════════════════════════════════
# CONTACT TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestContactParser:
    """Test person splitting and contact extraction."""

    def test_new_person_predicate(self):
        assert is_new_person_line("Jane Doe, Director")
        assert is_new_person_line("Mary-Kate O'Neil, VP Events")
        assert not is_new_person_line("Office: (555) 123-4567")
        assert not is_new_person_line("jane doe, director")
        assert not is_new_person_line("Jane Doe")

    def test_split_people(self):
        block = "Tom Becker, AE\nOffice: 1\nSara Ruiz, Manager\nOffice: 2"
        people = split_people(block)
        assert people == [["Tom Becker, AE", "Office: 1"], ["Sara Ruiz, Manager", "Office: 2"]]

    def test_no_boundary_is_single_person(self):
        people = split_people("Maya Patel\nCell: (415) 555-0111")
        assert len(people) == 1

    def test_multiple_people(self):
        block = (
            "Tom Becker, Account Executive\nOffice: (202) 555-0142\n"
            "Cell: (202) 555-0143\nSara Ruiz, Logistics Manager\nOffice: (202) 555-0150"
        )
        contacts = parse_contacts(ContactGroup.LAI_CONTACTS, block)

        assert [c.name for c in contacts] == ["Tom Becker", "Sara Ruiz"]
        assert contacts[0].title == "Account Executive"
        assert contacts[0].cell == "(202) 555-0143"
        assert contacts[1].office == "(202) 555-0150"
        assert contacts[1].cell is None

    def test_name_without_title(self):
        contact = parse_contacts(ContactGroup.CLIENT_ONSITE, "Ann Lee\nEmail: ann@x.com")[0]
        assert contact.name == "Ann Lee"
        assert contact.title is None
        assert contact.email == "ann@x.com"

    def test_talent_companion(self):
        block = (
            "Maya Patel\nCell: (415) 555-0111\n"
            "Maya will be accompanied by her husband, Raj Patel.\n"
            "Raj's Cell: (415) 555-0112"
        )
        contacts = parse_contacts(ContactGroup.TALENT, block)

        assert len(contacts) == 2
        talent, companion = contacts
        assert talent.group == ContactGroup.TALENT
        assert talent.name == "Maya Patel"
        assert talent.cell == "(415) 555-0111"
        assert companion.group == ContactGroup.TALENT_COMPANION
        assert companion.name == "Raj Patel"
        assert companion.cell == "(415) 555-0112"

    def test_talent_without_companion(self):
        contacts = parse_contacts(ContactGroup.TALENT, "Maya Patel\nCell: (415) 555-0111")
        assert len(contacts) == 1

    def test_empty_block(self):
        assert parse_contacts(ContactGroup.LAI_CONTACTS, "  ") == []

    def test_long_note_parses_quickly(self):
        t0 = time.perf_counter()
        contacts = parse_contacts(ContactGroup.CLIENT_ONSITE, "Jane Doe, VP\nNotes: " + "a" * 40000)
        assert time.perf_counter() - t0 < 1.0
        assert contacts[0].name == "Jane Doe"
        assert contacts[0].email is None

    def test_dedupe_first_wins(self):
        a = Contact(group=ContactGroup.LAI_CONTACTS, name="Tom", cell="(202) 555-0143", raw="first")
        b = Contact(group=ContactGroup.LAI_CONTACTS, name="tom", cell="202.555.0143", raw="second")
        c = Contact(group=ContactGroup.CLIENT_ONSITE, name="Tom", cell="(202) 555-0143")

        unique = dedupe_contacts([a, b, c])
        assert len(unique) == 2
        assert unique[0].raw == "first"


# ═══════════════════════════════════════════════════════════════════════════════
# FLIGHT TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestFlightParser:
    """Test flight leg detection."""

    def test_code_and_fields(self):
        legs = parse_flights("AA 1234 Reservation Code: ABCDEF Seat 12A")
        assert len(legs) == 1
        assert legs[0].airline == "AA"
        assert legs[0].flight_number == "1234"
        assert legs[0].reservation_code == "ABCDEF"
        assert legs[0].seat == "12A"

    def test_carrier_name(self):
        legs = parse_flights("Depart Delta 2210 Seat 4A\nUnited Flight 88")
        assert [(l.airline, l.flight_number) for l in legs] == [("Delta", "2210"), ("United", "88")]

    def test_leg_stops_at_blank_line(self):
        legs = parse_flights("UA 1127 Seat 3C\nDepart SFO\n\nKeynote Seat 99Z")
        assert legs[0].raw == "UA 1127 Seat 3C\nDepart SFO"
        assert legs[0].seat == "3C"

    def test_leg_stops_at_next_leg(self):
        legs = parse_flights("UA 100 Reservation Code: AAA111 UA 200 Reservation Code: BBB222")
        assert [l.reservation_code for l in legs] == ["AAA111", "BBB222"]

    def test_repeated_legs_kept(self):
        legs = parse_flights("AA 1234\n\nAA 1234")
        assert len(legs) == 2

    def test_dates_times_and_rooms_are_not_flights(self):
        text = "Friday, June 12, 2024\nSuite 1200\nDepart 10:30 AM\nChicago 12:30"
        assert parse_flights(text) == []

    def test_flight_word_is_not_a_carrier(self):
        assert parse_flights("Flight 1234 Reservation Code: ABC123 Seat 4A") == []
        assert parse_flights("Flights 22 and 23 are full") == []

        legs = parse_flights("Flight Delta 2210 Seat 4A")
        assert [(l.airline, l.flight_number) for l in legs] == [("Delta", "2210")]

    def test_predicate_is_swappable(self):
        text = "AA 1234\nZZ 999"
        anchors = find_flight_anchors(text, predicate=lambda m: m.group("airline") != "ZZ")
        assert [m.group("airline") for m in anchors] == ["AA"]
        assert all(is_flight_anchor(m) for m in find_flight_anchors(text))


# ═══════════════════════════════════════════════════════════════════════════════
# HEADER & SCORER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestHeader:
    """Test positional header recovery."""

    def test_date_keyword_heuristic(self):
        text = "Booking # 1234567\n- - -\nJane Doe\nFriday, June 1, 2024\nAcme\nGala\nCONTACT INFORMATION\n"
        header = parse_header(text, segment_headings(text))
        assert header.event_date_text == "Friday, June 1, 2024"
        assert header.talent_name == "Jane Doe"
        assert header.client_name == "Acme"
        assert header.event_title == "Gala"

    def test_positional_without_date(self):
        text = "- - -\nJane Doe\nAcme\nGala\nSometime\nCONTACT INFORMATION\n"
        header = parse_header(text, segment_headings(text))
        assert header.event_date_text == "Sometime"

    def test_no_headings_means_no_header(self):
        text = "Jane Doe\nAcme"
        assert parse_header(text, segment_headings(text)) == HeaderFacts()

    def test_is_date_line(self):
        assert is_date_line("Friday, June 1, 2024")
        assert is_date_line("10/17/2024")
        assert is_date_line("Oct. 17")
        assert not is_date_line("May Chen")


class TestConfidenceScorer:
    """Test the fixed-checklist coverage score."""

    def test_nothing_found(self):
        c = ConfidenceScorer().score(None, HeaderFacts(), [], [])
        assert c.overall == 0
        assert not (c.has_booking_number or c.has_header or c.has_sites or c.has_contacts)
        assert len(c.missing) == 7

    def test_booking_only(self):
        c = ConfidenceScorer().score("999999", HeaderFacts(), [], [])
        assert c.overall == 14
        assert c.has_booking_number

    def test_everything(self):
        header = HeaderFacts(talent_name="a", client_name="b", event_title="c", event_date_text="d")
        c = ConfidenceScorer().score(
            "1", header, [Site(type=SiteType.EVENT)], [Contact(group=ContactGroup.TALENT)]
        )
        assert c.overall == 100
        assert c.missing == []

    def test_monotonic(self):
        header = HeaderFacts(talent_name="a")
        without = ConfidenceScorer().score(None, header, [], [])
        with_booking = ConfidenceScorer().score("123456", header, [], [])
        assert with_booking.overall >= without.overall

    def test_logs_only_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="eventbrief.scorer")
        ConfidenceScorer().score("123456", HeaderFacts(), [], [])

        records = [r for r in caplog.records if r.name == "eventbrief.scorer"]
        assert records
        assert all(r.levelno == logging.DEBUG for r in records)


# ═══════════════════════════════════════════════════════════════════════════════
# END-TO-END TESTS
# ═══════════════════════════════════════════════════════════════════════════════


class TestEndToEnd:
    """Test full document parsing."""

    def test_scenario_one(self):
        brief = parse_event_brief(SCENARIO_ONE)

        assert brief.booking_number == "123456"
        assert brief.header.talent_name == "Jane Doe"
        assert brief.header.client_name == "Acme Corp"
        assert brief.header.event_title == "Annual Gala"
        assert brief.header.event_date_text == "Friday, June 1, 2024"

        assert brief.sites[0].type == SiteType.EVENT
        assert brief.sites[0].phone == "(555) 123-4567"

        client = [c for c in brief.contacts if c.group == ContactGroup.CLIENT_ONSITE]
        assert client[0].name == "John Smith"
        assert client[0].office == "(555) 987-6543"

        leg = brief.schedule.flights[0]
        assert (leg.airline, leg.flight_number, leg.reservation_code, leg.seat) == (
            "AA", "1234", "ABCDEF", "12A",
        )
        assert brief.confidence.has_booking_number is True
        assert brief.confidence.overall == 100

    def test_scenario_two_missing_sections(self):
        brief = parse_event_brief("Booking # 999999")

        assert brief.booking_number == "999999"
        assert brief.header == HeaderFacts()
        assert brief.sites == []
        assert brief.contacts == []
        assert brief.schedule is None
        assert brief.emergency_travel is None
        assert brief.confidence.overall == 14

    def test_stable_shape_without_structure(self):
        brief = parse_event_brief("just some words")
        data = brief.model_dump(mode="json")

        for key in ("booking_number", "header", "sites", "contacts", "schedule",
                    "emergency_travel", "sections", "confidence"):
            assert key in data
        assert set(data["sections"]) == {h.value for h in Heading}
        assert all(spans == [] for spans in data["sections"].values())
        assert brief.confidence.overall == 0

    def test_empty_input(self):
        brief = parse_event_brief("")
        assert isinstance(brief, ParsedBrief)
        assert brief.confidence.overall == 0

    def test_full_brief(self):
        brief = parse_event_brief(FULL_BRIEF)

        assert brief.booking_number == "7654321"
        assert brief.header.talent_name == "Dr. Maya Patel"
        assert brief.header.event_date_text == "Thursday, October 17, 2024"

        assert len(brief.sites) == 1
        site = brief.sites[0]
        assert site.type == SiteType.EVENT
        assert site.name == "The Willard Hotel"
        assert site.hotel_details.nights == 2
        assert site.hotel_details.confirmation == "88812345"

        groups = [c.group for c in brief.contacts]
        assert groups == [
            ContactGroup.CLIENT_ONSITE,
            ContactGroup.LAI_CONTACTS,
            ContactGroup.LAI_CONTACTS,
            ContactGroup.TALENT,
            ContactGroup.TALENT_COMPANION,
        ]
        assert brief.contacts[0].email == "lchen@northwind.example"
        assert brief.contacts[-1].cell == "(415) 555-0112"

        assert brief.emergency_travel.phones == ["(800) 555-0177"]

        flights = brief.schedule.flights
        assert [(f.airline, f.flight_number) for f in flights] == [("UA", "1127"), ("Delta", "2210")]
        assert flights[0].seat == "3C"
        assert flights[1].reservation_code == "QX7TLM"

        assert brief.sections[Heading.EVENT_DETAILS][0].text.strip().startswith("Keynote for 300")
        assert brief.sections[Heading.TALENT_INTRODUCTION][0].text.strip() == (
            "Please welcome Dr. Maya Patel."
        )
        assert brief.confidence.overall == 100

    def test_page_markers_do_not_matter(self):
        with_markers = parse_event_brief("\n\n=== PAGE 1 ===\n" + SCENARIO_ONE)
        without = parse_event_brief(SCENARIO_ONE)

        assert with_markers.header == without.header
        assert with_markers.contacts == without.contacts
        assert with_markers.schedule.flights == without.schedule.flights

    def test_duplicate_contacts_collapse(self):
        block = "Tom Becker, AE\nOffice: (202) 555-0142\nEmail: tom@lai.example\n"
        text = (
            "CONTACT INFORMATION\nLEADING AUTHORITIES CONTACTS: " + block
            + "LAI CONTACTS: " + block
        )
        brief = parse_event_brief(text)
        assert len(brief.contacts) == 1

    def test_repeated_contact_information_pages(self):
        page = "CONTACT INFORMATION\nTALENT CONTACT: Maya Patel\nCell: (415) 555-0111\n"
        brief = parse_event_brief(page + "\n=== PAGE 2 ===\n" + page)

        assert len(brief.sections[Heading.CONTACT_INFORMATION]) == 2
        assert len(brief.contacts) == 1

    def test_assemble_sections_match_canonical(self):
        canonical = normalize(FULL_BRIEF)
        brief = assemble(canonical)
        for spans in brief.sections.values():
            for span in spans:
                assert canonical[span.start:span.end] == span.text

    def test_confidence_monotonic_end_to_end(self):
        body = "- - -\nJane Doe\nCONTACT INFORMATION\nTALENT CONTACT: Jane Doe\n"
        without = parse_event_brief(body)
        with_booking = parse_event_brief("Booking # 123456\n" + body)
        assert with_booking.confidence.overall >= without.confidence.overall

    def test_emergency_stops_at_page_marker(self):
        text = (
            "EMERGENCY TRAVEL NUMBERS: Phone: (800) 555-0177\n\n"
            "=== PAGE 2 ===\nOffice: (202) 555-0000"
        )
        canonical = normalize(text)
        emergency = parse_emergency_travel(
            segment_headings(canonical)[Heading.EMERGENCY_TRAVEL_NUMBERS]
        )
        assert emergency.phones == ["(800) 555-0177"]
        assert emergency.raw == "Phone: (800) 555-0177"

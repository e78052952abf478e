"""
Confidence Scorer
=================
Coverage of a fixed checklist, reported as a 0-100 score.

Checklist (denominator 7):
    - Booking number
    - Talent name, client name, event title, event date text
    - At least one site
    - At least one contact

This is not a probability. The checklist and denominator are fixed so
scores stay comparable between runs.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import Confidence, Contact, HeaderFacts, Site

logger = logging.getLogger(__name__)

CHECKLIST_SIZE = 7


class ConfidenceScorer:
    """
    Scores how much of the expected structure was recovered.
    """

    def score(
        self,
        booking_number: Optional[str],
        header: HeaderFacts,
        sites: list[Site],
        contacts: list[Contact],
    ) -> Confidence:
        checklist = {
            "booking_number": booking_number is not None,
            "talent_name": header.talent_name is not None,
            "client_name": header.client_name is not None,
            "event_title": header.event_title is not None,
            "event_date_text": header.event_date_text is not None,
            "sites": bool(sites),
            "contacts": bool(contacts),
        }

        found = sum(checklist.values())
        confidence = Confidence(
            overall=round(found / CHECKLIST_SIZE * 100),
            has_booking_number=checklist["booking_number"],
            has_header=any(
                checklist[k]
                for k in ("talent_name", "client_name", "event_title", "event_date_text")
            ),
            has_sites=checklist["sites"],
            has_contacts=checklist["contacts"],
            missing=[name for name, present in checklist.items() if not present],
        )

        logger.debug(
            f"Coverage {found}/{CHECKLIST_SIZE} ({confidence.overall}%)"
            + (f", missing: {', '.join(confidence.missing)}" if confidence.missing else "")
        )
        return confidence

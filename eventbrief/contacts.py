"""
Person / Contact Parser
=======================
Splits a contact label block into one or more people, extracts their
phone and email fields, and deduplicates contacts across the document.

The boundary between people is a heuristic: a line that starts with a
capitalized name followed by a comma ("Jane Doe, Director") opens a new
person. The heuristic lives in `is_new_person_line` so it can be swapped
for a new template without touching the slicing code.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Optional

from . import fields
from .models import Contact, ContactGroup

logger = logging.getLogger(__name__)

# ─── Heuristic Patterns ───────────────────────────────────────────────────────

# "Jane Doe, Director" / "Mary-Kate O'Neil, VP Events"; at most six words
NEW_PERSON_PATTERN = re.compile(r"^[A-Z][a-zA-Z'.\-]{0,40}(?: [A-Za-z'.\-]{1,40}){0,5},(?:\s|$)")

# Lines that carry a value rather than a name
FIELD_LINE_PATTERN = re.compile(
    r"^(?:Office|Work|Direct|Cell|Mobile|Phone|Tel|Fax|E-?mail)\b", re.IGNORECASE
)

COMPANION_PATTERN = re.compile(
    r"accompanied\s+by\s+"
    r"(?:(?:his|her|their)\s+[a-z]{1,20}(?:\s+[a-z]{1,20})?,?\s+)?"
    r"([A-Z][\w'.\-]{0,40}(?: [A-Z][\w'.\-]{0,40}){0,3})"
)

NewPersonPredicate = Callable[[str], bool]


def is_new_person_line(line: str) -> bool:
    """True when `line` opens a new person record ("Name, Title")."""
    return bool(NEW_PERSON_PATTERN.match(line)) and not FIELD_LINE_PATTERN.match(line)


def is_companion_line(line: str) -> bool:
    return bool(COMPANION_PATTERN.search(line))


# ─── Splitting ────────────────────────────────────────────────────────────────


def split_people(
    block: str,
    predicate: NewPersonPredicate = is_new_person_line,
) -> list[list[str]]:
    """
    Group the block's lines into one list per person.

    Lines before the first boundary belong to the first person. When no
    line satisfies the predicate the whole block is one person.
    """
    lines = [line.strip() for line in block.split("\n") if line.strip()]
    people: list[list[str]] = []

    for line in lines:
        if predicate(line) or not people:
            people.append([line])
        else:
            people[-1].append(line)

    return people


def split_name_title(line: str) -> tuple[Optional[str], Optional[str]]:
    """Split a "Name, Title" line on its first comma."""
    if FIELD_LINE_PATTERN.match(line):
        return None, None
    name, _, title = line.partition(",")
    return name.strip() or None, title.strip() or None


def parse_person(group: ContactGroup, lines: list[str]) -> Contact:
    name, title = split_name_title(lines[0])
    body = "\n".join(lines)
    return Contact(
        group=group,
        name=name,
        title=title,
        office=fields.extract_office(body),
        cell=fields.extract_cell(body),
        email=fields.extract_email(body),
        raw=body,
    )


# ─── Talent ───────────────────────────────────────────────────────────────────


def _companion_cell(block: str, companion: str) -> Optional[str]:
    """Cell listed as "<Full Name>'s Cell:" or "<First>'s Cell:"."""
    first_name = companion.split()[0]
    for owner in dict.fromkeys((companion, first_name)):
        pattern = re.compile(
            rf"{re.escape(owner)}['’]s\s+(?:Cell|Mobile)\s*:\s*({fields.PHONE})",
            re.IGNORECASE,
        )
        cell = fields.match_first(block, pattern)
        if cell:
            return cell
    return None


def parse_talent(block: str) -> list[Contact]:
    """
    Talent contact plus an optional companion.

    A "will be accompanied by <name>" clause yields a second contact in
    the talent_companion group, with the cell found under "<name>'s Cell:".
    """
    lines = [line.strip() for line in block.split("\n") if line.strip()]
    companion_lines = [line for line in lines if is_companion_line(line)]
    person_block = "\n".join(line for line in lines if line not in companion_lines)

    contacts = [
        parse_person(ContactGroup.TALENT, person_lines)
        for person_lines in split_people(person_block)
    ]

    for line in companion_lines:
        companion = (fields.match_first(line, COMPANION_PATTERN) or "").rstrip(".,;")
        if not companion:
            continue
        contacts.append(Contact(
            group=ContactGroup.TALENT_COMPANION,
            name=companion,
            cell=_companion_cell(block, companion),
            raw=line,
        ))
        logger.debug(f"Talent companion found: {companion}")

    return contacts


# ─── Entry Points ─────────────────────────────────────────────────────────────


def parse_contacts(group: ContactGroup, block: str) -> list[Contact]:
    """All people listed in one contact label block."""
    if not block or not block.strip():
        return []

    if group == ContactGroup.TALENT:
        return parse_talent(block)

    return [parse_person(group, lines) for lines in split_people(block)]


def contact_key(contact: Contact) -> tuple:
    return (
        contact.group.value,
        (contact.name or "").casefold(),
        (contact.email or "").casefold(),
        fields.digits_only(contact.cell),
        fields.digits_only(contact.office),
    )


def dedupe_contacts(contacts: Iterable[Contact]) -> list[Contact]:
    """Keep the first contact for each composite key, in order."""
    seen: set[tuple] = set()
    unique: list[Contact] = []
    dropped = 0

    for contact in contacts:
        key = contact_key(contact)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(contact)

    if dropped:
        logger.debug(f"Dropped {dropped} duplicate contacts")
    return unique

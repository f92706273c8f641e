"""GEDCOM import: individuals and families into members and relationships."""

import calendar
import logging
import re
from pathlib import Path

from ged4py import GedcomReader

from models import Member, Relationship, RelationshipStatus, RelationshipType

logger = logging.getLogger(__name__)

# Month names and abbreviations, upper-cased ("JAN", "JANUARY", ..., plus "SEPT")
MONTH_MAP = {calendar.month_abbr[i].upper(): i for i in range(1, 13)}
MONTH_MAP.update({calendar.month_name[i].upper(): i for i in range(1, 13)})
MONTH_MAP["SEPT"] = 9

QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    re.IGNORECASE,
)

# Tried in order; numeric month/day groups or a month name group
DATE_PATTERNS = [
    re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})$"),  # 1839-08-29
    re.compile(r"^(?P<day>\d{1,2})\s+(?P<mon>[A-Za-z]+)\.?\s*(?P<year>\d{4})$"),  # 25 NOV 1954, 02 May1838
    re.compile(r"^(?P<mon>[A-Za-z]+)\.?,?\s*(?P<year>\d{4})$"),  # NOV 1954, May, 1837
    re.compile(r"^(?P<year>\d{4})$"),  # 1698
    re.compile(r"^(?P<month>\d{1,2})(?:[-/]|\s+)(?P<day>\d{1,2})(?:[-/]|\s+)(?P<year>\d{4})$"),  # 01-27-1920
    re.compile(r"^(?P<mon>[A-Za-z]+)\.?\s*(?P<day>\d{1,2}),?\s*(?P<year>\d{4})$"),  # April 17, 1850
]

PEDIGREE_SUBTYPES = {
    "BIRTH": "biological",
    "FOSTER": "foster",
    "STEP": "step",
}

GENDERS = {"M": "male", "F": "female"}


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form genealogy date into ISO format (YYYY-MM-DD).

    Qualifiers such as ABT/BEF/AROUND, surrounding parentheses and trailing
    question marks are ignored. Missing month or day default to 01.
    Returns None if the date cannot be parsed.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIER_RE.sub("", s).strip()
    if not s:
        return None

    for pattern in DATE_PATTERNS:
        match = pattern.match(s)
        if not match:
            continue
        parts = match.groupdict()

        if parts.get("mon"):
            month = MONTH_MAP.get(parts["mon"].upper().rstrip("."))
        else:
            month = int(parts.get("month") or 1) or 1
        day = int(parts.get("day") or 1) or 1

        if month and 1 <= month <= 12 and 1 <= day <= 31:
            return f"{int(parts['year']):04d}-{month:02d}-{day:02d}"

    return None


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name_parts(indi) -> tuple[str, str | None]:
    """Extract given name and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("Unknown", None)

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, _suffix = name_rec.value
        return (given or "Unknown", surname or None)

    # Fallback: string format "Given /Surname/"
    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    given = givn.value if givn else str(name_rec.value).split("/")[0].strip()
    return (given or "Unknown", surn.value if surn else None)


def extract_event_details(indi, tag: str) -> tuple[str | None, str | None]:
    """Extract date (as ISO) and place from an event tag (BIRT, DEAT, etc.)."""
    event = indi.sub_tag(tag)
    if event is None:
        return (None, None)

    date_rec = event.sub_tag("DATE")
    place_rec = event.sub_tag("PLAC")

    # ged4py may return DateValue objects
    date_val = parse_date_string(str(date_rec.value)) if date_rec and date_rec.value else None
    place_val = str(place_rec.value) if place_rec and place_rec.value else None
    return (date_val, place_val)


def extract_pedigrees(indi) -> dict[str, str]:
    """Map family xref -> PEDI value for each FAMC link of an individual."""
    pedigrees: dict[str, str] = {}
    for famc in indi.sub_tags("FAMC", follow=False):
        pedi = famc.sub_tag("PEDI")
        if famc.value and pedi and pedi.value:
            pedigrees[famc.value] = str(pedi.value).upper()
    return pedigrees


def normalize_data(reader: GedcomReader) -> tuple[list[Member], list[Relationship]]:
    """
    Extract members and relationships from parsed GEDCOM data.

    Each family becomes a spouse edge between husband and wife (divorced when the
    family records a DIV event) and one edge per parent and child. The child's
    pedigree (PEDI) selects the edge: adopted children get an adopted edge,
    foster and step children a parent-child edge with that subtype.
    """
    members: list[Member] = []
    relationships: list[Relationship] = []
    pedigrees: dict[tuple[int, str], str] = {}

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        member_id = extract_numeric_id(rec.xref_id)
        first_name, last_name = extract_name_parts(rec)
        sex_rec = rec.sub_tag("SEX")
        birth_date, birth_place = extract_event_details(rec, "BIRT")
        death_date, death_place = extract_event_details(rec, "DEAT")
        occu = rec.sub_tag("OCCU")

        members.append(
            Member(
                id=member_id,
                first_name=first_name,
                last_name=last_name,
                gender=GENDERS.get(sex_rec.value, "unknown") if sex_rec else None,
                birth_date=birth_date,
                birth_place=birth_place,
                death_date=death_date,
                death_place=death_place,
                occupation=str(occu.value) if occu and occu.value else None,
            )
        )
        for fam_xref, pedi in extract_pedigrees(rec).items():
            pedigrees[(member_id, fam_xref)] = pedi

    def add(from_id: int, to_id: int, rel_type: RelationshipType, **kwargs):
        relationships.append(
            Relationship(
                id=len(relationships) + 1,
                from_member_id=from_id,
                to_member_id=to_id,
                type=rel_type,
                **kwargs,
            )
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue

        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")
        parent_ids = [
            extract_numeric_id(p.xref_id) for p in (husb, wife) if p is not None and p.xref_id
        ]

        if len(parent_ids) == 2:
            divorced = rec.sub_tag("DIV") is not None
            add(
                parent_ids[0],
                parent_ids[1],
                RelationshipType.SPOUSE,
                status=RelationshipStatus.DIVORCED if divorced else RelationshipStatus.ACTIVE,
            )

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            pedi = pedigrees.get((child_id, rec.xref_id), "BIRTH")
            for parent_id in parent_ids:
                if pedi == "ADOPTED":
                    add(parent_id, child_id, RelationshipType.ADOPTED, sub_type="legal")
                else:
                    add(
                        parent_id,
                        child_id,
                        RelationshipType.PARENT_CHILD,
                        sub_type=PEDIGREE_SUBTYPES.get(pedi, "biological"),
                    )

    logger.debug("Normalized %d members and %d relationships", len(members), len(relationships))
    return members, relationships

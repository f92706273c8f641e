"""Chronological family timeline built from events, life dates and relationships."""

import logging
from dataclasses import dataclass, field

from models import FamilyTree, Member, RelationshipStatus, RelationshipType

logger = logging.getLogger(__name__)

# Order of entries that share a date
KIND_PRIORITY = {
    "birth": 1,
    "death": 2,
    "marriage": 3,
    "adoption": 4,
    "divorce": 5,
    "graduation": 8,
    "move": 9,
    "relationship": 10,
    "other": 11,
}


@dataclass
class TimelineEntry:
    date: str  # ISO date, empty when the event is undated
    year: int
    kind: str
    description: str
    member_ids: list[int] = field(default_factory=list)  # primary member first
    place: str | None = None

    @property
    def sort_key(self) -> tuple:
        return (self.year, self.date, KIND_PRIORITY.get(self.kind, 99))


def parse_year(date: str | None) -> int | None:
    """Leading year of an ISO date, 0 for an undated entry, None if unreadable."""
    if not date:
        return 0
    try:
        return int(date.split("-")[0])
    except ValueError:
        return None


def _entry(date, kind, description, member_ids, place=None) -> TimelineEntry | None:
    year = parse_year(date)
    if year is None:
        logger.debug("Skipping %s entry with unreadable date %r", kind, date)
        return None
    return TimelineEntry(date or "", year, kind, description, member_ids, place)


def life_entries(member: Member) -> list[TimelineEntry]:
    entries = []
    if member.birth_date:
        entries.append(_entry(member.birth_date, "birth", f"Birth of {member.name}", [member.id], member.birth_place))
    if member.death_date:
        entries.append(
            _entry(member.death_date, "death", f"Passing of {member.name}", [member.id], member.death_place)
        )
    return [e for e in entries if e is not None]


def timeline(tree: FamilyTree) -> list[TimelineEntry]:
    """
    Every dated happening in the family, oldest first.

    Recorded events come first in precedence: a birth, death, marriage,
    adoption or divorce derived from member or relationship dates is left out
    when a recorded event of the same kind on the same date already involves
    its primary member. Events whose members are all unknown are dropped.
    """
    members = {m.id: m for m in tree.members}
    entries: list[TimelineEntry] = []

    for event in tree.events:
        involved = [m for m in event.member_ids if m in members]
        if not involved:
            logger.debug("Skipping event %s: no known members", event.id)
            continue
        entry = _entry(
            event.date,
            event.type.value,
            event.description or f"Family event: {event.type.value}",
            involved,
            event.place,
        )
        if entry is not None:
            entries.append(entry)

    recorded = {(e.kind, e.date, m) for e in entries for m in e.member_ids}

    derived: list[TimelineEntry] = []
    for member in tree.members:
        derived.extend(life_entries(member))

    for rel in tree.relationships:
        source = members.get(rel.from_member_id)
        target = members.get(rel.to_member_id)
        if source is None or target is None:
            continue

        if rel.start_date:
            if rel.type is RelationshipType.SPOUSE:
                kind, description = "marriage", f"{source.name} married {target.name}"
            elif rel.type is RelationshipType.ADOPTED:
                kind, description = "adoption", f"{source.name} adopted {target.name}"
            else:
                kind, description = "relationship", f"{source.name} became {rel.type.value} of {target.name}"
            entry = _entry(rel.start_date, kind, description, [source.id, target.id])
            if entry is not None:
                derived.append(entry)

        if rel.end_date and rel.status is RelationshipStatus.DIVORCED:
            entry = _entry(rel.end_date, "divorce", f"{source.name} and {target.name} divorced", [source.id, target.id])
            if entry is not None:
                derived.append(entry)

    entries.extend(e for e in derived if (e.kind, e.date, e.member_ids[0]) not in recorded)
    return sorted(entries, key=lambda e: e.sort_key)

"""Data classes for family tree entities."""

from dataclasses import dataclass, field
from enum import Enum


class RelationshipType(str, Enum):
    PARENT_CHILD = "parent-child"
    SPOUSE = "spouse"
    ADOPTED = "adopted"
    GUARDIAN = "guardian"
    OTHER = "other"

    @property
    def directed(self) -> bool:
        """Directed edges point from the older/responsible member to the dependent one."""
        return self in (RelationshipType.PARENT_CHILD, RelationshipType.ADOPTED, RelationshipType.GUARDIAN)


class RelationshipStatus(str, Enum):
    ACTIVE = "active"
    DIVORCED = "divorced"
    SEPARATED = "separated"
    WIDOWED = "widowed"
    DECEASED = "deceased"


ALLOWED_SUBTYPES: dict[RelationshipType, frozenset[str]] = {
    RelationshipType.PARENT_CHILD: frozenset({"biological", "step", "foster", "adopted"}),
    RelationshipType.SPOUSE: frozenset({"legal", "common-law"}),
    RelationshipType.ADOPTED: frozenset({"legal", "foster"}),
    RelationshipType.GUARDIAN: frozenset({"legal"}),
    RelationshipType.OTHER: frozenset(),
}


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class Member:
    id: int
    first_name: str
    middle_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    birth_place: str | None = None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_place: str | None = None
    occupation: str | None = None
    x: float = 0.0  # top-left corner of the member's card, canvas units
    y: float = 0.0

    @property
    def name(self) -> str:
        parts = [p for p in (self.first_name, self.middle_name, self.last_name) if p]
        return " ".join(parts) if parts else "Unknown"

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Relationship:
    id: int
    from_member_id: int
    to_member_id: int
    type: RelationshipType
    sub_type: str | None = None
    status: RelationshipStatus = RelationshipStatus.ACTIVE
    start_date: str | None = None
    end_date: str | None = None

    def __post_init__(self):
        # Accept raw strings as stored in the database
        self.type = RelationshipType(self.type)
        self.status = RelationshipStatus(self.status or RelationshipStatus.ACTIVE)

        if self.sub_type is not None and self.sub_type not in ALLOWED_SUBTYPES[self.type]:
            raise ValueError(f"Subtype {self.sub_type!r} is not valid for a {self.type.value} relationship")
        if self.type is not RelationshipType.SPOUSE and self.status is not RelationshipStatus.ACTIVE:
            raise ValueError(f"Status {self.status.value!r} only applies to spouse relationships")

    @property
    def is_active(self) -> bool:
        return self.status is RelationshipStatus.ACTIVE

    @classmethod
    def from_stored(cls, **fields) -> tuple["Relationship", list[str]]:
        """
        Build a relationship from a stored row, repairing values the constructor
        would reject.

        Unknown types become OTHER, unknown or misplaced statuses become ACTIVE
        and a subtype not allowed for the type is dropped. Returns the
        relationship and one message per repair.
        """
        problems = []
        rel_id = fields.get("id")

        try:
            rel_type = RelationshipType(fields.get("type"))
        except ValueError:
            problems.append(f"Relationship {rel_id}: unknown type {fields.get('type')!r}, treated as other")
            rel_type = RelationshipType.OTHER

        try:
            status = RelationshipStatus(fields.get("status") or RelationshipStatus.ACTIVE)
        except ValueError:
            problems.append(f"Relationship {rel_id}: unknown status {fields.get('status')!r}, treated as active")
            status = RelationshipStatus.ACTIVE
        if rel_type is not RelationshipType.SPOUSE and status is not RelationshipStatus.ACTIVE:
            problems.append(
                f"Relationship {rel_id}: status {status.value!r} on a {rel_type.value} relationship, treated as active"
            )
            status = RelationshipStatus.ACTIVE

        sub_type = fields.get("sub_type")
        if sub_type is not None and sub_type not in ALLOWED_SUBTYPES[rel_type]:
            problems.append(f"Relationship {rel_id}: subtype {sub_type!r} dropped from a {rel_type.value} relationship")
            sub_type = None

        fields.update(type=rel_type, status=status, sub_type=sub_type)
        return cls(**fields), problems


class EventType(str, Enum):
    BIRTH = "birth"
    DEATH = "death"
    MARRIAGE = "marriage"
    DIVORCE = "divorce"
    ADOPTION = "adoption"
    GRADUATION = "graduation"
    MOVE = "move"
    OTHER = "other"


@dataclass
class FamilyEvent:
    """A dated family event involving one or more members."""

    id: int
    type: EventType
    date: str | None = None  # ISO format YYYY-MM-DD or None
    place: str | None = None
    description: str | None = None
    member_ids: list[int] = field(default_factory=list)

    def __post_init__(self):
        self.type = EventType(self.type)
        if not self.member_ids:
            raise ValueError(f"Event {self.id} must involve at least one member")


@dataclass
class FamilyTree:
    """Snapshot of all members and relationships handed to the layout engine."""

    members: list[Member] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    events: list[FamilyEvent] = field(default_factory=list)
    # problems repaired while reading stored rows
    load_warnings: list[str] = field(default_factory=list)

    @property
    def member_ids(self) -> set[int]:
        return {m.id for m in self.members}

    def find_member(self, member_id: int) -> Member | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

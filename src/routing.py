"""Line geometry for drawing relationships between positioned members.

Recomputed on every render pass from the current member positions; nothing
here is persisted.
"""

import logging
import math
from dataclasses import dataclass

from graph import build_index
from layout import LayoutConfig
from models import FamilyTree, Member, Point, Relationship, RelationshipType

logger = logging.getLogger(__name__)

ARROW_SIZE = 10.0
ARROW_SPREAD = math.pi / 6


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    width: float
    dash: str | None = None  # SVG dash array, None for a solid line


@dataclass(frozen=True)
class Arrowhead:
    tip: Point
    left: Point
    right: Point
    angle: float  # radians, direction of the line at the tip


@dataclass
class EdgeGeometry:
    relationship_id: int
    key: tuple
    start: Point
    end: Point
    style: EdgeStyle
    arrowhead: Arrowhead | None = None
    label: str | None = None

    @property
    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)


STYLES = {
    RelationshipType.SPOUSE: EdgeStyle("#EF4444", 3),
    RelationshipType.PARENT_CHILD: EdgeStyle("#94A3B8", 2),
    RelationshipType.ADOPTED: EdgeStyle("#8B5CF6", 2, "6 4"),
    RelationshipType.GUARDIAN: EdgeStyle("#10B981", 2, "2 4"),
    RelationshipType.OTHER: EdgeStyle("#CBD5E1", 1, "2 4"),
}


def card_center(member: Member, config: LayoutConfig) -> Point:
    return Point(member.x + config.card_width / 2, member.y + config.card_height / 2)


def bottom_center(member: Member, config: LayoutConfig) -> Point:
    return Point(member.x + config.card_width / 2, member.y + config.card_height)


def top_center(member: Member, config: LayoutConfig) -> Point:
    return Point(member.x + config.card_width / 2, member.y)


def edge_style(rel: Relationship) -> EdgeStyle:
    style = STYLES[rel.type]
    if rel.type is RelationshipType.SPOUSE and not rel.is_active:
        return EdgeStyle(style.color, style.width, "8 4")
    if rel.type is RelationshipType.PARENT_CHILD and rel.sub_type in ("step", "foster"):
        return EdgeStyle(style.color, style.width, "6 4")
    return style


def dedup_key(rel: Relationship, co_parent: int | None = None) -> tuple:
    """
    Key under which an edge is drawn at most once.

    Spouse edges are unordered. A child's edges from two co-parents share one
    key, since both are routed from the parents' midpoint.
    """
    a, b = rel.from_member_id, rel.to_member_id
    if rel.type is RelationshipType.SPOUSE:
        return (rel.type.value, min(a, b), max(a, b))
    if co_parent is not None:
        return (rel.type.value, min(a, co_parent), max(a, co_parent), b)
    return (rel.type.value, a, b)


def compute_arrowhead(start: Point, end: Point, size: float = ARROW_SIZE) -> Arrowhead | None:
    """Arrowhead at `end`, oriented along the line; None for a zero-length line."""
    dx, dy = end.x - start.x, end.y - start.y
    if dx == 0 and dy == 0:
        return None
    angle = math.atan2(dy, dx)
    left = Point(
        end.x - size * math.cos(angle - ARROW_SPREAD),
        end.y - size * math.sin(angle - ARROW_SPREAD),
    )
    right = Point(
        end.x - size * math.cos(angle + ARROW_SPREAD),
        end.y - size * math.sin(angle + ARROW_SPREAD),
    )
    return Arrowhead(tip=end, left=left, right=right, angle=angle)


def find_co_parent(
    rel: Relationship,
    members: dict[int, Member],
    parents: dict[int, set[int]],
    active_couples: set[frozenset[int]],
    config: LayoutConfig,
) -> int | None:
    """
    The child's other parent when the two parents form an active couple drawn
    side by side (tops within half a card height of each other).

    With more than two recorded parents the qualifying partner with the lowest
    id is chosen, so each parent pairs with at most one co-parent and a child
    of a three-way cluster can get two converging lines.
    """
    parent_id, child_id = rel.from_member_id, rel.to_member_id
    parent = members[parent_id]
    for other_id in sorted(parents.get(child_id, set()) - {parent_id}):
        other = members.get(other_id)
        if other is None or frozenset((parent_id, other_id)) not in active_couples:
            continue
        if abs(parent.y - other.y) <= config.card_height / 2:
            return other_id
    return None


def route_edge(
    rel: Relationship,
    members: dict[int, Member],
    parents: dict[int, set[int]],
    active_couples: set[frozenset[int]],
    config: LayoutConfig,
) -> EdgeGeometry | None:
    """Geometry for one relationship, or None if an endpoint is not positioned."""
    source = members.get(rel.from_member_id)
    target = members.get(rel.to_member_id)
    if source is None or target is None:
        logger.debug("Skipping relationship %s: endpoint missing from positioned members", rel.id)
        return None

    co_parent = None
    if rel.type is RelationshipType.SPOUSE or rel.type is RelationshipType.OTHER:
        start, end = card_center(source, config), card_center(target, config)
    elif rel.type is RelationshipType.PARENT_CHILD:
        co_parent = find_co_parent(rel, members, parents, active_couples, config)
        start = bottom_center(source, config)
        if co_parent is not None:
            other = bottom_center(members[co_parent], config)
            start = Point((start.x + other.x) / 2, (start.y + other.y) / 2)
        end = top_center(target, config)
    else:
        start, end = bottom_center(source, config), top_center(target, config)

    return EdgeGeometry(
        relationship_id=rel.id,
        key=dedup_key(rel, co_parent),
        start=start,
        end=end,
        style=edge_style(rel),
        arrowhead=compute_arrowhead(start, end) if rel.type.directed else None,
        label=None if rel.is_active else rel.status.value,
    )


def route_edges(tree: FamilyTree, config: LayoutConfig | None = None) -> dict[int, EdgeGeometry | None]:
    """
    Route every relationship of the snapshot.

    Returns relationship id -> geometry, or None where the edge is not drawn
    (missing endpoint, or already drawn under the same dedup key).
    """
    config = config or LayoutConfig()
    members = {m.id: m for m in tree.members}
    index = build_index(tree)
    active_couples = {
        frozenset((r.from_member_id, r.to_member_id))
        for r in tree.relationships
        if r.type is RelationshipType.SPOUSE and r.is_active
    }

    drawn: set[tuple] = set()
    routed: dict[int, EdgeGeometry | None] = {}
    for rel in tree.relationships:
        geometry = route_edge(rel, members, index.parents, active_couples, config)
        if geometry is not None and geometry.key in drawn:
            geometry = None
        if geometry is not None:
            drawn.add(geometry.key)
        routed[rel.id] = geometry
    return routed


def drawable_edges(tree: FamilyTree, config: LayoutConfig | None = None) -> list[EdgeGeometry]:
    return [g for g in route_edges(tree, config).values() if g is not None]

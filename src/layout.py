"""Recursive layout of the family tree onto the 2-D canvas.

Spouse clusters are laid out as units: a cluster's shared children are placed
first, then the cluster is centered above the span of its children's centers.
Childless clusters take the next free slot on a horizontal cursor that only
ever moves right, so unrelated subtrees never overlap.

All positions are the top-left corner of a member's card, matching what the
canvas stores on each member.
"""

import logging
from dataclasses import dataclass, field, replace

from graph import GraphIndex, assign_generations, build_index, find_roots, spouse_cluster
from models import FamilyTree, Point

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    card_width: float = 192.0
    card_height: float = 100.0
    horizontal_gap: float = 48.0
    vertical_gap: float = 96.0
    origin_x: float = 0.0
    origin_y: float = 0.0

    def band_y(self, depth: int) -> float:
        """Top edge of the cards in a depth band."""
        return self.origin_y + depth * (self.card_height + self.vertical_gap)

    def cluster_width(self, size: int) -> float:
        return size * self.card_width + (size - 1) * self.horizontal_gap


@dataclass
class LayoutContext:
    """Mutable state threaded through one layout run."""

    index: GraphIndex
    config: LayoutConfig
    cursor: float = 0.0
    placed: set[int] = field(default_factory=set)
    positions: dict[int, Point] = field(default_factory=dict)
    # placement order, so a finished subtree can be shifted as a block
    order: list[int] = field(default_factory=list)


def shared_children(cluster: list[int], index: GraphIndex) -> list[int]:
    """
    Children that every member of the cluster is recorded as parent of.

    A step-parent who is not a parent of record for a child does not pull that
    child under the couple.
    """
    if len(cluster) == 1:
        return sorted(index.children[cluster[0]])

    members = set(cluster)
    candidates: set[int] = set()
    for m in cluster:
        candidates |= index.children[m]
    return sorted(c for c in candidates if members <= index.parents[c])


def layout_cluster(cluster: list[int], depth: int, ctx: LayoutContext) -> float | None:
    """
    Lay out a spouse cluster and its descendants at the given depth.

    Returns the horizontal center of the cluster, or None when every member of
    the cluster was already placed through another path.
    """
    cluster = [m for m in cluster if m not in ctx.placed]
    if not cluster:
        return None

    cfg = ctx.config
    ctx.placed.update(cluster)
    start_cursor = ctx.cursor
    first_in_subtree = len(ctx.order)

    child_centers: list[float] = []
    for child_id in shared_children(cluster, ctx.index):
        if child_id in ctx.placed:
            continue
        center = layout_cluster(spouse_cluster(ctx.index, child_id), depth + 1, ctx)
        if center is not None:
            child_centers.append(center)

    width = cfg.cluster_width(len(cluster))
    if child_centers:
        left = (min(child_centers) + max(child_centers)) / 2 - width / 2
    else:
        left = ctx.cursor

    if left < start_cursor:
        # Wider than its children: move the whole subtree right of earlier ones
        shift = start_cursor - left
        for member_id in ctx.order[first_in_subtree:]:
            p = ctx.positions[member_id]
            ctx.positions[member_id] = Point(p.x + shift, p.y)
        left += shift
        ctx.cursor += shift

    y = cfg.band_y(depth)
    for i, member_id in enumerate(cluster):
        ctx.positions[member_id] = Point(left + i * (cfg.card_width + cfg.horizontal_gap), y)
        ctx.order.append(member_id)

    ctx.cursor = max(ctx.cursor, left + width + cfg.horizontal_gap)
    return left + width / 2


def auto_layout(tree: FamilyTree, config: LayoutConfig | None = None) -> dict[int, Point]:
    """
    Compute a position for every member of the snapshot.

    Root clusters, those in which no member has a recorded parent, are laid out
    in id order at depth 0. A parentless in-law married into the family waits
    until their spouse's parents reach the couple. Members still unplaced
    afterwards (isolated members, children excluded by the shared-children rule,
    cyclic islands) are placed at their generation band in id order.
    """
    config = config or LayoutConfig()
    index = build_index(tree)
    ctx = LayoutContext(index=index, config=config, cursor=config.origin_x)

    for root in find_roots(index):
        if root in ctx.placed:
            continue
        cluster = spouse_cluster(index, root)
        if all(not index.parents[m] for m in cluster):
            layout_cluster(cluster, 0, ctx)

    leftovers = [m for m in index.member_ids if m not in ctx.placed]
    if leftovers:
        logger.debug("Placing %d members not reached from a root", len(leftovers))
        generations = assign_generations(index)
        for member_id in leftovers:
            if member_id not in ctx.placed:
                layout_cluster(spouse_cluster(index, member_id), generations[member_id], ctx)

    return dict(sorted(ctx.positions.items()))


def changed_positions(tree: FamilyTree, positions: dict[int, Point]) -> dict[int, Point]:
    """Computed positions that differ from what is stored on the members."""
    return {
        m.id: positions[m.id]
        for m in tree.members
        if m.id in positions and m.position != positions[m.id]
    }


def apply_positions(tree: FamilyTree, positions: dict[int, Point]):
    """Write computed positions onto the in-memory members."""
    for m in tree.members:
        if m.id in positions:
            m.x, m.y = positions[m.id].x, positions[m.id].y


def positioned_tree(tree: FamilyTree, positions: dict[int, Point]) -> FamilyTree:
    """Copy of the snapshot with computed positions applied, leaving the input untouched."""
    return replace(
        tree,
        members=[
            replace(m, x=positions[m.id].x, y=positions[m.id].y) if m.id in positions else replace(m)
            for m in tree.members
        ],
        relationships=list(tree.relationships),
        events=list(tree.events),
    )

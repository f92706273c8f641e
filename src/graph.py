"""Relationship graph indexing, generation assignment and spouse clustering."""

import logging
from dataclasses import dataclass, field

import networkx as nx

from models import FamilyTree, RelationshipType

logger = logging.getLogger(__name__)


@dataclass
class GraphIndex:
    """Adjacency maps keyed by member id.

    Every member in the snapshot has an entry (possibly empty) in each map,
    so lookups never fail for known ids.
    """

    children: dict[int, set[int]] = field(default_factory=dict)
    parents: dict[int, set[int]] = field(default_factory=dict)
    spouses: dict[int, set[int]] = field(default_factory=dict)
    spouse_graph: nx.Graph = field(default_factory=nx.Graph)

    @property
    def member_ids(self) -> list[int]:
        return sorted(self.children)


@dataclass
class FamilyStats:
    total_members: int
    generations: int
    couples: int


def build_index(tree: FamilyTree) -> GraphIndex:
    """Build children/parents/spouses adjacency from a flat relationship list."""
    index = GraphIndex()
    for member in tree.members:
        index.children[member.id] = set()
        index.parents[member.id] = set()
        index.spouses[member.id] = set()
        index.spouse_graph.add_node(member.id)

    for rel in tree.relationships:
        a, b = rel.from_member_id, rel.to_member_id
        if a not in index.children or b not in index.children:
            logger.debug("Skipping relationship %s: references unknown member", rel.id)
            continue

        if rel.type is RelationshipType.PARENT_CHILD:
            index.children[a].add(b)
            index.parents[b].add(a)
        elif rel.type is RelationshipType.SPOUSE:
            # Spouse edges are undirected regardless of how they were recorded
            index.spouses[a].add(b)
            index.spouses[b].add(a)
            index.spouse_graph.add_edge(a, b)

    return index


def find_roots(index: GraphIndex) -> list[int]:
    """Members with no recorded parent, in id order."""
    return [m for m in index.member_ids if not index.parents[m]]


def assign_generations(index: GraphIndex) -> dict[int, int]:
    """
    Assign an integer generation to every member.

    Roots start at generation 0 and each child edge adds one. A member reached
    from several roots keeps the deepest generation found. Members that no root
    reaches (cyclic islands, rootless subgraphs) all get the next unused
    generation number.
    """
    generations: dict[int, int] = {}

    def walk(member_id: int, generation: int, visited: set[int]):
        # visited holds the current path, so a cycle ends the branch
        if member_id in visited or generations.get(member_id, -1) >= generation:
            return
        generations[member_id] = generation
        visited.add(member_id)
        for child_id in sorted(index.children[member_id]):
            walk(child_id, generation + 1, visited)
        visited.discard(member_id)

    for root in find_roots(index):
        walk(root, 0, set())

    orphans = [m for m in index.member_ids if m not in generations]
    if orphans:
        next_generation = max(generations.values(), default=-1) + 1
        logger.debug("Members unreachable from any root: %s", orphans)
        for member_id in orphans:
            generations[member_id] = next_generation

    return generations


def spouse_cluster(index: GraphIndex, seed: int) -> list[int]:
    """Return the seed's transitive spouse closure, sorted by id for stable layouts."""
    if seed not in index.spouse_graph:
        return [seed]
    return sorted(nx.node_connected_component(index.spouse_graph, seed))


def spouse_clusters(index: GraphIndex) -> list[list[int]]:
    """Partition all members into spouse clusters, ordered by their smallest id."""
    clusters = [sorted(c) for c in nx.connected_components(index.spouse_graph)]
    return sorted(clusters, key=lambda c: c[0])


def family_stats(tree: FamilyTree) -> FamilyStats:
    """Summary numbers shown next to the canvas."""
    index = build_index(tree)
    generations = assign_generations(index)
    couples = {
        (min(a, b), max(a, b))
        for a, partners in index.spouses.items()
        for b in partners
    }
    return FamilyStats(
        total_members=len(tree.members),
        generations=len(set(generations.values())),
        couples=len(couples),
    )


def to_networkx(tree: FamilyTree) -> nx.MultiDiGraph:
    """Build a NetworkX multigraph of the snapshot."""
    G = nx.MultiDiGraph()

    # Note: use 'member_name' instead of 'name' to avoid conflict with pydot
    for m in tree.members:
        G.add_node(
            m.id,
            member_name=m.name,
            gender=m.gender,
            birth_date=m.birth_date,
            death_date=m.death_date,
            x=m.x,
            y=m.y,
        )

    for rel in tree.relationships:
        G.add_edge(
            rel.from_member_id,
            rel.to_member_id,
            key=rel.id,
            relationship_type=rel.type,
            sub_type=rel.sub_type,
            status=rel.status,
        )

    return G

"""Integrity checks for family tree data."""

import networkx as nx

from graph import to_networkx
from models import FamilyTree, RelationshipType


def validate_tree(tree: FamilyTree) -> list[str]:
    """
    Validate the family tree snapshot for:
    - Stored rows that had to be repaired while loading
    - Relationships pointing at unknown members or at the member itself
    - Events involving unknown members
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent)
    - Date ordering issues

    Returns a list of warning messages. Nothing here is fatal: layout and
    routing tolerate all of these.
    """
    warnings: list[str] = list(tree.load_warnings)
    known = tree.member_ids

    for rel in tree.relationships:
        missing = [m for m in (rel.from_member_id, rel.to_member_id) if m not in known]
        if missing:
            warnings.append(f"Relationship {rel.id} references unknown member(s): {missing}")
        elif rel.from_member_id == rel.to_member_id:
            warnings.append(f"Relationship {rel.id} connects member {rel.from_member_id} to itself")

    for event in tree.events:
        missing = [m for m in event.member_ids if m not in known]
        if missing:
            warnings.append(f"Event {event.id} references unknown member(s): {missing}")

    G = to_networkx(tree)

    # Create a subgraph with only parent-child edges for cycle detection
    parent_edges = [
        (u, v)
        for u, v, d in G.edges(data=True)
        if d.get("relationship_type") is RelationshipType.PARENT_CHILD and u in known and v in known
    ]
    parent_graph = nx.DiGraph(parent_edges)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # birth_date is ISO format (YYYY-MM-DD) which can be compared as strings
    for parent, child in parent_edges:
        parent_data = G.nodes[parent]
        child_data = G.nodes[child]

        parent_birth = parent_data.get("birth_date")
        child_birth = child_data.get("birth_date")
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {child_data.get('member_name')} born before parent "
                f"{parent_data.get('member_name')}"
            )
            continue

        try:
            age_at_birth = int(child_birth[:4]) - int(parent_birth[:4])
        except ValueError:
            continue
        if age_at_birth < 12:
            warnings.append(
                f"Suspicious: {parent_data.get('member_name')} was less than 12 years "
                f"old when {child_data.get('member_name')} was born"
            )

    for m in tree.members:
        if m.birth_date and m.death_date and m.death_date < m.birth_date:
            warnings.append(f"Impossible: {m.name} died before being born")

    return warnings

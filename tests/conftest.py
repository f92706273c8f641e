import pytest

from models import FamilyTree, Member, Relationship


def build_tree(member_ids, *edges) -> FamilyTree:
    """
    Build a snapshot from member ids and (from, to, type[, extra fields]) tuples.

    Relationship ids are assigned in the order the edges are given.
    """
    members = [Member(id=m, first_name=f"M{m}") for m in member_ids]
    relationships = []
    for i, edge in enumerate(edges, start=1):
        src, tgt, rel_type, *extra = edge
        relationships.append(Relationship(i, src, tgt, rel_type, **(extra[0] if extra else {})))
    return FamilyTree(members=members, relationships=relationships)


@pytest.fixture
def make_tree():
    return build_tree


@pytest.fixture
def couple_with_child():
    """P1 and P2 married, C1 their child."""
    return build_tree(
        [1, 2, 3],
        (1, 2, "spouse"),
        (1, 3, "parent-child"),
        (2, 3, "parent-child"),
    )

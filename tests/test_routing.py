import math

from layout import auto_layout, positioned_tree
from models import Point, Relationship
from routing import STYLES, compute_arrowhead, dedup_key, drawable_edges, route_edges


def laid_out(tree):
    return positioned_tree(tree, auto_layout(tree))


def place(tree, **coords):
    """Set member positions by name, e.g. place(tree, m1=(0, 0))."""
    for key, (x, y) in coords.items():
        member = tree.find_member(int(key[1:]))
        member.x, member.y = x, y
    return tree


def test_couple_and_child_draw_two_lines(couple_with_child):
    edges = drawable_edges(laid_out(couple_with_child))
    assert len(edges) == 2

    spouse, child = edges
    assert spouse.key == ("spouse", 1, 2)
    assert spouse.start == Point(96.0, 50.0)
    assert spouse.end == Point(336.0, 50.0)
    assert spouse.arrowhead is None

    # routed from the midpoint of both parents' bottom edges
    assert child.start == Point(216.0, 100.0)
    assert child.end == Point(216.0, 196.0)
    assert child.arrowhead is not None
    assert math.isclose(child.arrowhead.angle, math.pi / 2)


def test_second_parent_edge_is_skipped(couple_with_child):
    routed = route_edges(laid_out(couple_with_child))
    assert routed[2] is not None
    assert routed[3] is None


def test_spouse_recorded_both_ways_draws_once(make_tree):
    tree = place(make_tree([1, 2], (1, 2, "spouse"), (2, 1, "spouse")), m1=(0, 0), m2=(240, 0))
    routed = route_edges(tree)
    assert routed[1] is not None
    assert routed[2] is None


def test_single_parent_routing(make_tree):
    tree = place(make_tree([1, 2], (1, 2, "parent-child")), m1=(0, 0), m2=(300, 200))
    (edge,) = drawable_edges(tree)
    assert edge.start == Point(96.0, 100.0)
    assert edge.end == Point(396.0, 200.0)
    assert edge.arrowhead.tip == edge.end
    assert edge.style == STYLES[edge_type(tree, edge)]


def edge_type(tree, edge):
    return next(r.type for r in tree.relationships if r.id == edge.relationship_id)


def test_misaligned_co_parents_route_separately(couple_with_child):
    tree = place(couple_with_child, m1=(0, 0), m2=(240, 150), m3=(120, 400))
    edges = drawable_edges(tree)
    parent_lines = [e for e in edges if e.key[0] == "parent-child"]
    assert len(parent_lines) == 2
    assert {e.start for e in parent_lines} == {Point(96.0, 100.0), Point(336.0, 250.0)}


def test_divorced_parents_route_separately_with_label(make_tree):
    tree = make_tree(
        [1, 2, 3],
        (1, 2, "spouse", {"status": "divorced"}),
        (1, 3, "parent-child"),
        (2, 3, "parent-child"),
    )
    edges = drawable_edges(laid_out(tree))
    spouse = edges[0]
    assert spouse.label == "divorced"
    assert spouse.style.dash is not None
    assert spouse.midpoint == Point(216.0, 50.0)
    assert len([e for e in edges if e.key[0] == "parent-child"]) == 2


def test_missing_member_skips_only_that_edge(make_tree):
    tree = place(
        make_tree([1, 2], (1, 2, "spouse"), (1, 99, "parent-child")),
        m1=(0, 0),
        m2=(240, 0),
    )
    routed = route_edges(tree)
    assert routed[1] is not None
    assert routed[2] is None


def test_guardian_and_other_edges(make_tree):
    tree = place(
        make_tree([1, 2, 3], (1, 2, "guardian"), (1, 3, "other")),
        m1=(0, 0),
        m2=(0, 200),
        m3=(240, 0),
    )
    guardian, other = drawable_edges(tree)
    assert guardian.arrowhead is not None
    assert guardian.style.dash == "2 4"
    assert guardian.start == Point(96.0, 100.0)
    assert other.arrowhead is None
    assert other.start == Point(96.0, 50.0)
    assert other.end == Point(336.0, 50.0)


def test_step_child_line_is_dashed(make_tree):
    tree = place(make_tree([1, 2], (1, 2, "parent-child", {"sub_type": "step"})), m1=(0, 0), m2=(0, 200))
    (edge,) = drawable_edges(tree)
    assert edge.style.dash == "6 4"


def test_dedup_key():
    assert dedup_key(Relationship(1, 5, 2, "spouse")) == ("spouse", 2, 5)
    assert dedup_key(Relationship(2, 5, 2, "parent-child")) == ("parent-child", 5, 2)
    assert dedup_key(Relationship(3, 5, 9, "parent-child"), co_parent=4) == ("parent-child", 4, 5, 9)


def test_arrowhead_geometry():
    head = compute_arrowhead(Point(0, 0), Point(100, 0), size=10)
    assert head.angle == 0
    assert math.isclose(head.left.x, 100 - 10 * math.cos(math.pi / 6))
    assert math.isclose(head.left.y, 10 * math.sin(math.pi / 6))
    assert math.isclose(head.right.y, -10 * math.sin(math.pi / 6))
    assert compute_arrowhead(Point(1, 1), Point(1, 1)) is None


def test_co_parent_pairs_with_lowest_qualifying_id(make_tree):
    # 2 is married to both 1 and 3, and all three are recorded parents of 4
    tree = place(
        make_tree(
            [1, 2, 3, 4],
            (1, 2, "spouse"),
            (2, 3, "spouse"),
            (1, 4, "parent-child"),
            (2, 4, "parent-child"),
            (3, 4, "parent-child"),
        ),
        m1=(0, 0),
        m2=(240, 0),
        m3=(480, 0),
        m4=(240, 300),
    )
    routed = route_edges(tree)
    assert routed[3].start == Point(216.0, 100.0)
    assert routed[3].key == ("parent-child", 1, 2, 4)
    # 2 pairs with 1, the lower id, so its edge joins the first line
    assert routed[4] is None
    assert routed[5].start == Point(456.0, 100.0)
    assert routed[5].key == ("parent-child", 2, 3, 4)

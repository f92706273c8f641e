from models import FamilyEvent, Member
from sample_data import sample_family
from validation import validate_tree


def test_sample_family_is_clean():
    assert validate_tree(sample_family()) == []


def test_parent_child_cycle(make_tree):
    warnings = validate_tree(make_tree([1, 2], (1, 2, "parent-child"), (2, 1, "parent-child")))
    assert any("Cycle detected" in w for w in warnings)


def test_spouse_edges_are_not_cycles(make_tree):
    assert validate_tree(make_tree([1, 2], (1, 2, "spouse"), (2, 1, "spouse"))) == []


def test_unknown_and_self_references(make_tree):
    warnings = validate_tree(make_tree([1], (1, 7, "guardian"), (1, 1, "other")))
    assert warnings[0] == "Relationship 1 references unknown member(s): [7]"
    assert warnings[1] == "Relationship 2 connects member 1 to itself"


def test_age_checks(make_tree):
    tree = make_tree([1, 2, 3], (1, 2, "parent-child"), (1, 3, "parent-child"))
    tree.members[0].birth_date = "1950-01-01"
    tree.members[1].birth_date = "1940-01-01"
    tree.members[2].birth_date = "1955-06-01"
    warnings = validate_tree(tree)
    assert "Impossible: M2 born before parent M1" in warnings
    assert "Suspicious: M1 was less than 12 years old when M3 was born" in warnings


def test_death_before_birth():
    tree = sample_family()
    tree.members.append(Member(8, "Ghost", birth_date="1900-01-01", death_date="1899-12-31"))
    assert validate_tree(tree) == ["Impossible: Ghost died before being born"]


def test_load_warnings_are_reported_first(make_tree):
    tree = make_tree([1, 2], (1, 2, "spouse"))
    tree.load_warnings.append("Relationship 9: unknown type 'cousin', treated as other")
    assert validate_tree(tree) == ["Relationship 9: unknown type 'cousin', treated as other"]


def test_event_with_unknown_member():
    tree = sample_family()
    tree.events.append(FamilyEvent(9, "move", "2001-01-01", member_ids=[3, 42]))
    assert validate_tree(tree) == ["Event 9 references unknown member(s): [42]"]

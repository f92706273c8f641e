import pytest

from models import EventType, FamilyEvent, FamilyTree, Member, Relationship, RelationshipStatus, RelationshipType


def test_relationship_coerces_stored_strings():
    rel = Relationship(1, 1, 2, "spouse", sub_type="common-law", status="divorced")
    assert rel.type is RelationshipType.SPOUSE
    assert rel.status is RelationshipStatus.DIVORCED
    assert not rel.is_active


def test_missing_status_defaults_to_active():
    rel = Relationship(1, 1, 2, "parent-child", status=None)
    assert rel.status is RelationshipStatus.ACTIVE


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        Relationship(1, 1, 2, "cousin")


def test_subtype_must_match_type():
    with pytest.raises(ValueError, match="not valid"):
        Relationship(1, 1, 2, "spouse", sub_type="biological")
    with pytest.raises(ValueError):
        Relationship(1, 1, 2, "other", sub_type="legal")


def test_status_only_for_spouse_edges():
    with pytest.raises(ValueError, match="only applies to spouse"):
        Relationship(1, 1, 2, "parent-child", status="divorced")


def test_directed_types():
    assert RelationshipType.PARENT_CHILD.directed
    assert RelationshipType.ADOPTED.directed
    assert RelationshipType.GUARDIAN.directed
    assert not RelationshipType.SPOUSE.directed
    assert not RelationshipType.OTHER.directed


def test_member_name_and_position():
    m = Member(1, "Sarah", middle_name="Elizabeth", last_name="Wilson", x=10, y=20)
    assert m.name == "Sarah Elizabeth Wilson"
    assert m.position.x == 10 and m.position.y == 20
    assert Member(2, "").name == "Unknown"


def test_find_member():
    tree = FamilyTree(members=[Member(1, "A"), Member(2, "B")])
    assert tree.find_member(2).first_name == "B"
    assert tree.find_member(3) is None
    assert tree.member_ids == {1, 2}


def test_from_stored_keeps_valid_rows():
    rel, problems = Relationship.from_stored(
        id=1, from_member_id=1, to_member_id=2, type="spouse", sub_type="legal", status="widowed"
    )
    assert problems == []
    assert rel.status is RelationshipStatus.WIDOWED
    assert rel.sub_type == "legal"


@pytest.mark.parametrize(
    "fields, expected_type, message",
    [
        ({"type": "cousin"}, RelationshipType.OTHER, "unknown type 'cousin'"),
        ({"type": "spouse", "status": "eloped"}, RelationshipType.SPOUSE, "unknown status 'eloped'"),
        ({"type": "adopted", "status": "divorced"}, RelationshipType.ADOPTED, "status 'divorced' on a adopted"),
        ({"type": "other", "sub_type": "legal"}, RelationshipType.OTHER, "subtype 'legal' dropped"),
    ],
)
def test_from_stored_repairs_bad_rows(fields, expected_type, message):
    rel, problems = Relationship.from_stored(id=9, from_member_id=1, to_member_id=2, **fields)
    assert rel.type is expected_type
    assert rel.sub_type is None
    assert len(problems) == 1
    assert problems[0].startswith("Relationship 9: ")
    assert message in problems[0]


def test_family_event_needs_a_member():
    event = FamilyEvent(1, "graduation", "2012-05-15", member_ids=[6])
    assert event.type is EventType.GRADUATION
    with pytest.raises(ValueError, match="at least one member"):
        FamilyEvent(2, "move", member_ids=[])

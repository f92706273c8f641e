import pytest

from database import (
    create_database,
    delete_member,
    load_snapshot,
    persist_positions,
    store_data,
    update_member_position,
)
from models import EventType, Point, RelationshipStatus, RelationshipType
from sample_data import sample_family


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "family_tree.db"
    sample = sample_family()
    conn = create_database(path)
    store_data(conn, sample.members, sample.relationships, sample.events)
    conn.close()
    return path


@pytest.fixture
def conn(db_path):
    conn = create_database(db_path)
    yield conn
    conn.close()


def test_snapshot_round_trip(conn):
    tree = load_snapshot(conn)
    sample = sample_family()
    assert [m.id for m in tree.members] == [m.id for m in sample.members]
    assert tree.find_member(4).name == "Sarah Elizabeth Wilson"
    assert tree.find_member(1).position == Point(300.0, 50.0)
    assert len(tree.relationships) == 10
    assert tree.relationships[0].type is RelationshipType.SPOUSE
    assert tree.relationships[2].sub_type == "biological"


def test_store_data_updates_existing_members(conn):
    tree = load_snapshot(conn)
    robert = tree.find_member(1)
    robert.occupation = "Engineer"
    store_data(conn, [robert], [])

    reloaded = load_snapshot(conn)
    assert reloaded.find_member(1).occupation == "Engineer"
    # upserting a member keeps its relationships
    assert len(reloaded.relationships) == 10


def test_update_member_position(conn):
    update_member_position(conn, 6, 12.5, 300.0)
    assert load_snapshot(conn).find_member(6).position == Point(12.5, 300.0)


def test_update_unknown_member(conn):
    with pytest.raises(LookupError, match="not found"):
        update_member_position(conn, 404, 0, 0)


def test_delete_member_cascades(conn):
    delete_member(conn, 3)
    tree = load_snapshot(conn)
    assert tree.find_member(3) is None
    assert all(3 not in (r.from_member_id, r.to_member_id) for r in tree.relationships)
    assert len(tree.relationships) == 5


def test_persist_positions_reports_failures_per_member(db_path):
    report = persist_positions(db_path, {1: Point(0, 0), 404: Point(1, 1), 7: Point(480, 392)})
    assert sorted(report.written) == [1, 7]
    assert list(report.failed) == [404]
    assert not report.ok

    conn = create_database(db_path)
    tree = load_snapshot(conn)
    conn.close()
    assert tree.find_member(1).position == Point(0.0, 0.0)
    assert tree.find_member(7).position == Point(480.0, 392.0)


def test_persist_nothing(db_path):
    report = persist_positions(db_path, {})
    assert report.ok
    assert report.written == []


def test_events_round_trip(conn):
    events = load_snapshot(conn).events
    assert len(events) == 8
    wedding = events[1]
    assert wedding.type is EventType.MARRIAGE
    assert wedding.place == "Boston Harbor Hotel"
    # member order is kept, the primary member first
    assert events[4].member_ids == [6, 3, 4]


def test_deleting_a_member_drops_them_from_events(conn):
    delete_member(conn, 6)
    events = load_snapshot(conn).events
    # the graduation involved only Emily and is gone
    assert [e.id for e in events] == [1, 2, 3, 4, 5, 6, 8]
    assert events[4].member_ids == [3, 4]


def test_status_on_parent_child_row_is_repaired(conn, caplog):
    conn.execute(
        "INSERT INTO relationship (id, from_member_id, to_member_id, type, status) "
        "VALUES (11, 1, 2, 'parent-child', 'deceased')"
    )
    conn.commit()

    tree = load_snapshot(conn)
    rel = tree.relationships[-1]
    assert rel.id == 11
    assert rel.type is RelationshipType.PARENT_CHILD
    assert rel.status is RelationshipStatus.ACTIVE
    assert tree.load_warnings == [
        "Relationship 11: status 'deceased' on a parent-child relationship, treated as active"
    ]
    assert "status 'deceased'" in caplog.text
    # the other rows load untouched
    assert len(tree.relationships) == 11


def test_disallowed_subtype_row_is_repaired(conn):
    conn.execute(
        "INSERT INTO relationship (id, from_member_id, to_member_id, type, sub_type) "
        "VALUES (11, 2, 5, 'guardian', 'step')"
    )
    conn.commit()

    tree = load_snapshot(conn)
    assert tree.relationships[-1].sub_type is None
    assert tree.load_warnings == ["Relationship 11: subtype 'step' dropped from a guardian relationship"]

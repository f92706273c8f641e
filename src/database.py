"""SQLite storage for members, relationships and canvas positions."""

import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from models import FamilyEvent, FamilyTree, Member, Point, Relationship

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = (
    "id",
    "first_name",
    "middle_name",
    "last_name",
    "gender",
    "birth_date",
    "birth_place",
    "death_date",
    "death_place",
    "occupation",
    "x",
    "y",
)

RELATIONSHIP_COLUMNS = (
    "id",
    "from_member_id",
    "to_member_id",
    "type",
    "sub_type",
    "status",
    "start_date",
    "end_date",
)

EVENT_COLUMNS = ("id", "type", "date", "place", "description")


@dataclass
class PersistReport:
    written: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path, timeout=30)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with member and relationship tables."""
    conn = connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS member (
            id INTEGER PRIMARY KEY,
            first_name TEXT NOT NULL,
            middle_name TEXT,
            last_name TEXT,
            gender TEXT,
            birth_date TEXT,
            birth_place TEXT,
            death_date TEXT,
            death_place TEXT,
            occupation TEXT,
            x REAL NOT NULL DEFAULT 0,
            y REAL NOT NULL DEFAULT 0
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relationship (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            from_member_id INTEGER NOT NULL,
            to_member_id INTEGER NOT NULL,
            type TEXT NOT NULL,
            sub_type TEXT,
            status TEXT NOT NULL DEFAULT 'active',
            start_date TEXT,
            end_date TEXT,
            FOREIGN KEY (from_member_id) REFERENCES member(id) ON DELETE CASCADE,
            FOREIGN KEY (to_member_id) REFERENCES member(id) ON DELETE CASCADE,
            UNIQUE (from_member_id, to_member_id, type)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS family_event (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL,
            date TEXT,
            place TEXT,
            description TEXT
        )
    """)

    # members involved in each event
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS event_member (
            event_id INTEGER NOT NULL,
            member_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            PRIMARY KEY (event_id, member_id),
            FOREIGN KEY (event_id) REFERENCES family_event(id) ON DELETE CASCADE,
            FOREIGN KEY (member_id) REFERENCES member(id) ON DELETE CASCADE
        )
    """)

    cursor.execute("CREATE INDEX IF NOT EXISTS family_event_date_idx ON family_event (date)")

    conn.commit()
    return conn


def store_data(
    conn: sqlite3.Connection,
    members: list[Member],
    relationships: list[Relationship],
    events: list[FamilyEvent] = (),
):
    """Insert members, relationships and family events into the database."""
    cursor = conn.cursor()

    # Upsert rather than REPLACE, which would cascade-delete relationships
    cursor.executemany(
        f"""
        INSERT INTO member ({", ".join(MEMBER_COLUMNS)})
        VALUES ({", ".join("?" * len(MEMBER_COLUMNS))})
        ON CONFLICT(id) DO UPDATE SET
        {", ".join(f"{col} = excluded.{col}" for col in MEMBER_COLUMNS[1:])}
        """,
        [tuple(getattr(m, col) for col in MEMBER_COLUMNS) for m in members],
    )

    cursor.executemany(
        f"""
        INSERT OR REPLACE INTO relationship ({", ".join(RELATIONSHIP_COLUMNS)})
        VALUES ({", ".join("?" * len(RELATIONSHIP_COLUMNS))})
        """,
        [
            (
                r.id,
                r.from_member_id,
                r.to_member_id,
                r.type.value,
                r.sub_type,
                r.status.value,
                r.start_date,
                r.end_date,
            )
            for r in relationships
        ],
    )

    cursor.executemany(
        f"""
        INSERT OR REPLACE INTO family_event ({", ".join(EVENT_COLUMNS)})
        VALUES ({", ".join("?" * len(EVENT_COLUMNS))})
        """,
        [(e.id, e.type.value, e.date, e.place, e.description) for e in events],
    )
    cursor.executemany(
        "INSERT OR REPLACE INTO event_member (event_id, member_id, position) VALUES (?, ?, ?)",
        [(e.id, member_id, i) for e in events for i, member_id in enumerate(e.member_ids)],
    )

    conn.commit()


def load_snapshot(conn: sqlite3.Connection) -> FamilyTree:
    """
    Read every member, relationship and event into a FamilyTree snapshot.

    Relationship rows the model would reject (unknown type, status on a
    non-spouse edge, disallowed subtype) are repaired rather than failing the
    whole load. Each repair is logged and kept on `FamilyTree.load_warnings`.
    """
    cursor = conn.cursor()

    cursor.execute(f"SELECT {', '.join(MEMBER_COLUMNS)} FROM member ORDER BY id")
    members = [Member(**dict(zip(MEMBER_COLUMNS, row))) for row in cursor.fetchall()]

    relationships = []
    load_warnings = []
    cursor.execute(f"SELECT {', '.join(RELATIONSHIP_COLUMNS)} FROM relationship ORDER BY id")
    for row in cursor.fetchall():
        rel, problems = Relationship.from_stored(**dict(zip(RELATIONSHIP_COLUMNS, row)))
        for problem in problems:
            logger.warning("%s", problem)
        relationships.append(rel)
        load_warnings.extend(problems)

    cursor.execute("SELECT event_id, member_id FROM event_member ORDER BY event_id, position")
    involved: dict[int, list[int]] = {}
    for event_id, member_id in cursor.fetchall():
        involved.setdefault(event_id, []).append(member_id)

    events = []
    cursor.execute(f"SELECT {', '.join(EVENT_COLUMNS)} FROM family_event ORDER BY id")
    for row in cursor.fetchall():
        fields = dict(zip(EVENT_COLUMNS, row))
        member_ids = involved.get(fields["id"])
        if not member_ids:
            # every member of the event was deleted
            logger.debug("Skipping event %s: no members left", fields["id"])
            continue
        try:
            events.append(FamilyEvent(member_ids=member_ids, **fields))
        except ValueError as exc:
            message = f"Event {fields['id']}: {exc}"
            logger.warning("%s", message)
            load_warnings.append(message)

    return FamilyTree(members=members, relationships=relationships, events=events, load_warnings=load_warnings)


def update_member_position(conn: sqlite3.Connection, member_id: int, x: float, y: float):
    """Store a member's canvas position."""
    cursor = conn.execute("UPDATE member SET x = ?, y = ? WHERE id = ?", (x, y, member_id))
    if cursor.rowcount == 0:
        raise LookupError(f"Family member {member_id} not found")
    conn.commit()


def delete_member(conn: sqlite3.Connection, member_id: int):
    """Delete a member together with every relationship that references it."""
    cursor = conn.execute("DELETE FROM member WHERE id = ?", (member_id,))
    if cursor.rowcount == 0:
        raise LookupError(f"Family member {member_id} not found")
    conn.commit()


def _write_position(db_path: Path, member_id: int, position: Point):
    conn = connect(db_path)
    try:
        update_member_position(conn, member_id, position.x, position.y)
    finally:
        conn.close()


def persist_positions(db_path: Path, positions: dict[int, Point], max_workers: int = 4) -> PersistReport:
    """
    Write each position independently and wait for the whole batch.

    Writes are not ordered and not transactional across members: a failure is
    recorded in the report while the other writes still go through.
    """
    report = PersistReport()
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            member_id: pool.submit(_write_position, db_path, member_id, position)
            for member_id, position in positions.items()
        }
        for member_id, future in futures.items():
            try:
                future.result()
            except (LookupError, sqlite3.Error) as exc:
                logger.warning("Failed to store position of member %s: %s", member_id, exc)
                report.failed[member_id] = str(exc)
            else:
                report.written.append(member_id)
    return report

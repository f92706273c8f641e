"""Sample family used when no GEDCOM file is given."""

from models import EventType, FamilyEvent, FamilyTree, Member, Relationship, RelationshipType


def sample_family() -> FamilyTree:
    """Three generations of the Johnson family, positioned by hand."""
    members = [
        Member(1, "Robert", last_name="Johnson", gender="male", birth_date="1940-05-15",
               birth_place="New York, NY", occupation="Retired Engineer", x=300, y=50),
        Member(2, "Mary", last_name="Johnson", gender="female", birth_date="1942-08-22",
               birth_place="New York, NY", occupation="Retired Teacher", x=500, y=50),
        Member(3, "James", last_name="Johnson", gender="male", birth_date="1965-03-10",
               birth_place="Boston, MA", occupation="Software Engineer", x=200, y=200),
        Member(4, "Sarah", middle_name="Elizabeth", last_name="Wilson", gender="female",
               birth_date="1968-11-28", occupation="Architect", x=400, y=200),
        Member(5, "Michael", last_name="Johnson", gender="male", birth_date="1970-07-15",
               occupation="Doctor", x=600, y=200),
        Member(6, "Emily", last_name="Johnson", gender="female", birth_date="1990-04-12",
               occupation="Graduate Student", x=150, y=350),
        Member(7, "William", last_name="Johnson", gender="male", birth_date="1992-09-30",
               occupation="Artist", x=350, y=350),
    ]

    spouse = RelationshipType.SPOUSE
    parent = RelationshipType.PARENT_CHILD
    relationships = [
        Relationship(1, 1, 2, spouse, start_date="1964-06-15"),
        Relationship(2, 3, 4, spouse, start_date="1989-08-20"),
        Relationship(3, 1, 3, parent, sub_type="biological"),
        Relationship(4, 2, 3, parent, sub_type="biological"),
        Relationship(5, 1, 5, parent, sub_type="biological"),
        Relationship(6, 2, 5, parent, sub_type="biological"),
        Relationship(7, 3, 6, parent, sub_type="biological"),
        Relationship(8, 4, 6, parent, sub_type="biological"),
        Relationship(9, 3, 7, parent, sub_type="biological"),
        Relationship(10, 4, 7, parent, sub_type="biological"),
    ]

    marriage, birth = EventType.MARRIAGE, EventType.BIRTH
    events = [
        FamilyEvent(1, marriage, "1964-06-15", "St. Patrick's Cathedral, New York",
                    "Wedding of Robert and Mary Johnson", [1, 2]),
        FamilyEvent(2, marriage, "1989-08-20", "Boston Harbor Hotel",
                    "Wedding of James Johnson and Sarah Wilson", [3, 4]),
        FamilyEvent(3, birth, "1965-03-10", "Massachusetts General Hospital", "Birth of James Johnson", [3, 1, 2]),
        FamilyEvent(4, birth, "1970-07-15", "Cedars-Sinai Medical Center", "Birth of Michael Johnson", [5, 1, 2]),
        FamilyEvent(5, birth, "1990-04-12", "Massachusetts General Hospital", "Birth of Emily Johnson", [6, 3, 4]),
        FamilyEvent(6, birth, "1992-09-30", "Massachusetts General Hospital", "Birth of William Johnson", [7, 3, 4]),
        FamilyEvent(7, EventType.GRADUATION, "2012-05-15", "Harvard University",
                    "Emily Johnson graduates with honors in Computer Science", [6]),
        FamilyEvent(8, EventType.OTHER, "2015-06-20", "Museum of Modern Art, New York",
                    "William Johnson's first major art exhibition", [7]),
    ]

    return FamilyTree(members=members, relationships=relationships, events=events)

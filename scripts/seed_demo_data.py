"""Seed demo data for the concierge front end.

Run this to populate a local database:
    python scripts/seed_demo_data.py

This script:
1. Creates any missing tables from concierge.tables
2. WIPES all existing data
3. Seeds map locations, villas, rooms, menu items and knowledge items
4. Creates an admin account and a demo guest checking out in 45 minutes
"""
from datetime import datetime, timedelta

import sqlalchemy

from concierge import database as db
from concierge import tables
from concierge.security import hash_password

NOW = datetime.utcnow().replace(microsecond=0)  # naive UTC, like the API stores it

LOCATIONS = [
    {"name": "Ocean Villas", "lat": 16.0398, "lng": 108.2505, "type": "VILLA"},
    {"name": "Lagoon Villas", "lat": 16.0389, "lng": 108.2492, "type": "VILLA"},
    {"name": "Beach Pool", "lat": 16.0405, "lng": 108.2512, "type": "FACILITY"},
    {"name": "V-Spa", "lat": 16.0411, "lng": 108.2498, "type": "FACILITY"},
    {"name": "Cafe Indochine", "lat": 16.0402, "lng": 108.2489, "type": "RESTAURANT"},
    {"name": "Don Cipriani's", "lat": 16.0393, "lng": 108.2501, "type": "RESTAURANT"},
]

ROOM_TYPES = [
    {"name": "Ocean Pool Villa", "description": "Two bedroom villa with private pool facing the sea", "location": "Ocean Villas"},
    {"name": "Lagoon Pool Villa", "description": "Three bedroom villa on the lagoon", "location": "Lagoon Villas"},
]

ROOMS = [
    {"number": "101", "type": "Ocean Pool Villa"},
    {"number": "102", "type": "Ocean Pool Villa"},
    {"number": "103", "type": "Ocean Pool Villa"},
    {"number": "201", "type": "Lagoon Pool Villa"},
    {"number": "202", "type": "Lagoon Pool Villa"},
]

MENU_ITEMS = [
    {"name": "Pho Bo", "price": 12.0, "category": "Dining", "description": "Beef noodle soup", "language": "English"},
    {"name": "Banh Xeo", "price": 9.5, "category": "Dining", "description": "Crispy rice pancake", "language": "English"},
    {"name": "Aromatherapy Massage", "price": 85.0, "category": "Spa", "description": "60 minutes", "language": "English"},
    {"name": "Airport Transfer", "price": 25.0, "category": "Buggy", "description": "Da Nang International Airport", "language": "English"},
]

KNOWLEDGE_ITEMS = [
    {"question": "What time is check-out?", "answer": "Check-out is at 12:00. Late check-out can be arranged at reception."},
    {"question": "When is breakfast served?", "answer": "Breakfast is served at Cafe Indochine from 6:30 to 10:30."},
]

ADMIN = {"last_name": "Admin", "room_number": "admin", "role": "ADMIN", "password": "admin123"}

DEMO_GUEST = {
    "last_name": "Nguyen",
    "room_number": "101",
    "villa_type": "Ocean Pool Villa",
    "role": "GUEST",
    "email": "guest@example.com",
    "language": "English",
    "check_in": NOW - timedelta(days=3),
    # Inside the default 60 minute reminder window
    "check_out": NOW + timedelta(minutes=45),
}


def wipe_database(conn):
    """Wipe all data from the database (except schema)."""
    print("\n[WIPE] Clearing all existing data...")
    # Reverse dependency order
    for table in reversed(tables.metadata.sorted_tables):
        conn.execute(sqlalchemy.delete(table))
        print(f"  Cleared {table.name}")
    print("[WIPE] Database cleared!")


def seed_catalog(conn):
    print("\n[CATALOG] Seeding locations, villas and menus...")

    location_ids = {}
    for location in LOCATIONS:
        location_ids[location["name"]] = conn.execute(
            sqlalchemy.insert(tables.locations).values(**location).returning(tables.locations.c.id)
        ).scalar_one()
    print(f"  Seeded {len(LOCATIONS)} locations")

    type_ids = {}
    for room_type in ROOM_TYPES:
        type_ids[room_type["name"]] = conn.execute(
            sqlalchemy.insert(tables.room_types).values(
                name=room_type["name"],
                description=room_type["description"],
                location_id=location_ids[room_type["location"]],
            ).returning(tables.room_types.c.id)
        ).scalar_one()
    print(f"  Seeded {len(ROOM_TYPES)} room types")

    conn.execute(
        sqlalchemy.insert(tables.rooms),
        [{"number": room["number"], "type_id": type_ids[room["type"]]} for room in ROOMS],
    )
    print(f"  Seeded {len(ROOMS)} rooms")

    conn.execute(sqlalchemy.insert(tables.menu_items), MENU_ITEMS)
    print(f"  Seeded {len(MENU_ITEMS)} menu items")

    conn.execute(sqlalchemy.insert(tables.knowledge_items), KNOWLEDGE_ITEMS)
    print(f"  Seeded {len(KNOWLEDGE_ITEMS)} knowledge items")


def seed_users(conn):
    print("\n[USERS] Seeding accounts...")

    admin = dict(ADMIN)
    admin["password_hash"] = hash_password(admin.pop("password"))
    conn.execute(sqlalchemy.insert(tables.users).values(**admin))
    print(f"  Created admin (room_number={ADMIN['room_number']}, password={ADMIN['password']})")

    conn.execute(sqlalchemy.insert(tables.users).values(**DEMO_GUEST))
    print(f"  Created guest {DEMO_GUEST['last_name']} in room {DEMO_GUEST['room_number']}, checking out {DEMO_GUEST['check_out']} UTC")


def main():
    print(f"[seed_demo] Using database dialect: {db.engine.dialect.name}")
    tables.metadata.create_all(db.engine)

    with db.engine.begin() as conn:
        wipe_database(conn)
        seed_catalog(conn)
        seed_users(conn)

    print("\n[seed_demo] Done!")


if __name__ == "__main__":
    main()

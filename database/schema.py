"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'reservation_equipment',
        'reservations',
        'reservation_status',
        'users',
        'equipment',
        'venues',
        'organizations',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Referenced resources
    db.execute('''
        CREATE TABLE organizations (
            org_id INTEGER PRIMARY KEY AUTOINCREMENT,
            org_name TEXT NOT NULL,
            org_code TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE venues (
            venue_id INTEGER PRIMARY KEY AUTOINCREMENT,
            venue_name TEXT NOT NULL,
            description TEXT,
            capacity INTEGER,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE equipment (
            equipment_id INTEGER PRIMARY KEY AUTOINCREMENT,
            equipment_name TEXT NOT NULL,
            description TEXT,
            quantity INTEGER DEFAULT 1,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Users
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            full_name TEXT,
            org_id INTEGER REFERENCES organizations(org_id),
            role TEXT NOT NULL DEFAULT 'organization',
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            last_login TEXT
        )
    ''')

    # 3. Reservations
    db.execute('''
        CREATE TABLE reservation_status (
            reservation_status_id INTEGER PRIMARY KEY,
            reservation_status TEXT UNIQUE NOT NULL,
            color TEXT NOT NULL,
            background_color TEXT NOT NULL
        )
    ''')

    # Times are stored as zero-padded HH:MM so text comparison orders them
    db.execute('''
        CREATE TABLE reservations (
            reservation_id INTEGER PRIMARY KEY AUTOINCREMENT,
            purpose TEXT NOT NULL,
            activity_date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            org_id INTEGER NOT NULL REFERENCES organizations(org_id),
            venue_id INTEGER REFERENCES venues(venue_id) ON DELETE SET NULL,
            reservation_status_id INTEGER NOT NULL DEFAULT 3
                REFERENCES reservation_status(reservation_status_id),
            reserved_by TEXT NOT NULL,
            officer_in_charge TEXT NOT NULL,
            contact_no TEXT NOT NULL,
            reservation_ts TEXT NOT NULL,
            edit_ts TEXT,
            decision_ts TEXT,
            created_by TEXT,
            CHECK (end_time > start_time)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_equipment (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL
                REFERENCES reservations(reservation_id) ON DELETE CASCADE,
            equipment_id INTEGER NOT NULL
                REFERENCES equipment(equipment_id) ON DELETE CASCADE,
            UNIQUE(reservation_id, equipment_id)
        )
    ''')


def create_indexes(db):
    """Create indexes for the overlap and calendar queries."""
    indexes = [
        'CREATE INDEX idx_reservations_venue_date ON reservations(venue_id, activity_date)',
        'CREATE INDEX idx_reservations_date ON reservations(activity_date)',
        'CREATE INDEX idx_reservations_status ON reservations(reservation_status_id)',
        'CREATE INDEX idx_reservations_org ON reservations(org_id)',
        'CREATE INDEX idx_reservation_equipment_equipment ON reservation_equipment(equipment_id)',
    ]
    for statement in indexes:
        db.execute(statement)

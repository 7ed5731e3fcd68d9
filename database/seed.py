"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Reservation statuses (ids are referenced by models.reservation_state)
    statuses = [
        (1, 'Reserved', '#3b82f6', '#edf5ff'),
        (2, 'Rejected', '#ef4444', '#fef1f1'),
        (3, 'Pending', '#eab308', '#fef9ee'),
        (4, 'Cancelled', '#9ca3af', '#f8f8f8'),
    ]

    for status_id, name, color, background in statuses:
        db.execute('''
            INSERT INTO reservation_status
            (reservation_status_id, reservation_status, color, background_color)
            VALUES (?, ?, ?, ?)
        ''', (status_id, name, color, background))

    # 2. Administrative office (org_id = 1)
    db.execute('''
        INSERT INTO organizations (org_id, org_name, org_code)
        VALUES (1, 'Center for Student Affairs Office', 'CSAO')
    ''')

    # 3. Default administrator
    db.execute('''
        INSERT INTO users (username, email, password_hash, full_name, org_id, role)
        VALUES (?, ?, ?, ?, 1, 'admin')
    ''', ('admin', 'admin@example.edu', generate_password_hash('admin123'), 'Administrator'))

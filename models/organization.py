"""
Organization data access functions.
Organizations own reservations; org 1 is the administrative office.
"""

from database import get_db


def get_all_organizations() -> list:
    """
    Get all organizations.

    Returns:
        List of organization dicts ordered by name
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM organizations ORDER BY org_name')
    return [dict(row) for row in cursor.fetchall()]


def get_organization_by_id(org_id: int) -> dict:
    """
    Get organization by ID.

    Args:
        org_id: Organization ID

    Returns:
        Organization dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM organizations WHERE org_id = ?', (org_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_organization(org_name: str, org_code: str = None) -> int:
    """
    Create an organization.

    Args:
        org_name: Display name
        org_code: Short code shown on the calendar (e.g. 'CSAO')

    Returns:
        New organization ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(
        'INSERT INTO organizations (org_name, org_code) VALUES (?, ?)',
        (org_name, org_code)
    )
    db.commit()
    return cursor.lastrowid


def update_organization(org_id: int, **kwargs) -> bool:
    """
    Update organization fields.

    Args:
        org_id: Organization ID to update
        **kwargs: Fields to update (org_name, org_code)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['org_name', 'org_code']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    values.append(org_id)
    query = f'UPDATE organizations SET {", ".join(updates)} WHERE org_id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0

"""
Equipment data access functions.
"""

from database import get_db


def get_all_equipment(active_only: bool = True) -> list:
    """
    Get all equipment.

    Args:
        active_only: If True, only return active items

    Returns:
        List of equipment dicts ordered by name
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM equipment'
    if active_only:
        query += ' WHERE active = 1'
    query += ' ORDER BY equipment_name'

    cursor.execute(query)
    return [dict(row) for row in cursor.fetchall()]


def get_missing_equipment_ids(equipment_ids: list) -> list:
    """
    Return the ids from the list that have no equipment row.

    Args:
        equipment_ids: Equipment IDs to look up

    Returns:
        list: Unknown IDs, in input order
    """
    if not equipment_ids:
        return []

    db = get_db()
    cursor = db.cursor()
    placeholders = ','.join('?' * len(equipment_ids))
    cursor.execute(
        f'SELECT equipment_id FROM equipment WHERE equipment_id IN ({placeholders})',
        list(equipment_ids)
    )
    found = {row['equipment_id'] for row in cursor.fetchall()}
    return [eid for eid in equipment_ids if eid not in found]


def create_equipment(equipment_name: str, description: str = None, quantity: int = 1) -> int:
    """
    Create an equipment item.

    Args:
        equipment_name: Display name
        description: Optional description
        quantity: Units on hand (informational)

    Returns:
        New equipment ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO equipment (equipment_name, description, quantity)
        VALUES (?, ?, ?)
    ''', (equipment_name, description, quantity))
    db.commit()
    return cursor.lastrowid


def get_equipment_by_id(equipment_id: int) -> dict:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM equipment WHERE equipment_id = ?', (equipment_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def update_equipment(equipment_id: int, **kwargs) -> bool:
    """
    Update equipment fields.

    Setting active to 0 drops the item from the active lookup list;
    reservations that name it are untouched.

    Args:
        equipment_id: Equipment ID to update
        **kwargs: Fields to update (equipment_name, description, quantity, active)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['equipment_name', 'description', 'quantity', 'active']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    values.append(equipment_id)
    query = f'UPDATE equipment SET {", ".join(updates)} WHERE equipment_id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0

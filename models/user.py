"""
User model and data access functions.
Handles user authentication, lookups, and Flask-Login integration.
"""

from flask_login import current_user
from werkzeug.security import generate_password_hash, check_password_hash
from database import get_db

ROLE_ADMIN = 'admin'
ROLE_ORGANIZATION = 'organization'


class User:
    """
    User class for Flask-Login integration.
    Wraps a users row; administrators may decide and remove reservations.
    """

    def __init__(self, user_dict):
        """
        Initialize User from database row.

        Args:
            user_dict: Dictionary with user data from database
        """
        self.id = user_dict['id']
        self.username = user_dict['username']
        self.email = user_dict['email']
        self.full_name = user_dict.get('full_name')
        self.org_id = user_dict.get('org_id')
        self.org_name = user_dict.get('org_name')
        self.role = user_dict.get('role', ROLE_ORGANIZATION)
        self.active = user_dict.get('active', 1)
        self.created_at = user_dict.get('created_at')
        self.last_login = user_dict.get('last_login')

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return self.active == 1

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    @property
    def is_administrator(self):
        return self.role == ROLE_ADMIN

    def get_id(self):
        """Required by Flask-Login. Returns user ID as unicode string."""
        return str(self.id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'org_id': self.org_id,
            'org_name': self.org_name,
            'role': self.role,
            'is_administrator': self.is_administrator,
        }


_USER_QUERY = '''
    SELECT u.*, o.org_name
    FROM users u
    LEFT JOIN organizations o ON o.org_id = u.org_id
'''


def get_user_by_id(user_id: int) -> dict:
    """
    Get user by ID.

    Args:
        user_id: User ID

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(_USER_QUERY + ' WHERE u.id = ?', (user_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_by_username(username: str) -> dict:
    """
    Get user by username.

    Args:
        username: Username to search for

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute(_USER_QUERY + ' WHERE u.username = ?', (username,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_user(
    username: str,
    email: str,
    password: str,
    full_name: str = None,
    org_id: int = None,
    role: str = ROLE_ORGANIZATION
) -> int:
    """
    Create new user with hashed password.

    Args:
        username: Unique username
        email: Unique email
        password: Plain text password (will be hashed)
        full_name: User's full name
        org_id: Organization the user books for
        role: 'admin' or 'organization'

    Returns:
        New user ID

    Raises:
        sqlite3.IntegrityError if username or email already exists
    """
    db = get_db()
    password_hash = generate_password_hash(password)

    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO users (username, email, password_hash, full_name, org_id, role)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (username, email, password_hash, full_name, org_id, role))

    db.commit()
    return cursor.lastrowid


def update_last_login(user_id: int) -> None:
    """
    Update last login timestamp.

    Args:
        user_id: User ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE users SET last_login = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (user_id,))
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """
    Verify password against stored hash.

    Args:
        user_dict: User dictionary with password_hash
        password: Plain text password to check

    Returns:
        True if password matches
    """
    return check_password_hash(user_dict['password_hash'], password)


def current_actor():
    """
    The logged-in user, or None outside an authenticated request.

    Returns:
        User or None
    """
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None

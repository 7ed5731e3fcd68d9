"""
Input validation helper functions.
Provides validation and normalization for common input types.
"""

import re
from datetime import datetime

# Philippine mobile number in international form: +639XXXXXXXXX
PHILIPPINE_MOBILE_PATTERN = r'^\+639\d{9}$'

# Any international number: optional plus, 10 to 15 digits
CONTACT_NUMBER_PATTERN = r'^\+?\d{10,15}$'


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def normalize_phone(phone: str) -> str:
    """
    Normalize a phone number to the +63 international form.

    Strips every non-digit, then:
    - 63XXXXXXXXXX  -> +63XXXXXXXXXX
    - 0XXXXXXXXXX   -> +63XXXXXXXXXX (leading zero replaced)
    - anything else -> +63 prefixed

    Normalization never fails; use validate_phone to check the result.

    Args:
        phone: Raw phone number as typed

    Returns:
        Normalized number, or '' for empty input
    """
    if not phone:
        return ''

    digits = re.sub(r'\D', '', str(phone))

    if digits.startswith('63'):
        return f'+{digits}'
    if digits.startswith('0'):
        return f'+63{digits[1:]}'
    return f'+63{digits}'


def validate_phone(phone: str) -> bool:
    """
    Validate a Philippine mobile number.
    Accepts: 09XXXXXXXXX, 639XXXXXXXXX, +639XXXXXXXXX (separators allowed)

    Args:
        phone: Phone number to validate

    Returns:
        True if the normalized number is +639 followed by 9 digits
    """
    if not phone:
        return False

    return bool(re.match(PHILIPPINE_MOBILE_PATTERN, normalize_phone(phone)))


def validate_contact_number(phone: str) -> bool:
    """
    Validate a generic international contact number (10-15 digits).

    Args:
        phone: Phone number, normalized or raw

    Returns:
        True if valid format
    """
    if not phone:
        return False

    cleaned = re.sub(r'[\s\-\(\)]', '', str(phone))
    return bool(re.match(CONTACT_NUMBER_PATTERN, cleaned))


def format_phone(phone: str) -> str:
    """
    Format a phone number for display as +63 9XX XXX XXXX.

    Args:
        phone: Phone number to format

    Returns:
        Formatted number, or the input unchanged if it is not a mobile number
    """
    if not phone:
        return ''

    normalized = normalize_phone(phone)
    if len(normalized) == 13:
        return f'{normalized[:3]} {normalized[3:6]} {normalized[6:9]} {normalized[9:]}'
    return phone


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (TypeError, ValueError):
        return False


def validate_positive_integer(value, field_name: str) -> tuple:
    """
    Validate and coerce a positive integer.

    Args:
        value: Raw value (int or numeric string)
        field_name: Field name for the error message

    Returns:
        Tuple of (is_valid, int_value, error_message)
    """
    if value is None or value == '':
        return False, None, f'{field_name} is required'
    if isinstance(value, bool):
        return False, None, f'{field_name} must be a positive integer'
    try:
        number = int(value)
    except (TypeError, ValueError):
        return False, None, f'{field_name} must be a positive integer'
    if number <= 0:
        return False, None, f'{field_name} must be a positive integer'
    return True, number, ''


def validate_integer_list(values, field_name: str) -> tuple:
    """
    Validate a list of positive integers, dropping duplicates in order.

    Args:
        values: List of raw values
        field_name: Field name for the error message

    Returns:
        Tuple of (is_valid, list_of_ints, error_message)
    """
    if values is None:
        return True, [], ''
    if not isinstance(values, (list, tuple)):
        values = [values]

    result = []
    for value in values:
        valid, number, _ = validate_positive_integer(value, field_name)
        if not valid:
            return False, None, f'{field_name} must be a list of positive integers'
        if number not in result:
            result.append(number)
    return True, result, ''


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized

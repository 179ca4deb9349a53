"""
Input Validation & Sanitization Utilities
Field-level checks plus the payload schemas for every API entity.

Schema functions (``validate_*_payload``) collect every field violation before
failing, then raise ``ValidationError`` with one ``{field, message}`` entry
per problem. On success they return a cleaned dict containing only known keys.
"""
import math
import re
from typing import Dict, Any, List, Optional, Tuple
import logging

from database.models import PresetValues
from errors import ValidationError

logger = logging.getLogger(__name__)

QUOTE_STATUSES = ('draft', 'pending', 'approved', 'rejected')
ADJUSTMENT_TYPES = ('discount', 'surcharge')
RECEIPT_STATUSES = ('draft', 'sent', 'paid', 'void')
FORMULA_OPERATORS = ('+', '-', '*', '/')
RIGHT_OPERAND_TYPES = ('number', 'field', 'preset')

MAX_SETTINGS_DEPTH = 10

# Regex patterns
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate that all required fields are present in the data

    Args:
        data: Dictionary of input data
        required_fields: List of required field names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None or data[field] == '']

    if missing_fields:
        return False, f"Missing required fields: {', '.join(missing_fields)}"

    return True, None


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not isinstance(email, str):
        return False, "Email must be a non-empty string"

    if not EMAIL_PATTERN.match(email):
        return False, "Invalid email format"

    if len(email) > 254:  # RFC 5321
        return False, "Email address too long"

    return True, None


def validate_string_length(value: str, min_length: int = 0, max_length: int = 1000) -> Tuple[bool, Optional[str]]:
    """
    Validate string length is within acceptable range

    Args:
        value: String to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "Value must be a string"

    if len(value) < min_length:
        return False, f"Value too short (minimum {min_length} characters)"

    if len(value) > max_length:
        return False, f"Value too long (maximum {max_length} characters)"

    return True, None


def is_number(value: Any) -> bool:
    """True for finite int/float values. Booleans are rejected even though bool subclasses int."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_number_range(value: float, min_value: Optional[float] = None, max_value: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate number is within acceptable range

    Args:
        value: Number to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not is_number(value):
        return False, "Value must be a number"

    if min_value is not None and value < min_value:
        return False, f"Value too small (minimum {min_value})"

    if max_value is not None and value > max_value:
        return False, f"Value too large (maximum {max_value})"

    return True, None


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input by removing potentially dangerous characters

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    # Remove null bytes
    sanitized = value.replace('\x00', '')

    # Trim whitespace
    sanitized = sanitized.strip()

    # Limit length
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def format_validation_error(field: str, message: str) -> Dict[str, str]:
    """
    Format a single field violation for consistent API responses

    Args:
        field: Field name (dotted/indexed path for nested payloads)
        message: Error message

    Returns:
        Error entry dictionary
    """
    return {'field': field, 'message': message}


# ============================================================================
# FIELD COLLECTORS
# ============================================================================
# Each helper appends to ``errors`` and returns the cleaned value (or None).

def _path(prefix: str, field: str) -> str:
    return f"{prefix}.{field}" if prefix else field


def _require_object(data: Any, field: str = 'body') -> None:
    if not isinstance(data, dict):
        raise ValidationError([format_validation_error(field, 'Must be a JSON object')])


def _string(data: Dict, field: str, errors: List, prefix: str = '', required: bool = True,
            min_length: int = 1, max_length: int = 255) -> Optional[str]:
    path = _path(prefix, field)
    value = data.get(field)
    if value is None:
        if required:
            errors.append(format_validation_error(path, 'Required'))
        return None

    is_valid, error = validate_string_length(value, min_length=min_length, max_length=max_length)
    if not is_valid:
        errors.append(format_validation_error(path, error))
        return None

    sanitized = sanitize_string(value, max_length=max_length)
    if len(sanitized) < min_length:
        errors.append(format_validation_error(path, f"Value too short (minimum {min_length} characters)"))
        return None
    return sanitized


def _password(data: Dict, field: str, errors: List, min_length: int = 1,
              max_length: int = 128) -> Optional[str]:
    """Passwords are length-checked as given and never sanitized."""
    value = data.get(field)
    if value is None:
        errors.append(format_validation_error(field, 'Required'))
        return None

    is_valid, error = validate_string_length(value, min_length=min_length, max_length=max_length)
    if not is_valid:
        errors.append(format_validation_error(field, error))
        return None
    return value


def _number(data: Dict, field: str, errors: List, prefix: str = '', required: bool = True,
            min_value: Optional[float] = None, max_value: Optional[float] = None) -> Optional[float]:
    path = _path(prefix, field)
    value = data.get(field)
    if value is None:
        if required:
            errors.append(format_validation_error(path, 'Required'))
        return None

    is_valid, error = validate_number_range(value, min_value=min_value, max_value=max_value)
    if not is_valid:
        errors.append(format_validation_error(path, error))
        return None
    return value


def _choice(data: Dict, field: str, choices: Tuple[str, ...], errors: List, prefix: str = '',
            required: bool = True) -> Optional[str]:
    path = _path(prefix, field)
    value = data.get(field)
    if value is None:
        if required:
            errors.append(format_validation_error(path, 'Required'))
        return None

    if value not in choices:
        errors.append(format_validation_error(path, f"Must be one of: {', '.join(choices)}"))
        return None
    return value


def _list(data: Dict, field: str, errors: List, prefix: str = '', required: bool = True) -> Optional[list]:
    path = _path(prefix, field)
    value = data.get(field)
    if value is None:
        if required:
            errors.append(format_validation_error(path, 'Required'))
        return None

    if not isinstance(value, list):
        errors.append(format_validation_error(path, 'Must be an array'))
        return None
    return value


def _raise_if_errors(errors: List, entity: str) -> None:
    if errors:
        logger.debug(f"{entity} payload rejected: {errors}")
        raise ValidationError(errors)


# ============================================================================
# QUOTES
# ============================================================================

def _validate_cabinet_item(item: Any, prefix: str, errors: List) -> Optional[Dict]:
    if not isinstance(item, dict):
        errors.append(format_validation_error(prefix, 'Must be an object'))
        return None

    return {
        'product_id': _string(item, 'product_id', errors, prefix, required=False, max_length=36),
        'material': _string(item, 'material', errors, prefix, required=False),
        'width': _number(item, 'width', errors, prefix, min_value=0),
        'height': _number(item, 'height', errors, prefix, min_value=0),
        'depth': _number(item, 'depth', errors, prefix, min_value=0),
        'price': _number(item, 'price', errors, prefix, min_value=0),
    }


def _validate_space(space: Any, prefix: str, errors: List) -> Optional[Dict]:
    if not isinstance(space, dict):
        errors.append(format_validation_error(prefix, 'Must be an object'))
        return None

    name = _string(space, 'name', errors, prefix)
    items = _list(space, 'items', errors, prefix) or []
    return {
        'name': name,
        'items': [
            _validate_cabinet_item(item, f"{prefix}.items[{idx}]", errors)
            for idx, item in enumerate(items)
        ],
    }


def validate_quote_payload(data: Any) -> Dict[str, Any]:
    """
    Validate a quote create/update payload including its space/item tree

    Args:
        data: Decoded JSON body

    Returns:
        Cleaned quote dict with a ``spaces`` list

    Raises:
        ValidationError: with one entry per offending field
    """
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'client_name': _string(data, 'client_name', errors),
        'email': _string(data, 'email', errors, max_length=254),
        'phone': _string(data, 'phone', errors, max_length=50),
        'project_name': _string(data, 'project_name', errors),
        'installation_address': _string(data, 'installation_address', errors, max_length=1000),
        'status': _choice(data, 'status', QUOTE_STATUSES, errors),
        'total': _number(data, 'total', errors, min_value=0),
        'adjustment_type': _choice(data, 'adjustment_type', ADJUSTMENT_TYPES, errors, required=False),
        'adjustment_percentage': _number(data, 'adjustment_percentage', errors, required=False,
                                         min_value=0, max_value=100),
        'adjusted_total': _number(data, 'adjusted_total', errors, required=False, min_value=0),
    }

    if cleaned['email'] is not None:
        is_valid, error = validate_email(cleaned['email'])
        if not is_valid:
            errors.append(format_validation_error('email', error))

    # An adjustment percentage means nothing without its type
    if data.get('adjustment_percentage') is not None and data.get('adjustment_type') is None:
        errors.append(format_validation_error(
            'adjustment_type', 'Required when adjustment_percentage is provided'
        ))

    spaces = _list(data, 'spaces', errors) or []
    cleaned['spaces'] = [
        _validate_space(space, f"spaces[{idx}]", errors)
        for idx, space in enumerate(spaces)
    ]

    _raise_if_errors(errors, 'Quote')
    return cleaned


def validate_convert_payload(data: Any) -> str:
    """Validate ``POST /orders`` body, returning the quote id to convert."""
    _require_object(data)
    errors: List[Dict[str, str]] = []
    quote_id = _string(data, 'quote_id', errors, max_length=36)
    _raise_if_errors(errors, 'Order')
    return quote_id


# ============================================================================
# RECEIPTS
# ============================================================================

def validate_receipt_payload(data: Any) -> Dict[str, float]:
    """Validate a new receipt: percentage in (0, 100] and a non-negative amount."""
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'payment_percentage': _number(data, 'payment_percentage', errors, min_value=0, max_value=100),
        'amount': _number(data, 'amount', errors, min_value=0),
    }
    if cleaned['payment_percentage'] == 0:
        errors.append(format_validation_error('payment_percentage', 'Must be greater than 0'))

    _raise_if_errors(errors, 'Receipt')
    return cleaned


def validate_receipt_status_payload(data: Any) -> str:
    _require_object(data)
    errors: List[Dict[str, str]] = []
    status = _choice(data, 'status', RECEIPT_STATUSES, errors)
    _raise_if_errors(errors, 'Receipt status')
    return status


# ============================================================================
# CATALOG
# ============================================================================

def validate_category_payload(data: Any) -> Dict[str, Any]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'name': _string(data, 'name', errors),
        'description': _string(data, 'description', errors, required=False, min_length=0, max_length=2000),
    }

    _raise_if_errors(errors, 'Category')
    return cleaned


def validate_product_payload(data: Any) -> Dict[str, Any]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'name': _string(data, 'name', errors),
        'category_id': _string(data, 'category_id', errors, max_length=36),
        'type': _string(data, 'type', errors, max_length=100),
        'unit_cost': _number(data, 'unit_cost', errors, min_value=0),
        'description': _string(data, 'description', errors, required=False, min_length=0, max_length=2000),
    }

    materials = _list(data, 'materials', errors) or []
    cleaned['materials'] = []
    for idx, material in enumerate(materials):
        if not isinstance(material, str):
            errors.append(format_validation_error(f"materials[{idx}]", 'Must be a string'))
        else:
            cleaned['materials'].append(sanitize_string(material))

    _raise_if_errors(errors, 'Product')
    return cleaned


# ============================================================================
# SETTINGS
# ============================================================================

PRESET_VALUE_FIELDS = PresetValues.NUMERIC_FIELDS


def validate_preset_values_payload(data: Any) -> Dict[str, float]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {field: _number(data, field, errors) for field in PRESET_VALUE_FIELDS}

    _raise_if_errors(errors, 'Preset values')
    return cleaned


def _validate_formula_step(step: Any, prefix: str, errors: List) -> Optional[Dict]:
    if not isinstance(step, dict):
        errors.append(format_validation_error(prefix, 'Must be an object'))
        return None

    cleaned = {
        'left_operand': _string(step, 'left_operand', errors, prefix),
        'operator': _choice(step, 'operator', FORMULA_OPERATORS, errors, prefix),
        'right_operand': _string(step, 'right_operand', errors, prefix),
        'right_operand_type': _choice(step, 'right_operand_type', RIGHT_OPERAND_TYPES, errors, prefix),
        'order': _number(step, 'order', errors, prefix, min_value=0),
    }

    if cleaned['order'] is not None and cleaned['order'] != int(cleaned['order']):
        errors.append(format_validation_error(_path(prefix, 'order'), 'Must be an integer'))
    elif cleaned['order'] is not None:
        cleaned['order'] = int(cleaned['order'])

    # Numeric right operands are stored as text but must parse
    if cleaned['right_operand_type'] == 'number' and cleaned['right_operand'] is not None:
        try:
            float(cleaned['right_operand'])
        except ValueError:
            errors.append(format_validation_error(
                _path(prefix, 'right_operand'), 'Must be numeric when right_operand_type is number'
            ))

    return cleaned


def validate_pricing_rule_payload(data: Any) -> Dict[str, Any]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'name': _string(data, 'name', errors),
        'result': _string(data, 'result', errors),
    }
    formula = _list(data, 'formula', errors) or []
    cleaned['formula'] = [
        _validate_formula_step(step, f"formula[{idx}]", errors)
        for idx, step in enumerate(formula)
    ]

    _raise_if_errors(errors, 'Pricing rule')
    return cleaned


def _validate_setting_value(value: Any, path: str, errors: List, depth: int = 0) -> None:
    """Open value: string, number, boolean, null, or a list/mapping of open values."""
    if depth > MAX_SETTINGS_DEPTH:
        errors.append(format_validation_error(path, f"Nested deeper than {MAX_SETTINGS_DEPTH} levels"))
        return

    if value is None or isinstance(value, (str, bool, int, float)):
        return

    if isinstance(value, list):
        for idx, entry in enumerate(value):
            _validate_setting_value(entry, f"{path}[{idx}]", errors, depth + 1)
        return

    if isinstance(value, dict):
        for key, entry in value.items():
            if not isinstance(key, str):
                errors.append(format_validation_error(path, 'Keys must be strings'))
                continue
            _validate_setting_value(entry, _path(path, key), errors, depth + 1)
        return

    errors.append(format_validation_error(path, 'Unsupported value type'))


def validate_template_payload(data: Any) -> Dict[str, Any]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    settings = data.get('settings')
    if settings is None:
        errors.append(format_validation_error('settings', 'Required'))
    elif not isinstance(settings, dict):
        errors.append(format_validation_error('settings', 'Must be an object'))
    else:
        _validate_setting_value(settings, 'settings', errors)

    _raise_if_errors(errors, 'Template')
    return {'settings': settings}


# ============================================================================
# AUTH
# ============================================================================

def validate_registration_payload(data: Any) -> Dict[str, str]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    cleaned = {
        'email': _string(data, 'email', errors, max_length=254),
        'password': _password(data, 'password', errors, min_length=8),
        'name': _string(data, 'name', errors, required=False),
    }
    if cleaned['email'] is not None:
        is_valid, error = validate_email(cleaned['email'])
        if not is_valid:
            errors.append(format_validation_error('email', error))
        cleaned['email'] = cleaned['email'].lower()

    _raise_if_errors(errors, 'Registration')
    return cleaned


def validate_login_payload(data: Any) -> Dict[str, str]:
    _require_object(data)
    errors: List[Dict[str, str]] = []

    is_valid, error = validate_required_fields(data, ['email', 'password'])
    if not is_valid:
        errors.append(format_validation_error('body', error))
        _raise_if_errors(errors, 'Login')

    cleaned = {
        'email': _string(data, 'email', errors, max_length=254),
        'password': _password(data, 'password', errors),
    }
    _raise_if_errors(errors, 'Login')
    cleaned['email'] = cleaned['email'].lower()
    return cleaned

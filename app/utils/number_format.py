"""Number parsing utilities for JSON request payloads."""
from decimal import Decimal, InvalidOperation

from app.exceptions import ValidationError


def to_decimal(value, field: str) -> Decimal:
    """
    Coerce a JSON number (or numeric string) to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    Booleans are rejected even though they are ints in Python.

    Raises:
        ValidationError: if the value is missing or not numeric.
    """
    if value is None or value == '' or isinstance(value, bool):
        raise ValidationError(f'El campo {field} es requerido y debe ser numérico')

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f'El campo {field} debe ser numérico')

    if not result.is_finite():
        raise ValidationError(f'El campo {field} debe ser numérico')
    return result


def to_positive_decimal(value, field: str) -> Decimal:
    """Like to_decimal but the result must be greater than zero."""
    result = to_decimal(value, field)
    if result <= 0:
        raise ValidationError(f'El campo {field} debe ser mayor a 0')
    return result


def to_id(value, field: str, required: bool = True):
    """Parse a catalog/entity id (positive integer). Returns None when optional and absent."""
    if value is None or value == '':
        if required:
            raise ValidationError(f'Se requiere {field}')
        return None
    if isinstance(value, bool):
        raise ValidationError(f'El campo {field} debe ser un identificador válido')
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'El campo {field} debe ser un identificador válido')
    if parsed <= 0:
        raise ValidationError(f'El campo {field} debe ser un identificador válido')
    return parsed


def to_optional_int(value, field: str):
    """Parse an optional non-negative integer count (e.g. pantones)."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f'El campo {field} debe ser un entero')
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'El campo {field} debe ser un entero')
    if parsed < 0:
        raise ValidationError(f'El campo {field} no puede ser negativo')
    return parsed


def to_optional_bool(value, field: str):
    """Parse an optional flag. Accepts JSON booleans, 0/1 and 'true'/'false'."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ('true', 'false', '1', '0'):
        return value.strip().lower() in ('true', '1')
    raise ValidationError(f'El campo {field} debe ser booleano')


def to_object(value) -> dict:
    """JSON request body as a dict; a missing body reads as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError('Cuerpo de la solicitud inválido')
    return value

from enum import Enum
from sqlalchemy.orm import class_mapper

def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a dictionary."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Convert datetime objects to ISO format strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        # Convert Decimal objects to floats
        elif hasattr(value, 'normalize') and hasattr(value, 'from_float'):  # Check if it's a Decimal
            value = float(value)
        elif isinstance(value, Enum):
            value = value.value
        result[c.key] = value
    return result


def enum_code(value) -> str:
    """Upper-cased code of an enum member or plain string ('' for None)."""
    value = getattr(value, 'value', value)
    return str(value or '').upper()

__all__ = ['sqlalchemy_to_dict', 'enum_code']

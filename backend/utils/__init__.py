import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import class_mapper

def _json_value(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.value
    return value

def sqlalchemy_to_dict(obj):
    """Column values of a mapped object, JSON-ready for the audit log."""
    if obj is None:
        return None
    mapper = class_mapper(obj.__class__)
    return {column.key: _json_value(getattr(obj, column.key)) for column in mapper.columns}

__all__ = ['sqlalchemy_to_dict']

"""
Generic serialization mixin for SQLAlchemy models

Provides the one mapping used at the API boundary: column names are exposed in
camelCase, datetimes as ISO strings and Numeric columns as floats.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import inspect
from pydantic.alias_generators import to_camel

from busstation import db
from busstation.logger import get_logger

logger = get_logger("bus_station.business.core.serialization")


def serialize_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SerializationMixin:
    """
    Mixin that adds:
    - to_dict(): snake_case column dictionary
    - to_api_dict(): camelCase dictionary for JSON responses
    - apply_changes(): set attributes from a {column: value} dictionary
    - create(): add and flush a new instance
    """

    # Columns never exposed through the API
    api_exclude = frozenset()

    def to_dict(self, include_audit_fields=True):
        result = {}
        mapper = inspect(self.__class__)
        for column in mapper.column_attrs:
            key = column.key
            if key in self.api_exclude:
                continue
            if not include_audit_fields and key in ('created_at', 'updated_at', 'created_by_id', 'updated_by_id'):
                continue
            result[key] = serialize_value(getattr(self, key))
        return result

    def to_api_dict(self, include_audit_fields=True):
        return {to_camel(key): value for key, value in self.to_dict(include_audit_fields).items()}

    def apply_changes(self, changes, user_id=None):
        """
        Apply a dictionary of column values.

        Returns:
            list: Names of the columns whose values actually changed
        """
        mapper = inspect(self.__class__)
        columns = {c.key for c in mapper.column_attrs}
        changed = []
        for key, value in changes.items():
            if key not in columns:
                continue
            if getattr(self, key) != value:
                setattr(self, key, value)
                changed.append(key)
        if changed and user_id is not None and hasattr(self, 'updated_by_id'):
            self.updated_by_id = user_id
        return changed

    @classmethod
    def create(cls, user_id=None, **fields):
        """Create, add and flush a new instance (caller commits)"""
        instance = cls(**fields)
        if user_id is not None:
            if hasattr(instance, 'created_by_id') and not instance.created_by_id:
                instance.created_by_id = user_id
            if hasattr(instance, 'updated_by_id'):
                instance.updated_by_id = user_id
        db.session.add(instance)
        db.session.flush()
        logger.debug(f"Created {cls.__name__} id={instance.id}")
        return instance

"""Column Types — custom SQLAlchemy types shared by the ORM models."""

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator


class SimpleArray(TypeDecorator):
    """Set of strings stored as one sorted, comma separated TEXT value.

    Keeps tag lookups portable: brand flag search is a plain LIKE on the
    stored text on every dialect. Sorting on bind makes equality on the
    column independent of the order tags were given in.
    """
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            return value
        return ",".join(sorted(value))

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return value.split(",")

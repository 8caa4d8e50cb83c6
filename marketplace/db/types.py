# marketplace/db/types.py
from sqlalchemy import JSON, String, exists, func, literal, select
from sqlalchemy.dialects.postgresql import ARRAY

# Native text[] on Postgres, JSON list everywhere else (SQLite in tests).
StringArray = ARRAY(String).with_variant(JSON(), "sqlite")


def array_overlaps(column, values, dialect_name: str):
    """Predicate that is true when ``column`` shares at least one item with ``values``."""
    values = list(values)
    if dialect_name == "postgresql":
        return column.overlap(values)
    items = func.json_each(column).table_valued("value")
    return exists(select(literal(1)).select_from(items).where(items.c.value.in_(values)))

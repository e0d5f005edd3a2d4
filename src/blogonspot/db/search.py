# src/blogonspot/db/search.py
"""Case-insensitive substring matching for listing filters."""

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Return a LIKE pattern matching `term` anywhere, with wildcards taken literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def ilike_any(columns, term: str) -> ColumnElement[bool]:
    """Match rows where any of `columns` contains `term`, ignoring case."""
    pattern = contains_pattern(term)
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))

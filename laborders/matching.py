"""
Patient duplicate detection.

Two registrations are the same person when their dates of birth fall on the
same UTC day and every word of the shorter name also appears in the longer
one:

- "Doe S Joe"  matches "Doe Joe"
- "Joe Doe"    matches "Joe s Doe"
- "John Smith" matches "John Michael Smith"

The relation is fuzzy and not transitive ("Joe Doe" matches both
"Joe A Doe" and "Joe B Doe", which do not match each other).
"""

from datetime import date, datetime
from datetime import timezone as dt_timezone
from typing import Optional

from django.db.models import Q
from django.utils.dateparse import parse_date, parse_datetime


def to_utc_date(value) -> date:
    """
    Collapse a date of birth to its UTC calendar day.

    Accepts a date, a datetime (naive is read as UTC) or an ISO 8601 string.
    Raises ValueError/TypeError for anything else.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        parsed = parse_datetime(text)
        if parsed is not None:
            return to_utc_date(parsed)
        day = parse_date(text)
        if day is not None:
            return day
        raise ValueError(f'Invalid date: {value!r}')
    raise TypeError(f'Unsupported date value: {type(value).__name__}')


def name_words(name: Optional[str]) -> list[str]:
    """trim -> lowercase -> split on whitespace, empty tokens dropped."""
    return (name or '').strip().lower().split()


def names_match(name1: str, name2: str) -> bool:
    """All words of the shorter name (by word count) must appear in the longer one."""
    words1 = name_words(name1)
    words2 = name_words(name2)

    if not words1 or not words2:
        return False

    shorter = words1 if len(words1) <= len(words2) else words2
    longer = words2 if shorter is words1 else words1
    longer_set = set(longer)
    return all(word in longer_set for word in shorter)


class PatientMatcher:
    """Finds an existing live patient that a new registration would duplicate."""

    def __init__(self, store):
        self.store = store

    def find_duplicate(self, name, dob):
        words = name_words(name)
        if not words:
            return None

        day = to_utc_date(dob)

        # Day only: icontains on SQLite folds ASCII case only.
        candidates, _ = self.store.find_many(where=Q(dob=day))

        for existing in candidates:
            if names_match(name, existing.name):
                return existing
        return None

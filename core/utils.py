"""
Core utilities shared by the apps.
"""
from django.utils import timezone


def now():
    """Current aware datetime; single clock for attempts and grading."""
    return timezone.now()


def parse_id(value):
    """int(value) or None for anything that is not a whole number."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_id_list(values):
    """
    Normalize a list of ids from a request body.
    Returns (ids, ok): ok is False when values is not a list or holds a non-integer.
    """
    if values is None:
        return [], True
    if not isinstance(values, (list, tuple)):
        return [], False
    ids = []
    for v in values:
        parsed = parse_id(v)
        if parsed is None:
            return [], False
        if parsed not in ids:
            ids.append(parsed)
    return ids, True

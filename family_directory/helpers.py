"""Utility functions for member records and map links."""

from .constants import DIRECTIONS_URL_TEMPLATE, RECORD_KEYS


def clean_text(value) -> str:
    """Coerce a stored field to a stripped string ('' for None)."""
    if value is None:
        return ""
    return str(value).strip()


def parse_coordinate(text) -> float | None:
    """Parse decimal-degree text into a float, or None if not numeric."""
    if text is None or text == "":
        return None
    try:
        return float(text)
    except (TypeError, ValueError):
        return None


def build_directions_url(lat, lng) -> str:
    """Canonical directions link for a coordinate pair ('' unless both are set)."""
    lat = clean_text(lat)
    lng = clean_text(lng)
    if not lat or not lng:
        return ""
    return DIRECTIONS_URL_TEMPLATE.format(lat=lat, lng=lng)


def to_record_keys(changes: dict) -> dict:
    """Translate snake_case field names to stored record keys.

    Keys that are already record keys pass through; unknown keys are dropped.
    """
    known = set(RECORD_KEYS.values())
    result = {}
    for key, value in changes.items():
        if key in RECORD_KEYS:
            result[RECORD_KEYS[key]] = value
        elif key in known:
            result[key] = value
    return result

"""Map URL coordinate extraction and location helpers for the map view."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from haversine import Unit, haversine

from .constants import COORDINATE_PATTERNS
from .errors import ValidationError
from .helpers import build_directions_url, clean_text, parse_coordinate

if TYPE_CHECKING:
    from .models import Member

_COMPILED_PATTERNS = [re.compile(p) for p in COORDINATE_PATTERNS]

LOCATION_FIELDS = ("latitude", "longitude", "googleMapUrl")


def extract_coordinates(url: str | None) -> dict | None:
    """Extract latitude/longitude text from a map-service URL.

    Tries, in order: ``@lat,lng``, the ``!3dlat!4dlng`` pin encoding, and a
    ``q``/``query``/``destination``/``daddr`` query parameter. Returns None
    when nothing matches.
    """
    if not url:
        return None
    for pattern in _COMPILED_PATTERNS:
        match = pattern.search(url)
        if match:
            return {"lat": match.group(1), "lng": match.group(2)}
    return None


def apply_location_edit(current: dict, changes: dict) -> dict:
    """Apply a form edit while keeping latitude, longitude and map URL consistent.

    A URL that yields coordinates wins over latitude/longitude edits in the
    same update. A latitude or longitude edit regenerates the canonical
    directions URL when both values are known.

    Returns:
        A new record dict; ``current`` is not modified.
    """
    result = dict(current)
    result.update({k: v for k, v in changes.items() if k not in LOCATION_FIELDS})

    if "googleMapUrl" in changes:
        url = changes["googleMapUrl"]
        result["googleMapUrl"] = url
        coords = extract_coordinates(url)
        if coords:
            result["latitude"] = coords["lat"]
            result["longitude"] = coords["lng"]
            return result

    if "latitude" in changes or "longitude" in changes:
        lat = changes.get("latitude", result.get("latitude"))
        lng = changes.get("longitude", result.get("longitude"))
        result["latitude"] = lat
        result["longitude"] = lng
        canonical = build_directions_url(lat, lng)
        if canonical:
            result["googleMapUrl"] = canonical

    return result


def in_range(lat: float, lng: float) -> bool:
    """True if lat is within [-90, 90] and lng within [-180, 180]."""
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def check_point(lat: float, lng: float) -> None:
    """Reject a search centre that is not a valid coordinate pair.

    Raises:
        ValidationError: If either value is out of range.
    """
    if not in_range(lat, lng):
        raise ValidationError(f"Coordinates out of range: {lat}, {lng}")


def member_location(member: Member) -> tuple[float, float] | None:
    """Resolve a member's coordinates from lat/lng fields, falling back to the map URL.

    Out-of-range pairs are treated as unknown.
    """
    lat = parse_coordinate(member.latitude)
    lng = parse_coordinate(member.longitude)
    if lat is not None and lng is not None and in_range(lat, lng):
        return (lat, lng)

    coords = extract_coordinates(member.google_map_url)
    if coords:
        lat, lng = float(coords["lat"]), float(coords["lng"])
        if in_range(lat, lng):
            return (lat, lng)
    return None


def map_markers(members: list[Member]) -> list[dict]:
    """One map marker per member with a resolvable location."""
    markers = []
    for member in members:
        location = member_location(member)
        if location is None:
            continue
        label = member.name
        if member.city:
            label = f"{member.name} - {member.city}"
        markers.append(
            {
                "id": member.id,
                "name": label,
                "lat": location[0],
                "lng": location[1],
                "directions_url": build_directions_url(*location),
            }
        )
    return markers


def members_near(
    members: list[Member],
    lat: float,
    lng: float,
    radius_km: float = 25.0,
    max_results: int = 50,
) -> list[dict]:
    """Find members within ``radius_km`` of a point, nearest first.

    Raises:
        ValidationError: If the centre point is out of range.
    """
    check_point(lat, lng)
    center = (lat, lng)
    results = []
    for member in members:
        location = member_location(member)
        if location is None:
            continue
        distance = haversine(center, location, unit=Unit.KILOMETERS)
        if distance <= radius_km:
            info = member.to_summary()
            info["distance_km"] = round(distance, 2)
            info["location"] = clean_text(member.city) or None
            results.append(info)

    results.sort(key=lambda r: r["distance_km"])
    return results[:max_results]

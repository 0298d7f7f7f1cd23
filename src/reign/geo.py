"""Great-circle proximity conditions built on PostgreSQL cube/earthdistance.

Callers pass radii in kilometers; ``earth_distance`` works in meters.
Nothing here validates input, callers range-check first.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, Float, func, literal

METERS_PER_KILOMETER = 1000


def distance_meters(
    lat_column: ColumnElement[Any],
    lng_column: ColumnElement[Any],
    latitude: float,
    longitude: float,
) -> ColumnElement[float]:
    """Great-circle distance in meters between a row's point and a reference point."""
    return func.earth_distance(
        func.ll_to_earth(lat_column, lng_column),
        func.ll_to_earth(literal(latitude, Float), literal(longitude, Float)),
        type_=Float,
    )


def within_radius(
    lat_column: ColumnElement[Any],
    lng_column: ColumnElement[Any],
    latitude: float,
    longitude: float,
    radius_km: float,
) -> ColumnElement[bool]:
    """Boolean condition: the row's point lies within ``radius_km`` of the reference point."""
    radius_m = literal(radius_km, Float) * METERS_PER_KILOMETER
    return distance_meters(lat_column, lng_column, latitude, longitude) <= radius_m

"""Input checks shared by every service."""

from __future__ import annotations

import math
import re

from reign.errors import InvalidCoordinateError, InvalidRadiusError, InvalidRequestError

UUID_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: object) -> bool:
    """Check whether ``value`` is a UUID v4 string."""
    return isinstance(value, str) and UUID_REGEX.match(value) is not None


def require_uuid(value: object, field: str = "userId") -> str:
    """Return ``value`` lowercased if it is a UUID v4 string, else raise InvalidRequestError."""
    if not is_valid_uuid(value):
        raise InvalidRequestError(f"{field} must be a valid UUID", error=f"Invalid {field}")
    return str(value).lower()


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Range-check a point in decimal degrees.

    Raises:
        InvalidCoordinateError: If either component is NaN or out of range.
    """
    if math.isnan(latitude) or not -90 <= latitude <= 90:
        raise InvalidCoordinateError("Latitude must be between -90 and 90", error="Invalid latitude")
    if math.isnan(longitude) or not -180 <= longitude <= 180:
        raise InvalidCoordinateError("Longitude must be between -180 and 180", error="Invalid longitude")


def validate_radius(radius_km: float) -> None:
    if math.isnan(radius_km) or math.isinf(radius_km) or radius_km <= 0:
        raise InvalidRadiusError("Radius must be greater than 0")

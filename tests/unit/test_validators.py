"""Unit tests for shared input checks."""

from __future__ import annotations

import math

import pytest

from reign.errors import InvalidCoordinateError, InvalidRadiusError, InvalidRequestError
from reign.validators import is_valid_uuid, require_uuid, validate_coordinates, validate_radius

VALID_ID = "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b"


class TestUuid:

    def test_accepts_v4(self):
        assert is_valid_uuid(VALID_ID)

    def test_case_insensitive(self):
        assert is_valid_uuid(VALID_ID.upper())

    @pytest.mark.parametrize("value", [
        "not-a-uuid",
        "",
        None,
        42,
        "3f2b8c1e-9a4d-1e6f-8b2a-1c3d5e7f9a0b",  # version 1
        "3f2b8c1e-9a4d-4e6f-7b2a-1c3d5e7f9a0b",  # bad variant
    ])
    def test_rejects_non_v4(self, value):
        assert not is_valid_uuid(value)

    def test_require_uuid_lowercases(self):
        assert require_uuid(VALID_ID.upper()) == VALID_ID

    def test_require_uuid_names_the_field(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            require_uuid("nope", "fromUser")
        assert exc_info.value.error == "Invalid fromUser"
        assert exc_info.value.status_code == 400


class TestCoordinates:

    @pytest.mark.parametrize("lat,lng", [(0, 0), (90, 180), (-90, -180), (37.77, -122.42)])
    def test_in_range(self, lat, lng):
        validate_coordinates(lat, lng)  # Should not raise

    @pytest.mark.parametrize("lat", [90.0001, -91, math.nan])
    def test_bad_latitude(self, lat):
        with pytest.raises(InvalidCoordinateError, match="Latitude"):
            validate_coordinates(lat, 0)

    @pytest.mark.parametrize("lng", [180.5, -181, math.nan])
    def test_bad_longitude(self, lng):
        with pytest.raises(InvalidCoordinateError) as exc_info:
            validate_coordinates(0, lng)
        assert exc_info.value.error == "Invalid longitude"


class TestRadius:

    def test_positive(self):
        validate_radius(0.001)

    @pytest.mark.parametrize("radius", [0, -1, math.nan, math.inf])
    def test_rejected(self, radius):
        with pytest.raises(InvalidRadiusError):
            validate_radius(radius)

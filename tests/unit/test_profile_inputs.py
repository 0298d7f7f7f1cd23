"""Unit tests for profile item, mood badge and image normalization."""

from __future__ import annotations

import base64

import pytest

from reign.errors import InvalidImageError, InvalidItemError, InvalidMoodBadgeError
from reign.profiles.images import validate_profile_image
from reign.profiles.items import (
    MoodBadgeInput,
    ProfileItemInput,
    normalize_items,
    normalize_mood_badges,
)

MAX_BYTES = 2 * 1024 * 1024


def _jpeg(size: int, prefix: str = "data:image/jpeg;base64,") -> str:
    return prefix + base64.b64encode(b"\xff" * size).decode()


class TestProfileItemShapes:

    def test_type_data_shape(self):
        item = ProfileItemInput.from_payload({"type": "skill", "data": {"skill": "Go"}})
        assert item == ProfileItemInput("skill", {"skill": "Go"})

    def test_item_type_item_data_shape(self):
        item = ProfileItemInput.from_payload({"item_type": "education", "item_data": {"school": "MIT"}})
        assert item.item_type == "education"
        assert item.item_data == {"school": "MIT"}

    def test_camel_case_shape(self):
        item = ProfileItemInput.from_payload({"itemType": "experience", "itemData": "Acme"})
        assert item == ProfileItemInput("experience", "Acme")

    def test_both_shapes_normalize_identically(self):
        a = ProfileItemInput.from_payload({"type": "skill", "data": {"skill": "Go"}})
        b = ProfileItemInput.from_payload({"item_type": "skill", "item_data": {"skill": "Go"}})
        assert a == b

    @pytest.mark.parametrize("payload", [
        {"kind": "skill", "value": "Go"},
        {"type": "skill"},
        {"data": {"skill": "Go"}},
        {"type": "", "data": "Go"},
        {"type": "skill", "data": None},
        {"type": "skill", "data": "   "},
        {"type": 7, "data": "Go"},
        "skill:Go",
        None,
    ])
    def test_rejects_unknown_shapes(self, payload):
        with pytest.raises(InvalidItemError):
            ProfileItemInput.from_payload(payload)

    def test_rejects_long_type(self):
        with pytest.raises(InvalidItemError, match="at most 50"):
            ProfileItemInput.from_payload({"type": "x" * 51, "data": "y"})

    def test_rejects_profile_image_items(self):
        with pytest.raises(InvalidItemError, match="profileImage"):
            ProfileItemInput.from_payload({"type": "profile_image", "data": {"imageData": "x"}})

    def test_one_bad_item_fails_the_batch(self):
        with pytest.raises(InvalidItemError):
            normalize_items([{"type": "skill", "data": "Go"}, {"nope": True}])


class TestMoodBadges:

    def test_strips_fields(self):
        badge = MoodBadgeInput.from_payload({"mood": " happy ", "category": "skill", "value": "Go"})
        assert badge == MoodBadgeInput("happy", "skill", "Go")

    @pytest.mark.parametrize("missing", ["mood", "category", "value"])
    def test_requires_every_field(self, missing):
        payload = {"mood": "happy", "category": "skill", "value": "Go"}
        payload[missing] = ""
        with pytest.raises(InvalidMoodBadgeError, match=missing):
            MoodBadgeInput.from_payload(payload)

    def test_empty_list_is_valid(self):
        assert normalize_mood_badges([]) == []


class TestProfileImage:

    def test_accepts_jpeg(self):
        image = _jpeg(128)
        assert validate_profile_image(image, MAX_BYTES) == image

    def test_accepts_jpg_prefix(self):
        validate_profile_image(_jpeg(16, "data:image/jpg;base64,"), MAX_BYTES)

    def test_rejects_png(self):
        with pytest.raises(InvalidImageError):
            validate_profile_image(_jpeg(16, "data:image/png;base64,"), MAX_BYTES)

    def test_rejects_bad_alphabet(self):
        with pytest.raises(InvalidImageError, match="base64"):
            validate_profile_image("data:image/jpeg;base64,abc$def", MAX_BYTES)

    def test_rejects_bad_padding(self):
        with pytest.raises(InvalidImageError, match="base64"):
            validate_profile_image("data:image/jpeg;base64,abcde", MAX_BYTES)

    def test_size_limit_is_on_decoded_bytes(self):
        validate_profile_image(_jpeg(MAX_BYTES), MAX_BYTES)
        with pytest.raises(InvalidImageError, match="2 MB"):
            validate_profile_image(_jpeg(MAX_BYTES + 1), MAX_BYTES)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidImageError):
            validate_profile_image(b"data:image/jpeg;base64,AAAA", MAX_BYTES)

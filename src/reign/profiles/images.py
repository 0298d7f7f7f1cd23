"""Profile image checks. Images travel as base64 JPEG data URIs."""

from __future__ import annotations

import base64
import binascii
import re

from reign.errors import InvalidImageError

JPEG_PREFIXES = ("data:image/jpeg;base64,", "data:image/jpg;base64,")

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")


def validate_profile_image(image: object, max_bytes: int) -> str:
    """
    Check that ``image`` is a base64 JPEG data URI of at most ``max_bytes`` decoded bytes.

    Returns:
        The image string unchanged.

    Raises:
        InvalidImageError: On a wrong prefix, a bad base64 payload, or an oversized image.
    """
    if not isinstance(image, str) or not image.startswith(JPEG_PREFIXES):
        raise InvalidImageError("Profile image must be a base64 encoded JPEG (data:image/jpeg;base64,...)")

    payload = image.split(",", 1)[1]
    if not _BASE64_RE.match(payload):
        raise InvalidImageError("Profile image contains invalid base64 characters")

    try:
        decoded = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise InvalidImageError("Profile image is not valid base64") from e

    if len(decoded) > max_bytes:
        raise InvalidImageError(f"Profile image must be at most {max_bytes // (1024 * 1024)} MB")
    return image

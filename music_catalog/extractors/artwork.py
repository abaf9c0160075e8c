from __future__ import annotations

import base64
from typing import Optional

DEFAULT_IMAGE_SUBTYPE = "jpeg"

_SUBTYPE_ALIASES = {
    "jpg": "jpeg",
    "pjpeg": "jpeg",
    "x-png": "png",
}


def image_subtype(mime: Optional[str]) -> str:
    """Return the image subtype for a picture mime type (``image/png`` -> ``png``)."""
    if not mime:
        return DEFAULT_IMAGE_SUBTYPE
    _, sep, subtype = mime.strip().lower().partition("/")
    if not sep or not subtype:
        return DEFAULT_IMAGE_SUBTYPE
    return _SUBTYPE_ALIASES.get(subtype, subtype)


def to_data_uri(data: bytes, mime: Optional[str] = None) -> str:
    payload = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:image/{image_subtype(mime)};base64,{payload}"

"""Helpers for the data-URL locators handed to callers for inline images."""

import base64
import binascii
from typing import Tuple


def to_data_url(mime_type: str, data: bytes) -> str:
    """Encode bytes as ``data:<mime>;base64,<payload>``."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def is_data_url(locator: str) -> bool:
    return locator.startswith("data:")


def parse_data_url(locator: str) -> Tuple[str, bytes]:
    """
    Decode a base64 data URL.

    Args:
        locator: A ``data:<mime>;base64,<payload>`` string

    Returns:
        Tuple of (mime_type, bytes)

    Raises:
        ValueError: If the locator is not a base64 data URL
    """
    if not is_data_url(locator) or "," not in locator:
        raise ValueError("Not a data URL")
    header, payload = locator[len("data:"):].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URLs are supported")
    mime_type = header[: -len(";base64")] or "application/octet-stream"
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e

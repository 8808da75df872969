"""File I/O, path and data-URI utilities."""

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tiff")

_MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
}


def ensure_directory(path: str | Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Any, path: str | Path, indent: int = 2) -> None:
    """Save data to a JSON file."""
    path = Path(path)
    ensure_directory(path.parent)
    with open(path, "w") as f:
        json.dump(data, f, indent=indent, default=str)


def is_image_name(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)


def mime_type_for(name: str) -> str:
    """MIME type from a file name's extension; unknown types map to PNG."""
    ext = name.lower().rsplit(".", 1)[-1] if "." in name else ""
    return _MIME_TYPES.get(ext, "image/png")


def to_data_uri(blob: bytes, mime_type: str = "image/png") -> str:
    """Encode bytes as a self-contained base64 data URI."""
    encoded = base64.b64encode(blob).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def from_data_uri(uri: str) -> tuple[str, bytes]:
    """Decode a base64 data URI into (mime_type, bytes)."""
    if not uri.startswith("data:") or ";base64," not in uri:
        raise ValueError("Not a base64 data URI")
    header, payload = uri.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0]
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e

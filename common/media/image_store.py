# common/media/image_store.py
from __future__ import annotations

import base64
import binascii
import logging
import uuid
from typing import Optional

from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from apps.core.api_exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

# ---------------- Upload helpers ----------------

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def _is_remote(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _decode_data_uri(value: str) -> tuple[bytes, str]:
    """Split `data:image/png;base64,....` into raw bytes and a file extension."""
    try:
        header, encoded = value.split(",", 1)
        mime = header[len("data:"):].split(";", 1)[0].lower()
    except ValueError:
        raise ValidationError("Malformed image data.")

    ext = _EXTENSIONS.get(mime)
    if not ext:
        raise ValidationError(f"Unsupported image type '{mime}'.")

    try:
        return base64.b64decode(encoded, validate=True), ext
    except (binascii.Error, ValueError):
        raise ValidationError("Malformed image data.")


def upload_image(value: Optional[str], folder: str = "uploads") -> Optional[str]:
    """
    Store an image and return its public URL.
    - empty      -> None
    - http(s)    -> kept as-is (already hosted)
    - data URI   -> written to default storage
    Storage failures surface as UpstreamError.
    """
    if not value:
        return None
    value = value.strip()
    if _is_remote(value):
        return value
    if not value.startswith("data:"):
        raise ValidationError("Image must be a data URI or an http(s) URL.")

    raw, ext = _decode_data_uri(value)
    name = f"{folder}/{uuid.uuid4().hex}.{ext}"
    try:
        saved = default_storage.save(name, ContentFile(raw))
        return default_storage.url(saved)
    except Exception as e:
        logger.error(f"[MEDIA] upload failed ({name}): {e}", exc_info=True)
        raise UpstreamError("Failed to upload image")


def _storage_key(url: str) -> Optional[str]:
    base = default_storage.url("")
    if base and url.startswith(base):
        return url[len(base):]
    return None


def destroy_image(url: Optional[str]) -> None:
    """Best-effort removal of an image we stored ourselves; foreign URLs are left alone."""
    if not url:
        return
    key = _storage_key(url)
    if not key:
        return
    try:
        default_storage.delete(key)
    except Exception as e:
        logger.warning(f"[MEDIA] delete failed ({key}): {e}")


def replace_image(old_url: Optional[str], new_value: Optional[str], folder: str = "uploads") -> Optional[str]:
    """Upload the new image first, then drop the old one. Empty value clears the image."""
    if new_value == old_url:
        return old_url
    new_url = upload_image(new_value, folder=folder) if new_value else None
    destroy_image(old_url)
    return new_url

"""
Image attachment handling.

Attachments arrive from the browser as data URIs
("data:image/png;base64,...").
"""

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from core.exceptions import ValidationError

MAX_IMAGE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ImageAttachment:
    """Decoded inline image ready to send to the model."""

    mime_type: str
    data: bytes


def decode_data_uri(data_uri: str) -> ImageAttachment:
    """
    Split a data URI into MIME type and bytes and check it is a real image.

    The declared MIME type is replaced by what Pillow detects.
    """
    try:
        header, payload = data_uri.split(",", 1)
        declared = header.split(";")[0].split(":")[1]
    except (ValueError, IndexError):
        raise ValidationError(message="Image must be a base64 data URI")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(message="Image payload is not valid base64")

    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(
            message="Image is too large",
            details={"max_bytes": MAX_IMAGE_BYTES},
        )

    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            detected = Image.MIME.get(img.format)
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError(message="Attachment is not a supported image")

    return ImageAttachment(mime_type=detected or declared, data=data)

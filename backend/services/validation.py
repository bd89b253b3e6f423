"""Request checks that run before any prompt is built or any call is made."""

import logging
import re
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from ..errors import InvalidInputError, SoftFieldError
from ..schemas import IMAGE_DATA_URI_PATTERN, ImageRequest

logger = logging.getLogger(__name__)

_IMAGE_DATA_URI_RE = re.compile(IMAGE_DATA_URI_PATTERN)


class ImageMode(str, Enum):
    GENERATE = "generate"
    EDIT = "edit"


def is_image_data_uri(value: str) -> bool:
    return bool(_IMAGE_DATA_URI_RE.match(value or ""))


def require_text(value: Optional[str], field: str) -> str:
    """Return the stripped value or raise if it is missing or blank."""
    text = (value or "").strip()
    if not text:
        raise InvalidInputError(f"'{field}' is required.")
    return text


def require_image_data_uri(value: Optional[str], field: str) -> str:
    uri = require_text(value, field)
    if not is_image_data_uri(uri):
        raise InvalidInputError(
            f"'{field}' must be an image data URI of the form 'data:image/<type>;base64,<payload>'."
        )
    return uri


def validate_image_request(request: ImageRequest) -> ImageMode:
    """Decide between editing and fresh generation.

    Editing wins when a base image and an instruction are both present. A bare
    prompt means fresh generation. Anything else is rejected before any call.
    """
    has_base = bool((request.base_image_data_uri or "").strip())
    has_instruction = bool((request.edit_instruction or "").strip())

    if has_base and has_instruction:
        require_image_data_uri(request.base_image_data_uri, "base_image_data_uri")
        return ImageMode.EDIT
    if (request.prompt or "").strip():
        if has_base or has_instruction:
            logger.debug("Incomplete edit pair ignored; generating from prompt instead.")
        return ImageMode.GENERATE
    raise InvalidInputError(
        "Either a prompt or a base image together with an edit instruction must be provided."
    )


def parse_optional_url(value: str, field: str) -> str:
    """Return a usable media reference or raise SoftFieldError."""
    url = value.strip()
    if url.startswith("data:"):
        if is_image_data_uri(url):
            return url
        raise SoftFieldError(field, value, "not an image data URI")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise SoftFieldError(field, value, "not an absolute http(s) URL")
    return url


def drop_invalid_url(value: Optional[str], field: str) -> Optional[str]:
    """Optional references are enhancements; a bad one is logged and skipped."""
    if not value or not value.strip():
        return None
    try:
        return parse_optional_url(value, field)
    except SoftFieldError as exc:
        logger.warning("Invalid %s provided, skipping: %s", field, exc)
        return None

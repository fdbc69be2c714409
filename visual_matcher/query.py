"""
Query key derivation for search requests.

The matcher never looks at pixels. A search is keyed by the uploaded
file's declared name (or MIME type), or by the image URL, and that key
alone drives the similarity scores.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = int(os.environ.get("VISUAL_MATCHER_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

UPLOAD_FALLBACK_KEY = "uploaded-file"
MISSING_INPUT_MESSAGE = "Please provide an image file or image URL"


class MissingQueryInputError(ValueError):
    """Raised when a search supplies neither an uploaded file nor a URL."""

    def __init__(self, message: str = MISSING_INPUT_MESSAGE):
        super().__init__(message)


class UploadTooLargeError(ValueError):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"File size must be less than {limit // (1024 * 1024)}MB "
                         f"(got {size} bytes)")
        self.size = size
        self.limit = limit


def derive_query_key(filename: Optional[str] = None,
                     content_type: Optional[str] = None,
                     image_url: Optional[str] = None,
                     has_upload: bool = False) -> str:
    """
    Derive the query key for a search request.

    An upload takes precedence over a URL. For uploads the declared
    filename is used, then the MIME type, then a fixed fallback.

    Args:
        filename: Declared name of the uploaded file.
        content_type: Declared MIME type of the uploaded file.
        image_url: Image URL supplied instead of an upload.
        has_upload: Whether the request carried a file at all.

    Returns:
        Non-empty query key.

    Raises:
        MissingQueryInputError: If there is no upload and no usable URL.
    """
    url = image_url.strip() if image_url else ""

    if has_upload:
        return filename or content_type or UPLOAD_FALLBACK_KEY
    if url:
        return image_url

    raise MissingQueryInputError()


def check_upload_size(size: int, limit: int = None) -> None:
    """Raise UploadTooLargeError if size exceeds the upload limit."""
    limit = MAX_UPLOAD_BYTES if limit is None else limit
    if size > limit:
        logger.warning(f"Rejected upload of {size} bytes (limit {limit})")
        raise UploadTooLargeError(size, limit)

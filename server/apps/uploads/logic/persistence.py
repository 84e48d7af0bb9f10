"""Business logic for persisting validated images."""

import logging
from typing import TYPE_CHECKING

from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import Storage, default_storage

from server.apps.uploads.exceptions import UploadIOError
from server.apps.uploads.image_types import get_extension

if TYPE_CHECKING:
    from server.apps.uploads.logic.validation import UploadedImage

logger = logging.getLogger(__name__)


def _get_storage() -> Storage:
    """Get the configured default storage backend.

    Returns:
        ImageStorage instance rooted at MEDIA_ROOT.
    """
    return default_storage


def save_upload(
    upload: 'UploadedImage',
    destination: str,
    storage: Storage | None = None,
) -> str:
    """Save a validated image under a name derived from its type.

    The extension comes from the detected content type, never from
    the filename the client sent. An unknown type gets no extension.
    On success the upload is closed. On failure it stays open so the
    caller can retry with another destination or close it.

    Args:
        upload: Validated image, positioned at offset 0.
        destination: Storage path without extension (e.g., 'images/cat').
        storage: Storage backend, defaults to the default storage.

    Returns:
        Storage path actually written (e.g., 'images/cat.gif'). The
        storage may alter the name to avoid overwriting a file.

    Raises:
        ValueError: If the upload was already saved or closed.
        UploadIOError: If the destination cannot be created or written.
    """
    if upload.closed:
        raise ValueError('Cannot save a closed upload')

    if storage is None:
        storage = _get_storage()

    name = destination + get_extension(upload.content_type)
    logger.info(
        'Saving %s upload %s to %s',
        upload.content_type,
        upload.filename,
        name,
    )

    try:
        saved_name = storage.save(name, upload.file)
    except (OSError, SuspiciousFileOperation) as error:
        logger.exception('Failed to save upload to %s', name)
        raise UploadIOError(
            f'Failed to save upload to {name}: {error}',
        ) from error

    upload.close()
    logger.info('Saved upload: %s', saved_name)
    return saved_name

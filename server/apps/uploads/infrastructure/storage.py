"""Custom storage backend for validated images."""

import logging
from typing import Any, final, override

from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)


@final
class ImageStorage(FileSystemStorage):
    """Local filesystem storage for uploaded images.

    Never overwrites an existing file. A write that fails part way
    removes what it had written before the error is re-raised.
    """

    @override
    def save(
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save an image, logging the name the storage picked.

        Raises:
            OSError: If writing the file fails.
            SuspiciousFileOperation: If name escapes the storage root.
        """
        logger.info('Writing image: %s', name)
        try:
            saved_name = super().save(name, content, max_length)
        except (OSError, SuspiciousFileOperation):
            logger.exception('Failed to write image: %s', name)
            raise
        logger.info('Wrote image as %s', saved_name)
        return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete an image, logging failures before re-raising."""
        try:
            super().delete(name)
            logger.info('Deleted image: %s', name)
        except OSError:
            logger.exception('Failed to delete image: %s', name)
            raise

    @override
    def _save(self, name: str, content: Any) -> str:
        """Write content, removing the target again if the write fails.

        Args:
            name: Available storage path chosen by save().
            content: Django File to write.

        Returns:
            Storage path written.
        """
        try:
            return super()._save(name, content)
        except OSError:
            self.rollback_save(name)
            raise

    def rollback_save(self, name: str) -> None:
        """Delete a partially written file after a failed save.

        A failing delete is logged and swallowed, the write error
        stays the one the caller sees.

        Args:
            name: Storage path of file to delete.
        """
        try:
            if not self.exists(name):
                return
            logger.warning('Rolling back failed save, deleting: %s', name)
            self.delete(name)
        except OSError:
            logger.exception(
                'Failed to roll back save, orphaned file: %s',
                name,
            )

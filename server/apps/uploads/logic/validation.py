"""Business logic for validating uploaded images."""

import logging
import shutil
import tempfile
from collections.abc import Mapping
from types import TracebackType
from typing import Any, BinaryIO, Final, Self, final

from django.conf import settings
from django.core.files.storage import Storage
from django.core.files.uploadedfile import UploadedFile
from django.http import HttpRequest

from server.apps.uploads.exceptions import (
    DisallowedTypeError,
    FileSizeExceededError,
    UploadError,
    UploadIOError,
)
from server.apps.uploads.infrastructure.limiter import SizeLimitedStream
from server.apps.uploads.infrastructure.multipart import extract_file
from server.apps.uploads.infrastructure.sniffing import detect_content_type
from server.apps.uploads.logic.persistence import save_upload
from server.apps.uploads.policy import UploadPolicy

# Chunk size for copying the limited body into the spool
_COPY_CHUNK_SIZE: Final = 64 * 1024

logger = logging.getLogger(__name__)


@final
class UploadedImage:
    """An uploaded file that passed validation.

    Owns the underlying file exclusively. The file is positioned at
    offset 0 when handed out, and is released either by ``save()``
    or by ``close()``. Closing more than once is a no-op.
    """

    def __init__(self, file: UploadedFile, content_type: str) -> None:
        """Initialize uploaded image.

        Args:
            file: Validated upload, positioned at offset 0.
            content_type: MIME type detected from the file contents.
        """
        self._file = file
        self._content_type = content_type
        self._closed = False

    def __repr__(self) -> str:
        """Debug representation."""
        return (
            f'<UploadedImage {self.filename!r} '
            f'{self._content_type} {self.size} bytes>'
        )

    def __enter__(self) -> Self:
        """Enter context, the image closes on exit."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the image when leaving the context."""
        self.close()

    @property
    def content_type(self) -> str:
        """Get the detected MIME type."""
        return self._content_type

    @property
    def file(self) -> UploadedFile:
        """Get the underlying uploaded file."""
        return self._file

    @property
    def filename(self) -> str:
        """Get the filename the client sent (not trusted for typing)."""
        return self._file.name or ''

    @property
    def size(self) -> int:
        """Get the file size in bytes."""
        return self._file.size or 0

    @property
    def closed(self) -> bool:
        """Whether the image has been saved or closed."""
        return self._closed

    def save(self, destination: str, storage: Storage | None = None) -> str:
        """Save the image, adding the extension for its type.

        Args:
            destination: Storage path without extension.
            storage: Storage backend, defaults to the default storage.

        Returns:
            Storage path actually written, including extension.
        """
        return save_upload(self, destination, storage=storage)

    def close(self) -> None:
        """Close the underlying file. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._file.close()
        logger.debug('Closed uploaded image: %s', self.filename)


def validate_upload(
    key: str,
    request: HttpRequest,
    policy: UploadPolicy | None = None,
) -> UploadedImage:
    """Validate an image uploaded in a multipart form.

    Steps, in order:
    1. Size: reject a declared Content-Length over the limit without
       reading the body, then read the body through a size limiter so
       an understated or missing header cannot sneak more bytes in.
    2. Extract the file sent under ``key``.
    3. Sniff its MIME type and check it against the allow-list.

    Args:
        key: Name of the file input in the multipart form.
        request: Incoming request, body not yet read.
        policy: Size and type limits. Defaults to the settings policy.

    Returns:
        Validated image positioned at offset 0.

    Raises:
        FileSizeExceededError: If declared or actual size is too big.
        FieldNotFoundError: If the field is missing or malformed.
        DisallowedTypeError: If the sniffed type is not allowed.
        UploadIOError: If reading the body or the file fails.
    """
    if policy is None:
        policy = UploadPolicy.from_settings()

    if policy.is_size_limited:
        _check_declared_size(request, policy.max_file_size)
        upload = _extract_limited(key, request, policy.max_file_size)
    else:
        upload = _read_field(key, request, request)

    try:
        content_type = detect_content_type(upload)
        if not policy.allows(content_type):
            logger.warning(
                'Rejected upload %s: type %s not allowed',
                upload.name,
                content_type,
            )
            raise DisallowedTypeError(content_type, policy.allowed_types)
    except UploadError:
        upload.close()
        raise

    logger.info(
        'Accepted upload %s: %s, %d bytes',
        upload.name,
        content_type,
        upload.size or 0,
    )
    return UploadedImage(upload, content_type)


def _check_declared_size(request: HttpRequest, max_size: int) -> None:
    """Fail fast when Content-Length already exceeds the limit.

    A missing or unparsable header is not an error here, the size
    limiter checks the real body length afterwards.

    Args:
        request: Incoming request.
        max_size: Maximum body size in bytes.

    Raises:
        FileSizeExceededError: If the declared length is over max_size.
    """
    try:
        declared_size = int(request.META.get('CONTENT_LENGTH') or 0)
    except (TypeError, ValueError):
        declared_size = 0

    if declared_size > max_size:
        logger.warning(
            'Rejected upload: declared size %d exceeds limit %d',
            declared_size,
            max_size,
        )
        raise FileSizeExceededError(
            max_size=max_size,
            declared_size=declared_size,
        )


def _extract_limited(
    key: str,
    request: HttpRequest,
    max_size: int,
) -> UploadedFile:
    """Read at most max_size + 1 body bytes, then extract the field.

    The body is copied through a SizeLimitedStream into a spooled
    temporary file, so the real length is verified no matter what the
    request declared. The multipart parser then reads the spool with
    the verified length as Content-Length.

    Args:
        key: Name of the file input.
        request: Incoming request.
        max_size: Maximum body size in bytes.

    Returns:
        Uploaded file for ``key``.

    Raises:
        FileSizeExceededError: If the body is longer than max_size.
    """
    limited = SizeLimitedStream(request, max_size)
    with tempfile.SpooledTemporaryFile(
        max_size=settings.FILE_UPLOAD_MAX_MEMORY_SIZE,
        suffix='.upload',
    ) as spool:
        try:
            shutil.copyfileobj(limited, spool, _COPY_CHUNK_SIZE)
        except OSError as error:
            raise UploadIOError(
                f'Failed to read request body: {error}',
            ) from error
        spool.seek(0)

        meta = {**request.META, 'CONTENT_LENGTH': str(limited.bytes_read)}
        return _read_field(key, request, spool, meta)


def _read_field(
    key: str,
    request: HttpRequest,
    body: BinaryIO | HttpRequest,
    meta: Mapping[str, Any] | None = None,
) -> UploadedFile:
    """Extract ``key`` from body, turning read faults into UploadIOError.

    Args:
        key: Name of the file input.
        request: Request supplying upload handlers.
        body: Multipart body stream.
        meta: Metadata override for the parser.

    Returns:
        Uploaded file for ``key``.

    Raises:
        UploadIOError: If the body cannot be read.
    """
    try:
        return extract_file(key, request, body, meta)
    except OSError as error:
        raise UploadIOError(
            f'Failed to read upload field {key!r}: {error}',
        ) from error

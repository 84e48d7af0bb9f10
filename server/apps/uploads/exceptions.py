"""Exceptions for uploads app."""

import enum
from collections.abc import Iterable


@enum.unique
class UploadErrorKind(enum.Enum):
    """Category of an upload failure.

    Lets callers tell client-caused rejections (size, type, field)
    apart from infrastructure faults.
    """

    SIZE_EXCEEDED = 'size-exceeded'
    DISALLOWED_TYPE = 'disallowed-type'
    FIELD_NOT_FOUND = 'field-not-found'
    IO_FAILURE = 'io-failure'


class UploadError(Exception):
    """Base class for upload validation and persistence failures."""

    kind: UploadErrorKind


class FileSizeExceededError(UploadError):
    """Raised when declared or actual body size exceeds the limit."""

    kind = UploadErrorKind.SIZE_EXCEEDED

    def __init__(
        self,
        max_size: int,
        declared_size: int | None = None,
    ) -> None:
        """Initialize FileSizeExceededError.

        Args:
            max_size: Maximum allowed size in bytes.
            declared_size: Size claimed by the Content-Length header,
                if the rejection came from the header.
        """
        self.max_size = max_size
        self.declared_size = declared_size

        if declared_size is None:
            message = f'File size exceeds max allowed size of {max_size} bytes'
        else:
            message = (
                f'Declared size {declared_size} exceeds max allowed size '
                f'of {max_size} bytes'
            )
        super().__init__(message)


class DisallowedTypeError(UploadError):
    """Raised when the sniffed content type is not in the allow-list."""

    kind = UploadErrorKind.DISALLOWED_TYPE

    def __init__(
        self,
        content_type: str,
        allowed_types: Iterable[str],
    ) -> None:
        """Initialize DisallowedTypeError.

        Args:
            content_type: Detected MIME type.
            allowed_types: MIME types the policy accepts.
        """
        self.content_type = content_type
        self.allowed_types = frozenset(allowed_types)
        super().__init__(f'Image type is not allowed: {content_type}')


class FieldNotFoundError(UploadError):
    """Raised when the multipart field is missing or cannot be parsed."""

    kind = UploadErrorKind.FIELD_NOT_FOUND

    def __init__(self, key: str, reason: str = 'no such file field') -> None:
        """Initialize FieldNotFoundError.

        Args:
            key: Name of the multipart form field.
            reason: Short description of what went wrong.
        """
        self.key = key
        super().__init__(f'Upload field {key!r} not found: {reason}')


class UploadIOError(UploadError):
    """Raised on read, seek or write faults of streams and storage."""

    kind = UploadErrorKind.IO_FAILURE

"""Content type detection from a file's leading bytes."""

import logging
from types import MappingProxyType
from typing import BinaryIO, Final

import filetype

from server.apps.uploads.exceptions import UploadIOError
from server.apps.uploads.image_types import ICO, PNG

# Standard content-sniffing prefix length
SNIFF_LENGTH: Final = 512

TEXT_PLAIN: Final = 'text/plain; charset=utf-8'
OCTET_STREAM: Final = 'application/octet-stream'

# filetype reports some types under legacy or subtype names
_MIME_ALIASES: Final = MappingProxyType({
    'image/x-icon': ICO,
    'image/apng': PNG,
})

# Control bytes that never appear in text
_BINARY_BYTES: Final = frozenset(
    (*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)),
)

logger = logging.getLogger(__name__)


def sniff_content_type(prefix: bytes) -> str:
    """Classify a byte prefix by its format signature.

    Signature matching is done by the filetype library. Prefixes it
    does not recognise are classified as UTF-8 text when free of
    binary control bytes, otherwise as generic binary data.

    Args:
        prefix: Leading bytes of a file, usually SNIFF_LENGTH of them.

    Returns:
        MIME type string (e.g., 'image/png', 'text/plain; charset=utf-8').
    """
    if not prefix:
        return OCTET_STREAM

    kind = filetype.guess(prefix)
    if kind is not None:
        return _MIME_ALIASES.get(kind.mime, kind.mime)

    if _BINARY_BYTES.isdisjoint(prefix):
        return TEXT_PLAIN
    return OCTET_STREAM


def detect_content_type(stream: BinaryIO) -> str:
    """Detect MIME type of a seekable stream from its first bytes.

    Reads up to SNIFF_LENGTH bytes from the start, then seeks back
    to offset 0 so the stream can be copied in full afterwards.
    The declared filename plays no part in detection.

    Args:
        stream: Seekable binary file-like object.

    Returns:
        Detected MIME type string.

    Raises:
        UploadIOError: If reading the prefix or seeking back fails.
    """
    try:
        stream.seek(0)
        prefix = stream.read(SNIFF_LENGTH)
    except OSError as error:
        raise UploadIOError(
            f'Failed to read upload prefix: {error}',
        ) from error

    # A failed rewind always propagates
    try:
        stream.seek(0)
    except OSError as error:
        raise UploadIOError(
            f'Failed to rewind upload after sniffing: {error}',
        ) from error

    content_type = sniff_content_type(prefix)
    logger.debug(
        'Sniffed %d bytes as %s',
        len(prefix),
        content_type,
    )
    return content_type

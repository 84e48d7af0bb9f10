"""Multipart form field extraction on top of Django's parser."""

import logging
from collections.abc import Mapping
from typing import Any, BinaryIO

from django.core.exceptions import SuspiciousOperation
from django.core.files.uploadedfile import UploadedFile
from django.http import HttpRequest
from django.http.multipartparser import MultiPartParser, MultiPartParserError

from server.apps.uploads.exceptions import FieldNotFoundError

logger = logging.getLogger(__name__)


def extract_file(
    key: str,
    request: HttpRequest,
    body: BinaryIO | HttpRequest,
    meta: Mapping[str, Any] | None = None,
) -> UploadedFile:
    """Parse a multipart body and return the file sent under ``key``.

    The body is parsed with the request's upload handlers, so small
    files stay in memory and large ones are spooled to temporary files
    exactly as Django does for ``request.FILES``. Every other file in
    the body is closed right away, the caller owns only the returned one.

    Args:
        key: Name of the file input in the form.
        request: Request supplying upload handlers and encoding.
        body: Readable multipart body, the request itself or a
            buffered copy of it.
        meta: Request metadata to parse with. Defaults to request.META.

    Returns:
        The uploaded file, positioned at offset 0.

    Raises:
        FieldNotFoundError: If the body is not multipart, is malformed,
            exceeds the DATA_UPLOAD_* limits or holds no file under
            ``key``.
    """
    if meta is None:
        meta = request.META

    try:
        parser = MultiPartParser(
            meta,
            body,
            request.upload_handlers,
            request.encoding,
        )
        _, files = parser.parse()
    except (MultiPartParserError, SuspiciousOperation) as error:
        logger.warning('Rejected multipart body for field %s: %s', key, error)
        raise FieldNotFoundError(key, reason=str(error)) from error

    selected: UploadedFile | None = None
    for field_name, uploads in files.lists():
        for upload in uploads:
            if selected is None and field_name == key:
                selected = upload
            else:
                upload.close()

    if selected is None:
        logger.warning('Upload field not found: %s', key)
        raise FieldNotFoundError(key)

    selected.seek(0)
    return selected

"""Shared fixtures for uploads app tests."""

from collections.abc import Callable
from io import BytesIO
from typing import Final

import pytest
from django.core.files.uploadedfile import (
    InMemoryUploadedFile,
    SimpleUploadedFile,
)
from django.core.handlers.asgi import ASGIRequest
from django.core.handlers.wsgi import WSGIRequest
from django.test import RequestFactory
from django.test.client import BOUNDARY, MULTIPART_CONTENT, encode_multipart

from server.apps.uploads.infrastructure.storage import ImageStorage

# 1x1 transparent GIF
_GIF_BYTES: Final = (
    b'GIF89a\x01\x00\x01\x00\x80\x00\x00\xff\xff\xff\x00\x00\x00'
    b'!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00'
    b'\x00\x02\x02D\x01\x00;'
)

# 1x1 PNG
_PNG_BYTES: Final = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01'
    b'\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f'
    b'\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82'
)

# PNG with an animation control chunk before the image data
_APNG_BYTES: Final = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01'
    b'\x08\x06\x00\x00\x00\x1f\x15\xc4\x89'
    b'\x00\x00\x00\x08acTL\x00\x00\x00\x01\x00\x00\x00\x00\x00\x00\x00\x00'
    b'\x00\x00\x00\x00IDAT\x00\x00\x00\x00'
    b'\x00\x00\x00\x00IEND\xaeB`\x82'
)

# JPEG SOI + JFIF APP0 header, padded, EOI
_JPEG_BYTES: Final = (
    b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
    + b'\x00' * 64
    + b'\xff\xd9'
)

_BMP_BYTES: Final = b'BM' + b'\x3a\x00\x00\x00' + b'\x00' * 52

_WEBP_BYTES: Final = b'RIFF\x24\x00\x00\x00WEBPVP8 ' + b'\x00' * 32

_ICO_BYTES: Final = b'\x00\x00\x01\x00\x01\x00\x10\x10' + b'\x00' * 40

_TEXT_BYTES: Final = b'Lorem ipsum dolor sit amet'

MultipartBuilder = Callable[..., tuple[bytes, str]]


@pytest.fixture
def image_bytes() -> dict[str, bytes]:
    """Small files of every sniffable image type, plus plain text.

    Returns:
        Mapping of short type name to file content.
    """
    return {
        'gif': _GIF_BYTES,
        'png': _PNG_BYTES,
        'apng': _APNG_BYTES,
        'jpeg': _JPEG_BYTES,
        'bmp': _BMP_BYTES,
        'webp': _WEBP_BYTES,
        'ico': _ICO_BYTES,
        'text': _TEXT_BYTES,
    }


@pytest.fixture
def multipart_body() -> MultipartBuilder:
    """Build multipart/form-data bodies.

    Returns:
        Function taking file content, filename and field name and
        returning the encoded body and its Content-Type.
    """
    def factory(
        content: bytes,
        filename: str = 'upload.bin',
        field: str = 'image',
    ) -> tuple[bytes, str]:
        body = encode_multipart(
            BOUNDARY,
            {field: SimpleUploadedFile(filename, content)},
        )
        return body, MULTIPART_CONTENT

    return factory


@pytest.fixture
def wsgi_upload_request(rf: RequestFactory) -> Callable[..., WSGIRequest]:
    """Build WSGI POST requests carrying one uploaded file.

    Returns:
        Function returning a WSGIRequest. Extra keyword arguments
        override environ values such as CONTENT_LENGTH.
    """
    def factory(
        content: bytes,
        filename: str = 'upload.bin',
        field: str = 'image',
        **extra: str,
    ) -> WSGIRequest:
        return rf.post(
            '/images/',
            {field: SimpleUploadedFile(filename, content)},
            **extra,
        )

    return factory


@pytest.fixture
def asgi_upload_request() -> Callable[..., ASGIRequest]:
    """Build ASGI requests from a raw body and an optional length header.

    ASGI requests read the whole body file regardless of the declared
    Content-Length, so they can carry more bytes than they claim.

    Returns:
        Function returning an ASGIRequest.
    """
    def factory(
        body: bytes,
        content_type: str,
        content_length: int | None = None,
    ) -> ASGIRequest:
        headers = [(b'content-type', content_type.encode('latin1'))]
        if content_length is not None:
            headers.append(
                (b'content-length', str(content_length).encode('latin1')),
            )
        scope = {
            'type': 'http',
            'method': 'POST',
            'path': '/images/',
            'query_string': b'',
            'headers': headers,
        }
        return ASGIRequest(scope, BytesIO(body))

    return factory


@pytest.fixture
def image_storage(tmp_path) -> ImageStorage:
    """Filesystem storage rooted in a temporary directory.

    Returns:
        ImageStorage writing below tmp_path.
    """
    return ImageStorage(location=str(tmp_path), base_url='/media/')


@pytest.fixture
def media_root(settings, tmp_path):
    """Point the default storage at a temporary directory.

    Yields:
        Path of the temporary media root.
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'default': {
            'BACKEND': (
                'server.apps.uploads.infrastructure.storage.ImageStorage'
            ),
            'OPTIONS': {'location': str(tmp_path), 'base_url': '/media/'},
        },
    }
    settings.MEDIA_ROOT = str(tmp_path)
    yield tmp_path


@pytest.fixture
def close_calls(monkeypatch) -> list[str]:
    """Count close() calls on in-memory uploaded files.

    Returns:
        List collecting the name of every closed file.
    """
    closed_names: list[str] = []
    original_close = InMemoryUploadedFile.close

    def recording_close(upload):
        closed_names.append(upload.name)
        original_close(upload)

    monkeypatch.setattr(InMemoryUploadedFile, 'close', recording_close)
    return closed_names

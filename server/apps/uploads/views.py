"""HTTP endpoint for image uploads."""

import logging
import uuid
from http import HTTPStatus
from types import MappingProxyType
from typing import Final

from django.conf import settings
from django.core.files.storage import default_storage
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from server.apps.uploads.exceptions import UploadError, UploadErrorKind
from server.apps.uploads.logic.validation import validate_upload

# Name of the file input in the upload form
UPLOAD_FIELD: Final = 'image'

_ERROR_STATUS: Final = MappingProxyType({
    UploadErrorKind.SIZE_EXCEEDED: HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
    UploadErrorKind.DISALLOWED_TYPE: HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
    UploadErrorKind.FIELD_NOT_FOUND: HTTPStatus.BAD_REQUEST,
    UploadErrorKind.IO_FAILURE: HTTPStatus.INTERNAL_SERVER_ERROR,
})

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def upload_image(request: HttpRequest) -> JsonResponse:
    """Validate and store an image sent as multipart form data.

    The body must not be read before validation, so the view is exempt
    from CSRF checks (the middleware would parse the form).

    Args:
        request: POST request with an ``image`` file field.

    Returns:
        201 with the stored name, or an error payload whose status
        depends on the failure kind.
    """
    destination = f'{settings.IMAGE_UPLOAD_DIRECTORY}/{uuid.uuid4().hex}'

    try:
        with validate_upload(UPLOAD_FIELD, request) as image:
            content_type = image.content_type
            saved_name = image.save(destination)
    except UploadError as error:
        status = _ERROR_STATUS[error.kind]
        if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error('Image upload failed: %s', error)
        return JsonResponse(
            {'error': error.kind.value, 'detail': str(error)},
            status=status,
        )

    return JsonResponse(
        {
            'name': saved_name,
            'content_type': content_type,
            'url': default_storage.url(saved_name),
        },
        status=HTTPStatus.CREATED,
    )

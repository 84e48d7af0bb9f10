"""Django storage configuration.

Validated images are written through the ``default`` storage, a local
filesystem backend rooted at ``MEDIA_ROOT``.
"""

from typing import Any, Final

from server.settings.components.common import MEDIA_ROOT, MEDIA_URL

# Storage configuration dictionary
# Uploaded images go to MEDIA_ROOT, static files stay separate
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.uploads.infrastructure.storage.ImageStorage',
        'OPTIONS': {
            'location': MEDIA_ROOT,
            'base_url': MEDIA_URL,
            'allow_overwrite': False,  # Prevent accidental overwrites
        },
    },
    'staticfiles': {
        # Keep static files separate from uploaded images
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

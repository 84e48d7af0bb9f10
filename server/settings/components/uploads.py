"""Image upload settings."""

from server.settings.components import config

# Maximum request body size in bytes, 0 disables the limit
IMAGE_UPLOAD_MAX_SIZE = config(
    'IMAGE_UPLOAD_MAX_SIZE',
    cast=int,
    default=10 * 1024 * 1024,
)

# Comma separated MIME types or group names ('popular', 'all')
IMAGE_UPLOAD_ALLOWED_TYPES = config(
    'IMAGE_UPLOAD_ALLOWED_TYPES',
    default='popular',
)

# Storage directory for images accepted by the upload view
IMAGE_UPLOAD_DIRECTORY = config('IMAGE_UPLOAD_DIRECTORY', default='images')

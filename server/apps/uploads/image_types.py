"""Image MIME types and their canonical file extensions."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

GIF: Final = 'image/gif'
PNG: Final = 'image/png'
JPEG: Final = 'image/jpeg'
BMP: Final = 'image/bmp'
WEBP: Final = 'image/webp'
ICO: Final = 'image/vnd.microsoft.icon'

# Popular web image types
POPULAR_TYPES: Final = frozenset((GIF, PNG, JPEG))

# Every image type the sniffer can name
ALL_TYPES: Final = frozenset((GIF, PNG, JPEG, BMP, WEBP, ICO))

# Named groups usable in settings
TYPE_GROUPS: Final[Mapping[str, frozenset[str]]] = MappingProxyType({
    'popular': POPULAR_TYPES,
    'all': ALL_TYPES,
})

# JPEG variants all map to .jpg
EXTENSIONS: Final[Mapping[str, str]] = MappingProxyType({
    GIF: '.gif',
    PNG: '.png',
    JPEG: '.jpg',
    'image/jpg': '.jpg',
    BMP: '.bmp',
    WEBP: '.webp',
    ICO: '.ico',
})


def get_extension(content_type: str) -> str:
    """Get the canonical file extension for a MIME type.

    Args:
        content_type: MIME type (e.g., 'image/png').

    Returns:
        Extension with leading dot (e.g., '.png').
        Returns empty string for unrecognized types.
    """
    return EXTENSIONS.get(content_type, '')


def parse_type_list(value: str) -> frozenset[str]:
    """Parse a comma separated list of MIME types.

    Group names from ``TYPE_GROUPS`` expand to their members,
    so 'popular,image/bmp' yields gif, png, jpeg and bmp.

    Args:
        value: Comma separated MIME types and group names.

    Returns:
        Set of MIME types. Empty when value is blank.
    """
    types: set[str] = set()
    for item in value.split(','):
        name = item.strip().lower()
        if not name:
            continue
        types.update(TYPE_GROUPS.get(name, (name,)))
    return frozenset(types)

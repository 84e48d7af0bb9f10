"""Upload policy: size limit and allowed image types."""

import dataclasses
from typing import Self, final

from django.conf import settings

from server.apps.uploads.image_types import parse_type_list


@final
@dataclasses.dataclass(frozen=True)
class UploadPolicy:
    """Limits applied to a single upload.

    Attributes:
        max_file_size: Maximum request body size in bytes, 0 is unlimited.
        allowed_types: Accepted MIME types, empty accepts any type.
    """

    max_file_size: int = 0
    allowed_types: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate the limit and freeze the allow-list.

        Raises:
            ValueError: If max_file_size is negative.
        """
        if self.max_file_size < 0:
            raise ValueError(
                f'max_file_size must be >= 0, got {self.max_file_size}',
            )
        object.__setattr__(  # noqa: WPS609
            self,
            'allowed_types',
            frozenset(self.allowed_types),
        )

    @classmethod
    def from_settings(cls) -> Self:
        """Build the project default policy from Django settings.

        Returns:
            Policy using IMAGE_UPLOAD_MAX_SIZE and
            IMAGE_UPLOAD_ALLOWED_TYPES.
        """
        allowed_types = settings.IMAGE_UPLOAD_ALLOWED_TYPES
        if isinstance(allowed_types, str):
            allowed_types = parse_type_list(allowed_types)
        return cls(
            max_file_size=settings.IMAGE_UPLOAD_MAX_SIZE,
            allowed_types=allowed_types,
        )

    @property
    def is_size_limited(self) -> bool:
        """Whether a size limit applies."""
        return self.max_file_size > 0

    @property
    def is_type_restricted(self) -> bool:
        """Whether only some MIME types are accepted."""
        return bool(self.allowed_types)

    def allows(self, content_type: str) -> bool:
        """Check a MIME type against the allow-list.

        Args:
            content_type: Detected MIME type.

        Returns:
            True if the type is accepted.
        """
        return not self.allowed_types or content_type in self.allowed_types

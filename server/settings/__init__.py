"""Django settings for the image upload project.

Settings are split into components, each one owning a single concern.
Values that differ between environments are read with ``config`` from
the environment or from ``config/.env``.
"""

from server.settings.components.common import *  # noqa: F403
from server.settings.components.logging import *  # noqa: F403
from server.settings.components.storages import *  # noqa: F403
from server.settings.components.uploads import *  # noqa: F403

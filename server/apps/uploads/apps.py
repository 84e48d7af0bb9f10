"""Django app configuration for uploads app."""

from django.apps import AppConfig


class UploadsConfig(AppConfig):
    """Configuration for uploads app."""

    name = 'server.apps.uploads'
    verbose_name = 'Image uploads'

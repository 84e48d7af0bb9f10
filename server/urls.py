"""Root URL configuration."""

from django.urls import include, path

urlpatterns = [
    path('images/', include('server.apps.uploads.urls')),
]

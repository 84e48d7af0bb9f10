"""URL routes for uploads app."""

from django.urls import path

from server.apps.uploads.views import upload_image

app_name = 'uploads'

urlpatterns = [
    path('', upload_image, name='upload'),
]

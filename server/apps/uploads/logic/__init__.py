"""Business logic layer for uploads app.

This package contains the upload pipeline:
- Validation of size, form field and content type
- Persistence of validated images through the storage API
"""

"""Infrastructure layer for uploads app.

This package contains integrations with external systems:
- Request body size limiting
- Multipart field extraction (Django's parser)
- Content type sniffing (filetype signatures)
- Filesystem storage backend

Keep infrastructure concerns separate from business logic.
"""

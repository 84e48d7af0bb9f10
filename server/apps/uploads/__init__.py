"""Validation and storage of images sent as multipart uploads."""

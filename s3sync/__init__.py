"""Synchronize locally stored files with Amazon S3 and detect text in uploaded images."""

__version__ = "1.0.0"

"""Blob storage access layer for automated deployment workflows."""

__version__ = "0.1.0"

"""Tools for XFS disk images and XSM machine storage."""

__version__ = "0.1.0"
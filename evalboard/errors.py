"""Exceptions shared across the storage and engine layers."""


class StorageError(Exception):
    """The backing store failed to read or write."""

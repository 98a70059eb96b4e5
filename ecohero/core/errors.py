from __future__ import annotations


class ProgressError(Exception):
    """Base class for progression engine errors."""


class StorageError(ProgressError):
    """Reading or writing the progress snapshot failed."""


class ProgressResetError(ProgressError):
    """Progress was reset in memory but the saved snapshot could not be cleared."""

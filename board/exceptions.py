"""
Exception hierarchy for the bulletin board.

Only storage failures are modelled as exceptions.  A post that does not
exist is a normal outcome and is reported as ``None`` by the repository.
"""


class BoardError(Exception):
    """Base exception for all bulletin board errors."""


class StorageError(BoardError):
    """Base class for failures of the relational store."""


class StorageInitError(StorageError):
    """The schema or connection could not be set up.  Fatal at startup."""


class StorageQueryError(StorageError):
    """A statement failed after startup, or the gateway is not open."""

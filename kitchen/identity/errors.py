"""Exception types raised by the identity engine."""

from __future__ import annotations


class IdentityError(Exception):
    """Base class for engine errors."""


class ConfigError(IdentityError):
    """A configuration file contains a value of the wrong shape."""


class StaleSnapshotError(IdentityError):
    """The caller's shopping-list snapshot no longer matches storage.

    Callers should re-fetch the rows and reconcile again.
    """


class RowNotFoundError(StaleSnapshotError):
    """An operation targets a shopping-list row that does not exist."""

    def __init__(self, row_id: object, operation: str) -> None:
        self.row_id = row_id
        self.operation = operation
        super().__init__(
            f"{operation}: shopping-list row {row_id!r} not found "
            f"(snapshot is stale, re-fetch and reconcile again)"
        )

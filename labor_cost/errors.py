"""Exceptions raised by the labor cost tracker."""


class LaborCostError(Exception):
    """Base class for all labor cost tracker errors."""

    pass


class RecordNotFoundError(LaborCostError):
    """Raised when an employee, project or entry id is not known."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} '{record_id}' not found")


class StorageError(LaborCostError):
    """Raised when records cannot be written to the record store."""

    pass


class SyncError(LaborCostError):
    """Raised when the remote summary table cannot be reached or parsed."""

    pass


class ExportError(LaborCostError):
    """Raised when an export document cannot be produced."""

    pass

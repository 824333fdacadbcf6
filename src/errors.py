class ReconciliationError(Exception):
    pass


class InvalidOperation(ReconciliationError, ValueError):
    """A manual match or unmatch that violates the current state's preconditions."""


class NotFound(InvalidOperation, LookupError):
    """Identifier or match id that is not part of the current state."""

class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ShiftNotFoundError(DomainError):
    """Raised when an update/delete targets a shift the store does not hold."""


class BusyError(DomainError):
    """Raised when a planning operation starts while another is in flight."""


class EventStoreError(Exception):
    """Raised when the event store (or roster provider) call fails."""

"""Deed registry exception hierarchy."""

from typing import Any


class RegistryError(Exception):
    """Base exception for all registry domain errors."""

    status_code = 400

    def __init__(self, message: str = "", code: str = "REGISTRY_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ConflictError(RegistryError):
    """Raised when a land, owner, deed or ledger key already exists."""

    status_code = 409

    def __init__(self, message: str = "Record already exists"):
        super().__init__(message, code="CONFLICT")


class NotFoundError(RegistryError):
    """Raised when a referenced land, owner or deed does not exist."""

    status_code = 404

    def __init__(self, message: str = "Record not found"):
        super().__init__(message, code="NOT_FOUND")


class InvalidStateError(RegistryError):
    """Raised when a deed is not in the state an operation requires."""

    status_code = 409

    def __init__(self, message: str = "Deed is not active"):
        super().__init__(message, code="INVALID_STATE")


class InvalidInputError(RegistryError):
    """Raised when a required field is missing or blank."""

    status_code = 422

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="VALIDATION_ERROR")


class LedgerImmutableError(RegistryError):
    """Raised on any attempt to rewrite or remove a sealed ledger entry."""

    status_code = 409

    def __init__(self, message: str = "Ledger entries cannot be modified"):
        super().__init__(message, code="LEDGER_IMMUTABLE")


def require_text(**values: Any) -> None:
    """Reject blank required text fields before touching the store."""
    for name, value in values.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInputError(f"Field '{name}' is required")

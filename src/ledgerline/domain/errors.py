"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist (or no longer exists)."""


class AccessDeniedError(DomainError):
    """Caller does not own the referenced entity."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def upload_not_found(upload_id: str) -> str:
    """Return message for a missing, finalized, or expired upload."""
    return f"Upload {upload_id} not found or expired"


def upload_access_denied(upload_id: str) -> str:
    """Return message when a user touches someone else's upload."""
    return f"Access denied to upload {upload_id}"


def import_not_found(import_id: int) -> str:
    """Return message for missing import record."""
    return f"Import {import_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing classification rule."""
    return f"Classification rule {rule_id} not found"


def import_already_deleted(import_id: int) -> str:
    """Return message when an import record was already marked deleted."""
    return f"Import {import_id} is already deleted"

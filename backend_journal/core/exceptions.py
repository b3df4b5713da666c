"""
Application-level exceptions.

Every error the ledger, analytics engine or identity layer raises derives
from JournalError. The API maps each class to an HTTP status through
``status_code``; ``code`` is a stable machine-readable identifier.
"""

from __future__ import annotations


class JournalError(Exception):
    """Base class for trade journal errors."""

    code = "journal_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(JournalError):
    """Invalid or missing input: enumerated field, required parameter, duplicate email."""

    code = "validation_error"
    status_code = 400


class NotFoundError(JournalError):
    """Lookup by id returned nothing."""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class AuthenticationError(JournalError):
    """Missing, malformed or expired token, or bad credentials."""

    code = "unauthorized"
    status_code = 401


class StorageFault(JournalError):
    """Connection or query failure in the storage layer. Never retried."""

    code = "storage_fault"
    status_code = 500


class ConfigurationError(JournalError):
    """Required setting is missing or malformed."""

    code = "configuration_error"

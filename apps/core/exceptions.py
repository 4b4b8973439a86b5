"""
Typed failures raised by the core service layer.

Every service operation either returns a complete value or raises exactly one
of these. The transport layer maps them to HTTP statuses by type, never by
message text.
"""

from django.core.exceptions import ValidationError


class CoreError(Exception):
    """Base class for all core failures."""

    code = 'internal_error'
    status_code = 500
    default_message = 'An unexpected error occurred.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(CoreError):
    """A referenced entity does not exist."""

    code = 'not_found'
    status_code = 404
    default_message = 'Resource not found'


class ValidationViolation(CoreError):
    """
    A request would break a business rule (party kind mismatch, owner
    invariants, duplicate numbers, reactivation of a deleted record...).
    """

    code = 'validation_error'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, message=None, message_dict=None):
        self.message_dict = message_dict or {}
        super().__init__(message)

    @classmethod
    def from_django(cls, exc: ValidationError) -> 'ValidationViolation':
        """Build from a model-level ``ValidationError``."""
        if hasattr(exc, 'error_dict'):
            message_dict = exc.message_dict
            first = next(iter(message_dict.values()), [])
            message = first[0] if first else None
            return cls(message, message_dict=message_dict)
        return cls('; '.join(exc.messages))


class StorageUnavailable(CoreError):
    """The backing store could not be reached, failed, or timed out."""

    code = 'storage_unavailable'
    status_code = 500
    default_message = 'Storage is unavailable'


class Cancelled(CoreError):
    """The caller aborted the operation."""

    code = 'cancelled'
    status_code = 500
    default_message = 'Operation was cancelled'

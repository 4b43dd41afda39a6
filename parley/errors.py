"""Exception hierarchy for the orchestration engine.

All engine exceptions inherit from ParleyError, which carries an error_code
so callers (the dispatcher, an admin surface) can report failures without
matching on exception types.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_READY = "NOT_READY"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    DUPLICATE_MESSAGE = "DUPLICATE_MESSAGE"
    ALREADY_PROCESSING = "ALREADY_PROCESSING"
    AI_COLLABORATOR_FAILURE = "AI_COLLABORATOR_FAILURE"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    CONTACT_ERROR = "CONTACT_ERROR"
    PROFILE_ERROR = "PROFILE_ERROR"


class ParleyError(Exception):
    """Base exception for all engine errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, address: str | None = None) -> None:
        self.message = message
        self.address = address
        super().__init__(message)


class NotReadyError(ParleyError):
    """Raised when the pipeline has not passed its startup liveness probe."""

    error_code = ErrorCode.NOT_READY


class MissingRequiredFieldError(ParleyError):
    """Raised when message content or address is absent."""

    error_code = ErrorCode.MISSING_REQUIRED_FIELD

    def __init__(self, field: str, address: str | None = None) -> None:
        super().__init__(f"Missing required field: {field}", address=address)
        self.field = field


class DuplicateMessageError(ParleyError):
    """Raised when a message id has already been recorded in the ledger."""

    error_code = ErrorCode.DUPLICATE_MESSAGE

    def __init__(self, message_id: str, address: str | None = None) -> None:
        super().__init__(f"Message with ID {message_id} already exists", address=address)
        self.message_id = message_id


class AlreadyProcessingError(ParleyError):
    """Raised when a message for the same address is already in flight."""

    error_code = ErrorCode.ALREADY_PROCESSING


class AICollaboratorError(ParleyError):
    """Raised when the AI completion fails or times out."""

    error_code = ErrorCode.AI_COLLABORATOR_FAILURE


class PersistenceError(ParleyError):
    """Raised when a ledger write fails or times out."""

    error_code = ErrorCode.PERSISTENCE_FAILURE


class ContactError(ParleyError):
    """Raised for contact directory write violations."""

    error_code = ErrorCode.CONTACT_ERROR


class ProfileError(ParleyError):
    """Raised for context profile write violations."""

    error_code = ErrorCode.PROFILE_ERROR

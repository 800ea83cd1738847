"""
Domain errors raised by the services and storage backends.

The API layer turns each of these into an HTTP status with a short message.
"""

class QuizBankError(Exception):
    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ValidationError(QuizBankError):
    """Missing or malformed required fields."""
    status_code = 400
    error_type = "validation_error"

class NotFoundError(QuizBankError):
    """No record matches the given id, userId or timestamp."""
    status_code = 404
    error_type = "not_found"

class DuplicateError(QuizBankError):
    status_code = 409
    error_type = "duplicate"

class StorageError(QuizBankError):
    """Underlying read, write or query failure."""
    status_code = 500
    error_type = "storage_error"

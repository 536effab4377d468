"""
Domain errors for quiz generation, templates and grading

Each error carries the HTTP status and error code the API layer reports.
Server-class errors (5xx) are logged by the exception handler in app.main.
"""
from typing import Any, Optional


class QuizServiceError(Exception):
    """Base class for all errors raised by the quiz services"""

    status_code = 500
    error = "server_error"

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(QuizServiceError):
    status_code = 400
    error = "validation_error"


class EmptyDocumentSet(ValidationError):
    error = "empty_document_set"

    def __init__(self, message: str = "At least one source document is required"):
        super().__init__(message)


class NotFound(QuizServiceError):
    status_code = 404
    error = "not_found"


class Forbidden(QuizServiceError):
    status_code = 403
    error = "forbidden"


class QuizConflict(QuizServiceError):
    """Raised when a quiz identifier is already taken"""
    status_code = 409
    error = "quiz_conflict"


class TypeNotFound(QuizServiceError):
    """A quiz type referenced by id or name is not in the catalog"""
    error = "type_not_found"


class MalformedResponse(QuizServiceError):
    """The generation service answered without a question list"""
    error = "malformed_response"


class GenerationFailed(QuizServiceError):
    error = "generation_failed"


class QuestionNotFound(QuizServiceError):
    """A submitted question does not match any stored question"""
    error = "question_not_found"


class DependencyFailure(QuizServiceError):
    """An external service is unreachable or returned an error"""
    error = "dependency_failure"

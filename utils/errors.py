"""
Error types raised by the services and turned into JSON responses by the
exception handler in main.py.

Every error carries the HTTP status it maps to, a human-readable message and,
where available, details about the underlying failure. InvalidQuizFormatError
also carries the raw model output so callers can see what came back.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None, details: str | None = None, raw: str | None = None):
        self.message = message or self.default_message
        self.details = details
        self.raw = raw
        super().__init__(self.message)

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        if self.raw is not None:
            body["raw"] = self.raw
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Missing required fields"


class ExtractionError(AppError):
    status_code = 400
    default_message = "Failed to extract text from uploaded file."


class UnsupportedTypeError(ExtractionError):
    pass


class InvalidQuizFormatError(AppError):
    status_code = 500
    default_message = "Invalid quiz format"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 400
    default_message = "Already exists"


class UpstreamError(AppError):
    status_code = 500
    default_message = "Failed to generate quiz"

"""Error types raised by the annotation pipeline.

Every stage raises a subclass of AnnotatorError; the CLI is the only place
that turns one into a process exit status.
"""


class AnnotatorError(Exception):
    """Base class for all errors raised by the action."""


class ConfigError(AnnotatorError):
    """Raised when the execution context is missing or invalid."""


class DecodeError(AnnotatorError):
    """Raised when the test report cannot be decoded."""


class ParseError(AnnotatorError):
    """Raised when a step index token or workflow file cannot be parsed."""


class ReadError(AnnotatorError):
    """Raised when the workflow directory or a workflow file cannot be read."""


class NotFoundError(AnnotatorError):
    """Raised when no check name or check run matches the execution context."""


class ApiError(AnnotatorError):
    """Raised when the Checks API answers with an unexpected status."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PublishError(AnnotatorError):
    """Raised when an annotation batch could not be published."""

    def __init__(self, message: str, *, batch: int) -> None:
        super().__init__(message)
        self.batch = batch

class InterviewError(Exception):
    """Base class for every failure the interview workflow reports."""


class ValidationError(InterviewError):
    """A required candidate field is missing. Raised before any network call."""

    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class TransportError(InterviewError):
    """The completion endpoint could not be reached."""


class ApiError(InterviewError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidResponse(InterviewError):
    """The completion payload did not have the expected shape."""


class PreconditionError(InterviewError):
    """An orchestrator method was called in the wrong state."""


class MissingConfiguration(InterviewError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key} is not configured")


class FileExtractionError(InterviewError):
    """An uploaded file could not be turned into text."""


class UnsupportedFileType(FileExtractionError):
    pass

"""Exception hierarchy shared by the workflow engine and its collaborators."""
from __future__ import annotations


class ApilineError(RuntimeError):
    """Base class for every error raised by apiline."""


class DefinitionParseError(ApilineError):
    """The workflow definition could not be read or does not have the expected shape."""


class PersistenceError(ApilineError):
    """The workflow definition could not be written back to its source."""


class StepError(ApilineError):
    """A single step failed; the workflow itself stays usable."""


class UnsupportedMethod(StepError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported method: {method}")
        self.method = method


class UnknownAuthKind(StepError):
    def __init__(self, auth: str) -> None:
        super().__init__(f"Unknown auth type: {auth}")
        self.auth = auth


class NetworkError(StepError):
    """The transport could not deliver the request or read the response."""


class UnexpectedStatus(StepError):
    def __init__(self, expected: int, actual: int, body: str) -> None:
        super().__init__(f"Expected status {expected}, got {actual}: {body}")
        self.expected = expected
        self.actual = actual
        self.body = body


class MalformedResponse(StepError):
    def __init__(self, excerpt: str) -> None:
        super().__init__(f"Failed to parse JSON response: {excerpt}")
        self.excerpt = excerpt


class ExtractionError(StepError):
    """An extract path is syntactically unusable."""


__all__ = [
    "ApilineError",
    "DefinitionParseError",
    "ExtractionError",
    "MalformedResponse",
    "NetworkError",
    "PersistenceError",
    "StepError",
    "UnexpectedStatus",
    "UnknownAuthKind",
    "UnsupportedMethod",
]

from typing import Any


class TransportError(Exception):
    def __init__(self, message: str, method: str, path: str):
        self.message = message
        self.method = method
        self.path = path
        super().__init__(f"{method} {path} failed: {message}")


class AuthFailure(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ResponseAssertionError(AssertionError):
    """Base for response checks, rendered by pytest as assertion failures."""


class UnexpectedStatus(ResponseAssertionError):
    def __init__(self, method: str, path: str, expected: int, actual: int, body_preview: str = ""):
        self.method = method
        self.path = path
        self.expected = expected
        self.actual = actual
        self.body_preview = body_preview
        super().__init__(
            f"{method} {path}: expected status {expected}, got {actual}; body: {body_preview!r}"
        )


class FieldMismatch(ResponseAssertionError):
    def __init__(self, path: str, expected: Any, actual: Any):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"{path}: expected {expected!r}, got {actual!r}")


class MissingField(ResponseAssertionError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: required field is missing or null")


class ScenarioStateError(Exception):
    pass


class ScenarioGraphError(Exception):
    pass

"""
Error classes for tppctl.

Every failure in a tppctl invocation is terminal: the CLI prints the string
form of the raised error as a single diagnostic line and exits with status 1.
The hierarchy below mirrors the kinds of failure the tool distinguishes.
"""

from __future__ import annotations


class TppError(Exception):
    """Base exception for all tppctl errors."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class ConfigurationError(TppError):
    """
    Raised when a required setting is missing or a setting is invalid.

    This is always raised before any command is dispatched.
    """

    pass


class TransportError(TppError):
    """
    Raised when a request cannot be sent or the HTTP status is not 2xx.

    Attributes:
        status_code: HTTP status code, if a response was received.
        body: Raw response body, kept for diagnosis.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message, path)
        self.status_code = status_code
        self.body = body


class DecodeError(TppError):
    """Raised when a response body does not match the expected shape."""

    pass


class ResultCodeError(TppError):
    """
    Raised when the Result code embedded in a response is not Success.

    Attributes:
        code: The raw integer Result code.
    """

    def __init__(self, message: str, path: str | None = None, code: int | None = None) -> None:
        super().__init__(message, path)
        self.code = code


class AttributeNotFoundError(ResultCodeError):
    """Raised when the platform reports that the credential attribute does not exist."""

    pass


class StructuralError(TppError):
    """
    Raised when a credential cannot be edited as retrieved.

    This covers a credential without any Values entries and a primary value
    that is not valid base64.
    """

    pass


class EditorError(TppError):
    """
    Raised when the external editor cannot be started or exits non-zero.

    Attributes:
        returncode: Exit status of the editor process, if it ran.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        returncode: int | None = None,
    ) -> None:
        super().__init__(message, path)
        self.returncode = returncode


class UpdateError(TppError):
    """Raised when pushing an edited credential back fails. Chained to the cause."""

    pass

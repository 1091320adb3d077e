"""
Interpretation of the platform's Result codes.

Every vedsdk endpoint embeds an integer "Result" field in its response body,
and the same numeric vocabulary is reused across unrelated endpoints. The tool
only distinguishes two outcomes (Success and AttributeNotFound); any other
code is reported with its raw value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from tppctl.errors import AttributeNotFoundError, ResultCodeError


class ResultCode(IntEnum):
    """Result codes known to the tool. Names are used for diagnostics only."""

    SUCCESS = 1
    INVALID_ARGUMENT = 2
    INVALID_ARGUMENT_RANGE = 3
    MISMATCHED_ARGUMENTS = 4
    NOT_IMPLEMENTED = 5
    INVALID_DESTINATION_LIST = 6
    INSUFFICIENT_PRIVILEGES = 7
    UNEXPECTED_ERROR = 8
    ATTRIBUTE_NOT_FOUND = 102
    OBJECT_DOES_NOT_EXIST = 400


_DISPLAY_NAMES = {
    ResultCode.SUCCESS: "Success",
    ResultCode.INVALID_ARGUMENT: "InvalidArgument",
    ResultCode.INVALID_ARGUMENT_RANGE: "InvalidArgumentRange",
    ResultCode.MISMATCHED_ARGUMENTS: "MismatchedArguments",
    ResultCode.NOT_IMPLEMENTED: "NotImplemented",
    ResultCode.INVALID_DESTINATION_LIST: "InvalidDestinationList",
    ResultCode.INSUFFICIENT_PRIVILEGES: "InsufficientPrivileges",
    ResultCode.UNEXPECTED_ERROR: "UnexpectedError",
    ResultCode.ATTRIBUTE_NOT_FOUND: "AttributeNotFound",
    ResultCode.OBJECT_DOES_NOT_EXIST: "ObjectDoesNotExist",
}


class Outcome(Enum):
    """The closed set of outcomes a Result code maps to."""

    SUCCESS = "success"
    ATTRIBUTE_NOT_FOUND = "attribute_not_found"
    OTHER = "other"


@dataclass(frozen=True)
class ResultStatus:
    """
    An interpreted Result code.

    Attributes:
        outcome: Which of the three outcomes the code maps to.
        code: The raw integer code as returned by the API.
    """

    outcome: Outcome
    code: int

    @property
    def ok(self) -> bool:
        """Return True if the code means success."""
        return self.outcome is Outcome.SUCCESS

    def describe(self) -> str:
        """Return a human-readable form such as 'result code 7 (InsufficientPrivileges)'."""
        return describe_result(self.code)


def describe_result(code: int) -> str:
    """
    Render a raw Result code for an error message.

    Args:
        code: Raw Result code.

    Returns:
        "result code N (Name)" for known codes, "result code N" otherwise.
    """
    try:
        name = _DISPLAY_NAMES[ResultCode(code)]
    except ValueError:
        return f"result code {code}"
    return f"result code {code} ({name})"


def interpret_result(code: int) -> ResultStatus:
    """
    Map a raw Result code to an outcome.

    Args:
        code: Raw Result code from an API response.

    Returns:
        ResultStatus carrying the outcome and the raw code.
    """
    if code == ResultCode.SUCCESS:
        return ResultStatus(Outcome.SUCCESS, code)
    if code == ResultCode.ATTRIBUTE_NOT_FOUND:
        return ResultStatus(Outcome.ATTRIBUTE_NOT_FOUND, code)
    return ResultStatus(Outcome.OTHER, code)


def raise_for_result(code: int, path: str, action: str) -> None:
    """
    Raise the matching error unless the Result code means success.

    Used identically after retrieving and after updating a credential so the
    two produce the same messages.

    Args:
        code: Raw Result code from the response body.
        path: Credential path the call was made for.
        action: Verb for the generic message, e.g. "fetching" or "updating".

    Raises:
        AttributeNotFoundError: If the code is AttributeNotFound.
        ResultCodeError: For any other non-success code.
    """
    status = interpret_result(code)
    if status.outcome is Outcome.SUCCESS:
        return
    if status.outcome is Outcome.ATTRIBUTE_NOT_FOUND:
        raise AttributeNotFoundError(
            f"attribute not found: '{path}'", path=path, code=code
        )
    raise ResultCodeError(
        f"error {action} '{path}': {status.describe()}", path=path, code=code
    )

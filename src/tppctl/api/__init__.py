"""
vedsdk API access for tppctl.

Contains the HTTP client, the request/response data models and the
interpretation of the platform's embedded Result codes.
"""

from tppctl.api.client import (
    USER_AGENT,
    TppClient,
    build_enumerate_request,
    build_retrieve_request,
    build_update_request,
)
from tppctl.api.models import (
    POLICY_ROOT,
    TYPE_NAME_GENERIC_CREDENTIAL,
    CatalogEntry,
    Contact,
    Credential,
    CredentialValue,
    EnumerateResult,
)
from tppctl.api.results import (
    Outcome,
    ResultCode,
    ResultStatus,
    describe_result,
    interpret_result,
    raise_for_result,
)

__all__ = [
    # Client
    "TppClient",
    "USER_AGENT",
    "build_retrieve_request",
    "build_update_request",
    "build_enumerate_request",
    # Models
    "Credential",
    "CredentialValue",
    "Contact",
    "CatalogEntry",
    "EnumerateResult",
    "POLICY_ROOT",
    "TYPE_NAME_GENERIC_CREDENTIAL",
    # Result codes
    "ResultCode",
    "ResultStatus",
    "Outcome",
    "interpret_result",
    "raise_for_result",
    "describe_result",
]

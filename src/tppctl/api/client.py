"""
Client for the platform's vedsdk REST configuration API.

Endpoints Used:
    - POST /vedsdk/credentials/retrieve: fetch one credential by path
    - POST /vedsdk/credentials/update: replace a credential's contents
    - POST /vedsdk/Config/Enumerate: list objects under the policy tree

Authentication:
    Every request carries ``Authorization: Bearer <token>``, a JSON content
    type and the tppctl User-Agent.

Error Model:
    A non-2xx HTTP status or a failure to send the request raises
    TransportError carrying the raw body. A 2xx response whose body does not
    have the expected shape raises DecodeError. The embedded Result code is
    a separate, logical check: update_credential applies it, retrieve_credential
    leaves it to the caller.

There is no retry logic; each operation makes exactly one request.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import requests

from tppctl import __version__
from tppctl.api.models import POLICY_ROOT, Credential, EnumerateResult
from tppctl.api.results import interpret_result, raise_for_result
from tppctl.errors import DecodeError, TransportError

if TYPE_CHECKING:
    from tppctl.config.settings import Settings

USER_AGENT = f"tppctl/v{__version__}"

RETRIEVE_ENDPOINT = "/vedsdk/credentials/retrieve"
UPDATE_ENDPOINT = "/vedsdk/credentials/update"
ENUMERATE_ENDPOINT = "/vedsdk/Config/Enumerate"


def build_retrieve_request(path: str) -> dict[str, Any]:
    """Body for /vedsdk/credentials/retrieve."""
    return {"CredentialPath": path}


def build_update_request(path: str, credential: Credential) -> dict[str, Any]:
    """
    Body for /vedsdk/credentials/update.

    The credential's fields and CredentialPath are siblings at the top level
    of the payload.

    Args:
        path: Credential path to update.
        credential: Full credential representation to store.

    Returns:
        Wire-format mapping ready for JSON serialization.
    """
    body = credential.to_dict()
    body["CredentialPath"] = path
    return body


def build_enumerate_request() -> dict[str, Any]:
    """Body for /vedsdk/Config/Enumerate: every object below the policy root."""
    return {"ObjectDN": POLICY_ROOT, "Pattern": "", "Recursive": True}


class TppClient:
    """
    Synchronous vedsdk API client.

    Attributes:
        config: Settings holding the base URL, token and transport options.
        logger: Logger instance for API calls.

    Example:
        client = TppClient(settings)
        for path in client.list_credentials():
            print(path)
    """

    def __init__(self, config: Settings) -> None:
        """
        Initialize the client.

        Args:
            config: Settings object with tpp_url and token.
        """
        self.config = config
        self.logger = logging.getLogger("tppctl.api")
        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        """
        Get or create a requests session with the standard headers.

        Returns:
            Configured requests.Session.
        """
        if self._session is not None:
            return self._session

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self.config.token}",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            }
        )
        self._session.verify = self.config.verify_tls

        return self._session

    def close(self) -> None:
        """Close the underlying session, if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> TppClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _post(self, endpoint: str, body: dict[str, Any], action: str) -> Any:
        """
        POST a JSON body and return the decoded JSON response.

        Args:
            endpoint: Endpoint path, appended directly to the base URL.
            body: Request body.
            action: Short name of the operation for error messages.

        Returns:
            The decoded JSON response body.

        Raises:
            TransportError: If the request fails or the status is not 2xx.
            DecodeError: If the response body is not valid JSON.
        """
        session = self._get_session()
        url = f"{self.config.tpp_url}{endpoint}"

        start_time = time.time()
        try:
            response = session.post(url, json=body, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"while making request to {endpoint}: {e}") from e

        duration_ms = (time.time() - start_time) * 1000
        self._log_api_call("POST", endpoint, response.status_code, duration_ms)

        if not 200 <= response.status_code < 300:
            # Body is read for the diagnostic only
            raise TransportError(
                f"{action} failed: {response.status_code} {response.reason}, "
                f"body: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"while decoding response from {endpoint}: {e}") from e

    def _log_api_call(
        self,
        method: str,
        endpoint: str,
        status_code: int | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """
        Log an API call.

        Args:
            method: HTTP method.
            endpoint: API endpoint path.
            status_code: Response status code (if available).
            duration_ms: Request duration in milliseconds.
        """
        msg = f"API call: {method} {endpoint}"
        if status_code is not None:
            msg += f" -> {status_code}"
        if duration_ms is not None:
            msg += f" ({duration_ms:.0f}ms)"
        self.logger.info(msg)

    def retrieve_credential(self, path: str) -> Credential:
        """
        Fetch a credential's full representation.

        The embedded Result code is not checked here; see raise_for_result.

        Args:
            path: Credential path, e.g. "\\VED\\Policy\\creds\\foo".

        Returns:
            The decoded Credential.

        Raises:
            TransportError: On request failure or non-2xx status.
            DecodeError: If the body is not a credential.
        """
        data = self._post(RETRIEVE_ENDPOINT, build_retrieve_request(path), "retrieve")
        try:
            return Credential.from_dict(data)
        except ValueError as e:
            raise DecodeError(
                f"while decoding response from {RETRIEVE_ENDPOINT}: {e}", path=path
            ) from e

    def update_credential(self, path: str, credential: Credential) -> None:
        """
        Push a credential back to the store.

        Args:
            path: Credential path to update.
            credential: Full credential representation.

        Raises:
            TransportError: On request failure or non-2xx status.
            DecodeError: If the body does not carry a Result code.
            AttributeNotFoundError: If the platform reports AttributeNotFound.
            ResultCodeError: For any other non-success Result code.
        """
        data = self._post(
            UPDATE_ENDPOINT, build_update_request(path, credential), "update"
        )
        code = data.get("Result") if isinstance(data, dict) else None
        if isinstance(code, bool) or not isinstance(code, int):
            raise DecodeError(
                f"while decoding response from {UPDATE_ENDPOINT}: "
                f"expected an object with an integer Result, got {data!r}",
                path=path,
            )
        raise_for_result(code, path, "updating")
        self.logger.debug(f"Updated credential {path}")

    def enumerate_objects(self) -> EnumerateResult:
        """
        Enumerate every object below the policy root, recursively.

        Raises:
            TransportError: On request failure or non-2xx status.
            DecodeError: If the body is not an enumeration result.
        """
        data = self._post(ENUMERATE_ENDPOINT, build_enumerate_request(), "list")
        try:
            return EnumerateResult.from_dict(data)
        except ValueError as e:
            raise DecodeError(
                f"while decoding response from {ENUMERATE_ENDPOINT}: {e}"
            ) from e

    def list_credentials(self) -> list[str]:
        """
        List the paths of all Generic Credential objects, in API order.

        Returns:
            Paths of entries whose type name contains "Generic Credential".
        """
        result = self.enumerate_objects()
        status = interpret_result(result.result)
        if not status.ok:
            self.logger.warning(f"Enumeration returned {status.describe()}")

        paths = [entry.dn for entry in result.objects if entry.is_generic_credential()]
        self.logger.debug(
            f"Found {len(paths)} generic credentials among {len(result.objects)} objects"
        )
        return paths

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""HTTP transport shared by every remote gateway.

Each call is one request/response cycle with no retries. The bearer token
comes from an injected credential provider, and any 401 response
invalidates that provider's session before the failure is returned.
"""

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

import httpx
from beartype import beartype
from pydantic import BaseModel, ValidationError

from ..core.config import Settings
from ..core.errors import Failure, FailureKind, FieldErrors
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "X-Requested-With": "XMLHttpRequest",
}


class CredentialProvider(Protocol):
    """Source of the bearer token attached to outgoing requests."""

    def current_token(self) -> str | None:
        """Return the token to send, or ``None`` when signed out."""
        ...

    def invalidate(self) -> None:
        """Forget the token and user after the server rejected them."""
        ...


@beartype
def _json_body(response: httpx.Response) -> Any:
    """Decode a JSON body, returning ``None`` when it is empty or not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


@beartype
def _server_message(body: Any, default: str) -> str:
    if isinstance(body, Mapping):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return default


@beartype
def _server_field_errors(body: Any) -> FieldErrors:
    """Normalize a Laravel-style ``errors`` block into ``FieldErrors``."""
    if not isinstance(body, Mapping) or not isinstance(body.get("errors"), Mapping):
        return {}
    errors: FieldErrors = {}
    for path, messages in body["errors"].items():
        if isinstance(messages, str):
            messages = [messages]
        collected = [str(message) for message in messages or []]
        if collected:
            errors[str(path)] = collected
    return errors


@beartype
def decode(model: type[M], payload: Any, failure_message: str) -> Result[M, Failure]:
    """Validate a response payload, reporting schema drift as a transport failure."""
    try:
        return Ok(model.model_validate(payload))
    except ValidationError as e:
        logger.warning("Unexpected %s payload: %s", model.__name__, e)
        return Err(Failure(kind=FailureKind.TRANSPORT_FAILURE, message=failure_message))


class ApiTransport:
    """Thin wrapper around ``httpx.AsyncClient`` with failure mapping."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: CredentialProvider,
    ) -> None:
        """Initialize transport.

        Args:
            client: Configured HTTP client; its base URL prefixes every path
            credentials: Provider of the bearer token and session invalidation
        """
        self._client = client
        self._credentials = credentials

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: CredentialProvider,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiTransport":
        """Build a transport whose client points at ``settings.api_url``."""
        client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=DEFAULT_HEADERS,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        return cls(client, credentials)

    @beartype
    def _headers(self) -> dict[str, str]:
        token = self._credentials.current_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    @beartype
    async def request(
        self,
        method: str,
        path: str,
        *,
        failure_message: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Result[Any, Failure]:
        """Send one request and return its decoded JSON body.

        Args:
            method: HTTP verb
            path: Path relative to the API base URL
            failure_message: Message used when the server does not supply one
            params: Query string parameters
            json: JSON request body

        Returns:
            Result containing the decoded body (``None`` for empty bodies)
            or a ``Failure`` describing why the call did not succeed
        """
        try:
            response = await self._client.request(
                method,
                path,
                params=dict(params) if params is not None else None,
                json=json,
                headers=self._headers(),
            )
        except httpx.TimeoutException:
            logger.warning("%s %s timed out", method, path)
            return Err(Failure(kind=FailureKind.TRANSPORT_FAILURE, message=failure_message))
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return Err(Failure(kind=FailureKind.TRANSPORT_FAILURE, message=failure_message))

        logger.debug("%s %s -> %s", method, path, response.status_code)
        body = _json_body(response)
        status = response.status_code

        if response.is_success:
            if response.content and body is None:
                return Err(
                    Failure(
                        kind=FailureKind.TRANSPORT_FAILURE,
                        message=failure_message,
                        status_code=status,
                    )
                )
            return Ok(body)

        message = _server_message(body, failure_message)
        if status == 401:
            # Session is dead for every operation, not just this one.
            logger.info("Received 401 from %s %s; invalidating session", method, path)
            self._credentials.invalidate()
            kind = FailureKind.UNAUTHORIZED
        elif status == 404:
            kind = FailureKind.NOT_FOUND
        elif status == 422:
            return Err(
                Failure(
                    kind=FailureKind.FIELD_VALIDATION_REJECTED,
                    message=message,
                    field_errors=_server_field_errors(body),
                    status_code=status,
                )
            )
        else:
            logger.warning("%s %s returned HTTP %s", method, path, status)
            kind = FailureKind.TRANSPORT_FAILURE

        return Err(Failure(kind=kind, message=message, status_code=status))

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

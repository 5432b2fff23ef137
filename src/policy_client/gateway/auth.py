# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Authentication endpoints: login, register, logout and current user."""

from beartype import beartype

from ..core.errors import Failure
from ..core.result_types import Result
from ..models.auth import AuthSession, LoginCredentials, RegistrationData, User
from .transport import ApiTransport, decode


class HttpAuthGateway:
    """Calls the token-issuing endpoints of the remote API."""

    def __init__(self, transport: ApiTransport) -> None:
        """Initialize gateway with a shared transport."""
        self._transport = transport

    @beartype
    async def login(self, credentials: LoginCredentials) -> Result[AuthSession, Failure]:
        """Exchange credentials for a token."""
        message = "Login failed"
        result = await self._transport.request(
            "POST",
            "/login",
            json=credentials.model_dump(mode="json", exclude_none=True),
            failure_message=message,
        )
        return result.and_then(lambda body: decode(AuthSession, body, message))

    @beartype
    async def register(self, data: RegistrationData) -> Result[AuthSession, Failure]:
        """Create an account and receive its first token."""
        message = "Registration failed"
        result = await self._transport.request(
            "POST",
            "/register",
            json=data.model_dump(mode="json"),
            failure_message=message,
        )
        return result.and_then(lambda body: decode(AuthSession, body, message))

    @beartype
    async def logout(self) -> Result[None, Failure]:
        """Revoke the current token server-side."""
        result = await self._transport.request(
            "POST", "/logout", failure_message="Logout failed"
        )
        return result.map(lambda _body: None)

    @beartype
    async def fetch_user(self) -> Result[User, Failure]:
        """Load the user the current token belongs to."""
        message = "Failed to load user"
        result = await self._transport.request("GET", "/user", failure_message=message)
        return result.and_then(lambda body: decode(User, body, message))

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Sign-in, registration and sign-out on top of the session state."""

from collections.abc import Mapping
from typing import Any

from beartype import beartype

from ..core.errors import Failure, FailureKind, validation_failure
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..gateway.auth import HttpAuthGateway
from ..models.auth import AuthSession, LoginCredentials, RegistrationData, User
from ..schemas.validation import ShapeKind, validate
from .session import SessionState

logger = get_logger(__name__)


class AuthService:
    """Service for authentication flows."""

    def __init__(self, gateway: HttpAuthGateway, session: SessionState) -> None:
        """Initialize auth service."""
        self._gateway = gateway
        self._session = session

    @property
    def session(self) -> SessionState:
        """Session state updated by this service."""
        return self._session

    @beartype
    def _accept(self, result: Result[AuthSession, Failure]) -> Result[User, Failure]:
        if isinstance(result, Err):
            return Err(result.unwrap_err().as_local_validation())
        issued = result.unwrap()
        self._session.start(issued.token, issued.user)
        return Ok(issued.user)

    @beartype
    async def login(self, form: Mapping[str, Any]) -> Result[User, Failure]:
        """Validate the login form, then exchange it for a token.

        Returns:
            Result containing the signed-in user, or a failure whose
            ``field_errors`` hold local or server-side validation messages
        """
        checked = validate(form, ShapeKind.LOGIN)
        if isinstance(checked, Err):
            return Err(validation_failure(checked.unwrap_err()))
        credentials: LoginCredentials = checked.unwrap()
        return self._accept(await self._gateway.login(credentials))

    @beartype
    async def register(self, form: Mapping[str, Any]) -> Result[User, Failure]:
        """Validate the registration form, then create the account."""
        checked = validate(form, ShapeKind.REGISTRATION)
        if isinstance(checked, Err):
            return Err(validation_failure(checked.unwrap_err()))
        data: RegistrationData = checked.unwrap()
        return self._accept(await self._gateway.register(data))

    @beartype
    async def logout(self) -> Result[None, Failure]:
        """Revoke the token remotely and always clear the local session."""
        if not self._session.is_authenticated:
            return Ok(None)
        result = await self._gateway.logout()
        if isinstance(result, Err):
            logger.warning("Logout request failed: %s", result.unwrap_err().message)
        self._session.invalidate()
        return result

    @beartype
    async def restore(self) -> Result[User | None, Failure]:
        """Refresh the persisted user snapshot from ``/user``.

        Returns ``Ok(None)`` when no token is persisted. A 401 has already
        cleared the session by the time the failure is returned.
        """
        if not self._session.is_authenticated:
            return Ok(None)
        result = await self._gateway.fetch_user()
        if isinstance(result, Err):
            failure = result.unwrap_err()
            if failure.kind is not FailureKind.UNAUTHORIZED:
                logger.warning("Could not refresh user: %s", failure.message)
            return result
        user = result.unwrap()
        self._session.update_user(user)
        return Ok(user)

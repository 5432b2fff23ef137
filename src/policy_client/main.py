# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy client composition root."""

from types import TracebackType

import httpx
from attrs import define, field
from beartype import beartype

from .core.config import Settings, get_settings
from .core.logging_utils import get_logger, level_from_name
from .gateway.auth import HttpAuthGateway
from .gateway.base import PolicyGateway
from .gateway.memory import InMemoryPolicyGateway
from .gateway.policies import HttpPolicyGateway
from .gateway.transport import ApiTransport
from .services.auth_service import AuthService
from .services.policy_store import PolicyStore
from .services.session import JsonFileSessionStorage, SessionState, SessionStorage

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class PolicyClient:
    """Everything a front end needs, wired to one session and transport."""

    settings: Settings = field()
    session: SessionState = field()
    auth: AuthService = field()
    gateway: PolicyGateway = field()
    store: PolicyStore = field()
    transport: ApiTransport = field()

    async def aclose(self) -> None:
        """Release the HTTP connection pool."""
        await self.transport.aclose()

    async def __aenter__(self) -> "PolicyClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


@beartype
def build_client(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    storage: SessionStorage | None = None,
) -> PolicyClient:
    """Create a client from settings.

    Args:
        settings: Client settings; environment-derived settings when omitted
        transport: HTTP transport override, e.g. ``httpx.MockTransport``
        storage: Session storage; a JSON file at ``settings.session_file``
            when omitted

    Returns:
        PolicyClient: Wired client sharing one session between auth and
        policy calls
    """
    settings = settings or get_settings()
    get_logger("policy_client", level=level_from_name(settings.log_level))

    session = SessionState(storage or JsonFileSessionStorage(settings.session_file))
    api = ApiTransport.from_settings(settings, session, transport=transport)

    gateway: PolicyGateway
    if settings.backend == "memory":
        gateway = InMemoryPolicyGateway()
    else:
        gateway = HttpPolicyGateway(api)
    logger.debug("Using %s policy backend at %s", settings.backend, settings.api_url)

    return PolicyClient(
        settings=settings,
        session=session,
        auth=AuthService(HttpAuthGateway(api), session),
        gateway=gateway,
        store=PolicyStore(gateway, per_page=settings.default_per_page),
        transport=api,
    )

"""Test configuration and fixtures for the policy client.

Provides settings pointed at a fake API, a scripted HTTP backend mounted
through ``httpx.MockTransport``, session state and an in-memory gateway.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from policy_client.core.config import Settings, clear_settings_cache
from policy_client.gateway.auth import HttpAuthGateway
from policy_client.gateway.memory import InMemoryPolicyGateway
from policy_client.gateway.policies import HttpPolicyGateway
from policy_client.gateway.transport import ApiTransport
from policy_client.models.auth import AuthSession, User
from policy_client.services.policy_store import PolicyStore
from policy_client.services.session import MemorySessionStorage, SessionState
from tests.fixtures.api_stub import ApiStub
from tests.fixtures.policy_data import TEST_TOKEN, make_policy_record, make_user

# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Keep the cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointed at the scripted API."""
    return Settings(
        api_url="http://testserver/api",
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def valid_policy_record() -> dict[str, Any]:
    """Complete creation-form record."""
    return make_policy_record()


@pytest.fixture
def user() -> User:
    """Signed-in user snapshot."""
    return User.model_validate(make_user())


@pytest.fixture
def session_storage(user: User) -> MemorySessionStorage:
    """Storage that already holds a session."""
    return MemorySessionStorage(AuthSession(token=TEST_TOKEN, user=user))


@pytest.fixture
def session(session_storage: MemorySessionStorage) -> SessionState:
    """Authenticated session state."""
    return SessionState(session_storage)


@pytest.fixture
def api_stub() -> ApiStub:
    """Scripted backend; add routes per test."""
    return ApiStub()


@pytest_asyncio.fixture  # type: ignore[misc]
async def api_transport(
    settings: Settings, session: SessionState, api_stub: ApiStub
) -> AsyncGenerator[ApiTransport, None]:
    """Transport wired to the scripted backend and the test session."""
    transport = ApiTransport.from_settings(
        settings, session, transport=httpx.MockTransport(api_stub)
    )
    yield transport
    await transport.aclose()


@pytest.fixture
def http_gateway(api_transport: ApiTransport) -> HttpPolicyGateway:
    """Policy gateway over the scripted backend."""
    return HttpPolicyGateway(api_transport)


@pytest.fixture
def auth_gateway(api_transport: ApiTransport) -> HttpAuthGateway:
    """Auth gateway over the scripted backend."""
    return HttpAuthGateway(api_transport)


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Clock that advances one second per reading."""
    start = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def memory_gateway(ticking_clock: Callable[[], datetime]) -> InMemoryPolicyGateway:
    """Empty in-memory gateway with deterministic timestamps."""
    return InMemoryPolicyGateway(clock=ticking_clock)


@pytest.fixture
def store(memory_gateway: InMemoryPolicyGateway) -> PolicyStore:
    """Store over the in-memory gateway."""
    return PolicyStore(memory_gateway)

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Authenticated session state and its persistence.

``SessionState`` is the credential provider handed to the HTTP transport:
it supplies the bearer token and is invalidated by the transport on any
401 response. The token and user snapshot survive restarts through a
``SessionStorage`` backend.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from beartype import beartype
from pydantic import ValidationError

from ..core.logging_utils import get_logger
from ..models.auth import AuthSession, User

logger = get_logger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "user"


class SessionStorage(ABC):
    """Where the token and user snapshot are kept between runs."""

    @abstractmethod
    def load(self) -> AuthSession | None:
        """Return the persisted session, or ``None`` when there is none."""

    @abstractmethod
    def save(self, session: AuthSession) -> None:
        """Persist ``session``, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the persisted session."""


class MemorySessionStorage(SessionStorage):
    """Process-local storage, used in tests and throwaway clients."""

    def __init__(self, session: AuthSession | None = None) -> None:
        self._session = session

    def load(self) -> AuthSession | None:
        return self._session

    def save(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class JsonFileSessionStorage(SessionStorage):
    """Stores ``{"auth_token": ..., "user": {...}}`` in a JSON file.

    The file is readable by its owner only. An unreadable or malformed
    file is treated as "no session" rather than an error.
    """

    def __init__(self, path: Path) -> None:
        """Initialize storage.

        Args:
            path: JSON file; parent directories are created on first save
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Location of the session file."""
        return self._path

    @beartype
    def load(self) -> AuthSession | None:
        if not self._path.exists():
            return None
        try:
            raw: Any = json.loads(self._path.read_text(encoding="utf-8"))
            return AuthSession(token=raw[TOKEN_KEY], user=raw[USER_KEY])
        except (OSError, ValueError, TypeError, KeyError, ValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            return None

    @beartype
    def save(self, session: AuthSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            TOKEN_KEY: session.token,
            USER_KEY: session.user.model_dump(mode="json"),
        }
        self._path.write_text(json.dumps(payload), encoding="utf-8")
        os.chmod(self._path, 0o600)

    @beartype
    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class SessionState:
    """Current token and user, restored from storage on construction."""

    def __init__(self, storage: SessionStorage) -> None:
        """Initialize session state.

        Args:
            storage: Persistence backend for the token and user snapshot
        """
        self._storage = storage
        self._session = storage.load()
        if self._session is not None:
            logger.debug("Restored session for %s", self._session.user.email)

    def current_token(self) -> str | None:
        """Bearer token for outgoing requests."""
        return self._session.token if self._session is not None else None

    def current_user(self) -> User | None:
        """Snapshot of the signed-in user."""
        return self._session.user if self._session is not None else None

    @property
    def is_authenticated(self) -> bool:
        """Whether a token is held."""
        return self._session is not None

    @beartype
    def start(self, token: str, user: User) -> None:
        """Record a freshly issued token and persist it."""
        self._session = AuthSession(token=token, user=user)
        self._storage.save(self._session)
        logger.info("Signed in as %s", user.email)

    @beartype
    def update_user(self, user: User) -> None:
        """Replace the user snapshot, keeping the current token."""
        if self._session is None:
            return
        self._session = AuthSession(token=self._session.token, user=user)
        self._storage.save(self._session)

    def invalidate(self) -> None:
        """Drop the token and user locally and in storage."""
        if self._session is not None:
            logger.info("Session for %s invalidated", self._session.user.email)
        self._session = None
        self._storage.clear()

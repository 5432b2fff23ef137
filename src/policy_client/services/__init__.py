# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Business logic service layer."""

from policy_client.core.result_types import Err, Ok, Result

from .auth_service import AuthService
from .policy_store import PolicyStore, StoreState
from .session import (
    JsonFileSessionStorage,
    MemorySessionStorage,
    SessionState,
    SessionStorage,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AuthService",
    "PolicyStore",
    "StoreState",
    "SessionState",
    "SessionStorage",
    "JsonFileSessionStorage",
    "MemorySessionStorage",
]

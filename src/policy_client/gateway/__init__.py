# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Gateways to the remote policy API and an in-memory stand-in."""

from .auth import HttpAuthGateway
from .base import PolicyGateway
from .memory import InMemoryPolicyGateway
from .policies import HttpPolicyGateway
from .transport import DEFAULT_HEADERS, ApiTransport, CredentialProvider, decode

__all__ = [
    "ApiTransport",
    "CredentialProvider",
    "DEFAULT_HEADERS",
    "HttpAuthGateway",
    "HttpPolicyGateway",
    "InMemoryPolicyGateway",
    "PolicyGateway",
    "decode",
]

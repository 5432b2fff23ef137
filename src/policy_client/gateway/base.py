# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base class for remote policy gateways."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..core.errors import Failure
from ..core.result_types import Result
from ..models.pagination import DocumentLink, PolicyFilters, PolicyPage
from ..models.policy import Policy


class PolicyGateway(ABC):
    """One method per remote policy operation.

    Write payloads are already in wire form (see ``schemas.wire``); every
    method performs a single request and never raises.
    """

    @abstractmethod
    async def list(self, filters: PolicyFilters) -> Result[PolicyPage, Failure]:
        """List policies matching ``filters``.

        Args:
            filters: Search text, status, page and page size

        Returns:
            Result containing the page of policies and its metadata
        """

    @abstractmethod
    async def get(self, policy_id: int) -> Result[Policy, Failure]:
        """Fetch one policy; ``NOT_FOUND`` when it does not exist."""

    @abstractmethod
    async def create(self, payload: Mapping[str, Any]) -> Result[Policy, Failure]:
        """Create a policy from a wire-shaped payload."""

    @abstractmethod
    async def update(
        self, policy_id: int, payload: Mapping[str, Any]
    ) -> Result[Policy, Failure]:
        """Apply a partial wire-shaped payload to an existing policy."""

    @abstractmethod
    async def delete(self, policy_id: int) -> Result[None, Failure]:
        """Delete a policy."""

    @abstractmethod
    async def generate_document(self, policy_id: int) -> Result[DocumentLink, Failure]:
        """Ask the remote system to render the policy document.

        Returns:
            Result containing a download URL that may only be valid once
        """

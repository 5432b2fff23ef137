# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy gateway backed by the remote JSON API."""

from collections.abc import Mapping
from typing import Any

from beartype import beartype

from ..core.errors import Failure, FailureKind
from ..core.result_types import Err, Result
from ..models.pagination import DocumentLink, PageInfo, PolicyFilters, PolicyPage
from ..models.policy import Policy
from .base import PolicyGateway
from .transport import ApiTransport, decode


@beartype
def _data(body: Any) -> Any:
    return body.get("data") if isinstance(body, Mapping) else None


class HttpPolicyGateway(PolicyGateway):
    """Policy operations over ``/policies``."""

    def __init__(self, transport: ApiTransport) -> None:
        """Initialize gateway with a shared transport."""
        self._transport = transport

    @beartype
    async def list(self, filters: PolicyFilters) -> Result[PolicyPage, Failure]:
        """List policies with the non-empty filters as query parameters."""
        message = "Failed to fetch policies"
        result = await self._transport.request(
            "GET", "/policies", params=filters.to_query(), failure_message=message
        )
        if isinstance(result, Err):
            return result

        body = result.unwrap()
        rows = _data(body)
        meta = body.get("meta") if isinstance(body, Mapping) else None
        if not isinstance(rows, list):
            return Err(Failure(kind=FailureKind.TRANSPORT_FAILURE, message=message))

        return decode(
            PolicyPage,
            {
                "items": rows,
                "page": meta if meta is not None else PageInfo.empty(filters.per_page),
            },
            message,
        )

    @beartype
    async def get(self, policy_id: int) -> Result[Policy, Failure]:
        """Fetch one policy."""
        message = "Failed to fetch policy"
        result = await self._transport.request(
            "GET", f"/policies/{policy_id}", failure_message=message
        )
        return result.and_then(lambda body: decode(Policy, _data(body), message))

    @beartype
    async def create(self, payload: Mapping[str, Any]) -> Result[Policy, Failure]:
        """Create a policy."""
        message = "Failed to create policy"
        result = await self._transport.request(
            "POST", "/policies", json=dict(payload), failure_message=message
        )
        return result.and_then(lambda body: decode(Policy, _data(body), message))

    @beartype
    async def update(
        self, policy_id: int, payload: Mapping[str, Any]
    ) -> Result[Policy, Failure]:
        """Update a policy with only the supplied wire fields."""
        message = "Failed to update policy"
        result = await self._transport.request(
            "PUT", f"/policies/{policy_id}", json=dict(payload), failure_message=message
        )
        return result.and_then(lambda body: decode(Policy, _data(body), message))

    @beartype
    async def delete(self, policy_id: int) -> Result[None, Failure]:
        """Delete a policy; the response body is ignored."""
        result = await self._transport.request(
            "DELETE", f"/policies/{policy_id}", failure_message="Failed to delete policy"
        )
        return result.map(lambda _body: None)

    @beartype
    async def generate_document(self, policy_id: int) -> Result[DocumentLink, Failure]:
        """Request the policy PDF and return its download link."""
        message = "Failed to generate PDF"
        result = await self._transport.request(
            "POST", f"/policies/{policy_id}/pdf", failure_message=message
        )
        return result.and_then(lambda body: decode(DocumentLink, body, message))

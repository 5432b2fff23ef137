# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Offline policy gateway holding records in process memory.

Behaves like the remote API from the client's point of view: it assigns
ids, policy numbers and timestamps, rejects invalid payloads with field
errors, filters and paginates listings newest-first, and answers unknown
ids with ``NOT_FOUND``. Useful for demos and for exercising the store
without a network.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from beartype import beartype

from ..core.errors import Failure, FailureKind, FieldErrors
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..models.pagination import DocumentLink, PageInfo, PolicyFilters, PolicyPage
from ..models.policy import Policy, PolicyDraft, PolicyUpdate
from ..schemas.validation import ShapeKind, validate
from ..schemas.wire import from_wire
from .base import PolicyGateway

logger = get_logger(__name__)

INVALID_DATA_MESSAGE = "The given data was invalid."


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@beartype
def _rejected(field_errors: FieldErrors) -> Failure:
    return Failure(
        kind=FailureKind.FIELD_VALIDATION_REJECTED,
        message=INVALID_DATA_MESSAGE,
        field_errors=field_errors,
        status_code=422,
    )


@beartype
def _not_found(policy_id: int) -> Failure:
    return Failure(
        kind=FailureKind.NOT_FOUND,
        message=f"Policy {policy_id} not found",
        status_code=404,
    )


@beartype
def _matches(policy: Policy, filters: PolicyFilters) -> bool:
    if filters.status is not None and policy.policy_status is not filters.status:
        return False
    if filters.search:
        needle = filters.search.lower()
        haystack = (policy.policy_no or "", policy.holder_display_name)
        if not any(needle in value.lower() for value in haystack):
            return False
    return True


class InMemoryPolicyGateway(PolicyGateway):
    """Policy gateway over a dict of stored records."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        """Initialize an empty store.

        Args:
            clock: Source of creation/update timestamps
        """
        self._clock = clock
        self._records: dict[int, Policy] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    @beartype
    def _store(self, draft: PolicyDraft) -> Policy:
        policy_id = self._next_id
        self._next_id += 1
        now = self._clock()
        holder = draft.policy_holder
        policy = Policy.model_validate(
            {
                **draft.to_record(),
                "id": policy_id,
                "policyNo": f"POL-{now.year}-{policy_id:06d}",
                "policyHolderName": f"{holder.first_name} {holder.last_name}",
                "createdAt": now,
                "updatedAt": now,
            }
        )
        self._records[policy_id] = policy
        return policy

    @beartype
    def seed(self, records: Iterable[Mapping[str, Any]]) -> list[Policy]:
        """Store internal-form draft records directly.

        Raises:
            ValueError: If a record is not a valid draft
        """
        stored = []
        for record in records:
            result = validate(record, ShapeKind.POLICY)
            if isinstance(result, Err):
                raise ValueError(f"Invalid seed record: {result.unwrap_err()}")
            stored.append(self._store(result.unwrap()))
        return stored

    @beartype
    async def list(self, filters: PolicyFilters) -> Result[PolicyPage, Failure]:
        """Filter, sort newest-first and slice one page."""
        matching = sorted(
            (policy for policy in self._records.values() if _matches(policy, filters)),
            key=lambda policy: (policy.created_at, policy.id),
            reverse=True,
        )
        start = (filters.page - 1) * filters.per_page
        rows = matching[start : start + filters.per_page]
        return Ok(
            PolicyPage(
                items=rows,
                page=PageInfo.from_counts(len(matching), filters.page, filters.per_page),
            )
        )

    @beartype
    async def get(self, policy_id: int) -> Result[Policy, Failure]:
        """Return the stored record."""
        policy = self._records.get(policy_id)
        if policy is None:
            return Err(_not_found(policy_id))
        return Ok(policy)

    @beartype
    async def create(self, payload: Mapping[str, Any]) -> Result[Policy, Failure]:
        """Validate a wire payload as a complete draft and store it."""
        result = validate(from_wire(payload), ShapeKind.POLICY)
        if isinstance(result, Err):
            return Err(_rejected(result.unwrap_err()))
        policy = self._store(result.unwrap())
        logger.debug("Stored policy %s as %s", policy.id, policy.policy_no)
        return Ok(policy)

    @beartype
    async def update(
        self, policy_id: int, payload: Mapping[str, Any]
    ) -> Result[Policy, Failure]:
        """Merge the supplied wire fields into the stored record."""
        existing = self._records.get(policy_id)
        if existing is None:
            return Err(_not_found(policy_id))

        result = validate(from_wire(payload), ShapeKind.POLICY_UPDATE)
        if isinstance(result, Err):
            return Err(_rejected(result.unwrap_err()))
        update: PolicyUpdate = result.unwrap()

        merged = {**existing.to_record(), **update.to_record(exclude_unset=True)}
        merged["updatedAt"] = self._clock()
        if update.policy_holder is not None:
            holder = update.policy_holder
            merged["policyHolderName"] = f"{holder.first_name} {holder.last_name}"

        policy = Policy.model_validate(merged)
        self._records[policy_id] = policy
        return Ok(policy)

    @beartype
    async def delete(self, policy_id: int) -> Result[None, Failure]:
        """Remove the stored record."""
        if self._records.pop(policy_id, None) is None:
            return Err(_not_found(policy_id))
        return Ok(None)

    @beartype
    async def generate_document(self, policy_id: int) -> Result[DocumentLink, Failure]:
        """Return a placeholder link; no document is rendered offline."""
        policy = self._records.get(policy_id)
        if policy is None:
            return Err(_not_found(policy_id))
        return Ok(
            DocumentLink(
                download_url=f"memory://policies/{policy_id}/{policy.policy_no}.pdf",
                message="PDF generated successfully",
            )
        )

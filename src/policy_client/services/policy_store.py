# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Shared policy state: the current page, the open policy and filters.

The store is the only mutable piece of the client. Readers always see a
complete ``StoreState`` snapshot; every operation replaces the snapshot as
a whole, so a list and its page metadata (or a list entry and ``current``)
can never be observed half-updated.

Overlapping operations are not serialized. ``is_loading`` stays true while
any of them is pending and the last response to arrive wins.
"""

from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from attrs import evolve, field, frozen
from beartype import beartype

from ..core.errors import Failure, FailureKind, validation_failure
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..gateway.base import PolicyGateway
from ..models.pagination import DEFAULT_PER_PAGE, DocumentLink, PageInfo, PolicyFilters
from ..models.policy import Policy, PolicyDraft, PolicyUpdate
from ..schemas.validation import ShapeKind, validate
from ..schemas.wire import draft_to_wire, update_to_wire

logger = get_logger(__name__)

T = TypeVar("T")


@frozen
class StoreState:
    """Immutable snapshot of everything the store holds."""

    items: tuple[Policy, ...] = field(default=())
    current: Policy | None = field(default=None)
    page_info: PageInfo = field(factory=PageInfo.empty)
    filters: PolicyFilters = field(factory=PolicyFilters)
    is_loading: bool = field(default=False)
    last_error: str | None = field(default=None)


class PolicyStore:
    """Policy list and detail state backed by a ``PolicyGateway``."""

    def __init__(
        self, gateway: PolicyGateway, *, per_page: int = DEFAULT_PER_PAGE
    ) -> None:
        """Initialize an empty store.

        Args:
            gateway: Remote (or in-memory) policy operations
            per_page: Initial page size for listings
        """
        self._gateway = gateway
        self._pending = 0
        self._state = StoreState(
            page_info=PageInfo.empty(per_page),
            filters=PolicyFilters(per_page=per_page),
        )

    @property
    def state(self) -> StoreState:
        """Current snapshot."""
        return self._state

    @property
    def items(self) -> tuple[Policy, ...]:
        return self._state.items

    @property
    def current(self) -> Policy | None:
        return self._state.current

    @property
    def page_info(self) -> PageInfo:
        return self._state.page_info

    @property
    def filters(self) -> PolicyFilters:
        return self._state.filters

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def last_error(self) -> str | None:
        return self._state.last_error

    # Pending bookkeeping

    @contextmanager
    def _pending_operation(self) -> Iterator[dict[str, Any]]:
        """Track one pending operation.

        Yields a dict of state changes. On exit, however the block ends
        (return, exception or cancellation), the operation is closed and
        the changes are applied together with the new ``is_loading`` value.
        """
        self._pending += 1
        self._state = evolve(self._state, is_loading=True, last_error=None)
        changes: dict[str, Any] = {}
        try:
            yield changes
        finally:
            self._pending -= 1
            self._state = evolve(
                self._state, is_loading=self._pending > 0, **changes
            )

    @beartype
    async def _call(
        self, operation: str, call: Callable[[], Awaitable[Result[T, Failure]]]
    ) -> Result[T, Failure]:
        """Run a gateway call, turning unexpected exceptions into failures."""
        try:
            return await call()
        except Exception as e:
            logger.exception("Unexpected error during %s", operation)
            return Err(Failure(kind=FailureKind.TRANSPORT_FAILURE, message=str(e)))

    # Operations

    @beartype
    async def refresh_list(self) -> Result[None, Failure]:
        """Fetch the page selected by the current filters."""
        with self._pending_operation() as changes:
            filters = self._state.filters
            result = await self._call(
                "refresh_list", lambda: self._gateway.list(filters)
            )
            if isinstance(result, Err):
                changes["last_error"] = result.unwrap_err().message
                return result

            page = result.unwrap()
            changes.update(items=tuple(page.items), page_info=page.page)

        logger.debug(
            "Loaded page %s of %s (%s policies)",
            page.page.current_page,
            page.page.last_page,
            page.page.total,
        )
        return Ok(None)

    @beartype
    async def load_one(self, policy_id: int) -> Result[Policy, Failure]:
        """Fetch one policy into ``current``."""
        with self._pending_operation() as changes:
            result = await self._call("load_one", lambda: self._gateway.get(policy_id))
            if isinstance(result, Err):
                changes["last_error"] = result.unwrap_err().message
                return result

            changes["current"] = result.unwrap()
        return result

    @beartype
    async def create(self, form: Mapping[str, Any]) -> Result[Policy, Failure]:
        """Validate and submit a new policy, prepending it on success.

        Page totals are not refreshed, so ``page_info`` lags behind until the
        next ``refresh_list``.
        """
        checked = validate(form, ShapeKind.POLICY)
        if isinstance(checked, Err):
            return Err(validation_failure(checked.unwrap_err()))
        draft: PolicyDraft = checked.unwrap()

        with self._pending_operation() as changes:
            result = await self._call(
                "create", lambda: self._gateway.create(draft_to_wire(draft))
            )
            if isinstance(result, Err):
                failure = result.unwrap_err().as_local_validation()
                changes["last_error"] = failure.message
                return Err(failure)

            policy = result.unwrap()
            changes["items"] = (policy, *self._state.items)

        logger.info("Created policy %s (%s)", policy.id, policy.policy_no)
        return Ok(policy)

    @beartype
    async def update(
        self, policy_id: int, form: Mapping[str, Any]
    ) -> Result[Policy, Failure]:
        """Validate and submit the supplied fields of an existing policy."""
        checked = validate(form, ShapeKind.POLICY_UPDATE)
        if isinstance(checked, Err):
            return Err(validation_failure(checked.unwrap_err()))
        partial: PolicyUpdate = checked.unwrap()

        with self._pending_operation() as changes:
            result = await self._call(
                "update",
                lambda: self._gateway.update(policy_id, update_to_wire(partial)),
            )
            if isinstance(result, Err):
                failure = result.unwrap_err().as_local_validation()
                changes["last_error"] = failure.message
                return Err(failure)

            policy = result.unwrap()
            state = self._state
            current = state.current
            if current is not None and current.id == policy_id:
                current = policy
            changes.update(
                items=tuple(
                    policy if item.id == policy_id else item for item in state.items
                ),
                current=current,
            )

        logger.info("Updated policy %s", policy_id)
        return Ok(policy)

    @beartype
    async def delete(self, policy_id: int) -> Result[None, Failure]:
        """Delete a policy and drop it from the list and ``current``."""
        with self._pending_operation() as changes:
            result = await self._call(
                "delete", lambda: self._gateway.delete(policy_id)
            )
            if isinstance(result, Err):
                changes["last_error"] = result.unwrap_err().message
                return result

            state = self._state
            current = state.current
            if current is not None and current.id == policy_id:
                current = None
            changes.update(
                items=tuple(item for item in state.items if item.id != policy_id),
                current=current,
            )

        logger.info("Deleted policy %s", policy_id)
        return Ok(None)

    @beartype
    async def generate_document(self, policy_id: int) -> Result[DocumentLink, Failure]:
        """Request the policy document; store state is left alone."""
        result = await self._call(
            "generate_document", lambda: self._gateway.generate_document(policy_id)
        )
        if isinstance(result, Err):
            logger.warning(
                "Document generation for policy %s failed: %s",
                policy_id,
                result.unwrap_err().message,
            )
        return result

    # Local state

    @beartype
    def set_filters(self, **changes: Any) -> PolicyFilters:
        """Merge ``changes`` into the filters without refreshing.

        Raises:
            pydantic.ValidationError: If a merged value is out of range
        """
        merged = PolicyFilters.model_validate(
            {**self._state.filters.model_dump(), **changes}
        )
        self._state = evolve(self._state, filters=merged)
        return merged

    @beartype
    def reset_page_filters(self, **changes: Any) -> PolicyFilters:
        """Merge ``changes`` and go back to the first page."""
        return self.set_filters(**{**changes, "page": 1})

    def clear_error(self) -> None:
        """Forget the last error message."""
        self._state = evolve(self._state, last_error=None)

    def clear_current(self) -> None:
        """Close the open policy."""
        self._state = evolve(self._state, current=None)

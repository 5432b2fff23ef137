# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Failure taxonomy shared by the gateway, the store and the auth service.

Operations never raise to their callers. They return ``Err(Failure(...))``
where ``Failure.kind`` tells the caller how to present the problem:

* ``VALIDATION_FAILED``: rejected locally before any network call.
* ``FIELD_VALIDATION_REJECTED``: the remote system answered 422.
* ``UNAUTHORIZED``: 401; the session has already been invalidated.
* ``NOT_FOUND``: 404 for get/update/delete/document.
* ``TRANSPORT_FAILURE``: network errors, timeouts, 5xx, undecodable bodies.
"""

from enum import Enum
from typing import TypeAlias

from attrs import field, frozen
from beartype import beartype

FieldErrors: TypeAlias = dict[str, list[str]]

ROOT_FIELD = "__root__"


class FailureKind(str, Enum):
    """Categories of failure surfaced by client operations."""

    VALIDATION_FAILED = "validation_failed"
    FIELD_VALIDATION_REJECTED = "field_validation_rejected"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"


@frozen
class Failure:
    """Structured failure returned inside ``Err``."""

    kind: FailureKind = field()
    message: str = field()
    field_errors: FieldErrors = field(factory=dict)
    status_code: int | None = field(default=None)

    @property
    def has_field_errors(self) -> bool:
        """Whether the failure carries per-field messages."""
        return bool(self.field_errors)

    @beartype
    def as_local_validation(self) -> "Failure":
        """Re-label a remote 422 so callers handle it like a local rejection."""
        if self.kind is not FailureKind.FIELD_VALIDATION_REJECTED:
            return self
        return Failure(
            kind=FailureKind.VALIDATION_FAILED,
            message=self.message,
            field_errors=self.field_errors,
            status_code=self.status_code,
        )


@beartype
def validation_failure(
    field_errors: FieldErrors, message: str = "The given data was invalid."
) -> Failure:
    """Build a local validation failure."""
    return Failure(
        kind=FailureKind.VALIDATION_FAILED,
        message=message,
        field_errors=field_errors,
    )


@beartype
def format_field_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as ``vehicles[0].coverages[1].limit``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = part
    return path or ROOT_FIELD

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Listing filters, pagination metadata and other list/document payloads."""

import math
from typing import Any

from beartype import beartype
from pydantic import ConfigDict, Field, field_validator

from .base import WireModelConfig
from .policy import Policy, PolicyStatus

DEFAULT_PER_PAGE = 15


@beartype
class PageInfo(WireModelConfig):
    """Pagination metadata as sent in a listing's ``meta`` block.

    ``from_``/``to`` form the 1-based inclusive display range; both are 0
    when the page holds no rows.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_assignment=True,
        validate_default=True,
        populate_by_name=True,
    )

    current_page: int = Field(1, ge=1, description="Current page number")
    last_page: int = Field(1, ge=1, description="Last available page")
    per_page: int = Field(DEFAULT_PER_PAGE, ge=1, description="Items per page")
    total: int = Field(0, ge=0, description="Total matching items")
    from_: int = Field(0, ge=0, alias="from", description="First row shown")
    to: int = Field(0, ge=0, description="Last row shown")

    @field_validator("from_", "to", mode="before")
    @classmethod
    def null_range_as_zero(cls, v: Any) -> Any:
        """The backend sends ``null`` bounds for an empty page."""
        return 0 if v is None else v

    @classmethod
    @beartype
    def empty(cls, per_page: int = DEFAULT_PER_PAGE) -> "PageInfo":
        """Metadata for a listing that has not been loaded yet."""
        return cls(per_page=per_page)

    @classmethod
    @beartype
    def from_counts(cls, total: int, page: int, per_page: int) -> "PageInfo":
        """Compute metadata for ``page`` of a result set of ``total`` rows."""
        last_page = max(1, math.ceil(total / per_page))
        first = (page - 1) * per_page + 1
        if total == 0 or first > total:
            first, last = 0, 0
        else:
            last = min(page * per_page, total)
        return cls(
            current_page=page,
            last_page=last_page,
            per_page=per_page,
            total=total,
            from_=first,
            to=last,
        )


@beartype
class PolicyFilters(WireModelConfig):
    """Active listing filters; empty values mean "no filter"."""

    search: str = Field("", max_length=255, description="Policy number or holder name")
    status: PolicyStatus | None = Field(None, description="Exact policy status")
    page: int = Field(1, ge=1, description="1-based page number")
    per_page: int = Field(DEFAULT_PER_PAGE, ge=1, le=100, description="Page size")

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_as_none(cls, v: Any) -> Any:
        """Forms submit an empty string for "any status"."""
        return None if v == "" else v

    @beartype
    def to_query(self) -> dict[str, str | int]:
        """Query parameters for ``GET /policies``, omitting empty filters."""
        params: dict[str, str | int] = {}
        if self.search:
            params["search"] = self.search
        if self.status is not None:
            params["status"] = self.status.value
        params["page"] = self.page
        params["per_page"] = self.per_page
        return params


@beartype
class PolicyPage(WireModelConfig):
    """One page of policies plus its metadata."""

    items: list[Policy] = Field(default_factory=list)
    page: PageInfo = Field(default_factory=PageInfo)


@beartype
class DocumentLink(WireModelConfig):
    """Result of a document generation request."""

    download_url: str = Field(..., min_length=1)
    message: str | None = None

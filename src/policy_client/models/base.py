# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for all client-side domain models.

Internal records use camelCase keys (``firstName``, ``garagingAddress``),
which the models expose as aliases over snake_case attributes. Records
coming from forms or the remote API may carry keys the client does not
know about yet; those are ignored rather than rejected.
"""

from beartype import beartype
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@beartype
class BaseModelConfig(BaseModel):
    """Base model with strict configuration for all domain entities.

    Enforces:
    - Immutability (frozen=True)
    - Unknown fields ignored (extra="ignore")
    - camelCase aliases, population by alias or attribute name
    - Automatic whitespace stripping
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @beartype
    def to_record(self, *, exclude_unset: bool = False) -> dict:
        """Dump the model as a JSON-safe camelCase record."""
        return self.model_dump(
            mode="json", by_alias=True, exclude_unset=exclude_unset
        )


@beartype
class WireModelConfig(BaseModel):
    """Base for payloads whose keys already use the wire's snake_case names."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

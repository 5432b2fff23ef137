# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Record validation and wire-format mapping."""

from .validation import SHAPES, ShapeKind, field_errors_from, is_valid, validate
from .wire import (
    INTERNAL_FIELD_NAMES,
    WIRE_FIELD_NAMES,
    draft_to_wire,
    from_wire,
    to_wire,
    update_to_wire,
)

__all__ = [
    "INTERNAL_FIELD_NAMES",
    "SHAPES",
    "ShapeKind",
    "WIRE_FIELD_NAMES",
    "draft_to_wire",
    "field_errors_from",
    "from_wire",
    "is_valid",
    "to_wire",
    "update_to_wire",
]

# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Domain models for the policy client."""

from .auth import AuthSession, LoginCredentials, RegistrationData, User
from .base import BaseModelConfig, WireModelConfig
from .pagination import DocumentLink, PageInfo, PolicyFilters, PolicyPage
from .policy import (
    WRITABLE_POLICY_FIELDS,
    Address,
    Coverage,
    CoverageType,
    Driver,
    Gender,
    LicenseStatus,
    MaritalStatus,
    Ownership,
    Policy,
    PolicyDraft,
    PolicyHolder,
    PolicyStatus,
    PolicyUpdate,
    Vehicle,
    VehicleUsage,
)

__all__ = [
    "WRITABLE_POLICY_FIELDS",
    "Address",
    "AuthSession",
    "BaseModelConfig",
    "Coverage",
    "CoverageType",
    "DocumentLink",
    "Driver",
    "Gender",
    "LicenseStatus",
    "LoginCredentials",
    "MaritalStatus",
    "Ownership",
    "PageInfo",
    "Policy",
    "PolicyDraft",
    "PolicyFilters",
    "PolicyHolder",
    "PolicyPage",
    "PolicyStatus",
    "PolicyUpdate",
    "RegistrationData",
    "User",
    "Vehicle",
    "VehicleUsage",
    "WireModelConfig",
]

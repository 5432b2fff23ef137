# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Client for the auto-insurance policy API.

Validates policy forms locally, talks to the remote API over HTTP and
keeps the list/detail state a user interface renders from.
"""

from .main import PolicyClient, build_client

__version__ = "0.1.0"

__all__ = ["PolicyClient", "build_client", "__version__"]

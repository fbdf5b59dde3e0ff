# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Domain entity."""

from .registry import DomainRegistry
from .table import DomainEntity

__all__ = ["DomainEntity", "DomainRegistry"]

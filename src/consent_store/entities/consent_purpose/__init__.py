# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent purpose entity."""

from .registry import ConsentPurposeRegistry
from .table import ConsentPurposeEntity

__all__ = ["ConsentPurposeEntity", "ConsentPurposeRegistry"]

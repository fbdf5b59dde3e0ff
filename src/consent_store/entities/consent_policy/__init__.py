# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent policy entity (versioned policy texts)."""

from .registry import ConsentPolicyRegistry
from .table import ConsentPolicyEntity

__all__ = ["ConsentPolicyEntity", "ConsentPolicyRegistry"]

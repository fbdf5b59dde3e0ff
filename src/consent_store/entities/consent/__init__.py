# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent entity."""

from .registry import ConsentRegistry
from .table import ConsentEntity

__all__ = ["ConsentEntity", "ConsentRegistry"]

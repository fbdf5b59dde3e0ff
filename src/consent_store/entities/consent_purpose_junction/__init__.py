# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent/purpose link entity."""

from .table import ConsentPurposeJunctionEntity

__all__ = ["ConsentPurposeJunctionEntity"]

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent record entity (action history)."""

from .table import ConsentRecordEntity

__all__ = ["ConsentRecordEntity"]

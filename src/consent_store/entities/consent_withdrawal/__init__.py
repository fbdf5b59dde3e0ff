# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent withdrawal entity."""

from .table import ConsentWithdrawalEntity

__all__ = ["ConsentWithdrawalEntity"]

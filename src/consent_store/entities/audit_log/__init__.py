# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Audit log entity."""

from .registry import AuditLogRegistry
from .table import AuditLogEntity

__all__ = ["AuditLogEntity", "AuditLogRegistry"]

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Subject entity."""

from .registry import SubjectRegistry
from .table import SubjectEntity

__all__ = ["SubjectEntity", "SubjectRegistry"]

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Database hooks: before/after interception of entity writes."""

from .pipeline import (
    create_with_hooks,
    run_after_hooks,
    run_before_hooks,
    update_many_with_hooks,
    update_with_hooks,
)
from .types import Abort, Continue, CustomOperation, HookResult, Transform

__all__ = [
    "Abort",
    "Continue",
    "CustomOperation",
    "HookResult",
    "Transform",
    "create_with_hooks",
    "run_after_hooks",
    "run_before_hooks",
    "update_many_with_hooks",
    "update_with_hooks",
]

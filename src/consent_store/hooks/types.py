# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Hook result types and hook registration shapes.

A before hook receives (data, context) and must return exactly one of:

    Abort()          stop the operation; the pipeline returns None
    Transform(data)  replace the working data and continue
    Continue()       keep the data unchanged and continue

Returning anything else (including None) is a HookFailureError. Abort
carries no reason: callers see the same None as "nothing written".

After hooks receive (record, context) and their return value is ignored.
Hooks may be plain functions or coroutines.

Hooks are registered as a list of per-entity maps, run in list order:

    [
        {"subject": {"create": {"before": check, "after": audit}}},
        {"consent": {"update": {"before": stamp}}},
    ]
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Union

HookOperation = Literal["create", "update"]
HookPhase = Literal["before", "after"]


@dataclass(frozen=True)
class Abort:
    """Veto the operation."""


@dataclass(frozen=True)
class Transform:
    """Continue with `data` as the new working data."""

    data: Mapping[str, Any]


@dataclass(frozen=True)
class Continue:
    """Continue with the data unchanged."""


HookResult = Union[Abort, Transform, Continue]

BeforeHook = Callable[..., Any]
AfterHook = Callable[..., Any]


@dataclass(frozen=True)
class CustomOperation:
    """Replacement for the adapter call inside a hook pipeline.

    fn(data) runs after the before hooks. Its result is used, and the
    adapter call skipped, when it is not None or when execute_main_fn is
    False. Otherwise the adapter runs with the same data.
    """

    fn: Callable[[dict[str, Any]], Any]
    execute_main_fn: bool = False


__all__ = [
    "Abort",
    "AfterHook",
    "BeforeHook",
    "Continue",
    "CustomOperation",
    "HookOperation",
    "HookPhase",
    "HookResult",
    "Transform",
]

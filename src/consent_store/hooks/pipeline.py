# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Hook pipeline around adapter writes.

Each write runs through:

    before hooks -> custom operation or adapter call -> after hooks

Before hooks run sequentially in registration order, each one seeing the
data as left by the previous one. An Abort ends the pipeline with None:
no adapter call and no after hooks. After hooks run only when the
operation produced a result; they get a copy of the stored record and
cannot change what the pipeline returns.

Exceptions raised by hooks, custom operations or the adapter propagate
unchanged.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..errors import HookFailureError
from .types import Abort, Continue, CustomOperation, HookOperation, HookPhase, Transform

if TYPE_CHECKING:
    from ..adapters.base import Adapter
    from ..adapters.where import Where
    from ..store_config import DatabaseHook

logger = logging.getLogger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _hooks_for(
    hooks: Sequence[DatabaseHook],
    model: str,
    operation: HookOperation,
    phase: HookPhase,
) -> list[Callable[..., Any]]:
    """Registered hook functions for model/operation/phase, in order."""
    found = []
    for hook_set in hooks:
        fn = hook_set.get(model, {}).get(operation, {}).get(phase)
        if fn is not None:
            found.append(fn)
    return found


def _registered(adapter: Adapter, hooks: Sequence[DatabaseHook] | None) -> Sequence[DatabaseHook]:
    if hooks is not None:
        return hooks
    return adapter.options.database_hooks if adapter.options else []


async def run_before_hooks(
    data: Mapping[str, Any],
    model: str,
    operation: HookOperation,
    hooks: Sequence[DatabaseHook],
    context: Any = None,
) -> dict[str, Any] | None:
    """Run before hooks; return the working data, or None on Abort.

    Raises:
        HookFailureError: A hook returned something other than a HookResult.
    """
    current = dict(data)
    for hook in _hooks_for(hooks, model, operation, "before"):
        result = await _resolve(hook(current, context))
        if isinstance(result, Abort):
            logger.debug("%s %s aborted by %s", operation, model, getattr(hook, "__name__", hook))
            return None
        if isinstance(result, Transform):
            if not isinstance(result.data, Mapping):
                raise HookFailureError(
                    f"Hook {getattr(hook, '__name__', hook)!r} returned Transform with "
                    f"{type(result.data).__name__} data, expected a mapping",
                    meta={"model": model, "operation": operation},
                )
            current = dict(result.data)
            continue
        if isinstance(result, Continue):
            continue
        raise HookFailureError(
            f"Hook {getattr(hook, '__name__', hook)!r} for {operation} {model} returned "
            f"{type(result).__name__}, expected Abort, Transform or Continue",
            meta={"model": model, "operation": operation},
        )
    return current


async def run_after_hooks(
    record: Mapping[str, Any],
    model: str,
    operation: HookOperation,
    hooks: Sequence[DatabaseHook],
    context: Any = None,
) -> None:
    """Run after hooks on a copy of the stored record."""
    for hook in _hooks_for(hooks, model, operation, "after"):
        await _resolve(hook(copy.deepcopy(dict(record)), context))


async def _execute(
    data: dict[str, Any],
    custom_fn: CustomOperation | None,
    main: Callable[[dict[str, Any]], Awaitable[Any]],
) -> Any:
    if custom_fn is not None:
        result = await _resolve(custom_fn.fn(data))
        if result is not None or not custom_fn.execute_main_fn:
            return result
    return await main(data)


async def create_with_hooks(
    adapter: Adapter,
    *,
    model: str,
    data: Mapping[str, Any],
    hooks: Sequence[DatabaseHook] | None = None,
    custom_fn: CustomOperation | None = None,
    context: Any = None,
) -> dict[str, Any] | None:
    """Create a record through the hook pipeline.

    Args:
        adapter: Adapter performing the write.
        model: Entity name.
        data: Entity data.
        hooks: Hook maps (defaults to adapter.options.database_hooks).
        custom_fn: Optional replacement for adapter.create.
        context: Request context passed to every hook.

    Returns:
        The created record, or None if a hook aborted or the custom
        operation produced nothing.
    """
    registered = _registered(adapter, hooks)
    working = await run_before_hooks(data, model, "create", registered, context)
    if working is None:
        return None

    async def main(values: dict[str, Any]) -> dict[str, Any]:
        return await adapter.create(model=model, data=values)

    created = await _execute(working, custom_fn, main)
    if created is not None:
        await run_after_hooks(created, model, "create", registered, context)
    return created


async def update_with_hooks(
    adapter: Adapter,
    *,
    model: str,
    where: Where,
    data: Mapping[str, Any],
    hooks: Sequence[DatabaseHook] | None = None,
    custom_fn: CustomOperation | None = None,
    context: Any = None,
) -> dict[str, Any] | None:
    """Update records through the hook pipeline, returning the first one."""
    registered = _registered(adapter, hooks)
    working = await run_before_hooks(data, model, "update", registered, context)
    if working is None:
        return None

    async def main(values: dict[str, Any]) -> dict[str, Any] | None:
        return await adapter.update(model=model, where=where, update=values)

    updated = await _execute(working, custom_fn, main)
    if updated is not None:
        await run_after_hooks(updated, model, "update", registered, context)
    return updated


async def update_many_with_hooks(
    adapter: Adapter,
    *,
    model: str,
    where: Where,
    data: Mapping[str, Any],
    hooks: Sequence[DatabaseHook] | None = None,
    custom_fn: CustomOperation | None = None,
    context: Any = None,
) -> list[dict[str, Any]] | None:
    """Update records through the hook pipeline, returning all of them.

    After hooks run once per updated record.
    """
    registered = _registered(adapter, hooks)
    working = await run_before_hooks(data, model, "update", registered, context)
    if working is None:
        return None

    async def main(values: dict[str, Any]) -> list[dict[str, Any]]:
        return await adapter.update_many(model=model, where=where, update=values)

    updated = await _execute(working, custom_fn, main)
    if updated:
        for record in updated:
            await run_after_hooks(record, model, "update", registered, context)
    return updated


__all__ = [
    "create_with_hooks",
    "run_after_hooks",
    "run_before_hooks",
    "update_many_with_hooks",
    "update_with_hooks",
]

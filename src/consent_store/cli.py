# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CLI for consent-store (consent-store command).

Inspection and setup commands over a configured store. The database comes
from --db or CONSENT_STORE_DB; without either the in-memory store is used.

Commands:
    schema: Show entities, or the fields of one entity
    init: Create missing SQL tables
    stats: Record count per entity
    entities: List records of one entity
    version: Show version info
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .errors import ConsentStoreError
from .store import ConsentStore
from .store_config import StoreOptions, config_from_env, parse_connection_string

console = Console()

T = TypeVar("T")


def build_options(db: str | None) -> StoreOptions:
    """Options from the environment, with --db taking precedence."""
    options = config_from_env()
    if db:
        options = replace(options, backend=parse_connection_string(db))
    return options


def run_with_store(options: StoreOptions, action: Callable[[ConsentStore], Awaitable[T]]) -> T:
    """Run an async action against a fresh store, always shutting it down.

    Store errors are printed and end the command with exit code 1.
    """

    async def runner() -> T:
        store = ConsentStore(options)
        try:
            return await action(store)
        finally:
            await store.shutdown()

    try:
        return asyncio.run(runner())
    except ConsentStoreError as e:
        console.print(f"[red]error: {e.message}[/red]")
        sys.exit(1)


def format_value(value: Any) -> str:
    if value is None:
        return "[dim]-[/dim]"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


# CLI Commands
# ============================================================================


@click.group()
@click.option(
    "--db",
    default=None,
    help="Database path or URL (default: $CONSENT_STORE_DB or in-memory).",
)
@click.option(
    "--log-level",
    default="WARNING",
    envvar="CONSENT_STORE_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level.",
)
@click.pass_context
def cli(ctx: click.Context, db: str | None, log_level: str) -> None:
    """Consent Store - storage core for consent management."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    try:
        ctx.obj = build_options(db)
    except ConsentStoreError as e:
        console.print(f"[red]error: {e.message}[/red]")
        sys.exit(1)


@cli.command("schema")
@click.argument("model", required=False)
@click.pass_obj
def schema_cmd(options: StoreOptions, model: str | None) -> None:
    """Show entities, or the fields of MODEL."""

    async def action(store: ConsentStore) -> None:
        if model is None:
            table = Table(title="Entities")
            table.add_column("Model", style="cyan")
            table.add_column("Table")
            table.add_column("Prefix")
            table.add_column("Fields", justify="right")
            for name, entity in sorted(store.schema.items()):
                table.add_row(
                    name, entity.entity_name, entity.entity_prefix, str(len(entity.fields))
                )
            console.print(table)
            return

        entity = store.adapter.transformer.get_schema(model)
        table = Table(title=f"{model} ({entity.entity_name})")
        table.add_column("Field", style="cyan")
        table.add_column("Type")
        table.add_column("Column")
        table.add_column("Required")
        table.add_column("Default")
        table.add_row("id", "string", "id", "yes", f"{entity.entity_prefix}_<uuid>")
        for field in entity.fields.values():
            default = field.default
            if callable(default):
                default = getattr(default, "__name__", None)
            table.add_row(
                field.name,
                field.type,
                field.storage_name or field.name,
                "yes" if field.required else "",
                format_value(default),
            )
        console.print(table)

    run_with_store(options, action)


@cli.command("init")
@click.pass_obj
def init_cmd(options: StoreOptions) -> None:
    """Create missing tables for every entity."""

    async def action(store: ConsentStore) -> str:
        await store.init()
        return store.adapter.id

    backend = run_with_store(options, action)
    console.print(f"[green]Schema ready[/green] ({backend})")


@cli.command("stats")
@click.pass_obj
def stats_cmd(options: StoreOptions) -> None:
    """Show the record count of every entity."""

    async def action(store: ConsentStore) -> list[tuple[str, int]]:
        return [
            (name, await store.adapter.count(model=name))
            for name in sorted(store.schema)
        ]

    counts = run_with_store(options, action)

    table = Table(title="Records")
    table.add_column("Model", style="cyan")
    table.add_column("Count", justify="right")
    for name, count in counts:
        table.add_row(name, str(count))
    console.print(table)


@cli.command("entities")
@click.argument("model")
@click.option("--limit", "-n", default=20, show_default=True, help="Maximum records to show.")
@click.pass_obj
def entities_cmd(options: StoreOptions, model: str, limit: int) -> None:
    """List records of MODEL."""

    async def action(store: ConsentStore) -> tuple[list[str], list[dict[str, Any]]]:
        columns = ["id", *store.adapter.transformer.get_schema(model).field_names]
        rows = await store.adapter.find_many(model=model, limit=limit)
        return columns, rows

    columns, rows = run_with_store(options, action)

    if not rows:
        console.print(f"[dim]No {model} records[/dim]")
        return

    table = Table(title=model)
    for column in columns:
        table.add_column(column, style="cyan" if column == "id" else None)
    for row in rows:
        table.add_row(*(format_value(row.get(column)) for column in columns))
    console.print(table)


@cli.command("version")
def version_cmd() -> None:
    """Show version information."""
    from consent_store import __version__

    console.print(f"consent-store {__version__}")


if __name__ == "__main__":
    cli()

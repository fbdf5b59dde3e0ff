# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for transaction atomicity and the non-transactional fallback."""

from __future__ import annotations

import logging

import pytest

from consent_store import AdvancedOptions, ConsentStore, MemoryBackend, SqlBackend, StoreOptions
from consent_store.adapters import SqlAdapter
from consent_store.errors import DatabaseQueryError


async def create_two(tx):
    """Create a subject, then fail on a duplicate id."""
    await tx.create(model="subject", data={"id": "sub_dup"})
    await tx.create(model="subject", data={"id": "sub_dup"})


class TestAtomicity:
    """All or nothing, on every backend."""

    async def test_rollback_on_error(self, consent_store: ConsentStore):
        """A failing second write leaves no record behind."""
        with pytest.raises(DatabaseQueryError):
            await consent_store.transaction(create_two)
        assert await consent_store.adapter.count(model="subject") == 0

    async def test_commit(self, consent_store: ConsentStore):
        """Writes are visible after the callback returns."""

        async def create(tx):
            subject = await tx.create(model="subject", data={})
            await tx.create(model="audit_log", data={
                "entity_type": "subject",
                "entity_id": subject["id"],
                "action_type": "create",
            })
            return subject["id"]

        subject_id = await consent_store.transaction(create)
        where = [{"field": "id", "value": subject_id}]
        assert await consent_store.adapter.find_one(model="subject", where=where)
        assert await consent_store.adapter.count(model="audit_log") == 1

    async def test_callback_error_propagates(self, consent_store: ConsentStore):
        """Exceptions from the callback are re-raised unchanged."""

        async def fail(tx):
            await tx.create(model="subject", data={})
            raise RuntimeError("stop")

        with pytest.raises(RuntimeError, match="stop"):
            await consent_store.transaction(fail)
        assert await consent_store.adapter.count(model="subject") == 0

    async def test_scoped_adapter_sees_own_writes(self, consent_store: ConsentStore):
        async def create_and_read(tx):
            created = await tx.create(model="subject", data={"external_id": "u1"})
            where = [{"field": "id", "value": created["id"]}]
            return await tx.find_one(model="subject", where=where)

        found = await consent_store.transaction(create_and_read)
        assert found["external_id"] == "u1"

    async def test_memory_isolation(self):
        """The live memory store is untouched until the callback returns."""
        store = ConsentStore(StoreOptions(backend=MemoryBackend()))

        async def create(tx):
            await tx.create(model="subject", data={})
            assert await store.adapter.count(model="subject") == 0
            return await tx.count(model="subject")

        assert await store.transaction(create) == 1
        assert await store.adapter.count(model="subject") == 1

    async def test_nested_sql_transaction(self, sqlite_adapter: SqlAdapter):
        """A transaction inside a transaction joins the outer one."""

        async def outer(tx):
            await tx.create(model="subject", data={})
            return await tx.transaction(callback=create_two)

        with pytest.raises(DatabaseQueryError):
            await sqlite_adapter.transaction(callback=outer)
        assert await sqlite_adapter.count(model="subject") == 0


class TestDisabledTransactions:
    """advanced.disable_transactions runs callbacks directly."""

    @pytest.mark.parametrize("backend", ["memory", "sqlite"])
    async def test_fallback_warns_and_keeps_partial_writes(self, backend, tmp_path, caplog):
        if backend == "memory":
            store_backend = MemoryBackend()
        else:
            store_backend = SqlBackend("sqlite", str(tmp_path / "consent.db"))
        store = ConsentStore(
            StoreOptions(backend=store_backend, advanced=AdvancedOptions(disable_transactions=True))
        )
        await store.init()
        try:
            with caplog.at_level(logging.WARNING):
                with pytest.raises(DatabaseQueryError):
                    await store.transaction(create_two)
            assert "Transactions disabled" in caplog.text
            assert await store.adapter.count(model="subject") == 1
        finally:
            await store.shutdown()


class TestUnsupportedTransactions:
    """Engines without transaction support fall back with a warning."""

    async def test_begin_unsupported(self, sqlite_adapter: SqlAdapter, monkeypatch, caplog):
        import aiosqlite

        async def begin(conn):
            raise aiosqlite.OperationalError("transactions are not supported by this engine")

        monkeypatch.setattr(sqlite_adapter.driver, "begin", begin)

        async def create(tx):
            assert tx is sqlite_adapter
            return await tx.create(model="subject", data={})

        with caplog.at_level(logging.WARNING):
            created = await sqlite_adapter.transaction(callback=create)
        assert created["id"].startswith("sub_")
        assert "does not support transactions" in caplog.text

    async def test_begin_other_error(self, sqlite_adapter: SqlAdapter, monkeypatch):
        """Other BEGIN failures are query errors."""
        import aiosqlite

        async def begin(conn):
            raise aiosqlite.OperationalError("database is locked")

        monkeypatch.setattr(sqlite_adapter.driver, "begin", begin)

        async def create(tx):
            return await tx.create(model="subject", data={})

        with pytest.raises(DatabaseQueryError, match="database is locked"):
            await sqlite_adapter.transaction(callback=create)

"""Unit tests for mapping repositories."""

import asyncpg
import pytest

from po_intake.pipeline.config.constants import MAX_RETRIES
from po_intake.pipeline.core.exceptions import MappingStoreError
from po_intake.pipeline.repositories.inventory_mapping import (
    InMemoryInventoryMappingRepository,
    PostgresInventoryMappingRepository,
    mapping_key,
)
from po_intake.pipeline.utils import retry as retry_module
from tests.fakes import SAMPLE_RECORDS

ROW = {
    "style_code": "PC61",
    "color": "Black",
    "size": "L",
    "inventory_key": "PC61BLK",
    "size_index": "L",
    "warehouse": "ATL",
    "description": None,
    "active": True,
}


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool

    async def fetchrow(self, sql, *args):
        self.pool.queries.append(args)
        if self.pool.failures:
            raise self.pool.failures.pop(0)
        return self.pool.row


class _Acquire:
    def __init__(self, pool):
        self.pool = pool

    async def __aenter__(self):
        return FakeConnection(self.pool)

    async def __aexit__(self, *exc):
        return False


class FakePool:
    def __init__(self, row=None, failures=None):
        self.row = row
        self.failures = list(failures or [])
        self.queries = []

    def acquire(self):
        return _Acquire(self)


class FakeDbManager:
    def __init__(self, pool):
        self.pool = pool

    async def get_pool(self):
        return self.pool


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    async def fake_sleep(seconds):
        return None

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)


class TestMappingKey:
    def test_normalization(self):
        assert mapping_key(" pc61 ", "BLACK", "xl") == ("PC61", "black", "XL")


class TestInMemoryRepository:
    @pytest.mark.asyncio
    async def test_color_case_insensitive(self):
        repo = InMemoryInventoryMappingRepository(SAMPLE_RECORDS)
        record = await repo.find("PC61", "black", "L")
        assert record.inventory_key == "PC61BLK"

    @pytest.mark.asyncio
    async def test_unknown_key(self):
        repo = InMemoryInventoryMappingRepository(SAMPLE_RECORDS)
        assert await repo.find("PC61", "Purple", "L") is None


class TestPostgresRepository:
    @pytest.mark.asyncio
    async def test_row_mapped_to_record(self):
        pool = FakePool(row=ROW)
        repo = PostgresInventoryMappingRepository(FakeDbManager(pool))

        record = await repo.find("pc61", "Black", "l")

        assert record.inventory_key == "PC61BLK"
        assert record.warehouse == "ATL"
        assert pool.queries == [("PC61", "Black", "L")]

    @pytest.mark.asyncio
    async def test_no_row_is_none(self):
        repo = PostgresInventoryMappingRepository(FakeDbManager(FakePool(row=None)))
        assert await repo.find("PC61", "Purple", "L") is None

    @pytest.mark.asyncio
    async def test_transient_error_retried(self):
        pool = FakePool(row=ROW, failures=[ConnectionResetError("reset")])
        repo = PostgresInventoryMappingRepository(FakeDbManager(pool))

        record = await repo.find("PC61", "Black", "L")

        assert record is not None
        assert len(pool.queries) == 2

    @pytest.mark.asyncio
    async def test_persistent_failure_raises_mapping_store_error(self):
        pool = FakePool(failures=[OSError("refused")] * 5)
        repo = PostgresInventoryMappingRepository(FakeDbManager(pool))

        with pytest.raises(MappingStoreError):
            await repo.find("PC61", "Black", "L")
        assert len(pool.queries) == MAX_RETRIES

    @pytest.mark.asyncio
    async def test_query_error_not_retried(self):
        pool = FakePool(failures=[asyncpg.PostgresError("bad sql")])
        repo = PostgresInventoryMappingRepository(FakeDbManager(pool))

        with pytest.raises(MappingStoreError):
            await repo.find("PC61", "Black", "L")
        assert len(pool.queries) == 1

"""Read-only access to the vendor -> supplier inventory mapping table."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Protocol

import asyncpg

from po_intake.pipeline.config.constants import MAPPING_TABLE
from po_intake.pipeline.core.database_manager import DatabaseManager
from po_intake.pipeline.core.exceptions import MappingStoreError
from po_intake.pipeline.models.dto import InventoryMappingRecord
from po_intake.pipeline.utils.retry import retry_on_db_error

logger = logging.getLogger(__name__)

FIND_MAPPING_SQL = f"""
    SELECT style_code, color, size, inventory_key, size_index, warehouse,
           description, active
    FROM {MAPPING_TABLE}
    WHERE style_code = $1
      AND lower(color) = lower($2)
      AND size = $3
      AND active
    LIMIT 1
"""

TRANSIENT_DB_ERRORS = (
    asyncpg.InterfaceError,
    asyncio.TimeoutError,
    OSError,
)


def mapping_key(style_code: str, color: str, size: str) -> tuple[str, str, str]:
    """Lookup key: style and size upper-cased, color compared case-insensitively."""
    return (style_code.strip().upper(), color.strip().lower(), size.strip().upper())


class InventoryMappingRepository(Protocol):
    async def find(
        self, style_code: str, color: str, size: str
    ) -> Optional[InventoryMappingRecord]: ...


class InMemoryInventoryMappingRepository:
    """Dictionary-backed store used without a database and in tests."""

    def __init__(self, records: Iterable[InventoryMappingRecord] = ()):
        self._records: dict[tuple[str, str, str], InventoryMappingRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: InventoryMappingRecord) -> None:
        self._records[mapping_key(record.style_code, record.color, record.size)] = record

    def __len__(self) -> int:
        return len(self._records)

    async def find(
        self, style_code: str, color: str, size: str
    ) -> Optional[InventoryMappingRecord]:
        record = self._records.get(mapping_key(style_code, color, size))
        if record is None or not record.active:
            return None
        return record


class PostgresInventoryMappingRepository:
    """asyncpg-backed store reading active rows of `inventory_mappings`."""

    def __init__(self, db_manager: DatabaseManager):
        self._db = db_manager

    @retry_on_db_error(retry_on=TRANSIENT_DB_ERRORS)
    async def _fetch_row(self, style_code: str, color: str, size: str):
        pool = await self._db.get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchrow(FIND_MAPPING_SQL, style_code, color, size)

    async def find(
        self, style_code: str, color: str, size: str
    ) -> Optional[InventoryMappingRecord]:
        style, _, size_key = mapping_key(style_code, color, size)
        try:
            row = await self._fetch_row(style, color.strip(), size_key)
        except (asyncpg.PostgresError, RuntimeError, *TRANSIENT_DB_ERRORS) as e:
            logger.error(
                "Mapping lookup failed",
                extra={"service": "mapping_store", "error_code": type(e).__name__},
            )
            raise MappingStoreError(str(e) or type(e).__name__) from e

        if row is None:
            return None
        return InventoryMappingRecord(
            style_code=row["style_code"],
            color=row["color"],
            size=row["size"],
            inventory_key=row["inventory_key"],
            size_index=row["size_index"],
            warehouse=row["warehouse"],
            description=row["description"],
            active=row["active"],
        )

"""Database setup script - creates inventory_mappings and loads sample rows.

Reads the same DB_* variables as the service (see po_intake.core.settings).
Existing rows for the sample keys are replaced.
"""

import asyncio

import asyncpg
from dotenv import load_dotenv

load_dotenv()

from po_intake.core.settings import db_settings  # noqa: E402
from po_intake.pipeline.config.constants import MAPPING_TABLE  # noqa: E402

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {MAPPING_TABLE} (
    id BIGSERIAL PRIMARY KEY,

    -- Vendor side (as printed on the purchase document)
    style_code VARCHAR(20) NOT NULL,
    color VARCHAR(20) NOT NULL,
    size VARCHAR(10) NOT NULL,

    -- Supplier side
    inventory_key VARCHAR(50) NOT NULL,
    size_index VARCHAR(10) NOT NULL,
    warehouse VARCHAR(10) NOT NULL DEFAULT 'ATL',

    description TEXT,
    active BOOLEAN NOT NULL DEFAULT TRUE,
    inserted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

CREATE_INDEXES_SQL = [
    f"CREATE UNIQUE INDEX IF NOT EXISTS idx_{MAPPING_TABLE}_lookup "
    f"ON {MAPPING_TABLE}(style_code, lower(color), size);",
    f"CREATE INDEX IF NOT EXISTS idx_{MAPPING_TABLE}_active ON {MAPPING_TABLE}(active);",
]

UPSERT_SQL = f"""
INSERT INTO {MAPPING_TABLE}
    (style_code, color, size, inventory_key, size_index, warehouse, description)
VALUES ($1, $2, $3, $4, $5, $6, $7)
ON CONFLICT (style_code, lower(color), size) DO UPDATE SET
    inventory_key = EXCLUDED.inventory_key,
    size_index = EXCLUDED.size_index,
    warehouse = EXCLUDED.warehouse,
    description = EXCLUDED.description,
    active = TRUE,
    updated_at = NOW();
"""

SAMPLE_MAPPINGS = [
    (
        "PC61",
        "Black",
        "L",
        "PC61BLK",
        "L",
        "ATL",
        "Port & Company Essential T-Shirt - Black",
    ),
    (
        "PC61",
        "Navy",
        "XL",
        "PC61NVY",
        "XL",
        "ATL",
        "Port & Company Essential T-Shirt - Navy",
    ),
]


async def seed_database():
    """Connect to PostgreSQL, create the mapping table and upsert samples."""
    print(f"Connecting to {db_settings.DB_HOST}:{db_settings.DB_PORT}/{db_settings.DB_NAME}...")

    conn = await asyncpg.connect(
        host=db_settings.DB_HOST,
        port=db_settings.DB_PORT,
        database=db_settings.DB_NAME,
        user=db_settings.DB_USER,
        password=db_settings.DB_PASSWORD.get_secret_value(),
        timeout=10.0,
    )
    try:
        print(f"Creating table '{MAPPING_TABLE}'...")
        await conn.execute(CREATE_TABLE_SQL)
        for idx_sql in CREATE_INDEXES_SQL:
            await conn.execute(idx_sql)

        print("Inserting sample mappings...")
        async with conn.transaction():
            await conn.executemany(UPSERT_SQL, SAMPLE_MAPPINGS)

        count = await conn.fetchval(f"SELECT COUNT(*) FROM {MAPPING_TABLE} WHERE active")
        print(f"Active mappings: {count}")
    finally:
        await conn.close()

    print("Database seeded successfully!")


if __name__ == "__main__":
    if not db_settings.DB_HOST:
        raise SystemExit("DB_HOST is not set")
    asyncio.run(seed_database())

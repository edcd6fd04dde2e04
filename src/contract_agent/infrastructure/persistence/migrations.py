"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the factory.
"""

from __future__ import annotations

import logging

from contract_agent.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS contracts (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        counterparty_name TEXT NOT NULL,
        amount REAL NOT NULL,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK(status IN ('active', 'pending', 'expired', 'cancelled')),
        created_at TEXT NOT NULL
    )""",
]

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_contracts_counterparty ON contracts(counterparty_name)",
    "CREATE INDEX IF NOT EXISTS idx_contracts_status ON contracts(status)",
    "CREATE INDEX IF NOT EXISTS idx_contracts_end_date ON contracts(end_date)",
    "CREATE INDEX IF NOT EXISTS idx_contracts_amount ON contracts(amount)",
]


async def run_migrations(connection: AsyncSQLiteConnection) -> None:
    """Create all tables and indexes if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    async with connection.acquire() as conn:
        for ddl in _TABLES + _INDEXES:
            await conn.execute(ddl)
    logger.info("Contract tables created (or already exist) in %s.", connection.db_path)

"""
infrastructure.persistence.contract_repo - SQLite contract repository.

Every method is one connection and one logical statement (plus a read-back
where the port returns the row). Default ordering is newest first.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from contract_agent.domain.entities import Contract
from contract_agent.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_DEFAULT_ORDER = "ORDER BY created_at DESC, rowid DESC"

# Only these columns may appear in an UPDATE's SET clause.
_UPDATABLE_COLUMNS = frozenset({
    "name",
    "counterparty_name",
    "amount",
    "start_date",
    "end_date",
    "status",
})


class SQLiteContractRepository:
    """Async SQLite implementation of ContractRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def get_all(self) -> list[Contract]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(f"SELECT * FROM contracts {_DEFAULT_ORDER}")
            return [self._row_to_entity(r) for r in rows]

    async def get_by_id(self, contract_id: str) -> Optional[Contract]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM contracts WHERE id = ?", (contract_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def insert(self, contract: Contract) -> Contract:
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO contracts
                   (id, name, counterparty_name, amount, start_date, end_date,
                    status, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (contract.id, contract.name, contract.counterparty_name,
                 contract.amount, contract.start_date, contract.end_date,
                 contract.status, contract.created_at),
            )
        return contract

    async def update_by_id(self, contract_id: str, fields: dict[str, Any]) -> Optional[Contract]:
        columns = [c for c in fields if c in _UPDATABLE_COLUMNS]
        if not columns:
            return await self.get_by_id(contract_id)

        set_clause = ", ".join(f"{c} = ?" for c in columns)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"UPDATE contracts SET {set_clause} WHERE id = ?",
                (*(fields[c] for c in columns), contract_id),
            )
            if cursor.rowcount == 0:
                return None
            rows = await conn.execute_fetchall(
                "SELECT * FROM contracts WHERE id = ?", (contract_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def find_first_by_name_contains(self, text: str) -> tuple[Optional[Contract], int]:
        """Case-insensitive substring match on name.

        Returns the first match in default order and the total match count.
        """
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT * FROM contracts
                    WHERE instr(lower(name), lower(?)) > 0
                    {_DEFAULT_ORDER}""",
                (text,),
            )
        if not rows:
            return None, 0
        return self._row_to_entity(rows[0]), len(rows)

    async def delete_by_id(self, contract_id: str) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM contracts WHERE id = ?", (contract_id,))
            return cursor.rowcount > 0

    async def delete_by_ids(self, contract_ids: Sequence[str]) -> int:
        if not contract_ids:
            return 0
        placeholders = ", ".join("?" for _ in contract_ids)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"DELETE FROM contracts WHERE id IN ({placeholders})",
                tuple(contract_ids),
            )
            return cursor.rowcount

    @staticmethod
    def _row_to_entity(row) -> Contract:
        return Contract(
            id=row["id"],
            name=row["name"],
            counterparty_name=row["counterparty_name"],
            amount=float(row["amount"]),
            start_date=row["start_date"],
            end_date=row["end_date"],
            status=row["status"],
            created_at=row["created_at"],
        )

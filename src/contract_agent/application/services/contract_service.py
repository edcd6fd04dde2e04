"""
application.services.contract_service - Contract reads, writes and aggregates.

Every store-backed operation goes through this service. It talks to the
ContractRepository port only and raises domain exceptions; the executor
turns those into per-operation results.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence
from uuid import uuid4

from contract_agent.domain.entities import Contract, ContractView, with_calculations
from contract_agent.domain.exceptions import ContractNotFoundError, InvalidArgumentsError
from contract_agent.domain.filters import apply_filters
from contract_agent.domain.models import FilterCondition
from contract_agent.domain.ports import ContractRepository
from contract_agent.application.dto import ClientGroup, NewContract, StatusGroup

logger = logging.getLogger(__name__)

# Columns an update may touch. Derived fields and id/created_at are not here.
UPDATABLE_FIELDS = (
    "name",
    "counterparty_name",
    "amount",
    "start_date",
    "end_date",
    "status",
)


class ContractService:
    """Business operations over the contract store."""

    def __init__(self, repo: ContractRepository):
        self._repo = repo

    # ── Reads ───────────────────────────────────────────────────────────────

    async def list_contracts(self) -> list[Contract]:
        return await self._repo.get_all()

    async def list_views(self, now: Optional[datetime] = None) -> list[ContractView]:
        return [with_calculations(c, now) for c in await self._repo.get_all()]

    async def get(self, contract_id: str) -> Contract:
        contract = await self._repo.get_by_id(contract_id)
        if contract is None:
            raise ContractNotFoundError(f"Contract not found: {contract_id}")
        return contract

    # ── Writes ──────────────────────────────────────────────────────────────

    async def add(self, data: NewContract) -> Contract:
        contract = Contract(
            id=str(uuid4()),
            name=data.name,
            counterparty_name=data.counterparty_name,
            amount=data.amount,
            start_date=data.start_date,
            end_date=data.end_date,
            status=data.status,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        saved = await self._repo.insert(contract)
        logger.info("Added contract '%s' (id=%s)", saved.name, saved.id)
        return saved

    async def update(self, contract_id: str, updates: dict[str, Any]) -> Contract:
        """Apply a partial update by id.

        Raises:
            InvalidArgumentsError: no updatable field was supplied.
            ContractNotFoundError: no contract has this id.
        """
        fields = _clean_updates(updates)
        updated = await self._repo.update_by_id(contract_id, fields)
        if updated is None:
            raise ContractNotFoundError(f"Contract not found: {contract_id}")
        logger.info("Updated contract %s (%s)", contract_id, ", ".join(sorted(fields)))
        return updated

    async def update_by_name(self, name_fragment: str, updates: dict[str, Any]) -> Contract:
        fields = _clean_updates(updates)
        target = await self._find_by_name(name_fragment)
        updated = await self._repo.update_by_id(target.id, fields)
        if updated is None:
            # Removed between lookup and update.
            raise ContractNotFoundError(f'No contract found matching "{name_fragment}"')
        logger.info("Updated contract '%s' matched by name '%s'", updated.name, name_fragment)
        return updated

    async def delete(self, contract_id: str) -> list[Contract]:
        """Delete one contract by id and return the contracts that remain."""
        deleted = await self._repo.delete_by_id(contract_id)
        if not deleted:
            raise ContractNotFoundError(f"Contract not found: {contract_id}")
        logger.info("Deleted contract %s", contract_id)
        return await self._repo.get_all()

    async def delete_many(self, contract_ids: Sequence[str]) -> int:
        count = await self._repo.delete_by_ids(list(contract_ids))
        logger.info("Deleted %d of %d requested contracts", count, len(contract_ids))
        return count

    async def delete_by_name(self, name_fragment: str) -> tuple[Contract, list[Contract]]:
        """Delete the first contract whose name contains the fragment.

        Returns the deleted contract and the contracts that remain.
        """
        target = await self._find_by_name(name_fragment)
        if not await self._repo.delete_by_id(target.id):
            raise ContractNotFoundError(f'No contract found matching "{name_fragment}"')
        logger.info("Deleted contract '%s' matched by name '%s'", target.name, name_fragment)
        return target, await self._repo.get_all()

    # ── Aggregates ──────────────────────────────────────────────────────────

    async def total(self, conditions: Sequence[FilterCondition] | None = None) -> tuple[float, int]:
        """Sum of amounts over the (optionally filtered) contracts, with the count."""
        contracts = apply_filters(await self._repo.get_all(), conditions)
        return sum(c.amount for c in contracts), len(contracts)

    async def average(self, conditions: Sequence[FilterCondition] | None = None) -> tuple[float, int]:
        contracts = apply_filters(await self._repo.get_all(), conditions)
        if not contracts:
            return 0.0, 0
        return round(sum(c.amount for c in contracts) / len(contracts), 2), len(contracts)

    async def expiring(self, days_ahead: int, now: Optional[datetime] = None) -> list[ContractView]:
        """Contracts whose remaining days fall in (0, days_ahead]."""
        views = await self.list_views(now)
        return [v for v in views if 0 < v.days_remaining <= days_ahead]

    async def group_by_client(
        self,
        sort_by: str = "totalValue",
        direction: str = "desc",
        now: Optional[datetime] = None,
    ) -> list[ClientGroup]:
        groups: dict[str, ClientGroup] = {}
        for view in await self.list_views(now):
            contract = view.contract
            group = groups.setdefault(
                contract.counterparty_name,
                ClientGroup(client_name=contract.counterparty_name),
            )
            group.contract_count += 1
            group.total_value += contract.amount
            group.contracts.append(view)

        for group in groups.values():
            group.average_value = round(group.total_value / group.contract_count, 2)

        key = _GROUP_SORT_KEYS.get(sort_by, _GROUP_SORT_KEYS["totalValue"])
        return sorted(groups.values(), key=key, reverse=(direction == "desc"))

    async def group_by_status(
        self,
        include_value: bool = True,
        now: Optional[datetime] = None,
    ) -> list[StatusGroup]:
        groups: dict[str, StatusGroup] = {}
        for view in await self.list_views(now):
            contract = view.contract
            group = groups.setdefault(
                contract.status,
                StatusGroup(status=contract.status, total_value=0.0 if include_value else None),
            )
            group.contract_count += 1
            if include_value:
                group.total_value += contract.amount
            group.contracts.append(view)
        return list(groups.values())

    # ── Helpers ─────────────────────────────────────────────────────────────

    async def _find_by_name(self, name_fragment: str) -> Contract:
        contract, count = await self._repo.find_first_by_name_contains(name_fragment)
        if contract is None:
            raise ContractNotFoundError(f'No contract found matching "{name_fragment}"')
        if count > 1:
            logger.warning(
                "Name '%s' matched %d contracts; using newest match '%s' (id=%s)",
                name_fragment, count, contract.name, contract.id,
            )
        return contract


_GROUP_SORT_KEYS = {
    "totalValue": lambda g: g.total_value,
    "averageValue": lambda g: g.average_value,
    "contractCount": lambda g: g.contract_count,
    "clientName": lambda g: g.client_name.lower(),
}


def _clean_updates(updates: dict[str, Any]) -> dict[str, Any]:
    fields = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
    if not fields:
        raise InvalidArgumentsError("No updates provided")
    return fields

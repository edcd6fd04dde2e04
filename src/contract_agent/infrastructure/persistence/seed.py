"""
infrastructure.persistence.seed - Demo data for a fresh database.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from contract_agent.domain.entities import Contract
from contract_agent.domain.ports import ContractRepository

logger = logging.getLogger(__name__)

# (name, counterparty, amount, start, end, status)
DEMO_CONTRACTS = [
    ("Cloud Infrastructure Agreement", "Acme Corp", 250000.0, "2025-01-01", "2025-12-31", "active"),
    ("Software License Renewal", "Globex Industries", 85000.0, "2025-03-01", "2026-02-28", "active"),
    ("Consulting Services", "Initech", 120000.0, "2024-06-01", "2025-05-31", "expired"),
    ("Hardware Maintenance", "Acme Corp", 45000.0, "2025-02-15", "2026-02-14", "pending"),
    ("Data Analytics Platform", "Umbrella Holdings", 310000.0, "2025-04-01", "2027-03-31", "active"),
    ("Security Audit", "Stark Logistics", 30000.0, "2025-05-01", "2025-07-31", "cancelled"),
    ("Marketing Retainer", "Globex Industries", 60000.0, "2025-01-15", "2025-10-14", "active"),
    ("Support Desk Outsourcing", "Wayne Services", 150000.0, "2025-07-01", "2026-06-30", "pending"),
]


async def seed_contracts(repo: ContractRepository) -> int:
    """Insert the demo contracts. Returns how many were inserted."""
    base = datetime.now(timezone.utc)
    for offset, (name, counterparty, amount, start, end, status) in enumerate(DEMO_CONTRACTS):
        # Distinct timestamps keep the newest-first order deterministic.
        created_at = (base - timedelta(seconds=offset)).isoformat()
        await repo.insert(Contract(
            id=str(uuid4()),
            name=name,
            counterparty_name=counterparty,
            amount=amount,
            start_date=start,
            end_date=end,
            status=status,
            created_at=created_at,
        ))
    logger.info("Seeded %d demo contracts", len(DEMO_CONTRACTS))
    return len(DEMO_CONTRACTS)

"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Contract is what the store holds. ContractView is what leaves the
operation boundary: the stored fields plus the derived ones, recomputed
on every read and never written back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Optional

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30


class ContractStatus(str, Enum):
    """Lifecycle state of a contract."""
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@dataclass
class Contract:
    """A single contract row."""
    id: str = ""
    name: str = ""
    counterparty_name: str = ""
    amount: float = 0.0
    start_date: str = ""            # YYYY-MM-DD
    end_date: str = ""              # YYYY-MM-DD
    status: str = ContractStatus.PENDING.value
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase, no derived fields)."""
        return {
            "id": self.id,
            "name": self.name,
            "counterpartyName": self.counterparty_name,
            "amount": self.amount,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": self.status,
        }


@dataclass(frozen=True)
class ContractView:
    """A contract with its derived fields attached.

    duration_days, days_remaining and monthly_amount are only ever produced
    by with_calculations(); nothing accepts them as input.
    """
    contract: Contract
    duration_days: int
    days_remaining: int
    monthly_amount: float

    @property
    def id(self) -> str:
        return self.contract.id

    @property
    def name(self) -> str:
        return self.contract.name

    def to_dict(self) -> dict[str, Any]:
        data = self.contract.to_dict()
        data["duration"] = self.duration_days
        data["daysRemaining"] = self.days_remaining
        data["monthlyAmount"] = self.monthly_amount
        return data


def _midnight_utc(value: str) -> datetime:
    return datetime.combine(date.fromisoformat(value), time.min, tzinfo=timezone.utc)


def _ceil_days(delta_seconds: float) -> int:
    return math.ceil(delta_seconds / SECONDS_PER_DAY)


def with_calculations(contract: Contract, now: Optional[datetime] = None) -> ContractView:
    """Attach duration, days remaining and monthly amount to a contract.

    Dates are read as UTC midnights. days_remaining is negative for
    contracts that have already ended. A zero-length contract has a
    monthly amount of 0.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    start = _midnight_utc(contract.start_date)
    end = _midnight_utc(contract.end_date)

    duration = _ceil_days((end - start).total_seconds())
    remaining = _ceil_days((end - now).total_seconds())
    if duration > 0:
        monthly = round(contract.amount / (duration / DAYS_PER_MONTH), 2)
    else:
        monthly = 0.0

    return ContractView(
        contract=contract,
        duration_days=duration,
        days_remaining=remaining,
        monthly_amount=monthly,
    )

"""
domain.filters - In-memory filtering of contracts by FilterCondition.

Used by the aggregate operations (total / average) which accept optional
filters. Column names are the wire names the model sees.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from contract_agent.domain.entities import Contract
from contract_agent.domain.models import FilterCondition

COLUMNS: dict[str, str] = {
    "name": "name",
    "counterpartyName": "counterparty_name",
    "amount": "amount",
    "startDate": "start_date",
    "endDate": "end_date",
    "status": "status",
}
NUMERIC_COLUMNS = frozenset({"amount"})


def _coerce(column: str, value: Any) -> Any:
    if column in NUMERIC_COLUMNS:
        return float(value)
    return str(value)


def _text(actual: Any) -> str:
    return str(actual).lower()


_COMPARATORS: dict[str, Callable[[Any, Any, Any], bool]] = {
    "equals": lambda a, v, _: a == v,
    "notEquals": lambda a, v, _: a != v,
    "contains": lambda a, v, _: _text(v) in _text(a),
    "startsWith": lambda a, v, _: _text(a).startswith(_text(v)),
    "endsWith": lambda a, v, _: _text(a).endswith(_text(v)),
    "greaterThan": lambda a, v, _: a > v,
    "lessThan": lambda a, v, _: a < v,
    "greaterThanOrEqual": lambda a, v, _: a >= v,
    "lessThanOrEqual": lambda a, v, _: a <= v,
    "between": lambda a, v, v2: v <= a <= v2,
}


def matches(contract: Contract, condition: FilterCondition) -> bool:
    """True when the contract satisfies one condition."""
    column = condition.column
    actual = _coerce(column, getattr(contract, COLUMNS[column]))
    value = _coerce(column, condition.value)
    value2 = _coerce(column, condition.value2) if condition.value2 is not None else None
    return _COMPARATORS[condition.operator](actual, value, value2)


def apply_filters(
    contracts: Iterable[Contract],
    conditions: Sequence[FilterCondition] | None,
) -> list[Contract]:
    """Keep contracts matching every condition (AND)."""
    if not conditions:
        return list(contracts)
    return [c for c in contracts if all(matches(c, cond) for cond in conditions)]

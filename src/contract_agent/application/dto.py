"""
application.dto - Data Transfer Objects for service input/output.

These are the structured results that services and the orchestrator return
to callers (tools, REST endpoints, CLI adapters).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from contract_agent.domain.entities import ContractView
from contract_agent.domain.models import OperationResult, camel_case

# Fields of the last successful tool result that are lifted to the top
# level of a chat response, so the caller can react without digging
# through toolResults.
SURFACED_FIELDS = (
    "contract",
    "contracts",
    "action",
    "filter",
    "sort",
    "search",
    "filters",
    "page_size",
    "page_number",
)


@dataclass(frozen=True)
class NewContract:
    """Input for creating a contract; id and created_at are assigned by the service."""
    name: str
    counterparty_name: str
    amount: float
    start_date: str
    end_date: str
    status: str = "pending"


@dataclass
class ClientGroup:
    """Contracts aggregated per counterparty, each with its derived fields."""
    client_name: str
    contract_count: int = 0
    total_value: float = 0.0
    average_value: float = 0.0
    contracts: list[ContractView] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "clientName": self.client_name,
            "contractCount": self.contract_count,
            "totalValue": self.total_value,
            "averageValue": self.average_value,
            "contracts": [v.to_dict() for v in self.contracts],
        }


@dataclass
class StatusGroup:
    """Contracts aggregated per status."""
    status: str
    contract_count: int = 0
    total_value: Optional[float] = None
    contracts: list[ContractView] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "contractCount": self.contract_count,
            "contracts": [v.to_dict() for v in self.contracts],
        }
        if self.total_value is not None:
            data["totalValue"] = self.total_value
        return data


@dataclass(frozen=True)
class ChatResponse:
    """Final structured response of one orchestration run.

    reason distinguishes "agent gave up" (iteration_limit) from "agent
    failed" (provider_error) when success is False.
    """
    success: bool
    message: str
    tool_results: tuple[OperationResult, ...] = ()
    reason: Optional[str] = None
    error: Optional[str] = None
    surfaced: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_tool_results(
        cls,
        message: str,
        tool_results: tuple[OperationResult, ...],
    ) -> ChatResponse:
        """Build a successful response, lifting record/intent fields of the last result."""
        surfaced: dict[str, Any] = {}
        last = tool_results[-1] if tool_results else None
        if last is not None and last.success and (last.carries_records or last.carries_view_intent):
            payload = last.to_dict()
            for name in SURFACED_FIELDS:
                if getattr(last, name) is not None:
                    key = camel_case(name)
                    surfaced[key] = payload[key]
        return cls(success=True, message=message, tool_results=tool_results, surfaced=surfaced)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "toolResults": [r.to_dict() for r in self.tool_results],
        }
        if self.reason is not None:
            data["reason"] = self.reason
        if self.error is not None:
            data["error"] = self.error
        data.update(self.surfaced)
        return data

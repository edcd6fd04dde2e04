"""
agent.tools.analytics - Aggregate and calculation operations.

Totals, averages, durations, monthly values, expiring contracts and
groupings. All of them read through ContractService; none write.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from contract_agent.domain.entities import with_calculations
from contract_agent.domain.models import OperationResult
from contract_agent.application.context import RequestContext
from contract_agent.agent.tools.base import Direction, FilterConditionInput, ToolInput
from contract_agent.agent.tools.contracts import ContractTool


def _money(value: float) -> str:
    return f"${value:,.2f}"


class AggregateInput(ToolInput):
    filters: Optional[List[FilterConditionInput]] = Field(
        default=None,
        description="Optional filters to apply before calculating",
    )

    def conditions(self):
        return [f.to_condition() for f in self.filters] if self.filters else None


class CalculateTotalValueTool(ContractTool):
    name = "calculateTotalValue"
    failure_text = "Failed to calculate total value"
    description = (
        "Calculate the sum of contract values, optionally filtered.\n"
        'Example: "what\'s the total value of all active contracts?"\n'
        'Example: "calculate total value for Acme Corp contracts"'
    )

    def get_schema(self) -> type[BaseModel]:
        return AggregateInput

    async def execute(self, ctx: RequestContext, args: AggregateInput) -> OperationResult:
        total, count = await self._service.total(args.conditions())
        return OperationResult(
            success=True,
            total_value=total,
            contract_count=count,
            message=f"Total value: {_money(total)}",
        )


class CalculateAverageValueTool(ContractTool):
    name = "calculateAverageValue"
    failure_text = "Failed to calculate average value"
    description = (
        "Calculate the average contract value, optionally filtered.\n"
        'Example: "what\'s the average value of our contracts?"'
    )

    def get_schema(self) -> type[BaseModel]:
        return AggregateInput

    async def execute(self, ctx: RequestContext, args: AggregateInput) -> OperationResult:
        average, count = await self._service.average(args.conditions())
        return OperationResult(
            success=True,
            average_value=average,
            contract_count=count,
            message=f"Average value: {_money(average)}",
        )


class OptionalContractIdInput(ToolInput):
    contract_id: Optional[str] = Field(
        default=None,
        description="Optional: specific contract ID. If omitted, calculates for all contracts",
    )


class CalculateContractDurationTool(ContractTool):
    name = "calculateContractDuration"
    failure_text = "Failed to calculate duration"
    description = (
        "Calculate duration in days for a specific contract or all contracts.\n"
        'Example: "how long is contract abc123?"\n'
        'Example: "show me contract durations"'
    )

    def get_schema(self) -> type[BaseModel]:
        return OptionalContractIdInput

    async def execute(self, ctx: RequestContext, args: OptionalContractIdInput) -> OperationResult:
        now = ctx.now()
        if args.contract_id:
            view = with_calculations(await self._service.get(args.contract_id), now)
            return OperationResult(
                success=True,
                contract_id=args.contract_id,
                duration=view.duration_days,
                message=f"Duration: {view.duration_days} days",
            )

        views = await self._service.list_views(now)
        return OperationResult(
            success=True,
            durations=[{"id": v.id, "name": v.name, "duration": v.duration_days} for v in views],
            message=f"Calculated durations for {len(views)} contracts",
        )


class CalculateMonthlyValueTool(ContractTool):
    name = "calculateMonthlyValue"
    failure_text = "Failed to calculate monthly value"
    description = (
        "Calculate monthly value (total value / duration in 30-day months) for contracts.\n"
        'Example: "what\'s the monthly value of contract abc123?"'
    )

    def get_schema(self) -> type[BaseModel]:
        return OptionalContractIdInput

    async def execute(self, ctx: RequestContext, args: OptionalContractIdInput) -> OperationResult:
        now = ctx.now()
        if args.contract_id:
            view = with_calculations(await self._service.get(args.contract_id), now)
            return OperationResult(
                success=True,
                contract_id=args.contract_id,
                monthly_value=view.monthly_amount,
                message=f"Monthly value: {_money(view.monthly_amount)}",
            )

        views = await self._service.list_views(now)
        return OperationResult(
            success=True,
            monthly_values=[
                {"id": v.id, "name": v.name, "monthlyAmount": v.monthly_amount} for v in views
            ],
            message=f"Calculated monthly values for {len(views)} contracts",
        )


class ExpiringInput(ToolInput):
    days_ahead: int = Field(default=30, ge=1, description="Number of days to look ahead")


class GetExpiringContractsTool(ContractTool):
    name = "getExpiringContracts"
    failure_text = "Failed to get expiring contracts"
    description = (
        "Get contracts expiring within a specified number of days. Already-ended contracts are excluded.\n"
        'Example: "show me contracts expiring in the next 30 days"\n'
        'Example: "which contracts are expiring soon?"'
    )

    def get_schema(self) -> type[BaseModel]:
        return ExpiringInput

    async def execute(self, ctx: RequestContext, args: ExpiringInput) -> OperationResult:
        expiring = await self._service.expiring(args.days_ahead, ctx.now())
        return OperationResult(
            success=True,
            contracts=[v.to_dict() for v in expiring],
            count=len(expiring),
            message=f"{len(expiring)} contracts expiring in the next {args.days_ahead} days",
        )


class GroupByClientInput(ToolInput):
    sort_by: Literal["totalValue", "averageValue", "contractCount", "clientName"] = Field(
        default="totalValue",
        description="How to sort the grouped results",
    )
    sort_direction: Direction = "desc"


class GroupByClientTool(ContractTool):
    name = "groupByClient"
    failure_text = "Failed to group by client"
    description = (
        "Group contracts by client and show aggregated data (count, total value, avg value).\n"
        'Example: "show me contracts grouped by client"\n'
        'Example: "which client has the most contract value?"'
    )

    def get_schema(self) -> type[BaseModel]:
        return GroupByClientInput

    async def execute(self, ctx: RequestContext, args: GroupByClientInput) -> OperationResult:
        groups = await self._service.group_by_client(args.sort_by, args.sort_direction, ctx.now())
        return OperationResult(
            success=True,
            groups=[g.to_dict() for g in groups],
            client_count=len(groups),
            message=f"Grouped contracts into {len(groups)} clients",
        )


class GroupByStatusInput(ToolInput):
    include_value: bool = Field(default=True, description="Include total value per status")


class GroupByStatusTool(ContractTool):
    name = "groupByStatus"
    failure_text = "Failed to group by status"
    description = (
        "Group contracts by status and show aggregated data.\n"
        'Example: "show me contract breakdown by status"'
    )

    def get_schema(self) -> type[BaseModel]:
        return GroupByStatusInput

    async def execute(self, ctx: RequestContext, args: GroupByStatusInput) -> OperationResult:
        groups = await self._service.group_by_status(args.include_value, ctx.now())
        summary = ", ".join(f"{g.status}: {g.contract_count}" for g in groups)
        return OperationResult(
            success=True,
            groups=[g.to_dict() for g in groups],
            message=f"Contracts by status: {summary}" if groups else "No contracts to group",
        )


def analytics_tools(service) -> list[ContractTool]:
    return [
        CalculateTotalValueTool(service),
        CalculateAverageValueTool(service),
        CalculateContractDurationTool(service),
        CalculateMonthlyValueTool(service),
        GetExpiringContractsTool(service),
        GroupByClientTool(service),
        GroupByStatusTool(service),
    ]

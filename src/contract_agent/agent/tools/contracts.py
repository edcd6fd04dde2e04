"""
agent.tools.contracts - Contract CRUD operations.

Thin wrappers around ContractService: validate, call the service once,
shape the OperationResult. Every contract that leaves here carries its
derived fields unless the caller explicitly opted out.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from contract_agent.domain.entities import with_calculations
from contract_agent.domain.models import OperationResult
from contract_agent.application.context import RequestContext
from contract_agent.application.dto import NewContract
from contract_agent.application.services.contract_service import ContractService
from contract_agent.agent.tools.base import (
    BaseTool,
    ContractFieldsInput,
    StatusName,
    ToolInput,
    check_iso_date,
)


class ContractTool(BaseTool):
    """Base for tools backed by ContractService."""

    def __init__(self, service: ContractService):
        self._service = service


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

class GetContractsInput(ToolInput):
    include_calculations: bool = Field(
        default=True,
        description="Include duration, daysRemaining and monthlyAmount",
    )


class GetContractsTool(ContractTool):
    name = "getContracts"
    failure_text = "Failed to fetch contracts"
    description = (
        "Get current contract data. Use this before performing operations that need to see existing data.\n"
        'Example: "what contracts do we have?" or "show me all contracts"'
    )

    def get_schema(self) -> type[BaseModel]:
        return GetContractsInput

    async def execute(self, ctx: RequestContext, args: GetContractsInput) -> OperationResult:
        contracts = await self._service.list_contracts()
        if args.include_calculations:
            rows = [with_calculations(c, ctx.now()).to_dict() for c in contracts]
        else:
            rows = [c.to_dict() for c in contracts]
        return OperationResult(
            success=True,
            contracts=rows,
            count=len(rows),
            message=f"Found {len(rows)} contracts",
        )


class ContractIdInput(ToolInput):
    id: str = Field(min_length=1, description="The unique ID of the contract")


class GetContractByIdInput(ContractIdInput):
    include_calculations: bool = Field(
        default=True,
        description="Include duration, daysRemaining and monthlyAmount",
    )


class GetContractByIdTool(ContractTool):
    name = "getContractById"
    failure_text = "Failed to fetch contract"
    description = 'Get a single contract by its ID. Example: "show me contract abc123"'

    def get_schema(self) -> type[BaseModel]:
        return GetContractByIdInput

    async def execute(self, ctx: RequestContext, args: GetContractByIdInput) -> OperationResult:
        contract = await self._service.get(args.id)
        data = with_calculations(contract, ctx.now()).to_dict() if args.include_calculations else contract.to_dict()
        return OperationResult(success=True, contract=data, message=f"Found contract: {contract.name}")


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

class AddContractInput(ToolInput):
    name: str = Field(min_length=1, description="Name/title of the contract")
    counterparty_name: str = Field(min_length=1, description="Client or company name")
    amount: float = Field(ge=0, description="Total contract value in dollars")
    start_date: str = Field(description="Contract start date in YYYY-MM-DD format")
    end_date: str = Field(description="Contract end date in YYYY-MM-DD format")
    status: StatusName = Field(default="pending", description="Current status of the contract")

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_are_iso(cls, v: str) -> str:
        return check_iso_date(v)


class AddContractTool(ContractTool):
    name = "addContract"
    failure_text = "Failed to add contract"
    description = (
        "Add a new contract to the table.\n"
        'Example: "add a new contract for Acme Corp worth 250000 starting January 1 2024 ending December 31 2024"'
    )

    def get_schema(self) -> type[BaseModel]:
        return AddContractInput

    async def execute(self, ctx: RequestContext, args: AddContractInput) -> OperationResult:
        contract = await self._service.add(NewContract(**args.model_dump()))
        return OperationResult(
            success=True,
            contract=with_calculations(contract, ctx.now()).to_dict(),
            message=f"Added contract: {contract.name}",
        )


class UpdateContractInput(ContractIdInput):
    updates: ContractFieldsInput = Field(description="Fields to update")


class UpdateContractTool(ContractTool):
    name = "updateContract"
    failure_text = "Failed to update contract"
    description = (
        "Update an existing contract by its ID. Only use this when you know the ID; "
        "when the user names the contract, use updateContractByName.\n"
        'Example: "change the value of contract abc123 to 300000"'
    )

    def get_schema(self) -> type[BaseModel]:
        return UpdateContractInput

    async def execute(self, ctx: RequestContext, args: UpdateContractInput) -> OperationResult:
        contract = await self._service.update(args.id, args.updates.to_updates())
        return OperationResult(
            success=True,
            contract=with_calculations(contract, ctx.now()).to_dict(),
            message=f"Updated contract {contract.id}",
        )


class UpdateByNameInput(ToolInput):
    name: str = Field(min_length=1, description="Full or partial contract name to match")
    updates: ContractFieldsInput = Field(description="Fields to update")


class UpdateContractByNameTool(ContractTool):
    name = "updateContractByName"
    failure_text = "Failed to update contract"
    description = (
        "Update a contract identified by (part of) its name. Matching is case-insensitive.\n"
        'Example: "set the Acme Cloud contract to active" -> name: "Acme Cloud", updates: {status: "active"}'
    )

    def get_schema(self) -> type[BaseModel]:
        return UpdateByNameInput

    async def execute(self, ctx: RequestContext, args: UpdateByNameInput) -> OperationResult:
        contract = await self._service.update_by_name(args.name, args.updates.to_updates())
        return OperationResult(
            success=True,
            contract=with_calculations(contract, ctx.now()).to_dict(),
            message=f"Updated contract: {contract.name}",
        )


# ---------------------------------------------------------------------------
# Deletes
# ---------------------------------------------------------------------------

class DeleteContractTool(ContractTool):
    name = "deleteContract"
    failure_text = "Failed to delete contract"
    description = (
        "Delete a contract by its ID. When the user names the contract, use deleteContractByName.\n"
        'Example: "remove contract abc123"'
    )

    def get_schema(self) -> type[BaseModel]:
        return ContractIdInput

    async def execute(self, ctx: RequestContext, args: ContractIdInput) -> OperationResult:
        remaining = await self._service.delete(args.id)
        now = ctx.now()
        return OperationResult(
            success=True,
            id=args.id,
            contracts=[with_calculations(c, now).to_dict() for c in remaining],
            message=f"Deleted contract {args.id}",
        )


class DeleteContractsInput(ToolInput):
    ids: List[str] = Field(min_length=1, description="Array of contract IDs to delete")


class DeleteContractsTool(ContractTool):
    name = "deleteContracts"
    failure_text = "Failed to delete contracts"
    description = (
        "Delete multiple contracts at once.\n"
        'Example: "delete all expired contracts" (use getContracts first to get IDs)'
    )

    def get_schema(self) -> type[BaseModel]:
        return DeleteContractsInput

    async def execute(self, ctx: RequestContext, args: DeleteContractsInput) -> OperationResult:
        count = await self._service.delete_many(args.ids)
        return OperationResult(success=True, deleted_count=count, message=f"Deleted {count} contracts")


class DeleteByNameInput(ToolInput):
    name: str = Field(min_length=1, description="Full or partial contract name to match")


class DeleteContractByNameTool(ContractTool):
    name = "deleteContractByName"
    failure_text = "Failed to delete contract"
    description = (
        "Delete a contract identified by (part of) its name. Matching is case-insensitive.\n"
        'Example: "delete the Globex maintenance contract" -> name: "Globex maintenance"'
    )

    def get_schema(self) -> type[BaseModel]:
        return DeleteByNameInput

    async def execute(self, ctx: RequestContext, args: DeleteByNameInput) -> OperationResult:
        deleted, remaining = await self._service.delete_by_name(args.name)
        now = ctx.now()
        return OperationResult(
            success=True,
            deleted_contract=with_calculations(deleted, now).to_dict(),
            contracts=[with_calculations(c, now).to_dict() for c in remaining],
            message=f"Deleted contract: {deleted.name}",
        )


def contract_tools(service: ContractService) -> list[BaseTool]:
    return [
        GetContractsTool(service),
        GetContractByIdTool(service),
        AddContractTool(service),
        UpdateContractTool(service),
        UpdateContractByNameTool(service),
        DeleteContractTool(service),
        DeleteContractsTool(service),
        DeleteContractByNameTool(service),
    ]

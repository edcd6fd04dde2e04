"""
agent.tools.base - Base tool interface and shared input models.

All operations inherit from BaseTool and return OperationResult. Each tool
declares a Pydantic input model; its JSON schema is what the model sees and
what the executor validates against.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from contract_agent.domain.models import FilterCondition, OperationResult
from contract_agent.application.context import RequestContext

ColumnName = Literal["name", "counterpartyName", "amount", "startDate", "endDate", "status"]
OperatorName = Literal[
    "equals",
    "notEquals",
    "contains",
    "startsWith",
    "endsWith",
    "greaterThan",
    "lessThan",
    "greaterThanOrEqual",
    "lessThanOrEqual",
    "between",
]
StatusName = Literal["active", "pending", "expired", "cancelled"]
Direction = Literal["asc", "desc"]
FilterValue = Union[int, float, str]


class ToolInput(BaseModel):
    """Base for every tool input model.

    Unknown keys are rejected, so derived fields (duration, daysRemaining,
    monthlyAmount) can never be passed in. Field names are snake_case in
    Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NoArguments(ToolInput):
    """Input schema for operations that take no arguments."""


class FilterConditionInput(ToolInput):
    """One filter condition: column <operator> value [and value2]."""

    column: ColumnName = Field(description="The column name to filter on")
    operator: OperatorName = Field(description="The comparison operator")
    value: FilterValue = Field(description="The value to compare against")
    value2: Optional[FilterValue] = Field(
        default=None,
        description='Second value, required for the "between" operator',
    )

    @model_validator(mode="after")
    def check_operands(self) -> FilterConditionInput:
        if self.operator == "between" and self.value2 is None:
            raise ValueError("operator 'between' requires both value and value2")
        if self.column == "amount":
            for operand in (self.value, self.value2):
                if isinstance(operand, str):
                    try:
                        float(operand)
                    except ValueError:
                        raise ValueError(f"amount filter value must be numeric, got {operand!r}")
        return self

    def to_condition(self) -> FilterCondition:
        return FilterCondition(
            column=self.column,
            operator=self.operator,
            value=self.value,
            value2=self.value2,
        )


def check_iso_date(value: Optional[str]) -> Optional[str]:
    """Reject anything that is not a YYYY-MM-DD calendar date."""
    if value is None:
        return value
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    if len(value) != 10:
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    return value


class ContractFieldsInput(ToolInput):
    """Partial contract fields accepted by the update operations."""

    name: Optional[str] = Field(default=None, min_length=1, description="Contract name/title")
    counterparty_name: Optional[str] = Field(
        default=None, min_length=1, description="Client or company name",
    )
    amount: Optional[float] = Field(default=None, ge=0, description="Total contract value in dollars")
    start_date: Optional[str] = Field(default=None, description="YYYY-MM-DD format")
    end_date: Optional[str] = Field(default=None, description="YYYY-MM-DD format")
    status: Optional[StatusName] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_are_iso(cls, v: Optional[str]) -> Optional[str]:
        return check_iso_date(v)

    def to_updates(self) -> dict:
        return self.model_dump(exclude_none=True)


class BaseTool(ABC):
    """Abstract base for all operations.

    category is "view" for pure intent operations and "store" for anything
    that goes through the contract store. failure_text is the error reported
    when the store raises during execute().
    """

    name: str
    description: str
    category: Literal["view", "store"] = "store"
    failure_text: str = "Operation failed"

    @abstractmethod
    async def execute(self, ctx: RequestContext, args: BaseModel) -> OperationResult:
        """Execute the tool with validated arguments."""
        ...

    @abstractmethod
    def get_schema(self) -> type[BaseModel]:
        """Return the Pydantic schema for this tool's input arguments."""
        ...

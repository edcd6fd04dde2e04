"""
agent.tools.table_view - View-intent operations (filter, sort, search, paging).

These never touch the store. Each returns an action tag plus normalised
parameters; whatever renders the table applies the intent.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from contract_agent.domain.models import OperationResult
from contract_agent.application.context import RequestContext
from contract_agent.agent.tools.base import (
    BaseTool,
    ColumnName,
    Direction,
    FilterConditionInput,
    NoArguments,
    ToolInput,
)


def _describe(condition: FilterConditionInput) -> str:
    if condition.operator == "between":
        return f"{condition.column} between {condition.value} and {condition.value2}"
    return f"{condition.column} {condition.operator} {condition.value}"


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

class FilterTableTool(BaseTool):
    name = "filterTable"
    category = "view"
    description = (
        "Filter contract rows based on a column and condition.\n"
        'Examples:\n'
        '- "show contracts worth more than 100000" -> column: "amount", operator: "greaterThan", value: 100000\n'
        '- "filter by status active" -> column: "status", operator: "equals", value: "active"\n'
        '- "find contracts for Acme" -> column: "counterpartyName", operator: "contains", value: "Acme"\n'
        '- "show contracts ending after 2024-12-31" -> column: "endDate", operator: "greaterThan", value: "2024-12-31"'
    )

    def get_schema(self) -> type[BaseModel]:
        return FilterConditionInput

    async def execute(self, ctx: RequestContext, args: FilterConditionInput) -> OperationResult:
        return OperationResult(
            success=True,
            action="filter",
            filter=args.to_condition().to_dict(),
            message=f"Filtering contracts where {_describe(args)}",
        )


class FilterMultipleInput(ToolInput):
    filters: List[FilterConditionInput] = Field(
        min_length=1,
        description="Conditions that must all hold (AND)",
    )


class FilterMultipleColumnsTool(BaseTool):
    name = "filterMultipleColumns"
    category = "view"
    description = (
        "Apply several filter conditions at once; a row must satisfy all of them.\n"
        'Example: "active contracts worth more than 50000" -> '
        '[{column: "status", operator: "equals", value: "active"}, '
        '{column: "amount", operator: "greaterThan", value: 50000}]'
    )

    def get_schema(self) -> type[BaseModel]:
        return FilterMultipleInput

    async def execute(self, ctx: RequestContext, args: FilterMultipleInput) -> OperationResult:
        return OperationResult(
            success=True,
            action="filterMultiple",
            filters=[f.to_condition().to_dict() for f in args.filters],
            message="Filtering contracts where " + " and ".join(_describe(f) for f in args.filters),
        )


class ClearFiltersTool(BaseTool):
    name = "clearFilters"
    category = "view"
    description = 'Remove all active filters and show every contract. Example: "show all contracts again"'

    def get_schema(self) -> type[BaseModel]:
        return NoArguments

    async def execute(self, ctx: RequestContext, args: NoArguments) -> OperationResult:
        return OperationResult(success=True, action="clearFilters", message="Cleared all filters")


# ---------------------------------------------------------------------------
# Sorting and search
# ---------------------------------------------------------------------------

class SortInput(ToolInput):
    column: ColumnName = Field(description="The column to sort by")
    direction: Direction = Field(description="Sort direction")


class SortTableTool(BaseTool):
    name = "sortTable"
    category = "view"
    description = (
        "Sort the contract table by a column.\n"
        'Example: "sort by value highest first" -> column: "amount", direction: "desc"\n'
        'Example: "order by end date" -> column: "endDate", direction: "asc"'
    )

    def get_schema(self) -> type[BaseModel]:
        return SortInput

    async def execute(self, ctx: RequestContext, args: SortInput) -> OperationResult:
        order = "ascending" if args.direction == "asc" else "descending"
        return OperationResult(
            success=True,
            action="sort",
            sort={"column": args.column, "direction": args.direction},
            message=f"Sorted by {args.column} ({order})",
        )


class ClearSortingTool(BaseTool):
    name = "clearSorting"
    category = "view"
    description = "Remove all sorting to return table to default order"

    def get_schema(self) -> type[BaseModel]:
        return NoArguments

    async def execute(self, ctx: RequestContext, args: NoArguments) -> OperationResult:
        return OperationResult(success=True, action="clearSort", message="Cleared sorting")


class SearchInput(ToolInput):
    query: str = Field(min_length=1, description="Search term to look for across text columns")
    columns: Optional[List[Literal["name", "counterpartyName"]]] = Field(
        default=None,
        description="Optional: specific columns to search. Defaults to both name and counterpartyName",
    )
    case_sensitive: bool = Field(default=False, description="Whether search should be case-sensitive")


class SearchTableTool(BaseTool):
    name = "searchTable"
    category = "view"
    description = (
        "Search across contract name and client name columns for a keyword.\n"
        'Example: "search for Microsoft" looks in name and counterpartyName\n'
        'Example: "find all cloud agreements" searches both name fields'
    )

    def get_schema(self) -> type[BaseModel]:
        return SearchInput

    async def execute(self, ctx: RequestContext, args: SearchInput) -> OperationResult:
        columns = list(dict.fromkeys(args.columns)) if args.columns else ["name", "counterpartyName"]
        return OperationResult(
            success=True,
            action="search",
            search={
                "query": args.query,
                "columns": columns,
                "caseSensitive": args.case_sensitive,
            },
            message=f"Searching for '{args.query}' in {', '.join(columns)}",
        )


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------

class PageSizeInput(ToolInput):
    page_size: Literal[10, 20, 50, 100] = Field(description="Number of rows per page")


class SetPageSizeTool(BaseTool):
    name = "setPageSize"
    category = "view"
    description = 'Change how many contracts are displayed per page. Example: "show 50 contracts per page"'

    def get_schema(self) -> type[BaseModel]:
        return PageSizeInput

    async def execute(self, ctx: RequestContext, args: PageSizeInput) -> OperationResult:
        return OperationResult(
            success=True,
            action="setPageSize",
            page_size=args.page_size,
            message=f"Showing {args.page_size} contracts per page",
        )


class PageInput(ToolInput):
    page_number: int = Field(ge=1, description="Page number (1-indexed)")


class GoToPageTool(BaseTool):
    name = "goToPage"
    category = "view"
    description = 'Navigate to a specific page number. Example: "go to page 3"'

    def get_schema(self) -> type[BaseModel]:
        return PageInput

    async def execute(self, ctx: RequestContext, args: PageInput) -> OperationResult:
        return OperationResult(
            success=True,
            action="goToPage",
            page_number=args.page_number,
            message=f"Moved to page {args.page_number}",
        )


def view_tools() -> list[BaseTool]:
    """All view-intent tools, in the order they are offered to the model."""
    return [
        FilterTableTool(),
        FilterMultipleColumnsTool(),
        ClearFiltersTool(),
        SortTableTool(),
        ClearSortingTool(),
        SearchTableTool(),
        SetPageSizeTool(),
        GoToPageTool(),
    ]

"""
Shared fixtures for the contract agent test suite.

Every test gets its own SQLite file under tmp_path. The language model is
replaced by ScriptedChatModel, which replays a fixed list of turns.
"""

import json
import os
from datetime import date
from typing import Any, Optional, Sequence, Union

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from contract_agent.agent.executor import OperationExecutor
from contract_agent.agent.tools.analytics import analytics_tools
from contract_agent.agent.tools.contracts import contract_tools
from contract_agent.agent.tools.registry import ToolRegistry
from contract_agent.agent.tools.table_view import view_tools
from contract_agent.application.context import RequestContext
from contract_agent.application.services.contract_service import ContractService
from contract_agent.domain.entities import Contract
from contract_agent.domain.models import (
    ConversationMessage,
    ModelTurn,
    OperationDefinition,
    OperationRequest,
)
from contract_agent.infrastructure.persistence.connection import AsyncSQLiteConnection
from contract_agent.infrastructure.persistence.contract_repo import SQLiteContractRepository
from contract_agent.infrastructure.persistence.migrations import run_migrations

TODAY = date(2025, 1, 1)


# =============================================================================
# SCRIPTED MODEL
# =============================================================================


def op(name: str, arguments: Union[dict, str, None] = None, request_id: Optional[str] = None) -> OperationRequest:
    """Build an OperationRequest; dict arguments are JSON-encoded."""
    if isinstance(arguments, dict):
        raw = json.dumps(arguments)
    else:
        raw = arguments or ""
    return OperationRequest(request_id=request_id or f"call_{name}", name=name, raw_arguments=raw)


def turn(*requests: OperationRequest, content: Optional[str] = None) -> ModelTurn:
    return ModelTurn(content=content, requests=tuple(requests))


class ScriptedChatModel:
    """ChatModelPort double.

    Tool-enabled calls consume `turns` in order; the last entry repeats once
    the script runs out. Calls without definitions (summaries) return
    `summary`. An Exception in either place is raised instead.
    """

    def __init__(self, turns: Sequence[Union[ModelTurn, Exception]], summary: Union[str, Exception] = "Done."):
        self._turns = list(turns)
        self._summary = summary
        self.calls: list[tuple[list[ConversationMessage], Optional[list[OperationDefinition]]]] = []

    @property
    def tool_calls(self) -> int:
        return sum(1 for _, defs in self.calls if defs is not None)

    @property
    def summary_calls(self) -> int:
        return sum(1 for _, defs in self.calls if defs is None)

    async def complete(self, messages, definitions=None) -> ModelTurn:
        self.calls.append((list(messages), list(definitions) if definitions is not None else None))
        if definitions is None:
            if isinstance(self._summary, Exception):
                raise self._summary
            return ModelTurn(content=self._summary)

        step = self._turns.pop(0) if len(self._turns) > 1 else self._turns[0]
        if isinstance(step, Exception):
            raise step
        return step


# =============================================================================
# STORE
# =============================================================================


@pytest.fixture
def connection(tmp_path) -> AsyncSQLiteConnection:
    return AsyncSQLiteConnection(str(tmp_path / "contracts.db"))


@pytest.fixture
async def repo(connection) -> SQLiteContractRepository:
    await run_migrations(connection)
    return SQLiteContractRepository(connection)


@pytest.fixture
def service(repo) -> ContractService:
    return ContractService(repo)


_counter = {"n": 0}


async def add_contract(
    repo: SQLiteContractRepository,
    name: str,
    counterparty_name: str = "Acme Corp",
    amount: float = 100000.0,
    start_date: str = "2024-01-01",
    end_date: str = "2024-12-31",
    status: str = "active",
    created_at: Optional[str] = None,
) -> Contract:
    """Insert a contract; later calls get later created_at unless given."""
    _counter["n"] += 1
    return await repo.insert(Contract(
        id=f"c-{_counter['n']:04d}",
        name=name,
        counterparty_name=counterparty_name,
        amount=amount,
        start_date=start_date,
        end_date=end_date,
        status=status,
        created_at=created_at or f"2024-06-01T00:00:00.{_counter['n']:06d}+00:00",
    ))


@pytest.fixture
async def sample_contracts(repo) -> dict[str, Contract]:
    """Four contracts across three counterparties, inserted oldest first."""
    return {
        "cloud": await add_contract(repo, "Cloud Infrastructure", "Acme Corp", 250000, "2024-01-01", "2025-01-31", "active"),
        "license": await add_contract(repo, "Software License", "Globex", 50000, "2024-03-01", "2025-02-28", "active"),
        "consulting": await add_contract(repo, "Consulting Services", "Initech", 120000, "2024-01-01", "2024-12-31", "expired"),
        "maintenance": await add_contract(repo, "Hardware Maintenance", "Acme Corp", 30000, "2024-06-01", "2025-05-31", "pending"),
    }


# =============================================================================
# AGENT
# =============================================================================


@pytest.fixture
def registry(service) -> ToolRegistry:
    registry = ToolRegistry()
    for tool in [*view_tools(), *contract_tools(service), *analytics_tools(service)]:
        registry.register(tool)
    return registry


@pytest.fixture
def executor(registry) -> OperationExecutor:
    return OperationExecutor(registry)


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(current_date=TODAY, current_date_readable="Wednesday, January 1, 2025")


def payload(**arguments: Any) -> str:
    return json.dumps(arguments)

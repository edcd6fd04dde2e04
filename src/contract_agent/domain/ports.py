"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. The executor and orchestrator
depend only on these protocols, never on concrete classes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from contract_agent.domain.entities import Contract
from contract_agent.domain.models import (
    ConversationMessage,
    ModelTurn,
    OperationDefinition,
)


# ---------------------------------------------------------------------------
# Repository Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class ContractRepository(Protocol):
    """CRUD-plus-lookup operations for Contract entities.

    Each method is one logical statement; nothing spans a transaction
    across calls.
    """

    async def get_all(self) -> list[Contract]: ...
    async def get_by_id(self, contract_id: str) -> Contract | None: ...
    async def insert(self, contract: Contract) -> Contract: ...
    async def update_by_id(self, contract_id: str, fields: dict[str, Any]) -> Contract | None: ...
    async def find_first_by_name_contains(self, text: str) -> tuple[Contract | None, int]: ...
    async def delete_by_id(self, contract_id: str) -> bool: ...
    async def delete_by_ids(self, contract_ids: Sequence[str]) -> int: ...


# ---------------------------------------------------------------------------
# Language Model Port
# ---------------------------------------------------------------------------

@runtime_checkable
class ChatModelPort(Protocol):
    """One round-trip to the language model.

    definitions=None means no operations are offered (plain completion).
    Implementations raise LLMProviderError on transport or shape failures.
    """

    async def complete(
        self,
        messages: Sequence[ConversationMessage],
        definitions: Optional[Sequence[OperationDefinition]] = None,
    ) -> ModelTurn: ...

"""
domain.models - Value objects for the tool-calling conversation.

These are immutable data containers with no business logic and no
dependencies on infrastructure (no LangChain, no SQLite, no FastAPI).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional, Union

Scalar = Union[str, int, float]


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class OperationRequest:
    """One model-issued instruction to run an operation.

    raw_arguments is kept exactly as the provider sent it; parsing happens
    at the executor boundary.
    """
    request_id: str
    name: str
    raw_arguments: str = ""


@dataclass(frozen=True)
class ConversationMessage:
    """A single message in the model-facing conversation."""
    role: Role
    content: Optional[str] = None
    requested_operations: tuple[OperationRequest, ...] = ()
    responds_to_request_id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> ConversationMessage:
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> ConversationMessage:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: Optional[str],
        requests: tuple[OperationRequest, ...] = (),
    ) -> ConversationMessage:
        return cls(role=Role.ASSISTANT, content=content, requested_operations=requests)

    @classmethod
    def tool(cls, request: OperationRequest, content: str) -> ConversationMessage:
        return cls(
            role=Role.TOOL,
            content=content,
            responds_to_request_id=request.request_id,
            name=request.name,
        )


@dataclass(frozen=True)
class ModelTurn:
    """What came back from one model call: text, operation requests, or both."""
    content: Optional[str] = None
    requests: tuple[OperationRequest, ...] = ()

    @property
    def wants_operations(self) -> bool:
        return bool(self.requests)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OperationDefinition:
    """Name, description and JSON-schema parameters of one operation."""
    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_openai_tool(self) -> dict[str, Any]:
        """OpenAI function-calling format (also accepted by bind_tools)."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass(frozen=True)
class FilterCondition:
    """column <operator> value [and value2] over contract wire columns."""
    column: str
    operator: str
    value: Scalar
    value2: Optional[Scalar] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "column": self.column,
            "operator": self.operator,
            "value": self.value,
        }
        if self.value2 is not None:
            data["value2"] = self.value2
        return data


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class OperationResult:
    """Uniform envelope returned by every operation dispatch.

    success is the only field callers should trust. Every other field is
    optional and omitted from to_dict() when unset.
    """
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    # View intents
    action: Optional[str] = None
    filter: Optional[dict[str, Any]] = None
    filters: Optional[list[dict[str, Any]]] = None
    sort: Optional[dict[str, Any]] = None
    search: Optional[dict[str, Any]] = None
    page_size: Optional[int] = None
    page_number: Optional[int] = None

    # Record data
    id: Optional[str] = None
    contract: Optional[dict[str, Any]] = None
    contracts: Optional[list[dict[str, Any]]] = None
    deleted_contract: Optional[dict[str, Any]] = None
    count: Optional[int] = None
    deleted_count: Optional[int] = None

    # Calculations
    contract_id: Optional[str] = None
    contract_count: Optional[int] = None
    total_value: Optional[float] = None
    average_value: Optional[float] = None
    duration: Optional[int] = None
    durations: Optional[list[dict[str, Any]]] = None
    monthly_value: Optional[float] = None
    monthly_values: Optional[list[dict[str, Any]]] = None
    groups: Optional[list[dict[str, Any]]] = None
    client_count: Optional[int] = None

    @classmethod
    def failure(cls, error: str, details: Optional[str] = None) -> OperationResult:
        return cls(success=False, error=error, details=details)

    @property
    def carries_view_intent(self) -> bool:
        return self.action is not None

    @property
    def carries_records(self) -> bool:
        return self.contract is not None or self.contracts is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        for f in fields(self):
            if f.name == "success":
                continue
            value = getattr(self, f.name)
            if value is not None:
                data[camel_case(f.name)] = value
        return data

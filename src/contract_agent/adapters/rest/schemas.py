"""Pydantic models for REST API request validation."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from contract_agent.domain.models import ConversationMessage, OperationRequest, Role


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Chat ---

class OperationRequestBody(_CamelModel):
    """A request from an earlier turn, replayed as history."""
    request_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    raw_arguments: str = ""

    def to_request(self) -> OperationRequest:
        return OperationRequest(
            request_id=self.request_id,
            name=self.name,
            raw_arguments=self.raw_arguments,
        )


class ChatMessageBody(_CamelModel):
    role: Literal["system", "user", "assistant", "tool"]
    content: Optional[str] = None
    requested_operations: List[OperationRequestBody] = Field(default_factory=list)
    responds_to_request_id: Optional[str] = None
    name: Optional[str] = None

    def to_message(self) -> ConversationMessage:
        return ConversationMessage(
            role=Role(self.role),
            content=self.content,
            requested_operations=tuple(r.to_request() for r in self.requested_operations),
            responds_to_request_id=self.responds_to_request_id,
            name=self.name,
        )


class ChatRequest(_CamelModel):
    messages: List[ChatMessageBody] = Field(..., min_length=1)
    current_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("currentDateAnchor", "currentDate", "current_date"),
        description="Today's date (YYYY-MM-DD) used for derived fields and relative dates",
    )
    current_date_readable: Optional[str] = None


# --- Direct dispatch ---

class ExecuteRequest(_CamelModel):
    operation_name: str = Field(..., min_length=1)
    arguments: Union[dict[str, Any], str, None] = None
    current_date: Optional[date] = Field(
        default=None,
        validation_alias=AliasChoices("currentDateAnchor", "currentDate", "current_date"),
    )

    def raw_arguments(self) -> str:
        """Arguments as the text the executor parses."""
        if self.arguments is None:
            return ""
        if isinstance(self.arguments, str):
            return self.arguments
        return json.dumps(self.arguments)

"""
infrastructure.llm.chat_model - ChatModelPort backed by a LangChain chat model.

Converts ConversationMessages to LangChain messages, offers operation
definitions through bind_tools(), and turns the reply back into a
ModelTurn. Argument text is passed through as the provider sent it so
malformed JSON reaches the executor unchanged.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence
from uuid import uuid4

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from contract_agent.domain.exceptions import LLMProviderError
from contract_agent.domain.models import (
    ConversationMessage,
    ModelTurn,
    OperationDefinition,
    OperationRequest,
    Role,
)

logger = logging.getLogger(__name__)


class LangChainChatModel:
    """Async ChatModelPort implementation over any LangChain BaseChatModel."""

    def __init__(self, llm: BaseChatModel):
        self._llm = llm

    async def complete(
        self,
        messages: Sequence[ConversationMessage],
        definitions: Optional[Sequence[OperationDefinition]] = None,
    ) -> ModelTurn:
        lc_messages = [to_langchain_message(m) for m in messages]
        runnable = self._llm
        if definitions:
            runnable = self._llm.bind_tools([d.to_openai_tool() for d in definitions])

        try:
            reply = await runnable.ainvoke(lc_messages)
        except Exception as exc:
            logger.exception("Chat model call failed")
            raise LLMProviderError(f"{type(exc).__name__}: {exc}") from exc

        if not isinstance(reply, AIMessage):
            raise LLMProviderError(f"Unexpected reply type from chat model: {type(reply).__name__}")

        requests = tuple(extract_requests(reply))
        logger.debug(
            "Model replied with %d operation request(s): %s",
            len(requests), [r.name for r in requests],
        )
        return ModelTurn(content=_text_of(reply.content) or None, requests=requests)


# ---------------------------------------------------------------------------
# Outbound conversion
# ---------------------------------------------------------------------------

def to_langchain_message(message: ConversationMessage) -> BaseMessage:
    """Map one ConversationMessage to the LangChain message type for its role."""
    if message.role is Role.SYSTEM:
        return SystemMessage(content=message.content or "")
    if message.role is Role.USER:
        return HumanMessage(content=message.content or "")
    if message.role is Role.TOOL:
        return ToolMessage(
            content=message.content or "",
            tool_call_id=message.responds_to_request_id or "",
            name=message.name,
        )

    tool_calls: list[dict[str, Any]] = []
    invalid_tool_calls: list[dict[str, Any]] = []
    for request in message.requested_operations:
        args = _parsed_or_none(request.raw_arguments)
        if args is None:
            invalid_tool_calls.append({
                "type": "invalid_tool_call",
                "id": request.request_id,
                "name": request.name,
                "args": request.raw_arguments,
                "error": None,
            })
        else:
            tool_calls.append({
                "type": "tool_call",
                "id": request.request_id,
                "name": request.name,
                "args": args,
            })
    return AIMessage(
        content=message.content or "",
        tool_calls=tool_calls,
        invalid_tool_calls=invalid_tool_calls,
    )


def _parsed_or_none(raw: str) -> Optional[dict]:
    if not raw or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


# ---------------------------------------------------------------------------
# Inbound conversion
# ---------------------------------------------------------------------------

def extract_requests(reply: AIMessage) -> list[OperationRequest]:
    """Pull operation requests out of a model reply, in the order received.

    Prefers the provider's raw OpenAI-format tool calls so argument text is
    untouched; falls back to LangChain's parsed tool_calls and
    invalid_tool_calls.
    """
    raw_calls = reply.additional_kwargs.get("tool_calls") or []
    if raw_calls:
        requests = []
        for call in raw_calls:
            function = call.get("function") or {}
            name = function.get("name")
            if not name:
                raise LLMProviderError("Tool call without a function name in model reply")
            requests.append(OperationRequest(
                request_id=call.get("id") or _new_id(),
                name=name,
                raw_arguments=function.get("arguments") or "",
            ))
        return requests

    requests = [
        OperationRequest(
            request_id=call.get("id") or _new_id(),
            name=call["name"],
            raw_arguments=json.dumps(call.get("args") or {}),
        )
        for call in reply.tool_calls
    ]
    for call in reply.invalid_tool_calls:
        if not call.get("name"):
            raise LLMProviderError("Tool call without a function name in model reply")
        requests.append(OperationRequest(
            request_id=call.get("id") or _new_id(),
            name=call["name"],
            raw_arguments=call.get("args") or "",
        ))
    return requests


def _text_of(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _new_id() -> str:
    return f"call_{uuid4().hex[:24]}"

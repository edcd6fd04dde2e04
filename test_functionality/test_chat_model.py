"""Tests for the LangChain chat-model adapter (no network calls)."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from contract_agent.domain.exceptions import LLMProviderError
from contract_agent.domain.models import ConversationMessage, OperationDefinition, OperationRequest
from contract_agent.infrastructure.llm.chat_model import (
    LangChainChatModel,
    extract_requests,
    to_langchain_message,
)


class StubLLM:
    """Stands in for a BaseChatModel: records bound tools and replays one reply."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.bound_tools = None
        self.received = None

    def bind_tools(self, tools):
        self.bound_tools = tools
        return self

    async def ainvoke(self, messages):
        self.received = messages
        if self.error is not None:
            raise self.error
        return self.reply


DEFINITION = OperationDefinition(
    name="goToPage",
    description="Navigate to a page",
    parameters={"type": "object", "properties": {"pageNumber": {"type": "integer"}}},
)


class TestExtractRequests:

    def test_prefers_raw_provider_arguments(self):
        reply = AIMessage(content="", additional_kwargs={"tool_calls": [{
            "id": "call_1",
            "type": "function",
            "function": {"name": "goToPage", "arguments": '{"pageNumber":3}'},
        }]})

        requests = extract_requests(reply)

        assert requests == [OperationRequest("call_1", "goToPage", '{"pageNumber":3}')]

    def test_keeps_malformed_arguments_verbatim(self):
        reply = AIMessage(content="", additional_kwargs={"tool_calls": [{
            "id": "call_1",
            "type": "function",
            "function": {"name": "goToPage", "arguments": '{"pageNumber":'},
        }]})

        assert extract_requests(reply)[0].raw_arguments == '{"pageNumber":'

    def test_parsed_tool_calls_in_order(self):
        reply = AIMessage(content="", tool_calls=[
            {"id": "a", "name": "clearFilters", "args": {}},
            {"id": "b", "name": "goToPage", "args": {"pageNumber": 2}},
        ])

        requests = extract_requests(reply)

        assert [r.request_id for r in requests] == ["a", "b"]
        assert requests[1].raw_arguments == '{"pageNumber": 2}'

    def test_invalid_tool_calls_are_dispatched_too(self):
        reply = AIMessage(content="", invalid_tool_calls=[
            {"type": "invalid_tool_call", "id": "x", "name": "goToPage", "args": "{oops", "error": None},
        ])

        requests = extract_requests(reply)

        assert requests == [OperationRequest("x", "goToPage", "{oops")]

    def test_text_only_reply_has_no_requests(self):
        assert extract_requests(AIMessage(content="All done.")) == []


class TestOutboundMessages:

    def test_roles_map_to_langchain_types(self):
        request = OperationRequest("call_1", "goToPage", '{"pageNumber": 2}')

        assert isinstance(to_langchain_message(ConversationMessage.system("s")), SystemMessage)
        assert isinstance(to_langchain_message(ConversationMessage.user("u")), HumanMessage)
        tool = to_langchain_message(ConversationMessage.tool(request, '{"success": true}'))
        assert isinstance(tool, ToolMessage)
        assert tool.tool_call_id == "call_1"

    def test_assistant_requests_become_tool_calls(self):
        good = OperationRequest("call_1", "goToPage", '{"pageNumber": 2}')
        bad = OperationRequest("call_2", "goToPage", "{oops")

        message = to_langchain_message(ConversationMessage.assistant(None, (good, bad)))

        assert isinstance(message, AIMessage)
        assert [c["id"] for c in message.tool_calls] == ["call_1"]
        assert message.tool_calls[0]["args"] == {"pageNumber": 2}
        assert message.invalid_tool_calls[0]["id"] == "call_2"
        assert message.invalid_tool_calls[0]["args"] == "{oops"


class TestComplete:

    async def test_binds_definitions_and_returns_turn(self):
        llm = StubLLM(reply=AIMessage(content="", tool_calls=[
            {"id": "c1", "name": "goToPage", "args": {"pageNumber": 4}},
        ]))

        result = await LangChainChatModel(llm).complete([ConversationMessage.user("page 4")], [DEFINITION])

        assert llm.bound_tools == [DEFINITION.to_openai_tool()]
        assert isinstance(llm.received[0], HumanMessage)
        assert result.content is None
        assert result.requests[0].name == "goToPage"

    async def test_no_definitions_means_no_binding(self):
        llm = StubLLM(reply=AIMessage(content=[{"type": "text", "text": "Two contracts "}, "expire soon."]))

        result = await LangChainChatModel(llm).complete([ConversationMessage.user("summary")])

        assert llm.bound_tools is None
        assert result.content == "Two contracts expire soon."
        assert not result.wants_operations

    async def test_provider_exception_is_wrapped(self):
        llm = StubLLM(error=TimeoutError("read timed out"))

        with pytest.raises(LLMProviderError, match="read timed out"):
            await LangChainChatModel(llm).complete([ConversationMessage.user("hi")], [DEFINITION])

    async def test_unexpected_reply_type(self):
        llm = StubLLM(reply="just a string")

        with pytest.raises(LLMProviderError):
            await LangChainChatModel(llm).complete([ConversationMessage.user("hi")])

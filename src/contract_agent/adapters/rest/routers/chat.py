"""Conversational endpoint and direct operation dispatch."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from contract_agent.factory import ServiceFactory
from contract_agent.adapters.rest.dependencies import build_request_ctx, get_factory
from contract_agent.adapters.rest.schemas import ChatRequest, ExecuteRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat")
async def chat(
    body: ChatRequest,
    factory: ServiceFactory = Depends(get_factory),
):
    """Run one request through the model <-> operation loop.

    Always answers 200 with a success flag; failed operations, provider
    errors and the iteration limit are reported in the body.
    """
    try:
        orchestrator = factory.create_orchestrator()
    except ValueError as exc:
        # Missing API key or unknown provider
        logger.error("Chat model unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc))

    ctx = build_request_ctx(body.current_date, body.current_date_readable)
    response = await orchestrator.run([m.to_message() for m in body.messages], ctx)
    return response.to_dict()


@router.get("/tools")
async def list_tools(factory: ServiceFactory = Depends(get_factory)):
    """Declared operations in OpenAI function format."""
    registry = factory.create_tool_registry()
    return {"tools": [d.to_openai_tool() for d in registry.definitions()]}


@router.post("/tools/execute")
async def execute_tool(
    body: ExecuteRequest,
    factory: ServiceFactory = Depends(get_factory),
):
    """Run one operation directly, bypassing the language model."""
    executor = factory.create_executor()
    ctx = build_request_ctx(body.current_date)
    result = await executor.execute(body.operation_name, body.raw_arguments(), ctx)
    return result.to_dict()

"""
agent.executor - Operation dispatch with validation at the boundary.

Parses the raw argument text, resolves the operation name through the
ToolRegistry, validates the arguments against the tool's Pydantic schema,
runs the tool and converts every failure into an OperationResult.
Nothing raised by a tool or the store escapes execute().
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import ValidationError

from contract_agent.domain.exceptions import ContractNotFoundError, InvalidArgumentsError
from contract_agent.domain.models import OperationResult
from contract_agent.application.context import RequestContext
from contract_agent.agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

INVALID_ARGUMENTS = "invalid arguments"


class OperationExecutor:
    """Runs one named operation per call.

    Constructed by factory.py with the registry injected. Holds no
    per-request state.
    """

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def execute(
        self,
        name: str,
        raw_arguments: Optional[str],
        ctx: RequestContext,
    ) -> OperationResult:
        """Execute an operation from its name and raw argument text.

        Args:
            name:          Operation name as issued by the model or caller.
            raw_arguments: JSON object text; empty or None means no arguments.
            ctx:           Request context (date anchor, request id).

        Returns:
            The operation's result. Failures come back with success=False.
        """
        try:
            payload = _parse_arguments(raw_arguments)
        except InvalidArgumentsError as exc:
            logger.warning("Unparseable arguments for %s: %s", name, exc)
            return OperationResult.failure(INVALID_ARGUMENTS, str(exc))

        tool = self._registry.get(name)
        if tool is None:
            logger.warning("Unknown operation requested: %s (request=%s)", name, ctx.request_id)
            return OperationResult.failure(f"unknown operation: {name}")

        try:
            args = tool.get_schema().model_validate(payload)
        except ValidationError as exc:
            details = _format_validation_errors(exc)
            logger.warning("Invalid arguments for %s: %s", name, details)
            return OperationResult.failure(INVALID_ARGUMENTS, details)

        logger.info("Executing %s (%s) request=%s", name, tool.category, ctx.request_id)
        try:
            result = await tool.execute(ctx, args)
        except InvalidArgumentsError as exc:
            logger.warning("%s rejected its arguments: %s", name, exc)
            return OperationResult.failure(INVALID_ARGUMENTS, str(exc))
        except ContractNotFoundError as exc:
            logger.info("%s found no matching contract: %s", name, exc)
            return OperationResult.failure(str(exc))
        except Exception as exc:
            logger.exception("Operation %s failed", name)
            return OperationResult.failure(tool.failure_text, str(exc))

        logger.debug("%s -> success=%s", name, result.success)
        return result


def _parse_arguments(raw_arguments: Optional[str]) -> dict:
    if raw_arguments is None or not raw_arguments.strip():
        return {}
    try:
        payload = json.loads(raw_arguments)
    except json.JSONDecodeError as exc:
        raise InvalidArgumentsError(f"arguments are not valid JSON: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise InvalidArgumentsError(
            f"arguments must be a JSON object, got {type(payload).__name__}"
        )
    return payload


def _format_validation_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)

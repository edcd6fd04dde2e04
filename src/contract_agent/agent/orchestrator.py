"""
agent.orchestrator - The tool-calling conversation loop.

One user request becomes one OrchestrationRun. The run moves through
AWAITING_MODEL -> DISPATCHING -> (AWAITING_MODEL | SUMMARIZING) -> DONE, or
ends in BUDGET_EXHAUSTED / PROVIDER_FAILED. Every transition returns a new
frozen run; nothing is shared between requests.

Replaces the LangChain AgentExecutor: the loop is explicit so that the
iteration cap, the turn-taking order and the success rule are enforced
here rather than inside a framework.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from contract_agent.domain.exceptions import LLMProviderError
from contract_agent.domain.models import (
    ConversationMessage,
    ModelTurn,
    OperationResult,
)
from contract_agent.domain.ports import ChatModelPort
from contract_agent.application.context import RequestContext
from contract_agent.application.dto import ChatResponse
from contract_agent.agent.executor import OperationExecutor
from contract_agent.agent.prompt import build_system_prompt

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 5

REASON_ITERATION_LIMIT = "iteration_limit"
REASON_PROVIDER_ERROR = "provider_error"
REASON_OPERATION_FAILED = "operation_failed"


class RunState(str, Enum):
    DRAFTING = "drafting"
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING = "dispatching"
    SUMMARIZING = "summarizing"
    DONE = "done"
    BUDGET_EXHAUSTED = "budget_exhausted"
    PROVIDER_FAILED = "provider_failed"


TERMINAL_STATES = frozenset({RunState.DONE, RunState.BUDGET_EXHAUSTED, RunState.PROVIDER_FAILED})


@dataclass(frozen=True)
class OrchestrationRun:
    """State of one request's loop.

    conversation: every message sent to / received from the model so far.
    budget:       dispatch rounds still allowed.
    rounds:       dispatch rounds used.
    turn:         the model turn waiting to be dispatched.
    """
    conversation: tuple[ConversationMessage, ...] = ()
    budget: int = MAX_ITERATIONS
    rounds: int = 0
    tool_results: tuple[OperationResult, ...] = ()
    state: RunState = RunState.DRAFTING
    turn: Optional[ModelTurn] = None
    final_message: str = ""
    error: Optional[str] = None

    @property
    def last_result(self) -> Optional[OperationResult]:
        return self.tool_results[-1] if self.tool_results else None

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, state: RunState, **changes) -> OrchestrationRun:
        return replace(self, state=state, **changes)


class ConversationOrchestrator:
    """Drives the model <-> operation loop for one request at a time.

    Constructed by factory.py. Safe to share between concurrent requests:
    all mutable state lives in the OrchestrationRun local to run().
    """

    def __init__(
        self,
        model: ChatModelPort,
        executor: OperationExecutor,
        max_iterations: int = MAX_ITERATIONS,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self._model = model
        self._executor = executor
        self._max_iterations = max_iterations
        self._definitions = tuple(executor.registry.definitions())

    async def run(
        self,
        messages: Sequence[ConversationMessage],
        ctx: RequestContext,
    ) -> ChatResponse:
        """Answer one request.

        Args:
            messages: Caller-owned history ending with the user's message.
            ctx:      Request context (date anchor, request id).

        Returns:
            The structured response. success is True only when the model
            answered without operations or the last operation succeeded.
        """
        logger.info(
            "Run %s started with %d caller messages",
            ctx.request_id, len(messages),
        )
        run = self._draft(messages, ctx)

        while not run.finished:
            if run.state is RunState.AWAITING_MODEL:
                run = await self._await_model(run)
            elif run.state is RunState.DISPATCHING:
                run = await self._dispatch(run, ctx)
            elif run.state is RunState.SUMMARIZING:
                run = await self._summarize(run)
            else:
                raise RuntimeError(f"Unexpected run state: {run.state}")

        response = self._respond(run)
        logger.info(
            "Run %s finished: state=%s rounds=%d success=%s",
            ctx.request_id, run.state.value, run.rounds, response.success,
        )
        return response

    # ── Transitions ─────────────────────────────────────────────────────────

    def _draft(self, messages: Sequence[ConversationMessage], ctx: RequestContext) -> OrchestrationRun:
        directive = ConversationMessage.system(build_system_prompt(self._executor.registry, ctx))
        return OrchestrationRun(
            conversation=(directive, *messages),
            budget=self._max_iterations,
            state=RunState.AWAITING_MODEL,
        )

    async def _await_model(self, run: OrchestrationRun) -> OrchestrationRun:
        try:
            turn = await self._model.complete(run.conversation, self._definitions)
        except LLMProviderError as exc:
            logger.error("Model call failed after %d rounds: %s", run.rounds, exc)
            return run.advance(RunState.PROVIDER_FAILED, error=str(exc))
        return run.advance(RunState.DISPATCHING, turn=turn)

    async def _dispatch(self, run: OrchestrationRun, ctx: RequestContext) -> OrchestrationRun:
        turn = run.turn
        if turn is None or not turn.wants_operations:
            return run.advance(
                RunState.DONE,
                turn=None,
                final_message=(turn.content if turn else None) or "",
            )

        conversation = [*run.conversation, ConversationMessage.assistant(turn.content, turn.requests)]
        results = list(run.tool_results)
        for request in turn.requests:
            result = await self._executor.execute(request.name, request.raw_arguments, ctx)
            results.append(result)
            conversation.append(ConversationMessage.tool(request, _serialize(result)))

        run = run.advance(
            RunState.DISPATCHING,
            conversation=tuple(conversation),
            tool_results=tuple(results),
            budget=run.budget - 1,
            rounds=run.rounds + 1,
            turn=None,
        )

        if run.last_result is not None and run.last_result.success:
            return run.advance(RunState.SUMMARIZING)
        if run.budget <= 0:
            logger.warning(
                "Iteration limit of %d reached without a successful operation",
                self._max_iterations,
            )
            return run.advance(RunState.BUDGET_EXHAUSTED)
        return run.advance(RunState.AWAITING_MODEL)

    async def _summarize(self, run: OrchestrationRun) -> OrchestrationRun:
        fallback = (run.last_result.message if run.last_result else None) or ""
        try:
            turn = await self._model.complete(run.conversation, None)
        except LLMProviderError as exc:
            logger.warning("Summary call failed, using tool message instead: %s", exc)
            return run.advance(RunState.DONE, final_message=fallback)

        if not turn.content:
            logger.warning("Summary call returned no text, using tool message instead")
            return run.advance(RunState.DONE, final_message=fallback)
        return run.advance(RunState.DONE, final_message=turn.content)

    # ── Output ──────────────────────────────────────────────────────────────

    def _respond(self, run: OrchestrationRun) -> ChatResponse:
        if run.state is RunState.PROVIDER_FAILED:
            return ChatResponse(
                success=False,
                message="The language model request failed; nothing further was done.",
                tool_results=run.tool_results,
                reason=REASON_PROVIDER_ERROR,
                error=run.error,
            )

        if run.state is RunState.BUDGET_EXHAUSTED:
            last = run.last_result
            return ChatResponse(
                success=False,
                message=(
                    f"Stopped after reaching the limit of {self._max_iterations} "
                    "operation rounds without completing the request."
                ),
                tool_results=run.tool_results,
                reason=REASON_ITERATION_LIMIT,
                error=last.error if last else None,
            )

        last = run.last_result
        if last is not None and not last.success:
            # Plain-text answer after a failed operation: the text is passed
            # on, but the run does not report success.
            return ChatResponse(
                success=False,
                message=run.final_message,
                tool_results=run.tool_results,
                reason=REASON_OPERATION_FAILED,
                error=last.error,
            )

        return ChatResponse.from_tool_results(run.final_message, run.tool_results)


def _serialize(result: OperationResult) -> str:
    return json.dumps(result.to_dict(), default=str)

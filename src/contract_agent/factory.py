"""
factory - Composition root for the contract agent.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services and the orchestrator.

Usage:
    from contract_agent.factory import ServiceFactory
    from contract_agent.infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    await factory.initialize()  # one-time startup

    # Direct dispatch (REST /tools/execute, CLI exec):
    result = await factory.create_executor().execute(name, raw_args, ctx)

    # Conversational loop (REST /chat, CLI ask/chat):
    response = await factory.create_orchestrator().run(messages, ctx)
"""

from __future__ import annotations

import logging
from typing import Optional

from contract_agent.domain.ports import ChatModelPort
from contract_agent.infrastructure.config import Settings
from contract_agent.infrastructure.llm.chat_model import LangChainChatModel
from contract_agent.infrastructure.llm.llm_builder import build_llm
from contract_agent.infrastructure.persistence.connection import AsyncSQLiteConnection
from contract_agent.infrastructure.persistence.contract_repo import SQLiteContractRepository
from contract_agent.infrastructure.persistence.migrations import run_migrations
from contract_agent.application.services.contract_service import ContractService
from contract_agent.agent.tools.registry import ToolRegistry
from contract_agent.agent.tools.table_view import view_tools
from contract_agent.agent.tools.contracts import contract_tools
from contract_agent.agent.tools.analytics import analytics_tools
from contract_agent.agent.executor import OperationExecutor
from contract_agent.agent.orchestrator import ConversationOrchestrator

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: wires all dependencies together.

    Call initialize() once at startup, then create services as needed.
    A chat model may be injected (tests, alternative providers); otherwise
    one is built lazily from the settings on first use.
    """

    def __init__(self, config: Settings, chat_model: Optional[ChatModelPort] = None):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._chat_model = chat_model
        self._registry: Optional[ToolRegistry] = None
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    async def initialize(self) -> None:
        """One-time startup: run migrations.

        Must be called before creating services or the orchestrator.
        """
        logger.info("Initializing ServiceFactory (db=%s)...", self._config.db_path)
        await run_migrations(self._connection)
        self._initialized = True
        logger.info("ServiceFactory ready")

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def create_contract_repository(self) -> SQLiteContractRepository:
        return SQLiteContractRepository(self._connection)

    def create_contract_service(self) -> ContractService:
        self._ensure_initialized()
        return ContractService(self.create_contract_repository())

    # ------------------------------------------------------------------
    # Agent
    # ------------------------------------------------------------------

    def create_tool_registry(self) -> ToolRegistry:
        """Registry with every operation registered; built once and reused."""
        self._ensure_initialized()
        if self._registry is None:
            service = self.create_contract_service()
            registry = ToolRegistry()
            for tool in [*view_tools(), *contract_tools(service), *analytics_tools(service)]:
                registry.register(tool)
            logger.info("Registered %d operations", len(registry.names()))
            self._registry = registry
        return self._registry

    def create_executor(self) -> OperationExecutor:
        return OperationExecutor(self.create_tool_registry())

    def create_chat_model(self) -> ChatModelPort:
        if self._chat_model is None:
            cfg = self._config
            llm = build_llm(
                provider=cfg.llm_provider,
                model=cfg.active_llm_model,
                temperature=cfg.llm_temperature,
                ollama_base_url=cfg.ollama_base_url,
                openai_api_key=cfg.openai_api_key,
                groq_api_key=cfg.groq_api_key,
            )
            self._chat_model = LangChainChatModel(llm)
        return self._chat_model

    def create_orchestrator(self) -> ConversationOrchestrator:
        return ConversationOrchestrator(
            model=self.create_chat_model(),
            executor=self.create_executor(),
            max_iterations=self._config.agent_max_iterations,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )

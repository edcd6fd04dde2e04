"""
FastAPI application - REST adapter for the contract agent.

Usage:
    python run_api.py

Or directly:
    uvicorn contract_agent.adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contract_agent import __version__
from contract_agent.infrastructure.config import Settings
from contract_agent.infrastructure.logging import configure_logging
from contract_agent.factory import ServiceFactory
from contract_agent.adapters.rest.dependencies import set_factory
from contract_agent.adapters.rest.routers import chat, contracts


def create_app(factory: Optional[ServiceFactory] = None) -> FastAPI:
    """Build the app. A pre-built factory (tests) skips reading the environment."""
    config = factory.config if factory is not None else Settings.from_env()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        active = factory or ServiceFactory(config)
        await active.initialize()
        set_factory(active)
        yield
        # No teardown needed: aiosqlite connections are per-operation

    app = FastAPI(
        title="Contract Table Agent",
        version=__version__,
        description="Natural-language management of a contract table through declared operations.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)
    app.include_router(contracts.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()

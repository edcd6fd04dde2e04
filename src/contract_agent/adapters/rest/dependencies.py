"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- build_request_ctx(): RequestContext from the optional date anchor.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from contract_agent.factory import ServiceFactory
from contract_agent.application.context import RequestContext

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


def build_request_ctx(
    current_date: Optional[date] = None,
    current_date_readable: Optional[str] = None,
) -> RequestContext:
    return RequestContext(
        current_date=current_date,
        current_date_readable=current_date_readable or "",
    )

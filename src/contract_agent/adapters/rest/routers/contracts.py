"""Read-only contract listing for table clients."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from contract_agent.factory import ServiceFactory
from contract_agent.adapters.rest.dependencies import build_request_ctx, get_factory

router = APIRouter(tags=["contracts"])


@router.get("/contracts")
async def list_contracts(
    current_date: Optional[date] = Query(default=None, alias="currentDate"),
    factory: ServiceFactory = Depends(get_factory),
):
    """All contracts, newest first, with duration, daysRemaining and monthlyAmount."""
    service = factory.create_contract_service()
    ctx = build_request_ctx(current_date)
    views = await service.list_views(ctx.now())
    return {"contracts": [v.to_dict() for v in views], "count": len(views)}

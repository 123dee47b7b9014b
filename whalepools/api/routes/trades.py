# api/routes/trades.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from whalepools.api.deps import get_trade_source
from whalepools.models.gecko import Trade
from whalepools.services.trade_source import TradeSource, TradeSourceError

router = APIRouter(prefix="/v1", tags=["trades"])


@router.get(
    "/networks/{network}/pools/{pool_address}/trades",
    response_model=list[Trade],
    summary="List recent upstream trades for a pool",
)
async def get_pool_trades(
    network: str,
    pool_address: str,
    whale_address: Annotated[
        str | None, Query(description="Only trades sent by this address (case-insensitive)")
    ] = None,
    source: TradeSource = Depends(get_trade_source),
) -> list[Trade]:
    """Pass-through to the upstream listing. No retries: the caller can just ask again."""
    try:
        trades = await source.list_trades(network, pool_address)
    except TradeSourceError as exc:
        upstream = f" (upstream status {exc.status_code})" if exc.status_code else ""
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{exc}{upstream}",
        ) from exc

    if whale_address:
        wanted = whale_address.lower()
        trades = [t for t in trades if t.from_address and t.from_address.lower() == wanted]
    return trades

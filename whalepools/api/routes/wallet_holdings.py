# api/routes/wallet_holdings.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from whalepools.api.deps import get_holdings_store
from whalepools.core.config import Settings, get_settings
from whalepools.models.holdings import WalletHoldingsResponse
from whalepools.services.holdings_store import HoldingsStore
from whalepools.services.snapshot_store import SnapshotCorruptError

router = APIRouter(prefix="/v1", tags=["wallet-holdings"])

NO_DATA_MESSAGE = (
    "No cached data available for this wallet. "
    "Please run the indexer to generate data."
)


@router.get(
    "/wallet-holdings",
    response_model=WalletHoldingsResponse,
    summary="Get cached token holdings for a whale wallet",
)
async def get_wallet_holdings(
    network: Annotated[str, Query(min_length=1, description="Network id", examples=["eth"])],
    address: Annotated[str, Query(min_length=1, description="Wallet address")],
    store: HoldingsStore = Depends(get_holdings_store),
    settings: Settings = Depends(get_settings),
) -> WalletHoldingsResponse:
    try:
        cached = store.read(network, address)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SnapshotCorruptError as exc:
        logger.warning("Unreadable holdings for {} on {}: {}", address, network, exc)
        cached = None

    if cached is None:
        logger.info("No cached data for wallet {} on {}", address, network)
        return WalletHoldingsResponse(
            address=address,
            network=network,
            no_cached_data=True,
            message=NO_DATA_MESSAGE,
        )

    stale = cached.is_stale(
        datetime.now(timezone.utc), timedelta(hours=settings.HOLDINGS_MAX_AGE_HOURS)
    )
    if stale:
        logger.info("Wallet data for {} is stale, consider running the indexer", address)

    return WalletHoldingsResponse(
        address=cached.address,
        network=cached.network,
        holdings=cached.holdings,
        total_value_usd=cached.total_value_usd,
        last_updated=cached.last_updated,
        is_stale=stale,
    )

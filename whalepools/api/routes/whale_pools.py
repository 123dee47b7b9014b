# api/routes/whale_pools.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from whalepools.api.deps import get_snapshot_store
from whalepools.models.whale import WhalePool
from whalepools.services.snapshot_store import SnapshotCorruptError, SnapshotStore

router = APIRouter(prefix="/v1", tags=["whale-pools"])


@router.get(
    "/whale-pools",
    response_model=list[WhalePool],
    response_model_by_alias=True,
    summary="Get the latest whale pool snapshot",
)
async def get_whale_pools(
    store: SnapshotStore = Depends(get_snapshot_store),
) -> list[WhalePool]:
    """
    Serves whatever the indexer last checkpointed.

    No snapshot yet is not an error: it is simply an empty list.
    """
    try:
        return store.read()
    except SnapshotCorruptError as exc:
        logger.error("Failed to read whale pool snapshot: {}", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Whale pool snapshot is unreadable",
        ) from exc

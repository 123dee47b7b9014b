# main.py

from fastapi import FastAPI

from whalepools.api.routes.trades import router as trades_router
from whalepools.api.routes.wallet_holdings import router as wallet_holdings_router
from whalepools.api.routes.whale_pools import router as whale_pools_router
from whalepools.core.config import get_settings

settings = get_settings()

app = FastAPI(
    title="Whale Pool Indexer",
    description="Read side for the whale pool snapshot and cached wallet holdings",
    version="0.1.0",
)

# Routes
app.include_router(whale_pools_router)
app.include_router(wallet_holdings_router)
app.include_router(trades_router)

# Health checks
@app.get("/healthz")
async def health():
    return {"status": "ok"}

@app.get("/readyz")
async def ready():
    return {
        "status": "ready",
        "trade_source": settings.TRADE_SOURCE,
        "snapshot_present": settings.snapshot_path.exists(),
    }

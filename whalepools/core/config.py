# core/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # general
    ENV: Literal["local", "dev", "staging", "prod"] = "local"
    APP_NAME: str = "whale-pool-indexer"

    # trade source selection: "remote" hits GeckoTerminal, "mock" is synthetic/offline
    TRADE_SOURCE: Literal["mock", "remote"] = "remote"

    # upstream trade API (GeckoTerminal v2)
    GECKO_API_BASE_URL: AnyHttpUrl = Field(
        default="https://api.geckoterminal.com/api/v2", validate_default=True
    )
    GECKO_API_TIMEOUT_SECONDS: float = 10.0

    # retry / pacing
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 5.0
    RATE_LIMIT_DELAY_SECONDS: float = 2.0  # 2s = 30 calls/minute

    # crawl shape
    POOL_LIMIT: int = 30
    POOL_MAX_PAGES: int = 1
    MIN_WHALE_VOLUME_USD: float = 10_000.0

    # storage
    DATA_DIR: Path = Path("data")
    SNAPSHOT_FILENAME: str = "whalePools.json"
    HOLDINGS_DIRNAME: str = "wallet-holdings"
    HOLDINGS_MAX_AGE_HOURS: float = 24.0

    # logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def snapshot_path(self) -> Path:
        return self.DATA_DIR / self.SNAPSHOT_FILENAME

    @property
    def holdings_dir(self) -> Path:
        return self.DATA_DIR / self.HOLDINGS_DIRNAME


@lru_cache
def get_settings() -> Settings:
    return Settings()

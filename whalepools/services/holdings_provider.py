# services/holdings_provider.py
from __future__ import annotations

import random
from typing import Protocol

from whalepools.models.holdings import TokenHolding

_COMMON_TOKENS = [
    ("Ethereum", "ETH"),
    ("USD Coin", "USDC"),
    ("Tether", "USDT"),
    ("Wrapped Bitcoin", "WBTC"),
]

_NETWORK_TOKENS: dict[str, list[tuple[str, str]]] = {
    "eth": [("Chainlink", "LINK"), ("Uniswap", "UNI"), ("Aave", "AAVE"), ("Compound", "COMP")],
    "bsc": [("Binance Coin", "BNB"), ("PancakeSwap", "CAKE"), ("Venus", "XVS")],
    "solana": [("Solana", "SOL"), ("Raydium", "RAY"), ("Marinade Staked SOL", "mSOL"), ("Bonk", "BONK")],
    "polygon_pos": [("Polygon", "MATIC"), ("QuickSwap", "QUICK"), ("SushiSwap", "SUSHI")],
    "arbitrum": [("Arbitrum", "ARB"), ("GMX", "GMX"), ("Camelot", "GRAIL")],
    "base": [("Aerodrome", "AERO"), ("Degen", "DEGEN")],
}

# (min quantity, max quantity, min price, max price)
_RANGES: dict[str, tuple[float, float, float, float]] = {
    "ETH": (0.1, 10, 3000, 5000),
    "WBTC": (0.1, 10, 40_000, 60_000),
    "SOL": (1, 100, 80, 150),
    "USDC": (100, 10_000, 0.98, 1.02),
    "USDT": (100, 10_000, 0.98, 1.02),
}
_DEFAULT_RANGE = (10, 1000, 1, 100)
_SOLANA_RANGE = (50, 5000, 0.5, 20)


class HoldingsProvider(Protocol):
    """Source of token balances for one wallet on one network."""

    async def get_holdings(self, network: str, address: str) -> list[TokenHolding]:
        ...


class MockHoldingsProvider(HoldingsProvider):
    """
    Deterministic fake balances, seeded by the address.

    Same address in, same holdings out, so re-runs are stable. No attempt is
    made to reflect real balances.
    """

    async def get_holdings(self, network: str, address: str) -> list[TokenHolding]:
        rng = random.Random(f"{network}:{address}")
        available = _COMMON_TOKENS + _NETWORK_TOKENS.get(network, [])
        count = rng.randint(2, min(6, len(available)))

        holdings: list[TokenHolding] = []
        for token, symbol in rng.sample(available, count):
            if symbol in _RANGES:
                q_lo, q_hi, p_lo, p_hi = _RANGES[symbol]
            elif network == "solana":
                q_lo, q_hi, p_lo, p_hi = _SOLANA_RANGE
            else:
                q_lo, q_hi, p_lo, p_hi = _DEFAULT_RANGE
            quantity = rng.uniform(q_lo, q_hi)
            holdings.append(
                TokenHolding(
                    token=token,
                    symbol=symbol,
                    quantity=quantity,
                    value_usd=quantity * rng.uniform(p_lo, p_hi),
                )
            )
        return holdings

# models/gecko.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def _attributes(item: Any) -> dict[str, Any]:
    if not isinstance(item, dict):
        return {}
    attrs = item.get("attributes")
    return attrs if isinstance(attrs, dict) else {}


def _text(value: Any) -> str | None:
    # bool is an int subclass; a boolean volume is never meaningful
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


class Network(BaseModel):
    """A chain as listed by GET /networks (e.g. ``eth``, ``solana``)."""

    id: str
    name: str | None = None

    @classmethod
    def from_api(cls, item: Any) -> Network | None:
        network_id = _text(item.get("id")) if isinstance(item, dict) else None
        if not network_id:
            return None
        return cls(id=network_id, name=_text(_attributes(item).get("name")))


class Pool(BaseModel):
    """A liquidity pool as listed by GET /networks/{network}/pools."""

    name: str
    address: str

    @classmethod
    def from_api(cls, item: Any) -> Pool | None:
        attrs = _attributes(item)
        address = _text(attrs.get("address"))
        if not address:
            return None
        return cls(name=_text(attrs.get("name")) or address, address=address)


class Trade(BaseModel):
    """
    One upstream trade, kept as loose as the upstream payload.

    Every field is optional: a trade with a missing or malformed field is still
    a Trade, it just never qualifies as a whale trade.
    """

    volume_usd: str | None = None
    timestamp_utc: str | None = None
    kind: str | None = None
    from_address: str | None = None

    @classmethod
    def from_api(cls, item: Any) -> Trade:
        attrs = _attributes(item)
        return cls(
            volume_usd=_text(attrs.get("volume_in_usd")),
            timestamp_utc=_text(attrs.get("block_timestamp")),
            kind=_text(attrs.get("kind")),
            from_address=_text(attrs.get("tx_from_address")),
        )

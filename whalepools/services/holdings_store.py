# services/holdings_store.py
from __future__ import annotations

import re
from pathlib import Path

from pydantic import ValidationError

from whalepools.models.holdings import WalletHoldings
from whalepools.services.snapshot_store import SnapshotCorruptError, atomic_write_bytes

_SAFE_COMPONENT = re.compile(r"^[A-Za-z0-9_.-]+$")


def _component(value: str, what: str) -> str:
    if not _SAFE_COMPONENT.match(value) or value in {".", ".."}:
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


class HoldingsStore:
    """One JSON document per (network, address) under ``root/{network}/{address}.json``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, network: str, address: str) -> Path:
        return self.root / _component(network, "network") / f"{_component(address, 'address')}.json"

    def read(self, network: str, address: str) -> WalletHoldings | None:
        path = self.path_for(network, address)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        try:
            return WalletHoldings.model_validate_json(raw)
        except ValidationError as exc:
            raise SnapshotCorruptError(f"Unreadable holdings at {path}: {exc}") from exc

    def write(self, holdings: WalletHoldings) -> Path:
        path = self.path_for(holdings.network, holdings.address)
        atomic_write_bytes(path, holdings.model_dump_json(indent=2).encode("utf-8"))
        return path

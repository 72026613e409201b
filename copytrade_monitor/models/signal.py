"""
Signal Model

Represents one detected buy/sell by the watched wallet.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Optional


class Direction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Signal:
    """
    A swap signal extracted from a transaction.

    Attributes:
        direction: BUY or SELL of `mint` by the wallet
        wallet: Watched wallet address
        mint: Token mint address traded
        amount: Token amount bought/sold (always >= 0)
        native_amount: SOL moved by the wallet in the same tx (always >= 0)
        price: native_amount / amount (SOL per token)
        timestamp: Block time, or detection time if the block time is unknown
        signature: Transaction signature
    """
    direction: Direction
    wallet: str
    mint: str
    amount: float
    native_amount: float
    price: Optional[float]
    timestamp: float
    signature: str

    # Optional metadata
    dex: Optional[str] = None
    slot: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["direction"] = self.direction.value
        return data

    def __str__(self) -> str:
        return (
            f"Signal({self.direction.value} {self.amount:.6f} {self.mint[:8]}... "
            f"for {self.native_amount:.6f} SOL via {self.dex or 'unknown'})"
        )

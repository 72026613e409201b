"""
Swap Extractor

Reconstructs what a transaction did to one wallet's balances and classifies
DEX swaps as BUY/SELL legs.

A transaction is only considered when it invokes at least one registered DEX
program. The filter is conservative: swaps routed through unknown programs
are missed rather than transfers being misread as trades.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from copytrade_monitor.constants import DUST_THRESHOLD, LAMPORTS_PER_SOL, NATIVE_MINT
from copytrade_monitor.core.dex_registry import DEFAULT_DEX_REGISTRY, DexRegistry
from copytrade_monitor.models.signal import Direction
from copytrade_monitor.models.transaction import ParsedTransaction

logger = logging.getLogger(__name__)


class MultiLegPolicy(str, Enum):
    """What to do when more than one token balance moved in the same swap."""
    PER_LEG = "per_leg"      # One leg per token
    LAST_WINS = "last_wins"  # Only the last token seen
    SKIP = "skip"            # Ambiguous, emit nothing


@dataclass(frozen=True)
class SwapLeg:
    direction: Direction
    mint: str
    amount: float
    native_amount: float
    dex: Optional[str] = None

    @property
    def price(self) -> Optional[float]:
        if self.amount <= 0:
            return None
        return self.native_amount / self.amount


def _is_meaningful(delta: float) -> bool:
    return abs(delta) > DUST_THRESHOLD


def token_deltas(tx: ParsedTransaction, wallet: str) -> Dict[str, float]:
    """
    Net change per mint across the wallet's token accounts (post - pre).

    Pre entries are matched by (account index, mint). A wallet-owned pre entry
    without a post entry is a closed account and counts as going to zero.
    """
    pre_by_key = {(b.account_index, b.mint): b for b in tx.pre_token_balances}
    deltas: Dict[str, float] = {}
    seen_keys = set()

    for post in tx.post_token_balances:
        if post.owner != wallet:
            continue
        key = (post.account_index, post.mint)
        seen_keys.add(key)
        pre = pre_by_key.get(key)
        pre_amount = pre.ui_amount if pre else 0.0
        deltas[post.mint] = deltas.get(post.mint, 0.0) + (post.ui_amount - pre_amount)

    for pre in tx.pre_token_balances:
        key = (pre.account_index, pre.mint)
        if pre.owner != wallet or key in seen_keys:
            continue
        deltas[pre.mint] = deltas.get(pre.mint, 0.0) - pre.ui_amount

    return {mint: d for mint, d in deltas.items() if _is_meaningful(d)}


def native_delta(tx: ParsedTransaction, wallet: str) -> float:
    """Change in the wallet's SOL balance, in SOL. 0.0 if it cannot be computed."""
    try:
        index = tx.account_keys.index(wallet)
    except ValueError:
        return 0.0
    if index >= len(tx.pre_balances) or index >= len(tx.post_balances):
        return 0.0
    delta = (tx.post_balances[index] - tx.pre_balances[index]) / LAMPORTS_PER_SOL
    return delta if _is_meaningful(delta) else 0.0


def extract_swaps(
    tx: ParsedTransaction,
    wallet: str,
    registry: DexRegistry = DEFAULT_DEX_REGISTRY,
    policy: MultiLegPolicy = MultiLegPolicy.PER_LEG,
) -> List[SwapLeg]:
    """
    Classify a transaction's effect on `wallet`.

    Returns an empty list when the transaction is not a swap: no DEX program
    invoked, or no token other than SOL changed meaningfully.

    Example:
        legs = extract_swaps(tx, "4Be9Cv...", policy=MultiLegPolicy.PER_LEG)
        for leg in legs:
            print(leg.direction, leg.mint, leg.amount, leg.price)
    """
    dex_program = registry.first_match(tx.program_ids)
    if dex_program is None:
        return []
    dex_name = registry.name_of(dex_program)

    deltas = token_deltas(tx, wallet)

    # Wrapped SOL held by the wallet settles in SOL too
    sol_change = native_delta(tx, wallet) + deltas.pop(NATIVE_MINT, 0.0)
    sol_amount = abs(sol_change) if _is_meaningful(sol_change) else 0.0

    legs: List[SwapLeg] = []
    for mint, change in deltas.items():
        direction = Direction.BUY if change > 0 else Direction.SELL
        legs.append(
            SwapLeg(
                direction=direction,
                mint=mint,
                amount=abs(change),
                native_amount=sol_amount,
                dex=dex_name,
            )
        )

    if len(legs) > 1:
        if policy == MultiLegPolicy.LAST_WINS:
            legs = legs[-1:]
        elif policy == MultiLegPolicy.SKIP:
            logger.info(
                "Skipping ambiguous swap %s: %d tokens moved",
                tx.signature[:16], len(legs),
            )
            return []

    return [leg for leg in legs if leg.amount > 0]

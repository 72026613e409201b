"""Wallet Monitor - Polling watcher for one leader wallet.

Periodically lists the wallet's newest transaction signatures, runs every
unseen transaction through the swap extractor and emits one Signal per
detected swap leg to the registered sinks.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from copytrade_monitor.config import Settings
from copytrade_monitor.constants import (
    MAX_FETCH_ATTEMPTS,
    POLL_INTERVAL_SECONDS,
    SIGNATURE_PAGE_LIMIT,
)
from copytrade_monitor.core.chain_source import ChainDataSource
from copytrade_monitor.core.dex_registry import DEFAULT_DEX_REGISTRY, DexRegistry
from copytrade_monitor.core.signature_ledger import SignatureLedger
from copytrade_monitor.core.swap_extractor import MultiLegPolicy, extract_swaps
from copytrade_monitor.exceptions import StateException
from copytrade_monitor.models.signal import Signal
from copytrade_monitor.models.transaction import ParsedTransaction, TransactionReference
from copytrade_monitor.utils.time import utc_ts

SignalSink = Callable[[Signal], Union[None, Awaitable[None]]]
ConnectedSink = Callable[[str], Union[None, Awaitable[None]]]


class MonitorState(str, Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"


class WalletMonitor:
    """
    Polls one wallet and emits swap signals.

    Ticks never overlap: each poll holds a lock for its whole duration, and
    signatures inside a page are handled oldest first so signals come out in
    chronological order even though the source lists newest first.

    Usage:
        monitor = WalletMonitor(SolanaRpcSource(rpc_url), wallet)
        monitor.on_signal(lambda s: print(s))
        await monitor.start()
        ...
        await monitor.stop()
    """

    def __init__(
        self,
        source: ChainDataSource,
        wallet: str,
        registry: DexRegistry = DEFAULT_DEX_REGISTRY,
        ledger: Optional[SignatureLedger] = None,
        interval: float = POLL_INTERVAL_SECONDS,
        page_limit: int = SIGNATURE_PAGE_LIMIT,
        policy: MultiLegPolicy = MultiLegPolicy.PER_LEG,
        skip_failed: bool = True,
        max_fetch_attempts: int = MAX_FETCH_ATTEMPTS,
    ) -> None:
        self.source = source
        self.wallet = wallet
        self.registry = registry
        self.ledger = ledger if ledger is not None else SignatureLedger()
        self.interval = interval
        self.page_limit = page_limit
        self.policy = policy
        self.skip_failed = skip_failed
        self.max_fetch_attempts = max_fetch_attempts
        self.logger = logging.getLogger("copytrade_monitor.wallet_monitor")

        self._state = MonitorState.STOPPED
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self._anchor: Optional[str] = None
        self._fetch_failures: Dict[str, int] = {}
        self._signal_sinks: List[SignalSink] = []
        self._connected_sinks: List[ConnectedSink] = []

        # Stats
        self.polls = 0
        self.poll_errors = 0
        self.processed = 0
        self.signals = 0

    @classmethod
    def from_settings(cls, settings: Settings, source: ChainDataSource, wallet: str = "") -> "WalletMonitor":
        return cls(
            source=source,
            wallet=wallet or settings.TARGET_WALLET,
            ledger=SignatureLedger(settings.LEDGER_MAX_SIZE, settings.LEDGER_RETAIN),
            interval=settings.POLL_INTERVAL_SEC,
            page_limit=settings.SIGNATURE_PAGE_LIMIT,
            policy=MultiLegPolicy(settings.MULTI_LEG_POLICY),
            skip_failed=settings.SKIP_FAILED_TX,
            max_fetch_attempts=settings.MAX_FETCH_ATTEMPTS,
        )

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def on_signal(self, sink: SignalSink) -> None:
        self._signal_sinks.append(sink)

    def on_connected(self, sink: ConnectedSink) -> None:
        self._connected_sinks.append(sink)

    def remove_listener(self, sink: Callable[..., Any]) -> None:
        if sink in self._signal_sinks:
            self._signal_sinks.remove(sink)
        if sink in self._connected_sinks:
            self._connected_sinks.remove(sink)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def state(self) -> MonitorState:
        return self._state

    def is_ready(self) -> bool:
        return self._state is MonitorState.RUNNING

    async def start(self) -> None:
        """Poll once immediately, then every `interval` seconds until stopped."""
        if self._state is MonitorState.RUNNING:
            raise StateException("Monitor already running", wallet=self.wallet[:16])
        self._state = MonitorState.RUNNING
        self.logger.info(
            "Polling wallet %s every %.1fs (page=%d)",
            self.wallet[:16], self.interval, self.page_limit,
        )
        await self._notify(self._connected_sinks, self.wallet)
        await self.poll()
        if self._state is MonitorState.RUNNING:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._state is MonitorState.STOPPED and self._task is None:
            return
        self._state = MonitorState.STOPPED
        task, self._task = self._task, None
        if task and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.logger.info("Wallet monitor stopped for %s", self.wallet[:16])

    async def _run(self) -> None:
        while self._state is MonitorState.RUNNING:
            await asyncio.sleep(self.interval)
            if self._state is not MonitorState.RUNNING:
                break
            await self.poll()

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    async def poll(self) -> int:
        """Run one tick. Returns the number of signals emitted."""
        async with self._lock:
            return await self._poll_once()

    async def _poll_once(self) -> int:
        if self._state is not MonitorState.RUNNING:
            return 0
        self.polls += 1

        try:
            refs = await self.source.list_recent_references(
                self.wallet, limit=self.page_limit, until=self._anchor
            )
        except Exception as e:
            self.poll_errors += 1
            self.logger.warning("Failed to list signatures for %s: %s", self.wallet[:16], e)
            return 0

        if self._state is not MonitorState.RUNNING or not refs:
            return 0

        emitted = 0
        for ref in reversed(refs):
            if self.ledger.has(ref.signature):
                self.logger.debug("Already processed %s, skipping", ref.signature[:16])
                self._anchor = ref.signature
                continue

            if ref.failed and self.skip_failed:
                self.logger.debug("Failed transaction %s, skipping", ref.signature[:16])
                self._mark_processed(ref.signature)
                continue

            try:
                tx = await self.source.get_parsed_transaction(ref.signature)
            except Exception as e:
                if self._state is not MonitorState.RUNNING:
                    return emitted
                self.poll_errors += 1
                attempts = self._fetch_failures.get(ref.signature, 0) + 1
                if attempts < self.max_fetch_attempts:
                    # Leave it unmarked; the anchor still sits below it so the next tick retries
                    self._fetch_failures[ref.signature] = attempts
                    self.logger.warning(
                        "Failed to fetch transaction %s (attempt %d/%d): %s",
                        ref.signature[:16], attempts, self.max_fetch_attempts, e,
                    )
                    break
                self.logger.warning(
                    "Giving up on transaction %s after %d attempts: %s",
                    ref.signature[:16], attempts, e,
                )
                self._mark_processed(ref.signature)
                continue

            if self._state is not MonitorState.RUNNING:
                return emitted

            self.logger.debug("New transaction %s", ref.signature[:16])
            signals = self._build_signals(tx, ref) if tx is not None else []
            self._mark_processed(ref.signature)

            for signal in signals:
                self.signals += 1
                emitted += 1
                self.logger.info(
                    "SWAP %s %s %.6f for %.6f SOL @ %.9f (%s)",
                    signal.direction.value, signal.mint[:16], signal.amount,
                    signal.native_amount, signal.price or 0.0, signal.signature[:16],
                )
                await self._notify(self._signal_sinks, signal)

        return emitted

    def _mark_processed(self, signature: str) -> None:
        self._fetch_failures.pop(signature, None)
        self.ledger.add(signature)
        self._anchor = signature
        self.processed += 1

    def _build_signals(self, tx: ParsedTransaction, ref: TransactionReference) -> List[Signal]:
        legs = extract_swaps(tx, self.wallet, self.registry, self.policy)
        timestamp = tx.block_time or ref.block_time or utc_ts()
        return [
            Signal(
                direction=leg.direction,
                wallet=self.wallet,
                mint=leg.mint,
                amount=leg.amount,
                native_amount=leg.native_amount,
                price=leg.price,
                timestamp=float(timestamp),
                signature=ref.signature,
                dex=leg.dex,
                slot=tx.slot if tx.slot is not None else ref.slot,
            )
            for leg in legs
            if leg.price is not None
        ]

    async def _notify(self, sinks: List[Callable[..., Any]], payload: Any) -> None:
        for sink in list(sinks):
            try:
                result = sink(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.logger.error("Listener %r failed: %s", sink, e)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def get_status(self) -> dict:
        return {
            "state": self._state.value,
            "wallet": self.wallet,
            "anchor": self._anchor,
            "ledger_size": len(self.ledger),
            "polls": self.polls,
            "poll_errors": self.poll_errors,
            "processed": self.processed,
            "signals": self.signals,
        }

"""Signal sinks - consumers the wallet monitor can deliver signals to."""
from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from html import escape
from pathlib import Path
from typing import Any

import httpx

from copytrade_monitor.config import Settings
from copytrade_monitor.constants import RECENT_SIGNALS_MAX
from copytrade_monitor.models.signal import Direction, Signal


class RecentSignals:
    """Last N signals for dashboard display."""

    def __init__(self, max_size: int = RECENT_SIGNALS_MAX) -> None:
        self._signals: deque[Signal] = deque(maxlen=max_size)

    def __call__(self, signal: Signal) -> None:
        self._signals.append(signal)

    def snapshot(self, limit: int = 50) -> list[dict]:
        """Newest first."""
        recent = list(self._signals)[-limit:] if limit > 0 else []
        return [s.to_dict() for s in reversed(recent)]

    def __len__(self) -> int:
        return len(self._signals)


class QueueSink:
    """Forwards signals into an asyncio queue for a separate consumer task."""

    def __init__(self, maxsize: int = 0) -> None:
        self.queue: asyncio.Queue[Signal] = asyncio.Queue(maxsize=maxsize)
        self.logger = logging.getLogger("copytrade_monitor.sinks.queue")

    def __call__(self, signal: Signal) -> None:
        try:
            self.queue.put_nowait(signal)
        except asyncio.QueueFull:
            self.logger.warning("Signal queue full, dropping signal %s", signal.signature[:16])

    def drain(self) -> list[Signal]:
        """Get all pending signals from queue."""
        signals: list[Signal] = []
        while True:
            try:
                signals.append(self.queue.get_nowait())
            except asyncio.QueueEmpty:
                break
        return signals


class JsonlFeedSink:
    """Appends each signal as one JSON line (for tailing by other processes)."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    async def __call__(self, signal: Signal) -> None:
        line = json.dumps(signal.to_dict(), ensure_ascii=False) + "\n"
        await asyncio.get_running_loop().run_in_executor(None, self._append, line)

    def _append(self, line: str) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)


def build_signal_message(signal: Signal) -> str:
    emoji = "🟢" if signal.direction is Direction.BUY else "🔴"
    lines = [
        f"{emoji} <b>{signal.direction.value}</b> via {escape(signal.dex or 'unknown DEX')}",
        f"Wallet: <code>{escape(signal.wallet)}</code>",
        f"Token: <code>{escape(signal.mint)}</code>",
        f"Amount: {signal.amount:.6f}",
        f"SOL: {signal.native_amount:.6f}",
    ]
    if signal.price is not None:
        lines.append(f"Price: {signal.price:.9f} SOL")
    lines.append(f'<a href="https://solscan.io/tx/{escape(signal.signature)}">Transaction</a>')
    return "\n".join(lines)


class TelegramSink:
    """Posts each signal to a Telegram chat through the Bot API."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.token = settings.TELEGRAM_BOT_TOKEN
        self.chat_id = settings.TELEGRAM_CHAT_ID
        self.enabled = settings.TELEGRAM_ENABLED and bool(self.token and self.chat_id)
        self.client = client or httpx.AsyncClient(timeout=settings.API_TIMEOUT_SEC)
        self.logger = logging.getLogger("copytrade_monitor.telegram")

    async def __call__(self, signal: Signal) -> None:
        if not self.enabled:
            return
        payload: dict[str, Any] = {
            "chat_id": self.chat_id,
            "text": build_signal_message(signal),
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        await self._post("sendMessage", payload)

    async def _post(self, method: str, payload: dict[str, Any]) -> None:
        url = f"https://api.telegram.org/bot{self.token}/{method}"
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self.logger.warning("Telegram %s failed: %s", method, exc)

    async def close(self) -> None:
        await self.client.aclose()

"""
Signature Ledger

Bounded record of transaction signatures the monitor already handled.
"""
from __future__ import annotations

import logging
from collections import OrderedDict

from copytrade_monitor.constants import LEDGER_MAX_SIZE, LEDGER_RETAIN

logger = logging.getLogger(__name__)


class SignatureLedger:
    """
    Deduplicating set of signatures ordered by recency.

    Once more than `max_size` signatures are held the ledger is compacted
    down to the `retain` most recently added ones. A signature evicted this
    way could be processed again if the chain source ever returned it, but
    the polling anchor keeps old signatures out of every page.
    """

    def __init__(self, max_size: int = LEDGER_MAX_SIZE, retain: int = LEDGER_RETAIN) -> None:
        if retain <= 0 or retain >= max_size:
            raise ValueError("retain must be positive and smaller than max_size")
        self.max_size = max_size
        self.retain = retain
        self._entries: OrderedDict[str, None] = OrderedDict()

    def has(self, signature: str) -> bool:
        return signature in self._entries

    def add(self, signature: str) -> None:
        if signature in self._entries:
            self._entries.move_to_end(signature)
            return
        self._entries[signature] = None
        if len(self._entries) > self.max_size:
            self._compact()

    def _compact(self) -> None:
        drop = len(self._entries) - self.retain
        for _ in range(drop):
            self._entries.popitem(last=False)
        logger.debug("Signature ledger compacted: dropped %d, kept %d", drop, len(self._entries))

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries

    def __len__(self) -> int:
        return len(self._entries)

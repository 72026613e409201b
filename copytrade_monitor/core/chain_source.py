"""
Chain Data Source

Ledger queries the wallet monitor needs: recent signatures for an address and
the parsed body of one transaction.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import List, Optional, Protocol

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey
from solders.signature import Signature

from copytrade_monitor.constants import RPC_TIMEOUT_SECONDS
from copytrade_monitor.exceptions import NetworkException
from copytrade_monitor.models.transaction import ParsedTransaction, TransactionReference

logger = logging.getLogger(__name__)


class ChainDataSource(Protocol):
    async def list_recent_references(
        self,
        address: str,
        limit: int,
        before: Optional[str] = None,
        until: Optional[str] = None,
    ) -> List[TransactionReference]:
        """Signatures involving `address`, newest first."""
        ...

    async def get_parsed_transaction(self, signature: str) -> Optional[ParsedTransaction]:
        """Full transaction, or None if the node does not have it (yet)."""
        ...


class SolanaRpcSource:
    """
    ChainDataSource backed by a Solana JSON-RPC endpoint.

    The endpoint is not contacted until the first request; a bad URL shows
    up as NetworkException on every poll.

    Usage:
        source = SolanaRpcSource("https://api.mainnet-beta.solana.com")
        refs = await source.list_recent_references(wallet, limit=10)
        tx = await source.get_parsed_transaction(refs[0].signature)
        await source.close()
    """

    def __init__(
        self,
        rpc_url: str,
        commitment: str = "confirmed",
        timeout: float = RPC_TIMEOUT_SECONDS,
        client: Optional[AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.commitment = Commitment(commitment)
        self.timeout = timeout
        self.client = client or AsyncClient(rpc_url, commitment=self.commitment, timeout=timeout)

    async def list_recent_references(
        self,
        address: str,
        limit: int,
        before: Optional[str] = None,
        until: Optional[str] = None,
    ) -> List[TransactionReference]:
        try:
            resp = await asyncio.wait_for(
                self.client.get_signatures_for_address(
                    Pubkey.from_string(address),
                    before=Signature.from_string(before) if before else None,
                    until=Signature.from_string(until) if until else None,
                    limit=limit,
                    commitment=self.commitment,
                ),
                timeout=self.timeout,
            )
        except Exception as e:
            raise NetworkException(
                "getSignaturesForAddress failed", address=address[:16], error=repr(e)
            ) from e

        return [
            TransactionReference(
                signature=str(item.signature),
                block_time=item.block_time,
                slot=item.slot,
                failed=item.err is not None,
            )
            for item in resp.value
        ]

    async def get_parsed_transaction(self, signature: str) -> Optional[ParsedTransaction]:
        try:
            resp = await asyncio.wait_for(
                self.client.get_transaction(
                    Signature.from_string(signature),
                    encoding="jsonParsed",
                    commitment=self.commitment,
                    max_supported_transaction_version=0,
                ),
                timeout=self.timeout,
            )
        except Exception as e:
            raise NetworkException(
                "getTransaction failed", signature=signature[:16], error=repr(e)
            ) from e

        if resp.value is None:
            return None
        try:
            result = json.loads(resp.to_json()).get("result")
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Undecodable transaction %s: %s", signature[:16], e)
            return None
        if not result:
            return None
        return ParsedTransaction.from_rpc(result, signature=signature)

    async def close(self) -> None:
        await self.client.close()

"""
Transaction Models

Decoded views of `getSignaturesForAddress` and `getTransaction` (jsonParsed)
results, reduced to what swap extraction needs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TransactionReference:
    """A transaction signature plus its approximate ordering time."""
    signature: str
    block_time: int | None = None
    slot: int | None = None
    failed: bool = False

    @classmethod
    def from_rpc(cls, data: dict[str, Any]) -> "TransactionReference":
        return cls(
            signature=data.get("signature", ""),
            block_time=data.get("blockTime"),
            slot=data.get("slot"),
            failed=data.get("err") is not None,
        )


@dataclass(frozen=True)
class TokenBalance:
    """One entry of preTokenBalances / postTokenBalances."""
    account_index: int
    mint: str
    owner: str | None
    ui_amount: float

    @classmethod
    def from_rpc(cls, data: Any) -> "TokenBalance | None":
        """None when the entry has no usable account index."""
        if not isinstance(data, dict):
            return None
        index = data.get("accountIndex")
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        ui = data.get("uiTokenAmount")
        ui = ui if isinstance(ui, dict) else {}
        amount = _to_float(ui.get("uiAmount"))
        if amount is None:
            # uiAmount is null for zero balances on some nodes
            amount = _to_float(ui.get("uiAmountString")) or 0.0
        return cls(
            account_index=index,
            mint=str(data.get("mint") or ""),
            owner=data.get("owner"),
            ui_amount=amount,
        )


@dataclass(frozen=True)
class ParsedTransaction:
    """
    Decoded transaction as seen by the swap extractor.

    Attributes:
        signature: Transaction signature
        account_keys: Account addresses, indexed like the balance arrays
        program_ids: Programs invoked (top-level and inner instructions)
        pre_balances / post_balances: Lamports per account index
        pre_token_balances / post_token_balances: SPL token snapshots
    """
    signature: str
    block_time: int | None = None
    slot: int | None = None
    account_keys: tuple[str, ...] = ()
    program_ids: tuple[str, ...] = ()
    pre_balances: tuple[int, ...] = ()
    post_balances: tuple[int, ...] = ()
    pre_token_balances: tuple[TokenBalance, ...] = ()
    post_token_balances: tuple[TokenBalance, ...] = ()
    failed: bool = False

    @classmethod
    def from_rpc(cls, result: Any, signature: str = "") -> "ParsedTransaction":
        """Build from a jsonParsed getTransaction result; missing or malformed parts become empty."""
        result = _as_dict(result)
        envelope = result.get("transaction")
        meta = _as_dict(result.get("meta"))
        # base64/binary encodings carry a list here, not a decoded message
        message = _as_dict(envelope.get("message")) if isinstance(envelope, dict) else {}

        account_keys = tuple(_account_key(k) for k in _as_list(message.get("accountKeys")))

        program_ids: list[str] = []
        for ix in _as_list(message.get("instructions")):
            _collect_program_id(ix, account_keys, program_ids)
        for inner in _as_list(meta.get("innerInstructions")):
            for ix in _as_list(_as_dict(inner).get("instructions")):
                _collect_program_id(ix, account_keys, program_ids)

        if not signature:
            sigs = _as_list(envelope.get("signatures")) if isinstance(envelope, dict) else []
            signature = str(sigs[0]) if sigs else ""

        return cls(
            signature=signature,
            block_time=_to_int(result.get("blockTime")),
            slot=_to_int(result.get("slot")),
            account_keys=account_keys,
            program_ids=tuple(program_ids),
            pre_balances=_lamports(meta.get("preBalances")),
            post_balances=_lamports(meta.get("postBalances")),
            pre_token_balances=_token_balances(meta.get("preTokenBalances")),
            post_token_balances=_token_balances(meta.get("postTokenBalances")),
            failed=meta.get("err") is not None,
        )


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _to_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lamports(values: Any) -> tuple[int, ...]:
    # Balances are positional, so one bad entry invalidates the whole array
    values = _as_list(values)
    if not all(_to_int(v) is not None for v in values):
        return ()
    return tuple(values)


def _token_balances(entries: Any) -> tuple[TokenBalance, ...]:
    balances = (TokenBalance.from_rpc(e) for e in _as_list(entries))
    return tuple(b for b in balances if b is not None)


def _account_key(key: Any) -> str:
    # jsonParsed: {"pubkey": ..., "signer": ...}; json: plain string
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return str(key)


def _collect_program_id(ix: Any, account_keys: tuple[str, ...], out: list[str]) -> None:
    if not isinstance(ix, dict):
        return
    program_id = ix.get("programId")
    if program_id is None and "programIdIndex" in ix:
        index = ix["programIdIndex"]
        if isinstance(index, int) and 0 <= index < len(account_keys):
            program_id = account_keys[index]
    if program_id and program_id not in out:
        out.append(str(program_id))

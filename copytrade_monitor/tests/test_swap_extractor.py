"""
Unit tests for the swap extractor

Tests core functionality:
1. DEX filter
2. BUY/SELL direction and sizing
3. Multi-token swaps under each policy
4. Partial or malformed transactions
"""

import pytest

from copytrade_monitor.constants import (
    JUPITER_V6_PROGRAM,
    NATIVE_MINT,
    RAYDIUM_V4_PROGRAM,
)
from copytrade_monitor.core.dex_registry import DEFAULT_DEX_REGISTRY, DexRegistry
from copytrade_monitor.core.swap_extractor import (
    MultiLegPolicy,
    extract_swaps,
    native_delta,
    token_deltas,
)
from copytrade_monitor.models.signal import Direction
from copytrade_monitor.models.transaction import ParsedTransaction, TokenBalance
from copytrade_monitor.tests.factories import (
    BONK,
    OTHER_OWNER,
    UNKNOWN_PROGRAM,
    USDC,
    WALLET,
    WIF,
    make_tx,
)


class TestScenarios:
    """Reference transactions"""

    def test_sell_usdc_for_sol(self):
        """Jupiter swap, USDC 100 -> 80, SOL +0.5 is a SELL of 20 USDC"""
        tx = make_tx(
            program_ids=(JUPITER_V6_PROGRAM,),
            token_changes={USDC: (100.0, 80.0)},
            sol_change=0.5,
        )
        legs = extract_swaps(tx, WALLET)

        assert len(legs) == 1
        leg = legs[0]
        assert leg.direction == Direction.SELL
        assert leg.mint == USDC
        assert leg.amount == pytest.approx(20.0)
        assert leg.native_amount == pytest.approx(0.5)
        assert leg.price == pytest.approx(0.025)
        assert leg.dex == "Jupiter v6"

    def test_unregistered_program_is_not_a_swap(self):
        """Balance changes don't matter without a DEX program"""
        tx = make_tx(
            program_ids=(UNKNOWN_PROGRAM,),
            token_changes={BONK: (0.0, 5000.0)},
            sol_change=-1.0,
        )
        assert extract_swaps(tx, WALLET) == []

    def test_identical_balances_is_not_a_swap(self):
        """DEX invoked but nothing moved for the wallet"""
        tx = make_tx(token_changes={BONK: (250.0, 250.0)}, sol_change=0.0)
        assert extract_swaps(tx, WALLET) == []


class TestDirection:
    """Test BUY/SELL classification"""

    def test_buy_token_with_sol(self):
        tx = make_tx(token_changes={BONK: (0.0, 1_234_567.5)}, sol_change=-0.75)
        legs = extract_swaps(tx, WALLET)

        assert len(legs) == 1
        assert legs[0].direction == Direction.BUY
        assert legs[0].amount == pytest.approx(1_234_567.5, abs=1e-6)
        assert legs[0].native_amount == pytest.approx(0.75)

    def test_sell_token_for_sol(self):
        tx = make_tx(token_changes={BONK: (1000.0, 400.0)}, sol_change=1.2)
        legs = extract_swaps(tx, WALLET)

        assert legs[0].direction == Direction.SELL
        assert legs[0].amount == pytest.approx(600.0)
        assert legs[0].price == pytest.approx(0.002)

    def test_sell_closing_token_account(self):
        """A wallet-owned account with no post entry went to zero"""
        tx = make_tx(token_changes={BONK: (300.0, None)}, sol_change=0.3)
        legs = extract_swaps(tx, WALLET)

        assert legs[0].direction == Direction.SELL
        assert legs[0].amount == pytest.approx(300.0)

    def test_dust_changes_ignored(self):
        tx = make_tx(token_changes={BONK: (10.0, 10.0000005)}, sol_change=-0.0000001)
        assert extract_swaps(tx, WALLET) == []

    def test_other_owners_balances_ignored(self):
        tx = ParsedTransaction(
            signature="sig",
            account_keys=(WALLET, "TokenAcct0", JUPITER_V6_PROGRAM),
            program_ids=(JUPITER_V6_PROGRAM,),
            pre_balances=(1_000_000_000, 0, 0),
            post_balances=(500_000_000, 0, 0),
            pre_token_balances=(TokenBalance(1, BONK, OTHER_OWNER, 0.0),),
            post_token_balances=(TokenBalance(1, BONK, OTHER_OWNER, 900.0),),
        )
        assert extract_swaps(tx, WALLET) == []

    def test_wrapped_sol_counts_as_native(self):
        """wSOL spent from a held account settles the swap, it is not a leg"""
        tx = make_tx(
            token_changes={NATIVE_MINT: (2.0, 1.5), BONK: (0.0, 800.0)},
            sol_change=0.0,
        )
        legs = extract_swaps(tx, WALLET)

        assert len(legs) == 1
        assert legs[0].mint == BONK
        assert legs[0].native_amount == pytest.approx(0.5)

    def test_no_native_leg_price_is_zero(self):
        """Wallet absent from account keys: no SOL amount, price 0"""
        tx = make_tx(token_changes={BONK: (0.0, 50.0)}, include_wallet=False)
        legs = extract_swaps(tx, WALLET)

        assert legs[0].native_amount == 0.0
        assert legs[0].price == 0.0

    def test_custom_registry(self):
        registry = DexRegistry({UNKNOWN_PROGRAM: "Test DEX"})
        tx = make_tx(program_ids=(UNKNOWN_PROGRAM,), token_changes={BONK: (0.0, 5.0)}, sol_change=-0.1)

        legs = extract_swaps(tx, WALLET, registry=registry)
        assert legs[0].dex == "Test DEX"
        assert extract_swaps(tx, WALLET, registry=DEFAULT_DEX_REGISTRY) == []


class TestMultiLeg:
    """Token-to-token swaps"""

    def _token_swap(self):
        return make_tx(
            program_ids=(RAYDIUM_V4_PROGRAM,),
            token_changes={WIF: (500.0, 0.0), BONK: (0.0, 90_000.0)},
            sol_change=-0.000005,
        )

    def test_per_leg_emits_each_token(self):
        legs = extract_swaps(self._token_swap(), WALLET, policy=MultiLegPolicy.PER_LEG)

        assert [(leg.direction, leg.mint) for leg in legs] == [
            (Direction.SELL, WIF),
            (Direction.BUY, BONK),
        ]

    def test_last_wins_keeps_final_token(self):
        legs = extract_swaps(self._token_swap(), WALLET, policy=MultiLegPolicy.LAST_WINS)

        assert len(legs) == 1
        assert legs[0].mint == BONK
        assert legs[0].direction == Direction.BUY

    def test_skip_drops_ambiguous_swap(self):
        assert extract_swaps(self._token_swap(), WALLET, policy=MultiLegPolicy.SKIP) == []

    def test_single_leg_unaffected_by_policy(self):
        tx = make_tx(token_changes={BONK: (0.0, 10.0)}, sol_change=-0.1)
        for policy in MultiLegPolicy:
            assert len(extract_swaps(tx, WALLET, policy=policy)) == 1


class TestPartialData:
    """Malformed transactions degrade to 'not a swap'"""

    def test_empty_transaction(self):
        tx = ParsedTransaction(signature="sig", program_ids=(JUPITER_V6_PROGRAM,))
        assert extract_swaps(tx, WALLET) == []

    def test_short_balance_arrays(self):
        tx = ParsedTransaction(
            signature="sig",
            account_keys=("Pool", WALLET),
            program_ids=(JUPITER_V6_PROGRAM,),
            pre_balances=(1,),
            post_balances=(2,),
        )
        assert native_delta(tx, WALLET) == 0.0
        assert extract_swaps(tx, WALLET) == []

    def test_token_deltas_sum_across_accounts(self):
        tx = ParsedTransaction(
            signature="sig",
            program_ids=(JUPITER_V6_PROGRAM,),
            pre_token_balances=(
                TokenBalance(1, BONK, WALLET, 10.0),
                TokenBalance(2, BONK, WALLET, 5.0),
            ),
            post_token_balances=(
                TokenBalance(1, BONK, WALLET, 20.0),
                TokenBalance(2, BONK, WALLET, 7.0),
            ),
        )
        assert token_deltas(tx, WALLET) == {BONK: pytest.approx(12.0)}

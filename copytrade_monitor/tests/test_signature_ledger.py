"""Unit tests for the signature ledger and DEX registry"""

import pytest

from copytrade_monitor.constants import DEX_PROGRAMS, JUPITER_V6_PROGRAM
from copytrade_monitor.core.dex_registry import DEFAULT_DEX_REGISTRY, DexRegistry
from copytrade_monitor.core.signature_ledger import SignatureLedger


class TestSignatureLedger:

    def test_add_and_has(self):
        ledger = SignatureLedger()
        assert not ledger.has("a")
        ledger.add("a")
        assert ledger.has("a")
        assert "a" in ledger

    def test_add_is_idempotent(self):
        ledger = SignatureLedger()
        ledger.add("a")
        ledger.add("a")
        assert len(ledger) == 1

    def test_compacts_to_retained_suffix(self):
        """Over the ceiling, only the most recent `retain` survive"""
        ledger = SignatureLedger(max_size=10, retain=5)
        for i in range(11):
            ledger.add(f"sig{i}")

        assert len(ledger) == 5
        assert not ledger.has("sig5")
        assert all(ledger.has(f"sig{i}") for i in range(6, 11))

    def test_never_exceeds_ceiling(self):
        ledger = SignatureLedger(max_size=1000, retain=500)
        for i in range(5000):
            ledger.add(f"sig{i}")
            assert len(ledger) <= 1000
            assert ledger.has(f"sig{i}")

    def test_readd_refreshes_recency(self):
        ledger = SignatureLedger(max_size=4, retain=2)
        for sig in ("a", "b", "c", "d"):
            ledger.add(sig)
        ledger.add("a")
        ledger.add("e")

        assert ledger.has("a")
        assert ledger.has("e")
        assert not ledger.has("b")

    @pytest.mark.parametrize("max_size,retain", [(10, 10), (10, 0), (5, 8)])
    def test_invalid_bounds(self, max_size, retain):
        with pytest.raises(ValueError):
            SignatureLedger(max_size=max_size, retain=retain)


class TestDexRegistry:

    def test_default_registry_contents(self):
        assert len(DEFAULT_DEX_REGISTRY) == len(DEX_PROGRAMS)
        assert DEFAULT_DEX_REGISTRY.is_dex(JUPITER_V6_PROGRAM)
        assert DEFAULT_DEX_REGISTRY.name_of(JUPITER_V6_PROGRAM) == "Jupiter v6"
        assert DEFAULT_DEX_REGISTRY.name_of("11111111111111111111111111111111") is None

    def test_first_match_keeps_invocation_order(self):
        registry = DexRegistry({"B": "Beta", "A": "Alpha"})
        assert registry.first_match(["X", "A", "B"]) == "A"
        assert registry.first_match(["X", "Y"]) is None

    def test_registry_is_read_only(self):
        source = {"A": "Alpha"}
        registry = DexRegistry(source)
        source["B"] = "Beta"

        assert "B" not in registry
        with pytest.raises(TypeError):
            registry.programs["C"] = "Gamma"

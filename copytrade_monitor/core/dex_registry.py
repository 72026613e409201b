"""
DEX Registry

Read-only map of DEX program ids to display names.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from copytrade_monitor.constants import DEX_PROGRAMS


class DexRegistry:
    """Membership tests for swap-capable programs."""

    def __init__(self, programs: Mapping[str, str]) -> None:
        self._programs = MappingProxyType(dict(programs))

    @property
    def programs(self) -> Mapping[str, str]:
        return self._programs

    def is_dex(self, program_id: str) -> bool:
        return program_id in self._programs

    def name_of(self, program_id: str) -> Optional[str]:
        return self._programs.get(program_id)

    def first_match(self, program_ids: Iterable[str]) -> Optional[str]:
        """Return the first registered program id, in invocation order."""
        for program_id in program_ids:
            if program_id in self._programs:
                return program_id
        return None

    def __contains__(self, program_id: object) -> bool:
        return program_id in self._programs

    def __len__(self) -> int:
        return len(self._programs)


DEFAULT_DEX_REGISTRY = DexRegistry(DEX_PROGRAMS)

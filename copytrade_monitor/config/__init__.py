"""Config package"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from ..constants import (
    DEFAULT_RPC_URL,
    LEDGER_MAX_SIZE,
    LEDGER_RETAIN,
    MAX_FETCH_ATTEMPTS,
    POLL_INTERVAL_SECONDS,
    RPC_TIMEOUT_SECONDS,
    SIGNATURE_PAGE_LIMIT,
)
from ..exceptions import ConfigurationException

MULTI_LEG_POLICIES = ("per_leg", "last_wins", "skip")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ============================================
    # CREDENTIALS & ENDPOINTS
    # ============================================
    RPC_URL: str = DEFAULT_RPC_URL
    RPC_COMMITMENT: str = "confirmed"
    RPC_TIMEOUT_SEC: float = RPC_TIMEOUT_SECONDS
    TARGET_WALLET: str = ""

    # ============================================
    # POLLING
    # ============================================
    POLL_INTERVAL_SEC: float = POLL_INTERVAL_SECONDS
    SIGNATURE_PAGE_LIMIT: int = SIGNATURE_PAGE_LIMIT
    LEDGER_MAX_SIZE: int = LEDGER_MAX_SIZE
    LEDGER_RETAIN: int = LEDGER_RETAIN
    SKIP_FAILED_TX: bool = True
    MAX_FETCH_ATTEMPTS: int = MAX_FETCH_ATTEMPTS

    # ============================================
    # EXTRACTION
    # ============================================
    MULTI_LEG_POLICY: str = "per_leg"

    # ============================================
    # OUTPUTS
    # ============================================
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    SIGNAL_FEED_FILE: str = ""
    TELEGRAM_ENABLED: bool = False
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""
    API_TIMEOUT_SEC: float = 10.0

    def validate(self) -> "Settings":
        """Reject settings the monitor cannot run with."""
        if self.POLL_INTERVAL_SEC <= 0:
            raise ConfigurationException(
                "Poll interval must be positive", POLL_INTERVAL_SEC=self.POLL_INTERVAL_SEC
            )
        if self.SIGNATURE_PAGE_LIMIT <= 0:
            raise ConfigurationException(
                "Signature page limit must be positive", SIGNATURE_PAGE_LIMIT=self.SIGNATURE_PAGE_LIMIT
            )
        if self.MAX_FETCH_ATTEMPTS <= 0:
            raise ConfigurationException(
                "Fetch attempts must be positive", MAX_FETCH_ATTEMPTS=self.MAX_FETCH_ATTEMPTS
            )
        if self.LEDGER_RETAIN <= 0 or self.LEDGER_RETAIN >= self.LEDGER_MAX_SIZE:
            raise ConfigurationException(
                "Ledger retain must be positive and below max size",
                LEDGER_RETAIN=self.LEDGER_RETAIN,
                LEDGER_MAX_SIZE=self.LEDGER_MAX_SIZE,
            )
        if self.MULTI_LEG_POLICY not in MULTI_LEG_POLICIES:
            raise ConfigurationException(
                "Unknown multi-leg policy", MULTI_LEG_POLICY=self.MULTI_LEG_POLICY
            )
        return self


def get_settings() -> Settings:
    """Build settings from the environment (and .env, if present)."""
    load_dotenv()
    try:
        settings = Settings(
            RPC_URL=os.getenv("RPC_URL", DEFAULT_RPC_URL),
            RPC_COMMITMENT=os.getenv("RPC_COMMITMENT", "confirmed"),
            RPC_TIMEOUT_SEC=float(os.getenv("RPC_TIMEOUT_SEC", str(RPC_TIMEOUT_SECONDS))),
            TARGET_WALLET=os.getenv("TARGET_WALLET", "").strip(),
            POLL_INTERVAL_SEC=float(os.getenv("POLL_INTERVAL_SEC", str(POLL_INTERVAL_SECONDS))),
            SIGNATURE_PAGE_LIMIT=int(os.getenv("SIGNATURE_PAGE_LIMIT", str(SIGNATURE_PAGE_LIMIT))),
            LEDGER_MAX_SIZE=int(os.getenv("LEDGER_MAX_SIZE", str(LEDGER_MAX_SIZE))),
            LEDGER_RETAIN=int(os.getenv("LEDGER_RETAIN", str(LEDGER_RETAIN))),
            SKIP_FAILED_TX=_env_bool("SKIP_FAILED_TX", "true"),
            MAX_FETCH_ATTEMPTS=int(os.getenv("MAX_FETCH_ATTEMPTS", str(MAX_FETCH_ATTEMPTS))),
            MULTI_LEG_POLICY=os.getenv("MULTI_LEG_POLICY", "per_leg").strip().lower(),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
            LOG_DIR=os.getenv("LOG_DIR", "logs"),
            SIGNAL_FEED_FILE=os.getenv("SIGNAL_FEED_FILE", "").strip(),
            TELEGRAM_ENABLED=_env_bool("TELEGRAM_ENABLED", "false"),
            TELEGRAM_BOT_TOKEN=os.getenv("TELEGRAM_BOT_TOKEN", "").strip(),
            TELEGRAM_CHAT_ID=os.getenv("TELEGRAM_CHAT_ID", "").strip(),
            API_TIMEOUT_SEC=float(os.getenv("API_TIMEOUT_SEC", "10.0")),
        )
    except ValueError as e:
        raise ConfigurationException("Invalid numeric setting", error=str(e)) from e
    return settings.validate()

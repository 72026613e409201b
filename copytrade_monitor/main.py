import argparse
import asyncio
import logging
import platform
import signal
import sys

from copytrade_monitor.config import get_settings
from copytrade_monitor.core.chain_source import SolanaRpcSource
from copytrade_monitor.core.sinks import JsonlFeedSink, RecentSignals, TelegramSink
from copytrade_monitor.core.wallet_monitor import WalletMonitor
from copytrade_monitor.exceptions import ConfigurationException
from copytrade_monitor.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch a Solana wallet and report its DEX swaps")
    parser.add_argument("--wallet", help="Wallet address to watch (default: TARGET_WALLET)")
    parser.add_argument("--rpc-url", help="Solana RPC endpoint (default: RPC_URL)")
    parser.add_argument("--interval", type=float, help="Seconds between polls (default: POLL_INTERVAL_SEC)")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.rpc_url:
        settings.RPC_URL = args.rpc_url
    if args.interval is not None:
        settings.POLL_INTERVAL_SEC = args.interval
    if args.wallet:
        settings.TARGET_WALLET = args.wallet.strip()
    settings.validate()
    if not settings.TARGET_WALLET:
        raise ConfigurationException("No wallet to watch; set TARGET_WALLET or pass --wallet")

    setup_logging(settings)

    source = SolanaRpcSource(settings.RPC_URL, settings.RPC_COMMITMENT, settings.RPC_TIMEOUT_SEC)
    monitor = WalletMonitor.from_settings(settings, source)

    recent = RecentSignals()
    monitor.on_signal(recent)
    if settings.SIGNAL_FEED_FILE:
        monitor.on_signal(JsonlFeedSink(settings.SIGNAL_FEED_FILE))
    telegram = TelegramSink(settings)
    if telegram.enabled:
        monitor.on_signal(telegram)
    monitor.on_connected(lambda wallet: logger.info("Connected, watching %s", wallet))

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_shutdown(sig):
        logger.info("Received signal %s, shutting down...", sig)
        shutdown_event.set()

    # Add signal handlers (not supported on Windows - use fallback)
    if platform.system() != "Windows":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: handle_shutdown(s))
    else:
        signal.signal(signal.SIGINT, lambda s, f: loop.call_soon_threadsafe(handle_shutdown, s))

    try:
        await monitor.start()
        await shutdown_event.wait()
    finally:
        await monitor.stop()
        await telegram.close()
        await source.close()
        logger.info("Shutdown complete: %s", monitor.get_status())
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except ConfigurationException as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()

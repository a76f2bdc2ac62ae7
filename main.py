"""
CLI interface for the YouTube announcement bot.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from chains.tracking_chain import TrackingChain, create_tracking_chain
from config.settings import ConfigurationError, Settings, load_settings
from schedulers.cycle_scheduler import CycleScheduler
from storage.database import StorageError
from utils import safe_log_text, utc_now

__version__ = "0.1.0"

# Setup logging
logger = logging.getLogger(__name__)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"[SUCCESS] {message}")


def print_error(message: str) -> None:
    """Print error message."""
    print(f"[ERROR] {message}")


def print_info(message: str) -> None:
    """Print info message."""
    print(f"[INFO] {message}")


def print_warning(message: str) -> None:
    """Print warning message."""
    print(f"[WARNING] {message}")


async def run_command(settings: Settings, chain: Optional[TrackingChain] = None) -> int:
    """Run a single tracking cycle."""
    chain = chain or create_tracking_chain(settings)
    logger.info("started")

    try:
        await chain.initialize()
        result = await chain.run_cycle()
    except StorageError as e:
        logger.error(f"Ledger error, aborting run: {e}")
        return 1
    finally:
        await chain.close()

    if result["errors"]:
        for error in result["errors"]:
            logger.warning(error)
    logger.info("finished")
    return 0


async def watch_command(settings: Settings, chain: Optional[TrackingChain] = None) -> int:
    """Run tracking cycles on an interval until interrupted."""
    chain = chain or create_tracking_chain(settings)

    try:
        await chain.initialize()
    except StorageError as e:
        logger.error(f"Ledger error, not starting: {e}")
        await chain.close()
        return 1

    cycle_scheduler = CycleScheduler(chain, settings.poll_interval_minutes)
    cycle_scheduler.start()
    print_info(f"Watching {len(settings.channels)} channels every {settings.poll_interval_minutes} minutes")
    print_info("Press Ctrl+C to stop")

    try:
        await cycle_scheduler.wait()
    finally:
        cycle_scheduler.stop()
        await chain.close()

    if cycle_scheduler.fatal_error:
        print_error(f"Stopped after ledger error: {cycle_scheduler.fatal_error}")
        return 1
    return 0


async def channels_command(settings: Settings) -> int:
    """List the monitored channels."""
    print_info(f"Monitoring {len(settings.channels)} channels:")
    for channel in settings.channels:
        print(f"  {channel.channel_id}  {safe_log_text(channel.name)}")
    return 0


async def status_command(settings: Settings, chain: Optional[TrackingChain] = None) -> int:
    """Show ledger contents."""
    chain = chain or create_tracking_chain(settings)
    config = chain.config
    now = utc_now()

    try:
        await chain.initialize()
        announced = await chain.ledger.count_announcements()
        marks = await chain.ledger.list_check_marks()
    except StorageError as e:
        print_error(f"Cannot read ledger: {e}")
        return 1
    finally:
        await chain.close()

    names = {channel.channel_id: channel.name for channel in config.channels}

    print_info(f"Ledger: {settings.dbfile}")
    print_info(f"Announced videos remembered: {announced}")
    print_info(f"Channels checked within {config.recheck_interval}: {len(marks)}/{len(config.channels)}")
    for mark in marks:
        next_check = mark.date_checked + config.recheck_interval
        due = "due" if next_check <= now else f"next check after {next_check:%Y-%m-%d %H:%M} UTC"
        print(f"  {mark.id}  {safe_log_text(names.get(mark.id, '?'))}  checked {mark.date_checked:%Y-%m-%d %H:%M} UTC, {due}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="ytbot",
        description="Posts new videos from monitored YouTube channels to a Discord webhook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration is read from YTBOT_* environment variables or a .env file:
  YTBOT_GC_API_KEY   Google Cloud API key (required)
  YTBOT_DBFILE       Path to sqlite3 file for storage (required)
  YTBOT_WEBHOOK      Discord webhook for posting videos (required)
  YTBOT_CHANNELS     JSON list of {"name": ..., "channel_id": ...} (optional)

Examples:
  python main.py run         # Check all channels once
  python main.py watch       # Check channels on an interval
  python main.py channels    # List monitored channels
  python main.py status      # Show ledger status
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("run", help="Check all channels once (default)")
    subparsers.add_parser("watch", help="Check channels every poll interval until stopped")
    subparsers.add_parser("channels", help="List monitored channels")
    subparsers.add_parser("status", help="Show ledger status")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = create_parser()
    args = parser.parse_args(argv)
    command = args.command or "run"

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        return 1

    settings.setup_logging()

    if command == "run":
        return await run_command(settings)
    if command == "watch":
        return await watch_command(settings)
    if command == "channels":
        return await channels_command(settings)
    if command == "status":
        return await status_command(settings)

    print_error(f"Unknown command: {command}")
    parser.print_help()
    return 2


def cli() -> None:
    """Console script entry point."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        print_info("\nGoodbye!")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()

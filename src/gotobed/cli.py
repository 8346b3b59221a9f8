"""
CLI entry point for gotobed.

PURPOSE: Command-line interface for the bot, the dashboard and quick edits.
AI CONTEXT: Main entry points for package execution. Each command applies
its own policy to load errors (see errors.py).

USAGE:
    # Run the Telegram bot (default)
    python -m gotobed

    # Or via CLI command (after install)
    gotobed bot --dashboard-port 8080   # Bot plus dashboard subprocess
    gotobed dashboard                   # Serve the chart
    gotobed log                         # Log a bedtime now
    gotobed target 23:00                # Set the target
    gotobed report                      # Print target and streaks
"""

from __future__ import annotations

import argparse
import logging
import subprocess  # nosec B404
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import Tracker
    from .storage import StorageManager

# Constants
PROG_NAME = "gotobed"
MODULE_NAME = "gotobed"
SUBPROCESS_TIMEOUT = 5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached so logging is configured once)."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output."""
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def _load_tracker(storage: StorageManager) -> Tracker | None:
    """
    Load the tracker for a command that writes to it.

    A missing log starts a fresh tracker. A corrupt one is reported and
    None returned, so nothing overwrites it.
    """
    result = storage.load_tracker()
    tracker = result.tracker_or_new()
    if tracker is None:
        _get_logger().error(f"{result.error}")
    elif not result.success:
        _log("No time log found, starting a new one")
    return tracker


def run_bot(
    dashboard_host: str | None = None,
    dashboard_port: int | None = None,
    *,
    storage: StorageManager | None = None,
    subprocess_factory: Callable[..., Any] | None = None,
    max_polls: int | None = None,
) -> int:
    """
    Run the Telegram bot.

    Restores the tracker, optionally starts the dashboard in a background
    process, and relays chat commands until interrupted.

    Args:
        dashboard_host: If provided with dashboard_port, start the dashboard.
        dashboard_port: If provided with dashboard_host, start the dashboard.
        storage: Optional StorageManager for testability.
        subprocess_factory: Optional factory for creating subprocesses.
            Defaults to subprocess.Popen. Used for testability.
        max_polls: Stop after this many polls (tests). None runs forever.

    Returns:
        0 on normal exit, 1 when the token is missing or the log is corrupt.
    """
    from .commands import CommandHandler
    from .config import Config
    from .relay import TelegramRelay
    from .storage import StorageManager as StorageMgr

    token = Config.get_telegram_token()
    if not token:
        _get_logger().error("Environment variable GOTOBED_TELEGRAM_TOKEN not set")
        return 1

    storage = storage or StorageMgr()
    tracker = _load_tracker(storage)
    if tracker is None:
        return 1

    popen = subprocess_factory or subprocess.Popen
    dashboard_process = None

    if bool(dashboard_host) != bool(dashboard_port):
        _log("Both --dashboard-host and --dashboard-port are required together", emoji="⚠️")
    elif dashboard_host and dashboard_port:
        _log(f"Starting dashboard at http://{dashboard_host}:{dashboard_port}")
        dashboard_process = popen(  # nosec B603
            [
                sys.executable,
                "-m",
                MODULE_NAME,
                "dashboard",
                "--host",
                dashboard_host,
                "--port",
                str(dashboard_port),
            ],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    handler = CommandHandler(storage, tracker)
    relay = TelegramRelay(token, storage)
    relay.send("Starting...")

    try:
        relay.run(handler.handle, max_polls=max_polls)
    except KeyboardInterrupt:
        _log("Stopping bot")
    finally:
        if dashboard_process:
            dashboard_process.terminate()
            try:
                dashboard_process.wait(timeout=SUBPROCESS_TIMEOUT)
            except subprocess.TimeoutExpired:
                _log("Dashboard process did not terminate gracefully, killing", emoji="⚠️")
                dashboard_process.kill()
                dashboard_process.wait()
    return 0


def run_dashboard(host: str | None = None, port: int | None = None) -> int:
    """
    Launch the web dashboard.

    Args:
        host: Bind address. Default: GOTOBED_PLOT_HOST or 0.0.0.0
        port: TCP port. Default: GOTOBED_PLOT_PORT or 8080

    Returns:
        0 after the server stops.
    """
    from .web import run_dashboard as start_web

    _log("Press Ctrl+C to stop", emoji="🚀")
    start_web(host=host, port=port)
    return 0


def run_command(text: str, storage: StorageManager | None = None) -> int:
    """
    Run one chat command locally and print the reply.

    Args:
        text: Command text, e.g. "log" or "target 23:00".
        storage: Optional StorageManager for testability.

    Returns:
        0 on success, 1 when the log is corrupt.
    """
    from .commands import CommandHandler
    from .storage import StorageManager as StorageMgr

    storage = storage or StorageMgr()
    tracker = _load_tracker(storage)
    if tracker is None:
        return 1
    # Note: Using print() intentionally for stdout piping support
    print(CommandHandler(storage, tracker).handle(text))
    return 0


def run_report(storage: StorageManager | None = None) -> int:
    """
    Print target, current streak and best streak to stdout.

    Returns:
        0 on success (including an empty log), 1 when the log is corrupt.
    """
    from .presenters import ChartPresenter
    from .statistics import StatisticsEngine
    from .storage import StorageManager as StorageMgr

    storage = storage or StorageMgr()
    result = ChartPresenter(storage, StatisticsEngine()).build_chart()
    if not result.success or result.chart is None:
        _get_logger().error(f"{result.error}")
        return 1

    print(result.chart.summary.text)
    if result.chart.notice:
        print(result.chart.notice)
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for gotobed.

    Subcommands:
    - bot [--dashboard-host HOST --dashboard-port PORT]: Telegram bot (default)
    - dashboard [--host HOST] [--port PORT]: Web dashboard
    - log: Log a bedtime now
    - target [HH:MM]: Show or set the target
    - report: Print target and streaks

    Args:
        argv: Argument list. Default: sys.argv[1:]

    Returns:
        Exit code: 0 for success, 1 for a missing token or a corrupt log.

    Raises:
        SystemExit: On --help or argument parsing errors.
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="gotobed - log bedtimes and track streaks against a target",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    bot_parser = subparsers.add_parser("bot", help="Run the Telegram bot")
    bot_parser.add_argument(
        "--dashboard-host",
        default=None,
        help="Start dashboard on this host (e.g., 0.0.0.0)",
    )
    bot_parser.add_argument(
        "--dashboard-port",
        type=int,
        default=None,
        help="Start dashboard on this port (e.g., 8080)",
    )

    dashboard_parser = subparsers.add_parser("dashboard", help="Serve the history chart")
    dashboard_parser.add_argument("--host", default=None, help="Bind address (default: 0.0.0.0)")
    dashboard_parser.add_argument(
        "--port", type=int, default=None, help="Port number (default: 8080)"
    )

    subparsers.add_parser("log", help="Log a bedtime now")

    target_parser = subparsers.add_parser("target", help="Show or set the target time")
    target_parser.add_argument("time", nargs="?", default=None, help="New target as HH:MM")

    subparsers.add_parser("report", help="Print target and streaks to stdout")

    args = parser.parse_args(argv)
    _get_logger()

    if args.command == "dashboard":
        return run_dashboard(host=args.host, port=args.port)
    if args.command == "log":
        return run_command("log")
    if args.command == "target":
        return run_command(f"target {args.time}" if args.time else "target")
    if args.command == "report":
        return run_report()
    if args.command == "bot":
        return run_bot(
            dashboard_host=args.dashboard_host,
            dashboard_port=args.dashboard_port,
        )
    # Default: run the bot without dashboard
    return run_bot()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

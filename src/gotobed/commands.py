"""
Chat command handling for gotobed.

PURPOSE: Turn one line of chat text into a tracker action and a reply.
AI CONTEXT: Shared by the Telegram relay and the CLI. This is where target
strings are validated; the chart code trusts whatever target it is given.

GRAMMAR (leading slash optional):
    log             Log a bedtime now, reply with the local date and time
    target          Reply with the current target
    target H:M      Set the target (H 0-23, M 0-59, one or two digits each)
    streak          Reply with target, current streak and best streak
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .models import format_target
from .presenters import ChartPresenter
from .statistics import StatisticsEngine

if TYPE_CHECKING:
    from .models import Target, Tracker
    from .storage import StorageManager

__all__ = ["CommandHandler", "parse_target"]

logger = logging.getLogger(__name__)

RE_LOG = re.compile(r"^/?log$")
RE_TARGET_PRINT = re.compile(r"^/?target$")
RE_TARGET_SET = re.compile(r"^/?target ([0-9]{1,2}):([0-9]{1,2})$")
RE_STREAK = re.compile(r"^/?streak$")

INVALID_COMMAND = "Invalid command"
INVALID_TARGET = "Invalid target time"


def parse_target(text: str) -> Target | None:
    """
    Parse and validate an H:M target string.

    Args:
        text: e.g. "23:00" or "7:5".

    Returns:
        (hour, minute), or None if malformed or out of range.

    Example:
        >>> parse_target("23:05")
        (23, 5)
        >>> parse_target("24:00") is None
        True
    """
    match = re.fullmatch(r"([0-9]{1,2}):([0-9]{1,2})", text.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return (hour, minute)


class CommandHandler:
    """
    Dispatches chat commands against an in-memory tracker.

    The handler owns the tracker between commands and writes every change
    through StorageManager immediately.
    """

    def __init__(
        self,
        storage: StorageManager,
        tracker: Tracker,
        statistics: StatisticsEngine | None = None,
    ) -> None:
        self.storage = storage
        self.tracker = tracker
        self.presenter = ChartPresenter(storage, statistics or StatisticsEngine())

    def handle(self, text: str) -> str:
        """
        Run one command.

        Args:
            text: Raw message text.

        Returns:
            Reply text. Unknown commands get "Invalid command".
        """
        msg = text.strip()

        if RE_LOG.match(msg):
            return self.log()
        if RE_TARGET_PRINT.match(msg):
            return f"Current target: {format_target(self.tracker.current_target)}"
        if match := RE_TARGET_SET.match(msg):
            target = parse_target(f"{match.group(1)}:{match.group(2)}")
            if target is None:
                return INVALID_TARGET
            return self.set_target(target)
        if RE_STREAK.match(msg):
            return self.presenter.assemble(self.tracker).summary.text

        logger.debug(f"Unrecognised command: {msg!r}")
        return INVALID_COMMAND

    def log(self) -> str:
        """Append a bedtime and reply with its local dd/mm/YYYY HH:MM."""
        try:
            self.tracker, local_time = self.storage.log_bedtime(self.tracker)
        except ValueError as e:
            logger.error(f"Could not log bedtime: {e}")
            return f"Could not log bedtime: {e}"
        return local_time.strftime("%d/%m/%Y %H:%M")

    def set_target(self, target: Target) -> str:
        self.tracker, saved = self.storage.set_target(self.tracker, target)
        if not saved:
            return f"Target set to {format_target(target)}, but it could not be saved"
        return f"Set target to {format_target(target)}"

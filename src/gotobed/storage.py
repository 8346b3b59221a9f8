"""
Storage management for gotobed.

PURPOSE: Centralized JSON file I/O for the time log and relay context.
AI CONTEXT: All persistence operations go through this module.

STORAGE STRUCTURE:
    <data dir>/
    ├── time_log.json   # Tracker document
    └── telegram.json   # TelegramContext

ERROR HANDLING STRATEGY:
- Time log not found: LoadResult with MissingLogError
- Time log unreadable or invalid: LoadResult with CorruptLogError, file left untouched
- Context not found or invalid: Log warning, return empty context
- Write failure: Log error, return False, don't crash the bot or the dashboard

Loading never raises; callers inspect LoadResult and apply their own policy.

USAGE:
    # Production
    storage = StorageManager()

    # Testing with MockFileSystem
    storage = StorageManager(storage_dir="/test", filesystem=mock_fs)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .config import Config
from .errors import CorruptLogError, MissingLogError, TrackerError
from .filesystem import RealFileSystem
from .models import LogEntry, TelegramContext, Tracker, format_target

if TYPE_CHECKING:
    from .filesystem import FileSystem
    from .models import Target

__all__ = ["LoadResult", "StorageManager"]

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """
    Result of loading the time log.

    Attributes:
        success: True when tracker holds a parsed document.
        tracker: The loaded Tracker snapshot, or None on failure.
        error: MissingLogError or CorruptLogError when success is False.
    """

    success: bool
    tracker: Tracker | None = None
    error: TrackerError | None = None

    def tracker_or_new(self) -> Tracker | None:
        """
        Tracker to keep logging into.

        Returns:
            The loaded tracker; a fresh Tracker when the log is missing;
            None when the log is corrupt, so it is never overwritten.
        """
        if self.tracker is not None:
            return self.tracker
        if isinstance(self.error, MissingLogError):
            return Tracker.new()
        return None


class StorageManager:
    """
    JSON file I/O manager for the tracker document.

    DESIGN PRINCIPLES:
    1. Fail-safe: Never crash the process on I/O errors
    2. Snapshot reads: Every load returns a fresh, immutable Tracker
    3. Whole-document writes through a temporary file and an atomic replace
    4. Testable: FileSystem can be injected for mocking

    THREAD SAFETY:
    Single writer assumed (the bot). Readers (dashboard) only ever see a
    complete document thanks to the replace-on-write.
    """

    def __init__(
        self,
        storage_dir: str | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """
        Initialize storage paths.

        Args:
            storage_dir: Custom storage path. Default: Config.get_data_dir()
            filesystem: FileSystem implementation. Default: RealFileSystem

        Nothing is created on disk until the first save.
        """
        self.storage_dir = storage_dir or Config.get_data_dir()
        self._fs: FileSystem = filesystem or RealFileSystem()
        self.log_file = os.path.join(self.storage_dir, Config.LOG_FILE)
        self.context_file = os.path.join(self.storage_dir, Config.CONTEXT_FILE)

    def _write_json(self, file_path: str, data: Any) -> bool:
        """
        Write JSON file with error handling.

        Args:
            file_path: Destination path
            data: Data to serialize

        Returns:
            True on success, False on failure.

        FORMATTING:
        - 2-space indent for readability
        - written to <file>.tmp then replaced
        """
        tmp_path = f"{file_path}.tmp"
        try:
            content = json.dumps(data, indent=2)
            self._fs.makedirs(self.storage_dir, exist_ok=True)
            self._fs.write_text(tmp_path, content)
            self._fs.replace(tmp_path, file_path)
            return True
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            return False

    # =========================================================================
    # TIME LOG OPERATIONS
    # =========================================================================

    def load_tracker(self) -> LoadResult:
        """
        Load the tracker document.

        Returns:
            LoadResult with the tracker, or with MissingLogError /
            CorruptLogError. Never raises.
        """
        try:
            content = self._fs.read_text(self.log_file)
        except FileNotFoundError:
            return LoadResult(success=False, error=MissingLogError(self.log_file))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {self.log_file}: {e}")
            return LoadResult(success=False, error=CorruptLogError(self.log_file, str(e)))

        try:
            tracker = Tracker.from_dict(json.loads(content))
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {self.log_file}: {e}")
            return LoadResult(success=False, error=CorruptLogError(self.log_file, str(e)))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid time log in {self.log_file}: {e!r}")
            return LoadResult(success=False, error=CorruptLogError(self.log_file, repr(e)))

        return LoadResult(success=True, tracker=tracker)

    def save_tracker(self, tracker: Tracker) -> bool:
        """
        Save the tracker document.

        Returns:
            True on success.
        """
        return self._write_json(self.log_file, tracker.to_dict())

    def log_bedtime(
        self,
        tracker: Tracker,
        now: datetime | None = None,
        timezone: str | None = None,
    ) -> tuple[Tracker, datetime]:
        """
        Append a bedtime stamped now, tagged with the current target.

        Args:
            tracker: Tracker to extend.
            now: Optional instant for testability.
            timezone: Zone to record. Default: Config.get_timezone()

        Returns:
            (updated tracker, local time of the new entry). The tracker is
            returned even if saving failed; the failure is logged.

        Raises:
            ValueError: Unknown zone, or now is earlier than the last entry.
                Nothing is written in either case.
        """
        zone = timezone or Config.get_timezone()
        entry = LogEntry.create(timezone=zone, target=tracker.current_target, now=now)
        local_time = entry.local_time()
        updated = tracker.append(entry)
        logger.info(f"Logging {entry.bedtime.isoformat()}, {zone}")
        self.save_tracker(updated)
        return updated, local_time

    def set_target(self, tracker: Tracker, target: Target) -> tuple[Tracker, bool]:
        """
        Replace the current target and persist.

        Returns:
            (updated tracker, True if saved).
        """
        updated = tracker.with_target(target)
        saved = self.save_tracker(updated)
        if saved:
            logger.info(f"Target set to {format_target(target)}")
        return updated, saved

    # =========================================================================
    # RELAY CONTEXT OPERATIONS
    # =========================================================================

    def load_context(self) -> TelegramContext:
        """
        Load the relay context.

        Returns:
            Stored TelegramContext, or an empty one if missing or invalid.
        """
        logger.info(f"Attempting to restore Telegram context from {self.context_file}")
        try:
            content = self._fs.read_text(self.context_file)
            return TelegramContext.from_dict(json.loads(content))
        except FileNotFoundError:
            logger.warning("No Telegram context restored, creating new context")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {self.context_file}: {e}")
        except (OSError, TypeError) as e:
            logger.error(f"Error parsing Telegram context from {self.context_file}: {e}")
        return TelegramContext()

    def save_context(self, context: TelegramContext) -> bool:
        """Persist the relay context. Returns True on success."""
        logger.info(f"Saving Telegram context to {self.context_file}")
        return self._write_json(self.context_file, context.to_dict())

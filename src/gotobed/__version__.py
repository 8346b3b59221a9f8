"""Version information for gotobed."""

__version__ = "0.3.0"
__version_date__ = "2026-10-19"

__title__ = "gotobed"
__description__ = "Bedtime logger with a Telegram bot, streak tracking and a history chart"

__author__ = "gotobed contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 gotobed contributors"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]

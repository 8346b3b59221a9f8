"""
gotobed - bedtime tracker.

PURPOSE: Log bedtimes from a chat bot and chart them against a daily target.
AI CONTEXT: The analytics core (coordinates, ticks, statistics, presenters)
is pure; storage, relay, web and cli are the collaborators around it.

PACKAGE STRUCTURE:
- coordinates.py: Noon-wrapped chart coordinates for logged instants
- ticks.py: Axis ticks matching the coordinate convention
- statistics.py: Moving-average trend and streak analysis
- presenters.py: Chart package assembly and matplotlib rendering
- storage.py: JSON file persistence of the time log
- models.py: Data models (LogEntry, Tracker, TelegramContext)
- errors.py: Load error taxonomy
- commands.py: Chat command grammar
- relay.py: Telegram long-poll relay
- web/: FastAPI dashboard
- config.py: Configuration constants

QUICK START:
    # Run the Telegram bot
    python -m gotobed bot

    # Serve the chart
    python -m gotobed dashboard
"""

from gotobed.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]

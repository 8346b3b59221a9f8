"""
Package entry point for python -m execution.

USAGE:
    python -m gotobed            # Run the Telegram bot
    python -m gotobed bot        # Run the Telegram bot
    python -m gotobed dashboard  # Serve the chart
    python -m gotobed report     # Print the streak summary
"""

import sys

from gotobed.cli import main

if __name__ == "__main__":
    sys.exit(main())

"""
Web dashboard module for gotobed.

PURPOSE: FastAPI app serving the bedtime history chart.

FEATURES:
- HTML page with the streak summary and the chart
- Server-side chart rendering (matplotlib PNG)
- JSON endpoints with the renderer-agnostic chart data

USAGE:
    # Via CLI
    gotobed dashboard

    # Programmatically
    from gotobed.web import create_app
    app = create_app()
    # Run with uvicorn
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]

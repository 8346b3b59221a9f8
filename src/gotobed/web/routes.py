"""
FastAPI routes for the gotobed dashboard.

PURPOSE: Thin route handlers that delegate to ChartPresenter.
AI CONTEXT: This is the request boundary - the only place that decides what
a load error means for the user.

ROUTE STRUCTURE:
- / : Dashboard page (summary + chart image)
- /charts/history.png : Chart as PNG
- /api/chart : Chart data as JSON
- /api/summary : Target and streaks as JSON

ERROR POLICY:
- Missing or empty log: "No data yet" content, HTTP 200
- Corrupt log: HTTP 500 with a short message; the server keeps running
"""

from __future__ import annotations

import html
import logging
import time
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response

from ..presenters import ChartPresenter, ChartResult
from ..statistics import StatisticsEngine
from ..storage import StorageManager

if TYPE_CHECKING:
    from ..presenters import ChartData

__all__ = [
    "router",
    "get_storage",
    "get_statistics",
    "get_chart_presenter",
]

logger = logging.getLogger(__name__)

router = APIRouter()

_DASHBOARD_CSS = """
body {
    margin: 0;
    padding: 1.5rem;
    font-family: Georgia, "Times New Roman", serif;
    background: #fdfcf7;
    color: #222;
}
main { max-width: 1040px; margin: 0 auto; }
h1 { font-weight: normal; letter-spacing: 0.02em; }
.summary { display: flex; gap: 3rem; margin: 1rem 0 1.5rem; }
.metric { font-size: 2.25rem; }
.metric-label { font-size: 0.8rem; text-transform: uppercase; color: #777; }
.notice { font-style: italic; color: #777; }
.error { border-left: 4px solid #b00; padding: 0.5rem 1rem; color: #b00; }
.chart-container img { width: 100%; height: auto; border: 1px solid #ddd; }
"""

# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_storage() -> StorageManager:
    """
    StorageManager for the configured data directory.

    A new instance per request, so every render reads a fresh snapshot.
    """
    return StorageManager()


def get_statistics() -> StatisticsEngine:
    """StatisticsEngine with the default smoothing window."""
    return StatisticsEngine()


def get_chart_presenter() -> ChartPresenter:
    """ChartPresenter wired to the default storage and statistics."""
    return ChartPresenter(get_storage(), get_statistics())


def _checked_chart(result: ChartResult) -> ChartData:
    """
    Unwrap a ChartResult or fail the request.

    Raises:
        HTTPException: 500 when the log could not be restored.
    """
    if not result.success or result.chart is None:
        logger.error(f"Chart render failed: {result.error}")
        raise HTTPException(status_code=500, detail=str(result.error))
    return result.chart


# ============================================================================
# Page Routes
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> HTMLResponse:
    """
    Render the dashboard page.

    Returns:
        HTMLResponse with the summary and the chart image, or a 500 page
        naming the problem when the log is corrupt.
    """
    result = presenter.build_chart()
    if not result.success or result.chart is None:
        logger.error(f"Chart render failed: {result.error}")
        return HTMLResponse(
            content=_render_page(None, error=str(result.error)),
            status_code=500,
            media_type="text/html; charset=utf-8",
        )
    return HTMLResponse(
        content=_render_page(result.chart),
        media_type="text/html; charset=utf-8",
    )


# ============================================================================
# Chart Routes (PNG images)
# ============================================================================


@router.get("/charts/history.png")
async def history_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> Response:
    """
    Serve the history chart as a PNG.

    Returns:
        PNG bytes, or an SVG placeholder when matplotlib is not installed.

    Raises:
        HTTPException: 500 when the log is corrupt.
    """
    chart = _checked_chart(presenter.build_chart())
    try:
        png_bytes = presenter.render_png(chart)
        return Response(content=png_bytes, media_type="image/png")
    except ImportError:
        return Response(
            content=_PLACEHOLDER_SVG,
            media_type="image/svg+xml",
        )


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get("/api/chart")
async def api_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> dict[str, object]:
    """
    Chart data for client-side renderers.

    Returns:
        ChartData.to_dict(): x_ticks, y_ticks, series, axes, summary, notice.

    Raises:
        HTTPException: 500 when the log is corrupt.
    """
    return _checked_chart(presenter.build_chart()).to_dict()


@router.get("/api/summary")
async def api_summary(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> dict[str, object]:
    """
    Target and streaks.

    Example:
        >>> # GET /api/summary
        >>> {"target": "23:00", "current_streak": 3, "best_streak": 5}
    """
    return _checked_chart(presenter.build_chart()).summary.to_dict()


# ============================================================================
# HTML
# ============================================================================

_PLACEHOLDER_SVG = b"""<svg xmlns="http://www.w3.org/2000/svg" width="1000" height="600">
<rect width="100%" height="100%" fill="#fdfcf7"/>
<text x="500" y="300" text-anchor="middle" font-family="serif" fill="#777">
Chart rendering needs matplotlib
</text>
</svg>"""


def _render_summary(chart: ChartData) -> str:
    s = chart.summary
    metrics = (
        (html.escape(s.target), "Target"),
        (str(s.current_streak), "Current streak"),
        (str(s.best_streak), "Best streak"),
    )
    cells = "".join(
        f'<div><div class="metric">{value}</div><div class="metric-label">{label}</div></div>'
        for value, label in metrics
    )
    return f'<section class="summary">{cells}</section>'


def _render_page(chart: ChartData | None, error: str | None = None) -> str:
    """
    Full dashboard HTML.

    Args:
        chart: Assembled chart, or None when rendering an error page.
        error: Message for the error page.
    """
    if chart is None:
        body = f'<p class="error">{html.escape(error or "Unknown error")}</p>'
    else:
        parts = [_render_summary(chart)]
        if chart.notice:
            parts.append(f'<p class="notice">{html.escape(chart.notice)}</p>')
        # Cache-busting query so a reload always fetches the latest chart
        parts.append(
            '<div class="chart-container">'
            f'<img src="/charts/history.png?t={int(time.time())}" alt="Bedtime history">'
            "</div>"
        )
        body = "\n".join(parts)

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8">'
        "<title>gotobed</title>"
        f"<style>{_DASHBOARD_CSS}</style></head>"
        f"<body><main><h1>Bedtime history</h1>\n{body}\n</main></body></html>"
    )

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import plotly.graph_objs as go
from plotly.colors import hex_to_rgb

from src.data.market_data import candles_to_frame
from src.models.candle import BandPoint, Candle
from src.models.settings import IndicatorSettings, LineStyle

DASH = {"solid": "solid", "dashed": "dash"}


def _gaps(values: Sequence[float]) -> List[Optional[float]]:
    # plotly breaks the line on None; nan would be drawn as 0 by some renderers
    return [None if math.isnan(v) else v for v in values]


def _fill_color(color: str, opacity: float) -> str:
    if color.startswith("#") and len(color) == 7:
        r, g, b = hex_to_rgb(color)
        return f"rgba({r}, {g}, {b}, {opacity})"
    return color


def _line_trace(x, y, name: str, style: LineStyle) -> go.Scatter:
    return go.Scatter(
        x=x,
        y=y,
        mode="lines",
        name=name,
        line=dict(color=style.color, width=style.line_width, dash=DASH[style.line_style]),
        connectgaps=False,
    )


def build_figure(
    candles: Sequence[Candle],
    points: Sequence[BandPoint],
    settings: IndicatorSettings,
    title: Optional[str] = None,
) -> go.Figure:
    """Candlestick chart with the band lines and optional fill on one time axis."""
    if len(points) != len(candles):
        raise ValueError(f"Got {len(points)} band points for {len(candles)} candles")

    df = candles_to_frame(candles)
    x = df.index
    basis = _gaps([p.basis for p in points])
    upper = _gaps([p.upper for p in points])
    lower = _gaps([p.lower for p in points])
    style = settings.style

    fig = go.Figure()
    fig.add_trace(go.Candlestick(
        x=x,
        open=df["open"], high=df["high"], low=df["low"], close=df["close"],
        name=title or "Price",
    ))

    if style.fill.visible:
        fig.add_trace(go.Scatter(
            x=x, y=upper, mode="lines", line=dict(width=0),
            showlegend=False, hoverinfo="skip", name="BB Fill Top",
        ))
        fig.add_trace(go.Scatter(
            x=x, y=lower, mode="lines", line=dict(width=0),
            fill="tonexty", fillcolor=_fill_color(style.upper.color, style.fill.opacity),
            showlegend=False, hoverinfo="skip", name="BB Fill",
        ))

    label = f"BB {settings.length} {settings.std_dev_multiplier:g}"
    if style.basis.visible:
        fig.add_trace(_line_trace(x, basis, f"{label} Basis", style.basis))
    if style.upper.visible:
        fig.add_trace(_line_trace(x, upper, f"{label} Upper", style.upper))
    if style.lower.visible:
        fig.add_trace(_line_trace(x, lower, f"{label} Lower", style.lower))

    fig.update_layout(height=700, xaxis_rangeslider_visible=False, title=title)
    return fig

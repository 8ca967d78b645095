import logging
import os
import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.append(str(ROOT))

from src.chart.figure import build_figure
from src.config import DASHBOARD_LIMIT_RANGE, dashboard_candle_limit, default_indicator_settings, settings
from src.data.market_data import bands_to_frame, fetch_candles, load_candles_json
from src.exchange.binance_client import BinanceKlinesClient, KLINE_INTERVALS
from src.indicators.bollinger import compute_bollinger_bands
from src.log import log_settings_change, setup_logging
from src.models.settings import BandStyles, FillStyle, IndicatorSettings, LineStyle

logger = logging.getLogger("dashboard")
setup_logging(settings.log_level)

st.set_page_config(page_title="Bollinger Bands", layout="wide")
st.title("Bollinger Bands")

defaults = default_indicator_settings()


def line_style_inputs(label: str, current: LineStyle) -> LineStyle:
	st.markdown(f"**{label}**")
	return LineStyle(
		visible=st.checkbox("Visible", value=current.visible, key=f"{label}_visible"),
		color=st.color_picker("Color", value=current.color, key=f"{label}_color"),
		line_width=st.slider("Line width", min_value=1, max_value=4, value=current.line_width, key=f"{label}_width"),
		line_style=st.selectbox(
			"Line style", ["solid", "dashed"],
			index=["solid", "dashed"].index(current.line_style), key=f"{label}_style",
		),
	)


with st.sidebar:
	st.header("Data")
	source = st.radio("Source", ["File", "Binance"], index=0)
	if source == "File":
		ohlcv_path = st.text_input("OHLCV JSON", value=os.getenv("OHLCV_PATH", settings.ohlcv_path))
	else:
		symbol = st.text_input("Symbol", value=settings.default_symbol)
		interval = st.selectbox("Interval", list(KLINE_INTERVALS), index=KLINE_INTERVALS.index(settings.default_interval))
		limit = st.slider(
			"Candles", min_value=DASHBOARD_LIMIT_RANGE[0], max_value=DASHBOARD_LIMIT_RANGE[1], value=dashboard_candle_limit()
		)

	tab_inputs, tab_style = st.tabs(["Inputs", "Style"])
	with tab_inputs:
		length = st.number_input("Length", min_value=1, max_value=500, value=defaults.length, step=1)
		st.selectbox("Basic MA Type", ["SMA"], index=0, disabled=True)
		st.selectbox("Source", ["close"], index=0, disabled=True)
		mult = st.number_input(
			"StdDev", min_value=0.1, max_value=10.0, value=float(defaults.std_dev_multiplier), step=0.1, format="%.1f"
		)
		offset = st.number_input("Offset", min_value=-500, max_value=500, value=defaults.offset, step=1)
	with tab_style:
		basis_style = line_style_inputs("Basis", defaults.style.basis)
		upper_style = line_style_inputs("Upper", defaults.style.upper)
		lower_style = line_style_inputs("Lower", defaults.style.lower)
		st.markdown("**Background**")
		fill_style = FillStyle(
			visible=st.checkbox("Fill", value=defaults.style.fill.visible),
			opacity=st.slider("Opacity", min_value=0.0, max_value=1.0, value=defaults.style.fill.opacity, step=0.05),
		)

bb_settings = IndicatorSettings(
	length=int(length),
	std_dev_multiplier=float(mult),
	offset=int(offset),
	style=BandStyles(basis=basis_style, upper=upper_style, lower=lower_style, fill=fill_style),
)
log_settings_change(st.session_state, bb_settings, logger)

try:
	if source == "File":
		candles = load_candles_json(ohlcv_path)
		title = Path(ohlcv_path).name
	else:
		candles = fetch_candles(BinanceKlinesClient(), symbol, interval, limit=int(limit))
		title = f"{symbol} {interval}"

	if not candles:
		st.warning("No candles loaded.")
		raise SystemExit

	points = compute_bollinger_bands(candles, bb_settings)

	c1, c2, c3, c4 = st.columns(4)
	c1.metric("Length", bb_settings.length)
	c2.metric("MA Type", bb_settings.ma_type)
	c3.metric("StdDev", f"{bb_settings.std_dev_multiplier:g}")
	c4.metric("Offset", bb_settings.offset)

	fig = build_figure(candles, points, bb_settings, title=title)
	st.plotly_chart(fig, use_container_width=True)
	st.caption(f"{len(candles)} data points loaded")

	with st.expander("Band values"):
		st.dataframe(bands_to_frame(points).dropna(how="all", subset=["basis", "upper", "lower"]))

except Exception as e:
	logger.exception("Dashboard render failed")
	st.error(f"Error: {e}")

# stock_viewer/renderer.py
# One parameterised line-chart renderer for every chart view
# ------------------------------------------------------------------------------------
#  - build_figure(): pure, returns a plotly Figure (or an empty-state figure)
#  - render(): draws into a Streamlit container (st, a column, st.empty(), ...)

import logging
import zlib
from dataclasses import replace

import pandas as pd
import plotly.graph_objects as go
from plotly.colors import qualitative

from .config import ANNOTATIONS, EXCHANGE_NAMES, RenderConfig
from .data import Dataset
from .scales import ChartScales

logger = logging.getLogger(__name__)

PALETTE = qualitative.T10
X_LABEL = "Date"
Y_LABEL = "↑ Close Price ($)"
BAND_COLOR = "#9CA3AF"


# =========================================
# 1) LOOKUPS
# =========================================
def legend_name(key: str, names: dict | None = None) -> str:
    """Display name for an index symbol; unknown symbols show as-is."""
    names = EXCHANGE_NAMES if names is None else names
    return names.get(key) or key


def series_color(key: str) -> str:
    """Stable colour per symbol: same key, same colour on every render."""
    symbols = list(EXCHANGE_NAMES)
    if key in symbols:
        slot = symbols.index(key)
    else:
        slot = zlib.crc32(key.encode("utf-8"))
    return PALETTE[slot % len(PALETTE)]


def format_tooltip_date(ts) -> str:
    ts = pd.Timestamp(ts)
    return f"{ts:%b} {ts.day}, {ts.year}"


def format_tooltip_value(value: float) -> str:
    """Close as stored in the CSV: whole numbers without ".0", others at full precision."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def tooltip_text(ts, value: float) -> str:
    return f"{format_tooltip_date(ts)}<br>{format_tooltip_value(value)}"


# =========================================
# 2) SCOPE
# =========================================
def scope_frame(dataset: Dataset, config: RenderConfig) -> pd.DataFrame:
    if config.series_key is None:
        return dataset.frame
    return dataset.series(config.series_key)


def empty_message(config: RenderConfig) -> str:
    if config.series_key is not None:
        return f"No data available for {config.series_key}."
    return "No data available."


def clip_band(annotation, scales: ChartScales):
    """(x0, x1) of an annotation band inside the x-domain, or None if outside it."""
    x = scales.x
    lo, hi = x.domain
    start, end = pd.Timestamp(annotation.start), pd.Timestamp(annotation.end)
    if not (x.contains(start) or x.contains(end) or start <= lo <= end):
        return None
    return max(start, lo), min(end, hi)


# =========================================
# 3) FIGURE PIECES
# =========================================
def style_figure(fig: go.Figure, config: RenderConfig) -> go.Figure:
    m = config.margins
    fig.update_layout(
        title=dict(text=config.title, font=dict(color="#111827", size=14), x=0.5, xanchor="center"),
        width=config.width,
        height=config.height,
        autosize=False,
        paper_bgcolor="white",
        plot_bgcolor="white",
        margin=dict(l=m.left, r=m.right, t=m.top, b=m.bottom),
        xaxis=dict(title_text=X_LABEL, color="#374151", showgrid=False, zeroline=False, showline=True),
        yaxis=dict(title_text=Y_LABEL, color="#374151", gridcolor="#E5E7EB", zeroline=False, showline=True),
        hovermode="closest" if config.show_tooltip else False,
        showlegend=config.grouped and config.show_legend,
    )
    return fig


def add_axes(fig: go.Figure, scales: ChartScales) -> go.Figure:
    fig.update_xaxes(range=list(scales.x_domain), type="date")
    fig.update_yaxes(range=list(scales.y_domain), tickmode="array", tickvals=scales.y_ticks)
    return fig


def add_series(fig: go.Figure, frame: pd.DataFrame, config: RenderConfig) -> go.Figure:
    if config.grouped:
        groups = [(key, group) for key, group in frame.groupby("index", sort=False)]
    else:
        groups = [(frame["index"].iloc[0], frame)]

    for key, group in groups:
        group = group.sort_values("date", kind="mergesort")
        color = series_color(key) if config.grouped else config.line_color
        trace = dict(
            x=group["date"],
            y=group["close"],
            mode="lines",
            name=legend_name(key, config.legend_names),
            line=dict(color=color, width=1.5),
            fill="none",
        )
        if config.show_tooltip:
            trace.update(
                text=[tooltip_text(d, v) for d, v in zip(group["date"], group["close"])],
                hovertemplate="%{text}<extra></extra>",
                hoverlabel=dict(bgcolor="white", font=dict(size=11)),
            )
        else:
            trace.update(hoverinfo="skip")
        fig.add_trace(go.Scatter(**trace))

    if config.grouped and config.show_legend:
        fig.update_layout(legend=dict(
            x=1.02, y=0.8, xanchor="left", yanchor="top",
            font=dict(size=10),
            bgcolor="rgba(0,0,0,0)",
        ))
    return fig


def add_annotations(fig: go.Figure, scales: ChartScales, annotations=ANNOTATIONS) -> go.Figure:
    for ann in annotations:
        band = clip_band(ann, scales)
        if band is None:
            logger.debug("Annotation %r outside %s..%s, hidden", ann.label, *scales.x_domain)
            continue
        x0, x1 = band
        fig.add_vrect(
            x0=x0, x1=x1,
            fillcolor=BAND_COLOR, opacity=0.15,
            line_width=0, layer="below",
        )
        fig.add_annotation(
            x=x0 + (x1 - x0) / 2,
            y=1.0, yref="paper", yanchor="bottom",
            text=ann.label,
            showarrow=False,
            font=dict(size=10, color="#374151"),
            bgcolor="white",
            bordercolor=BAND_COLOR,
            borderwidth=1,
            borderpad=3,
        )
    return fig


def empty_figure(config: RenderConfig) -> go.Figure:
    fig = style_figure(go.Figure(), config)
    fig.update_layout(showlegend=False)
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.add_annotation(
        x=0.5, y=0.5, xref="paper", yref="paper",
        text=empty_message(config),
        showarrow=False,
        font=dict(size=14, color="#6B7280"),
    )
    return fig


# =========================================
# 4) ENTRY POINTS
# =========================================
class ChartRenderer:
    """Builds a closing-price line chart for one RenderConfig."""

    def __init__(self, annotations=ANNOTATIONS):
        self.annotations = tuple(annotations)

    def build_figure(self, dataset: Dataset, config: RenderConfig) -> go.Figure:
        frame = scope_frame(dataset, config)
        if frame.empty:
            logger.info("Nothing to plot for %s (key=%s)", config.chart_id, config.series_key)
            return empty_figure(config)

        if not config.grouped and frame["index"].nunique() > 1:
            # one polyline per index, never a single line through several
            config = replace(config, grouped=True)

        scales = ChartScales(frame, config.inner_width, config.inner_height)
        fig = style_figure(go.Figure(), config)
        add_axes(fig, scales)
        add_series(fig, frame, config)
        if config.show_annotations:
            add_annotations(fig, scales, self.annotations)
        logger.debug("Built %s: %d points, y=%s", config.chart_id, len(frame), scales.y_domain)
        return fig

    def render(self, target, dataset: Dataset, config: RenderConfig) -> None:
        """Draw the chart into ``target``, or an explicit message when there is no data."""
        if scope_frame(dataset, config).empty:
            target.info(empty_message(config))
            return
        fig = self.build_figure(dataset, config)
        target.plotly_chart(fig, key=config.chart_id, config={"displayModeBar": True})


_default = ChartRenderer()


def build_figure(dataset: Dataset, config: RenderConfig) -> go.Figure:
    return _default.build_figure(dataset, config)


def render(target, dataset: Dataset, config: RenderConfig) -> None:
    _default.render(target, dataset, config)


# =========================================
# 5) SELECTOR
# =========================================
def selector_options(dataset: Dataset, default: str | None = None) -> tuple[list[str], int]:
    """Options for a series dropdown and the index of the default one.

    ``default`` may be a raw symbol or a display name (any case); when it
    matches nothing the first option is selected.
    """
    options = dataset.keys()
    if not options or default is None:
        return options, 0
    wanted = default.strip().lower()
    for i, key in enumerate(options):
        if key.lower() == wanted or legend_name(key).lower() == wanted:
            return options, i
    return options, 0

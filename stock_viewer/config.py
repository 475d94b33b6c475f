# stock_viewer/config.py
# Central configuration: file locations, exchange names, annotations, chart presets
# ------------------------------------------------------------------------------------

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import date

# =========================================
# 1) FILES
# =========================================
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_FILE = os.path.join(BASE_DIR, "data", "stock.csv")


def data_file() -> str:
    """Price CSV location; STOCK_VIEWER_DATA wins over the bundled default."""
    return os.environ.get("STOCK_VIEWER_DATA") or DATA_FILE


# CSV columns
INDEX_COL = "Index"
DATE_COL = "Date"
CLOSE_COL = "CloseUSD"
DATE_FORMAT = "%Y-%m-%d"

# =========================================
# 2) EXCHANGES
# =========================================
# Raw index symbol -> legend name. Order also fixes each symbol's colour.
EXCHANGE_NAMES = {
    "N100": "euronext",
    "GDAXI": "germany",
    "HSI": "hongkong",
    "NSEI": "india",
    "IXIC": "NASDAQ",
    "NYA": "NYSE",
    "000001.SS": "shanghai",
    "J203.JO": "south africa",
    "SSMI": "swiss",
    "TWII": "taiwan",
    "N225": "tokyo",
    "GSPTSE": "toronto",
}

DEFAULT_SELECTION = "NASDAQ"


# =========================================
# 3) TYPES
# =========================================
@dataclass(frozen=True)
class Annotation:
    """A historical event drawn as a labelled vertical band."""

    label: str
    start: date
    end: date


@dataclass(frozen=True)
class Margins:
    top: int = 50
    right: int = 60
    bottom: int = 50
    left: int = 60


@dataclass(frozen=True)
class RenderConfig:
    """Everything a single chart render needs besides the data.

    ``width``/``height`` are the outer figure size; the plot area is what is
    left after ``margins``. ``series_key`` limits the chart to one series,
    ``None`` plots the whole dataset.
    """

    title: str = ""
    margins: Margins = field(default_factory=Margins)
    width: int = 800
    height: int = 400
    grouped: bool = False
    show_legend: bool = False
    show_tooltip: bool = False
    show_annotations: bool = True
    series_key: str | None = None
    legend_names: dict = field(default_factory=lambda: dict(EXCHANGE_NAMES))
    line_color: str = "steelblue"
    chart_id: str = "stock-chart"

    @property
    def inner_width(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margins.top - self.margins.bottom


# =========================================
# 4) ANNOTATIONS
# =========================================
ANNOTATIONS = (
    Annotation("DotCom", date(2000, 3, 1), date(2002, 10, 1)),
    Annotation("Great Recession", date(2007, 12, 1), date(2009, 6, 1)),
    Annotation("Covid-19", date(2020, 2, 1), date(2020, 4, 1)),
)

# =========================================
# 5) CHART PRESETS
# =========================================
CHART_PRESETS = {
    "all": RenderConfig(
        title="All Stock Exchanges",
        margins=Margins(top=50, right=100, bottom=50, left=50),
        grouped=True,
        show_legend=True,
        chart_id="stock-full-chart",
    ),
    "nyse": RenderConfig(
        title="NYSE Exchange",
        series_key="NYA",
        show_tooltip=True,
        chart_id="stock-nyse-chart",
    ),
    "filter": RenderConfig(
        show_tooltip=True,
        chart_id="stock-chart",
    ),
}


# =========================================
# 6) LOGGING
# =========================================
LOG_LEVEL = os.environ.get("STOCK_VIEWER_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = LOG_LEVEL) -> None:
    """Send log records to stdout. Safe to call on every Streamlit rerun."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)

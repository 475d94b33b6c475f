from .config import ANNOTATIONS, CHART_PRESETS, EXCHANGE_NAMES, Annotation, Margins, RenderConfig
from .data import DataLoadError, DataPoint, Dataset, load_dataset, parse_row
from .renderer import ChartRenderer, build_figure, legend_name, render, selector_options

__all__ = [
    "ANNOTATIONS",
    "CHART_PRESETS",
    "EXCHANGE_NAMES",
    "Annotation",
    "ChartRenderer",
    "DataLoadError",
    "DataPoint",
    "Dataset",
    "Margins",
    "RenderConfig",
    "build_figure",
    "legend_name",
    "load_dataset",
    "parse_row",
    "render",
    "selector_options",
]

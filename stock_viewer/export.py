# stock_viewer/export.py
# Static HTML page: one chart + an exchange dropdown, no Python server needed
# ------------------------------------------------------------------------------------
#   python -m stock_viewer.export --data data/stock.csv --output index.html

import argparse
import json
import logging
import sys
from dataclasses import replace
from html import escape

import plotly.io as pio

from .config import CHART_PRESETS, DEFAULT_SELECTION, configure_logging, data_file
from .data import DataLoadError, Dataset, load_dataset
from .renderer import ChartRenderer, selector_options

logger = logging.getLogger(__name__)

PLOTLY_CDN = "https://cdn.plot.ly/plotly-2.35.2.min.js"


def build_figures(dataset: Dataset, renderer: ChartRenderer | None = None) -> dict:
    """One figure (as a plotly JSON dict) per series key, using the filter preset."""
    renderer = renderer or ChartRenderer()
    base = CHART_PRESETS["filter"]
    figures = {}
    for key in dataset.keys():
        fig = renderer.build_figure(dataset, replace(base, title=key, series_key=key))
        figures[key] = json.loads(pio.to_json(fig))
    if not figures:
        figures[""] = json.loads(pio.to_json(renderer.build_figure(dataset, base)))
    return figures


def render_html(dataset: Dataset, default: str | None = DEFAULT_SELECTION,
                title: str = "Stock Exchanges") -> str:
    figures = build_figures(dataset)
    options, selected = selector_options(dataset, default)
    option_tags = "\n".join(
        f'            <option value="{escape(k)}"{" selected" if i == selected else ""}>{escape(k)}</option>'
        for i, k in enumerate(options)
    )
    # keep "</script>" inside the JSON from closing the tag
    data_json = json.dumps(figures).replace("</", "<\\/")
    first_key = options[selected] if options else ""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <script src="{PLOTLY_CDN}"></script>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; margin: 0; background-color: #f8f9fa; }}
        #controls {{ padding: 10px 20px; background-color: #fff; border-bottom: 1px solid #ddd; display: flex; align-items: center; gap: 12px; }}
        #stock-chart {{ padding: 10px 20px; }}
        select {{ padding: 5px 10px; border: 1px solid #ccc; border-radius: 4px; background-color: #fff; }}
    </style>
</head>
<body>
    <div id="controls">
        <label for="stock-select">Exchange</label>
        <select id="stock-select">
{option_tags}
        </select>
    </div>
    <div id="stock-chart"></div>

    <script>
        const allFigures = {data_json};
        const chartDiv = document.getElementById('stock-chart');
        const select = document.getElementById('stock-select');

        function plot(key) {{
            const fig = allFigures[key];
            Plotly.purge(chartDiv);
            Plotly.newPlot(chartDiv, fig.data, fig.layout, {{displayModeBar: true}});
        }}

        select.addEventListener('change', () => plot(select.value));
        plot({json.dumps(first_key)});
    </script>
</body>
</html>
"""


def write_html(dataset: Dataset, output_path: str, default: str | None = DEFAULT_SELECTION) -> str:
    html = render_html(dataset, default=default)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(html)
    logger.info("Wrote %s (%d series)", output_path, len(dataset.keys()))
    return output_path


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a static stock-index chart page.")
    parser.add_argument("--data", default=data_file(), help="price CSV (Index, Date, CloseUSD)")
    parser.add_argument("--output", default="index.html", help="HTML file to write")
    parser.add_argument("--default", default=DEFAULT_SELECTION, help="series selected on load")
    args = parser.parse_args(argv)

    configure_logging()
    try:
        dataset = load_dataset(args.data)
    except DataLoadError as e:
        logger.error("%s", e)
        return 1
    try:
        write_html(dataset, args.output, default=args.default)
    except OSError as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

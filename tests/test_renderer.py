"""Tests for the parameterised chart renderer."""

from __future__ import annotations

from dataclasses import replace

import pandas as pd
import pytest

from stock_viewer.config import ANNOTATIONS, CHART_PRESETS, RenderConfig
from stock_viewer.data import DataPoint, Dataset
from stock_viewer.renderer import (
    PALETTE,
    ChartRenderer,
    build_figure,
    clip_band,
    legend_name,
    selector_options,
    series_color,
    tooltip_text,
)
from stock_viewer.scales import ChartScales


def _dataset(rows) -> Dataset:
    return Dataset.from_points(DataPoint(k, pd.Timestamp(d), float(c)) for k, d, c in rows)


@pytest.mark.unit
def test_legend_name_uses_exchange_table_with_raw_key_fallback() -> None:
    assert legend_name("IXIC") == "NASDAQ"
    assert legend_name("000001.SS") == "shanghai"
    assert legend_name("XYZ") == "XYZ"


@pytest.mark.unit
def test_series_color_is_stable_per_key() -> None:
    assert series_color("IXIC") == PALETTE[4]
    assert series_color("XYZ") == series_color("XYZ")


@pytest.mark.unit
def test_tooltip_shows_formatted_date_and_value() -> None:
    assert tooltip_text(pd.Timestamp(2020, 1, 2), 100.5) == "Jan 2, 2020<br>100.5"
    assert tooltip_text(pd.Timestamp(1999, 6, 1), 50.0) == "Jun 1, 1999<br>50"


@pytest.mark.integration
def test_grouped_chart_draws_one_line_per_series_with_legend(dataset: Dataset) -> None:
    fig = build_figure(dataset, CHART_PRESETS["all"])

    assert [t.name for t in fig.data] == ["NASDAQ", "NYSE", "euronext"]
    assert all(t.fill == "none" for t in fig.data)
    assert fig.data[0].line.color == series_color("IXIC")
    assert fig.layout.showlegend is True
    assert fig.layout.title.text == "All Stock Exchanges"
    assert fig.layout.xaxis.title.text == "Date"
    assert fig.layout.yaxis.title.text == "↑ Close Price ($)"
    assert tuple(fig.layout.yaxis.range) == (0.0, 110.0)


@pytest.mark.integration
def test_grouped_chart_lines_are_in_date_order(dataset: Dataset) -> None:
    fig = build_figure(dataset, CHART_PRESETS["all"])
    ixic = fig.data[0]
    dates = pd.to_datetime(list(ixic.x))
    assert dates.is_monotonic_increasing
    assert list(ixic.y) == [100.5, 101.25, 99.0]


@pytest.mark.integration
def test_single_series_chart_with_tooltips(dataset: Dataset) -> None:
    fig = build_figure(dataset, CHART_PRESETS["nyse"])

    assert len(fig.data) == 1
    trace = fig.data[0]
    assert trace.line.color == "steelblue"
    assert list(trace.text) == ["Jun 1, 1999<br>50", "Jun 1, 2021<br>80"]
    assert trace.hovertemplate == "%{text}<extra></extra>"
    assert fig.layout.hovermode == "closest"
    assert fig.layout.showlegend is False


@pytest.mark.integration
def test_hover_disabled_without_tooltip_mode(dataset: Dataset) -> None:
    cfg = replace(CHART_PRESETS["nyse"], show_tooltip=False)
    fig = build_figure(dataset, cfg)
    assert fig.data[0].hoverinfo == "skip"
    assert fig.data[0].text is None


@pytest.mark.integration
def test_y_ticks_follow_plot_height(dataset: Dataset) -> None:
    fig = build_figure(dataset, CHART_PRESETS["nyse"])
    assert list(fig.layout.yaxis.tickvals) == [0, 10, 20, 30, 40, 50, 60, 70, 80]


@pytest.mark.integration
def test_annotations_drawn_inside_domain(dataset: Dataset) -> None:
    fig = build_figure(dataset, CHART_PRESETS["nyse"])
    labels = [a.text for a in fig.layout.annotations]
    assert labels == ["DotCom", "Great Recession", "Covid-19"]
    assert len(fig.layout.shapes) == 3


@pytest.mark.integration
def test_annotations_outside_domain_are_hidden(dataset: Dataset) -> None:
    cfg = replace(CHART_PRESETS["filter"], series_key="IXIC", title="IXIC")
    fig = build_figure(dataset, cfg)
    assert len(fig.layout.annotations) == 0
    assert len(fig.layout.shapes) == 0


@pytest.mark.integration
def test_annotations_can_be_switched_off(dataset: Dataset) -> None:
    cfg = replace(CHART_PRESETS["all"], show_annotations=False)
    fig = build_figure(dataset, cfg)
    assert len(fig.layout.shapes) == 0


@pytest.mark.unit
def test_clip_band_trims_to_domain() -> None:
    frame = pd.DataFrame({
        "index": ["A", "A"],
        "date": [pd.Timestamp("2001-01-01"), pd.Timestamp("2008-06-01")],
        "close": [1.0, 2.0],
    })
    scales = ChartScales(frame, 690, 300)
    dotcom, recession, covid = ANNOTATIONS

    assert clip_band(dotcom, scales) == (pd.Timestamp("2001-01-01"), pd.Timestamp("2002-10-01"))
    assert clip_band(recession, scales) == (pd.Timestamp("2007-12-01"), pd.Timestamp("2008-06-01"))
    assert clip_band(covid, scales) is None


@pytest.mark.integration
def test_selecting_same_key_twice_gives_identical_chart(dataset: Dataset) -> None:
    cfg = replace(CHART_PRESETS["filter"], series_key="NYA", title="NYA")
    assert build_figure(dataset, cfg).to_json() == build_figure(dataset, cfg).to_json()


@pytest.mark.unit
def test_missing_series_renders_empty_state_figure() -> None:
    ds = _dataset([("IXIC", "2020-01-02", 100.5)])
    cfg = replace(CHART_PRESETS["filter"], series_key="NYA", title="NYA")

    fig = build_figure(ds, cfg)

    assert len(fig.data) == 0
    assert fig.layout.annotations[0].text == "No data available for NYA."


@pytest.mark.unit
def test_render_shows_message_instead_of_blank_panel(target) -> None:
    ds = _dataset([("IXIC", "2020-01-02", 100.5)])
    cfg = replace(CHART_PRESETS["filter"], series_key="NYA", title="NYA")

    ChartRenderer().render(target, ds, cfg)

    assert target.charts == []
    assert target.messages == ["No data available for NYA."]


@pytest.mark.unit
def test_render_empty_dataset_does_not_raise(target) -> None:
    ChartRenderer().render(target, Dataset(), CHART_PRESETS["all"])
    assert target.messages == ["No data available."]


@pytest.mark.integration
def test_render_draws_figure_into_target(dataset: Dataset, target) -> None:
    ChartRenderer().render(target, dataset, CHART_PRESETS["nyse"])

    (fig, kwargs), = target.charts
    assert kwargs["key"] == "stock-nyse-chart"
    assert fig.layout.title.text == "NYSE Exchange"


@pytest.mark.unit
def test_renderer_accepts_custom_annotations() -> None:
    ds = _dataset([("IXIC", "2020-01-02", 1), ("IXIC", "2020-03-01", 2)])
    renderer = ChartRenderer(annotations=[])
    fig = renderer.build_figure(ds, RenderConfig(series_key="IXIC"))
    assert len(fig.layout.shapes) == 0


@pytest.mark.integration
def test_selector_options_resolve_default_by_name_or_symbol(dataset: Dataset) -> None:
    assert selector_options(dataset, "NASDAQ") == (["IXIC", "NYA", "N100"], 0)
    assert selector_options(dataset, "nyse") == (["IXIC", "NYA", "N100"], 1)
    assert selector_options(dataset, "N100") == (["IXIC", "NYA", "N100"], 2)
    assert selector_options(dataset, "TOKYO") == (["IXIC", "NYA", "N100"], 0)


@pytest.mark.unit
def test_selector_options_on_empty_dataset() -> None:
    assert selector_options(Dataset(), "NASDAQ") == ([], 0)


@pytest.mark.integration
def test_ungrouped_config_over_several_indices_draws_one_line_each(dataset: Dataset) -> None:
    """Without a series key the default config must not join indices into one line."""

    fig = build_figure(dataset, RenderConfig())

    assert [t.name for t in fig.data] == ["NASDAQ", "NYSE", "euronext"]
    assert list(fig.data[1].y) == [50.0, 80.0]
    assert list(fig.data[2].y) == [40.0]


@pytest.mark.unit
def test_single_series_trace_named_after_its_index() -> None:
    ds = _dataset([("NYA", "2020-01-02", 1), ("NYA", "2020-01-03", 2)])
    fig = build_figure(ds, RenderConfig(title="Only NYSE"))
    assert len(fig.data) == 1
    assert fig.data[0].name == "NYSE"
    assert fig.data[0].line.color == "steelblue"


@pytest.mark.unit
def test_tooltip_value_keeps_full_precision() -> None:
    assert tooltip_text(pd.Timestamp(2020, 1, 2), 1234.5678) == "Jan 2, 2020<br>1234.5678"


@pytest.mark.unit
def test_clip_band_covering_whole_domain_is_trimmed_both_sides() -> None:
    frame = pd.DataFrame({
        "index": ["A", "A"],
        "date": [pd.Timestamp("2000-06-01"), pd.Timestamp("2001-06-01")],
        "close": [1.0, 2.0],
    })
    scales = ChartScales(frame, 690, 300)
    dotcom = ANNOTATIONS[0]

    assert clip_band(dotcom, scales) == (pd.Timestamp("2000-06-01"), pd.Timestamp("2001-06-01"))

"""Pytest fixtures shared across the stock viewer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from stock_viewer.data import Dataset, load_dataset

SAMPLE_CSV = """Index,Date,Open,CloseUSD
IXIC,2020-01-03,1,101.25
IXIC,2020-01-02,1,100.50
NYA,1999-06-01,1,50
NYA,2021-06-01,1,80
N100,2008-01-02,1,40
IXIC,2020-01-06,1,99.00
"""


class RecordingTarget:
    """Stand-in for a Streamlit container that records what was drawn."""

    def __init__(self) -> None:
        self.charts: list[tuple] = []
        self.messages: list[str] = []

    def plotly_chart(self, fig, **kwargs) -> None:
        self.charts.append((fig, kwargs))

    def info(self, body) -> None:
        self.messages.append(str(body))


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    """Write the sample price CSV to a temporary file."""

    path = tmp_path / "stock.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def dataset(sample_csv: Path) -> Dataset:
    """Return the sample CSV loaded into a Dataset."""

    return load_dataset(sample_csv)


@pytest.fixture
def target() -> RecordingTarget:
    return RecordingTarget()

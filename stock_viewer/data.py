# stock_viewer/data.py
# CSV loading + grouping of closing prices by index symbol
# ------------------------------------------------------------------------------------

import logging
import os
from dataclasses import dataclass

import pandas as pd

from .config import CLOSE_COL, DATE_COL, DATE_FORMAT, INDEX_COL

logger = logging.getLogger(__name__)

COLUMNS = ["index", "date", "close"]


class DataLoadError(RuntimeError):
    """The price CSV could not be read or lacks the required columns."""


@dataclass(frozen=True)
class DataPoint:
    series_key: str
    timestamp: pd.Timestamp
    value: float


def parse_row(row: dict) -> DataPoint:
    """Map one raw CSV record onto a DataPoint. Extra keys are ignored.

    Single-record API: raises on a malformed record. Bulk loading goes
    through frame_from_csv, which applies the same column rules and date
    format but drops malformed rows instead.
    """
    return DataPoint(
        series_key=str(row[INDEX_COL]).strip(),
        timestamp=pd.to_datetime(row[DATE_COL], format=DATE_FORMAT),
        value=float(row[CLOSE_COL]),
    )


def format_date(ts) -> str:
    return pd.Timestamp(ts).strftime(DATE_FORMAT)


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame({
        "index": pd.Series(dtype=object),
        "date": pd.Series(dtype="datetime64[ns]"),
        "close": pd.Series(dtype=float),
    })


class Dataset:
    """Closing prices grouped by index symbol.

    Rows are kept in one long frame (``index``, ``date``, ``close``). Within
    a symbol the rows are sorted by date; symbols keep the order in which
    they first appear in the source file. Treat instances as read-only.
    """

    def __init__(self, frame: pd.DataFrame | None = None):
        if frame is None or frame.empty:
            self._frame = _empty_frame()
            self._keys = []
            return
        frame = frame[COLUMNS].reset_index(drop=True)
        keys = [str(k) for k in pd.unique(frame["index"])]
        order = frame["index"].map({k: i for i, k in enumerate(keys)})
        frame = (
            frame.assign(_order=order)
            .sort_values(["_order", "date"], kind="mergesort")
            .drop(columns="_order")
            .reset_index(drop=True)
        )
        self._frame = frame
        self._keys = keys

    @classmethod
    def from_points(cls, points) -> "Dataset":
        rows = [{"index": p.series_key, "date": p.timestamp, "close": p.value} for p in points]
        if not rows:
            return cls()
        frame = pd.DataFrame(rows, columns=COLUMNS)
        frame["date"] = pd.to_datetime(frame["date"])
        return cls(frame)

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def keys(self) -> list[str]:
        return list(self._keys)

    def series(self, key: str) -> pd.DataFrame:
        """Rows of one symbol, oldest first. Unknown symbols give an empty frame."""
        return self._frame[self._frame["index"] == key].reset_index(drop=True)

    def groups(self) -> dict[str, pd.DataFrame]:
        return {k: self.series(k) for k in self._keys}

    def subset(self, keys) -> "Dataset":
        wanted = [k for k in keys if k in self._keys]
        return Dataset(self._frame[self._frame["index"].isin(wanted)])

    def points(self, key: str | None = None) -> list[DataPoint]:
        frame = self._frame if key is None else self.series(key)
        return [
            DataPoint(key, ts, float(close))
            for key, ts, close in frame.itertuples(index=False, name=None)
        ]

    @property
    def is_empty(self) -> bool:
        return self._frame.empty

    def __len__(self) -> int:
        return len(self._frame)

    def __contains__(self, key) -> bool:
        return key in self._keys

    def __repr__(self) -> str:
        return f"Dataset(rows={len(self)}, series={self._keys})"


def frame_from_csv(df_raw: pd.DataFrame) -> pd.DataFrame:
    """Coerce a raw CSV frame into the (index, date, close) layout.

    Rows whose date or close does not parse are dropped.
    """
    missing = [c for c in (INDEX_COL, DATE_COL, CLOSE_COL) if c not in df_raw.columns]
    if missing:
        raise DataLoadError(f"CSV is missing required column(s): {', '.join(missing)}")

    df = pd.DataFrame({
        "index": df_raw[INDEX_COL].astype(str).str.strip(),
        "date": pd.to_datetime(df_raw[DATE_COL], format=DATE_FORMAT, errors="coerce"),
        "close": pd.to_numeric(df_raw[CLOSE_COL], errors="coerce"),
    })
    bad = df["date"].isna() | df["close"].isna() | df_raw[INDEX_COL].isna()
    if bad.any():
        logger.warning("Dropped %d row(s) with unparseable Index/Date/CloseUSD", int(bad.sum()))
    return df.loc[~bad].reset_index(drop=True)


def load_dataset(path) -> Dataset:
    """Read the price CSV at ``path`` and group it by index symbol."""
    if not os.path.exists(path):
        raise DataLoadError(f"Data file not found: {path}")
    try:
        df_raw = pd.read_csv(path, dtype={INDEX_COL: str, DATE_COL: str})
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        raise DataLoadError(f"Could not read {path}: {e}") from e

    dataset = Dataset(frame_from_csv(df_raw))
    logger.info("Loaded %d rows across %d series from %s", len(dataset), len(dataset.keys()), path)
    return dataset

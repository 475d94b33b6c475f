# stock_viewer/scales.py
# Extents, nice bounds, ticks and data -> pixel scales
# ------------------------------------------------------------------------------------

import math

import numpy as np
import pandas as pd

# Step-size thresholds for 1/2/5/10 tick increments
E10 = math.sqrt(50)
E5 = math.sqrt(10)
E2 = math.sqrt(2)

PIXELS_PER_TICK = 40


def x_extent(frame: pd.DataFrame) -> tuple[pd.Timestamp, pd.Timestamp]:
    """[earliest, latest] date of ``frame``."""
    if frame is None or frame.empty:
        raise ValueError("No data to compute a date extent")
    return frame["date"].min(), frame["date"].max()


def y_extent(frame: pd.DataFrame) -> tuple[float, float]:
    """[0, highest close] of ``frame``; prices are anchored at zero."""
    if frame is None or frame.empty:
        raise ValueError("No data to compute a value extent")
    return 0.0, float(frame["close"].max())


def tick_increment(start: float, stop: float, count: float) -> float:
    """Tick step for [start, stop]; negative values mean 1/-step."""
    if count <= 0:
        return 0.0
    step = (stop - start) / count
    if not np.isfinite(step) or step <= 0:
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= E10 else 5 if error >= E5 else 2 if error >= E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def nice(lo: float, hi: float, count: float = 10) -> tuple[float, float]:
    """Extend [lo, hi] outward to round tick values.

    The result always covers the input. A zero-width domain is widened
    to one unit so the axis stays usable.
    """
    if hi < lo:
        lo, hi = hi, lo
    if hi == lo:
        return float(lo), float(lo) + 1.0
    start, stop = lo, hi
    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return float(min(start, lo)), float(max(stop, hi))


def ticks(lo: float, hi: float, count: float) -> list[float]:
    """Round tick values inside [lo, hi], about ``count`` of them."""
    if hi < lo:
        lo, hi = hi, lo
    if hi == lo:
        return [float(lo)]
    inc = tick_increment(lo, hi, count)
    if inc == 0:
        return []
    if inc > 0:
        i1, i2 = math.ceil(lo / inc - 1e-9), math.floor(hi / inc + 1e-9)
        return [float(i * inc) for i in range(i1, i2 + 1)]
    inv = -inc
    i1, i2 = math.ceil(lo * inv - 1e-9), math.floor(hi * inv + 1e-9)
    return [float(i / inv) for i in range(i1, i2 + 1)]


def tick_count(pixel_height: float) -> float:
    return pixel_height / PIXELS_PER_TICK


class LinearScale:
    """Maps a numeric domain linearly onto a pixel range (which may be inverted)."""

    def __init__(self, domain, range_):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: float = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


class TimeScale:
    """Maps timestamps linearly onto a pixel range."""

    def __init__(self, domain, range_):
        self.domain = (pd.Timestamp(domain[0]), pd.Timestamp(domain[1]))
        self._linear = LinearScale((self.domain[0].value, self.domain[1].value), range_)
        self.range = self._linear.range

    def __call__(self, ts) -> float:
        return self._linear(pd.Timestamp(ts).value)

    def invert(self, pixel: float) -> pd.Timestamp:
        return pd.Timestamp(int(round(self._linear.invert(pixel))))

    def contains(self, ts) -> bool:
        ts = pd.Timestamp(ts)
        return self.domain[0] <= ts <= self.domain[1]


class ChartScales:
    """Scales derived for one render call; never shared between renders."""

    def __init__(self, frame: pd.DataFrame, inner_width: float, inner_height: float):
        self.x_domain = x_extent(frame)
        raw_y = y_extent(frame)
        self.y_domain = nice(*raw_y)
        self.x = TimeScale(self.x_domain, (0, inner_width))
        self.y = LinearScale(self.y_domain, (inner_height, 0))
        self.y_ticks = self.y.ticks(tick_count(inner_height))

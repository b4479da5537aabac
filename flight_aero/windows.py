"""Flight / stationary window selection."""

from __future__ import annotations
from dataclasses import dataclass, replace
import math

import numpy as np
from loguru import logger

from .domain import InvalidWindow, TimeWindow, WindowMode, WindowSpec


# Float slack when comparing user-entered times against the record
TIME_TOL_S = 1e-9


def _percent_rows(n: int, start_pct: float, end_pct: float) -> tuple[int, int]:
    """Validate percent bounds and map them to (first, last) row indices."""
    if n <= 0:
        raise InvalidWindow("Cannot select a window in an empty record.")
    for pct in (start_pct, end_pct):
        if not (0.0 <= pct <= 100.0):
            raise InvalidWindow(f"Percent bounds must lie in [0, 100], got {pct}")
    if start_pct > end_pct:
        raise InvalidWindow(f"Window start ({start_pct}%) must be before end ({end_pct}%).")

    def to_index(pct: float) -> int:
        return min(max(int(math.floor(pct * n / 100.0)), 0), n - 1)

    return to_index(start_pct), to_index(end_pct)


def _time_rows(t: np.ndarray, start: float, end: float, relative: bool) -> np.ndarray:
    """Validate time bounds and return the indices of the rows inside them."""
    if len(t) == 0:
        raise InvalidWindow("Cannot select a window in an empty record.")
    if start > end:
        raise InvalidWindow(f"Window start ({start}) must be before end ({end}).")

    t0, t_last = float(t[0]), float(t[-1])
    lo, hi = (0.0, t_last - t0) if relative else (t0, t_last)
    if start < lo - TIME_TOL_S or end > hi + TIME_TOL_S:
        raise InvalidWindow(f"Window [{start}, {end}] lies outside the record [{lo}, {hi}].")

    if relative:
        start, end = start + t0, end + t0
    return np.flatnonzero((t >= start - TIME_TOL_S) & (t <= end + TIME_TOL_S))


def window_from_percent(n: int, start_pct: float, end_pct: float) -> TimeWindow:
    """
    Convert percentage-of-record bounds into row indices.

    index = floor(pct / 100 * n), clamped to [0, n - 1].

    Args:
        n: Number of samples in the record
        start_pct: Start of the window (0..100)
        end_pct: End of the window (0..100)

    Returns:
        TimeWindow with inclusive row indices

    Raises:
        InvalidWindow: empty record, bounds outside 0..100, start >= end, or a
            window that collapses to a single row after clamping
    """
    first, last = _percent_rows(n, start_pct, end_pct)
    if start_pct == end_pct:
        raise InvalidWindow(f"Window start ({start_pct}%) must be before end ({end_pct}%).")
    return TimeWindow(first, last)


def window_from_time(t: np.ndarray, start: float, end: float, relative: bool = False) -> TimeWindow:
    """
    Select the rows whose time lies in [start, end] (inclusive).

    With relative=True the bounds are offsets from the first sample and must lie
    in [0, duration]; otherwise they are absolute times within [t0, tN].
    `t` must be sorted (see preprocess.prepare_samples).
    """
    t = np.asarray(t, dtype=float)
    idx = _time_rows(t, start, end, relative)
    if start == end:
        raise InvalidWindow(f"Window start ({start}) must be before end ({end}).")
    if len(idx) < 2:
        raise InvalidWindow(f"Window [{start}, {end}] contains {len(idx)} sample(s); need at least 2.")
    return TimeWindow(int(idx[0]), int(idx[-1]))


def resolve_window(t: np.ndarray, spec: WindowSpec) -> TimeWindow:
    mode = WindowMode(spec.mode)
    if mode is WindowMode.PERCENT:
        return window_from_percent(len(t), spec.start, spec.end)
    return window_from_time(t, spec.start, spec.end, relative=mode is WindowMode.RELATIVE)


def resolve_stationary_window(t: np.ndarray, spec: WindowSpec) -> TimeWindow | None:
    """
    Resolve a calibration window, which may be empty.

    Bounds are validated like resolve_window, but a zero-length range or one
    that covers fewer than two rows gives None (identity reference attitude).
    """
    t = np.asarray(t, dtype=float)
    mode = WindowMode(spec.mode)
    if mode is WindowMode.PERCENT:
        first, last = _percent_rows(len(t), spec.start, spec.end)
    else:
        idx = _time_rows(t, spec.start, spec.end, relative=mode is WindowMode.RELATIVE)
        first, last = (int(idx[0]), int(idx[-1])) if len(idx) else (0, 0)

    if last <= first:
        logger.info(f"Stationary window [{spec.start}, {spec.end}] ({mode.value}) is empty; calibration disabled")
        return None
    return TimeWindow(first, last)


@dataclass(frozen=True)
class FlightBounds:
    """
    The accepted flight window plus an optional stationary calibration window.

    Updates return a new FlightBounds and only succeed when the new window is
    valid, so a rejected update leaves the previous selection in place.
    """
    flight: TimeWindow
    stationary: TimeWindow | None = None

    @classmethod
    def from_specs(cls, t: np.ndarray, flight: WindowSpec, stationary: WindowSpec | None = None) -> "FlightBounds":
        stat = resolve_stationary_window(t, stationary) if stationary is not None else None
        return cls(flight=resolve_window(t, flight), stationary=stat)

    def with_flight(self, t: np.ndarray, spec: WindowSpec) -> "FlightBounds":
        return replace(self, flight=resolve_window(t, spec))

    def with_stationary(self, t: np.ndarray, spec: WindowSpec | None) -> "FlightBounds":
        if spec is None:
            return replace(self, stationary=None)
        return replace(self, stationary=resolve_stationary_window(t, spec))

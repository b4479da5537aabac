from __future__ import annotations
from pathlib import Path
from typing import Union, IO
import numpy as np
import pandas as pd
from loguru import logger

from .channels import ChannelBinding, extract_channels
from .domain import EPOCH_MS_THRESHOLD, TimestampUnit

CSVSource = Union[str, Path, IO[bytes], IO[str]]


# -----------------------------
# Helpers
# -----------------------------

def timestamps_to_seconds(t: np.ndarray, unit: TimestampUnit) -> np.ndarray:
    """
    Convert raw timestamps to seconds.

    SECONDS and MILLISECONDS are explicit declarations by the caller. AUTO
    treats the record as milliseconds when its first timestamp exceeds 1e9
    (epoch-like values) and as seconds otherwise.
    """
    t = np.asarray(t, dtype=float)
    unit = TimestampUnit(unit)
    if unit is TimestampUnit.MILLISECONDS:
        return t / 1000.0
    if unit is TimestampUnit.AUTO and len(t) > 0 and abs(t[0]) > EPOCH_MS_THRESHOLD:
        return t / 1000.0
    return t.copy()


def median_dt(t: np.ndarray) -> float | None:
    dts = np.diff(np.asarray(t, dtype=float))
    dts = dts[dts > 0]
    if len(dts) == 0:
        return None
    return float(np.median(dts))


def sample_rate_hz(t: np.ndarray) -> float | None:
    """1 / median positive spacing, or None when fewer than two distinct times exist."""
    dt = median_dt(t)
    return None if dt is None else 1.0 / dt


# -----------------------------
# Loading
# -----------------------------
def load_samples(csv_source: CSVSource) -> pd.DataFrame:
    """
    Read a sensor log as-is. Column names are not interpreted here; see
    channels.resolve_channels. An empty file gives an empty DataFrame.
    """
    try:
        df = pd.read_csv(csv_source, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    df.columns = [str(c).strip() for c in df.columns]
    logger.debug(f"Loaded {len(df)} rows with columns {list(df.columns)}")
    return df


def prepare_samples(frame: pd.DataFrame, binding: ChannelBinding, unit: TimestampUnit = TimestampUnit.SECONDS) -> pd.DataFrame:
    """
    Turn a raw dataset into the canonical sample frame used by the pipeline.

    Returns a DataFrame with columns:
      t (seconds), accel_x/y/z, gyro_x/y/z, pressure, quat_w/x/y/z
    sorted by time (stable, so equal timestamps keep their order). The median
    sample spacing is stored in df.attrs["dt"] (None for < 2 distinct times).
    """
    df = extract_channels(frame, binding)

    bad_t = df["timestamp"].isna()
    if bad_t.any():
        logger.warning(f"Dropping {int(bad_t.sum())} rows without a numeric timestamp")
        df = df.loc[~bad_t].copy()

    df.insert(0, "t", timestamps_to_seconds(df["timestamp"].to_numpy(float), unit))
    df = df.drop(columns=["timestamp"])
    df = df.sort_values("t", kind="stable").reset_index(drop=True)

    df.attrs["dt"] = median_dt(df["t"].to_numpy(float))
    return df

"""Mapping of loosely named CSV columns onto canonical sensor channels."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Mapping

import numpy as np
import pandas as pd
from loguru import logger


# Ordered synonyms per canonical role. Earlier entries win.
CHANNEL_CANDIDATES: dict[str, tuple[str, ...]] = {
    "timestamp": ("timestamp", "Timestamp", "time", "Time", "t", "time_s", "Time (s)"),
    "accel_x": ("Linear Accel X", "linear_accel_x", "LinAccel X", "accelX", "accel_x", "Accel X", "ax"),
    "accel_y": ("Linear Accel Y", "linear_accel_y", "LinAccel Y", "accelY", "accel_y", "Accel Y", "ay"),
    "accel_z": ("Linear Accel Z", "linear_accel_z", "LinAccel Z", "accelZ", "accel_z", "Accel Z", "az"),
    "gyro_x": ("Gyro X", "gyro_x", "gyroX", "gx"),
    "gyro_y": ("Gyro Y", "gyro_y", "gyroY", "gy"),
    "gyro_z": ("Gyro Z", "gyro_z", "gyroZ", "gz"),
    "pressure": ("Pressure", "pressure", "Dynamic Pressure", "dynamic_pressure", "diff_pressure", "p"),
    "quat_w": ("Quat W", "quat_w", "quatW", "qw", "q0"),
    "quat_x": ("Quat X", "quat_x", "quatX", "qx", "q1"),
    "quat_y": ("Quat Y", "quat_y", "quatY", "qy", "q2"),
    "quat_z": ("Quat Z", "quat_z", "quatZ", "qz", "q3"),
}

ACCEL_ROLES = ("accel_x", "accel_y", "accel_z")
GYRO_ROLES = ("gyro_x", "gyro_y", "gyro_z")
QUAT_ROLES = ("quat_w", "quat_x", "quat_y", "quat_z")
SIGNAL_ROLES = ACCEL_ROLES + GYRO_ROLES + ("pressure",) + QUAT_ROLES


def _normalize_col(c: str) -> str:
    return str(c).strip().lower().replace(" ", "").replace("_", "")


def _pick_col(columns: list[str], candidates: Iterable[str]) -> str | None:
    candidates = list(candidates)
    # exact spelling first, then case/spacing-insensitive
    for cand in candidates:
        if cand in columns:
            return cand
    norm_map: dict[str, str] = {}
    for c in columns:
        norm_map.setdefault(_normalize_col(c), c)
    for cand in candidates:
        key = _normalize_col(cand)
        if key in norm_map:
            return norm_map[key]
    return None


@dataclass(frozen=True)
class ChannelBinding:
    columns: Mapping[str, str | None]   # canonical role -> source column (None = unresolved)

    def column(self, role: str) -> str | None:
        return self.columns.get(role)

    @property
    def unresolved(self) -> tuple[str, ...]:
        return tuple(role for role, col in self.columns.items() if col is None)

    @property
    def has_orientation(self) -> bool:
        return all(self.columns.get(r) is not None for r in QUAT_ROLES)


def resolve_channels(columns: Iterable[str], candidates: Mapping[str, Iterable[str]] | None = None) -> ChannelBinding:
    """
    Resolve each canonical role to the best matching column of a dataset.

    Args:
        columns: Header of the dataset (or the keys of one sample)
        candidates: Optional override of CHANNEL_CANDIDATES

    Returns:
        ChannelBinding; roles with no matching column map to None
    """
    cols = [str(c) for c in columns]
    table = CHANNEL_CANDIDATES if candidates is None else candidates
    binding = ChannelBinding(columns={role: _pick_col(cols, cands) for role, cands in table.items()})

    if binding.unresolved:
        logger.warning(f"Unresolved channels (defaulting to 0): {list(binding.unresolved)}")
    return binding


def extract_channels(frame: pd.DataFrame, binding: ChannelBinding) -> pd.DataFrame:
    """
    Build a frame with one numeric column per canonical signal role.

    Unresolved roles and non-numeric or infinite cells become 0.0. The timestamp column is
    copied as-is (named "timestamp"); it must be resolvable.
    """
    ts_col = binding.column("timestamp")
    if ts_col is None:
        raise ValueError(f"No time column found. Expected one of {list(CHANNEL_CANDIDATES['timestamp'])}. Found: {list(frame.columns)}")

    out = pd.DataFrame(index=frame.index)
    ts = pd.to_numeric(frame[ts_col], errors="coerce").astype(float)
    out["timestamp"] = ts.where(np.isfinite(ts))

    for role in SIGNAL_ROLES:
        col = binding.column(role)
        if col is None:
            out[role] = 0.0
        else:
            values = pd.to_numeric(frame[col], errors="coerce").astype(float)
            out[role] = values.where(np.isfinite(values), 0.0)
    return out

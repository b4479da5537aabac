"""Velocity estimation by integrating acceleration over the flight window."""

from __future__ import annotations
import math

import numpy as np
import pandas as pd
from loguru import logger
from scipy.spatial.transform import Rotation, Slerp

from .channels import ACCEL_ROLES, QUAT_ROLES
from .domain import (
    DT_FLOOR_S,
    GRAVITY_MPS2,
    IntegrationMethod,
    ProcessingOptions,
    TimeWindow,
    VelocityEstimationMode,
)

VEL_COLS = ["vel_x", "vel_y", "vel_z"]


def time_steps(t: np.ndarray) -> np.ndarray:
    """dt[0] = 0, dt[i] = max(t[i] - t[i-1], DT_FLOOR_S)."""
    t = np.asarray(t, dtype=float)
    dt = np.zeros_like(t)
    if len(t) > 1:
        dt[1:] = np.maximum(np.diff(t), DT_FLOOR_S)
    return dt


def integrate_velocity(
    accel: np.ndarray,
    dt: np.ndarray,
    method: IntegrationMethod = IntegrationMethod.EULER,
    drift_suppression: bool = False,
    threshold_mps2: float = 0.05,
    time_constant_s: float = 1.0,
) -> np.ndarray:
    """
    Integrate an (n, 3) acceleration series into velocity, starting at rest.

    Args:
        accel: Acceleration per sample (m/s^2)
        dt: Time step per sample (s), dt[0] ignored
        method: EULER uses a[i]; RK4 integrates acceleration interpolated
            linearly between samples, which reduces to (a[i-1] + a[i]) / 2
        drift_suppression: Decay velocity by exp(-dt / tau) on samples whose
            acceleration magnitude is below threshold_mps2
        threshold_mps2: Low-acceleration threshold
        time_constant_s: Decay time constant tau

    Returns:
        New (n, 3) velocity array with v[0] = (0, 0, 0)
    """
    accel = np.asarray(accel, dtype=float).reshape(-1, 3)
    dt = np.asarray(dt, dtype=float)
    n = len(accel)
    vel = np.zeros((n, 3), dtype=float)
    if n == 0:
        return vel

    method = IntegrationMethod(method)
    a_mag = np.linalg.norm(accel, axis=1)

    for i in range(1, n):
        if method is IntegrationMethod.RK4:
            step = 0.5 * (accel[i - 1] + accel[i]) * dt[i]
        else:
            step = accel[i] * dt[i]
        v = vel[i - 1] + step

        if drift_suppression and a_mag[i] < threshold_mps2:
            decay = math.exp(-dt[i] / time_constant_s) if time_constant_s > 0 else 0.0
            v = v * decay

        vel[i] = v

    return vel


# -----------------------------
# Orientation model
# -----------------------------
def _to_rotations(quats_wxyz: np.ndarray) -> Rotation:
    """Build scipy rotations from (w, x, y, z) rows; zero or non-finite rows become identity."""
    q = np.asarray(quats_wxyz, dtype=float).reshape(-1, 4)
    xyzw = q[:, [1, 2, 3, 0]].copy()
    norms = np.linalg.norm(xyzw, axis=1)
    bad = ~np.isfinite(norms) | (norms < 1e-12)
    xyzw[bad] = [0.0, 0.0, 0.0, 1.0]
    return Rotation.from_quat(xyzw)


def reference_orientation(quats_wxyz: np.ndarray) -> Rotation:
    """
    Average orientation over a stationary window by chaining SLERP:
    avg <- slerp(avg, q_k, 1 / (k + 1)). Identity for an empty window.
    """
    q = np.asarray(quats_wxyz, dtype=float).reshape(-1, 4)
    if len(q) == 0:
        return Rotation.identity()

    rots = _to_rotations(q)
    avg = rots[0]
    for k in range(1, len(rots)):
        pair = Rotation.from_quat(np.vstack([avg.as_quat(), rots[k].as_quat()]))
        avg = Slerp([0.0, 1.0], pair)([1.0 / (k + 1)])[0]
    return avg


def rotate_to_reference(accel: np.ndarray, quats_wxyz: np.ndarray, reference: Rotation) -> np.ndarray:
    """Rotate body-frame acceleration into the reference frame using ref^-1 * q_i."""
    accel = np.asarray(accel, dtype=float).reshape(-1, 3)
    if len(accel) == 0:
        return accel.copy()
    rel = reference.inv() * _to_rotations(quats_wxyz)
    return np.atleast_2d(rel.apply(accel))


def gravity_estimate(stationary_accel: np.ndarray) -> float:
    """Magnitude of the mean acceleration over the stationary window (GRAVITY_MPS2 if empty)."""
    a = np.asarray(stationary_accel, dtype=float).reshape(-1, 3)
    if len(a) == 0:
        return GRAVITY_MPS2
    return float(np.linalg.norm(a.mean(axis=0)))


# -----------------------------
# Window-level entry point
# -----------------------------
def estimate_kinematics(
    samples: pd.DataFrame,
    window: TimeWindow,
    options: ProcessingOptions,
    stationary: TimeWindow | None = None,
) -> pd.DataFrame:
    """
    Integrate the flight window of a canonical sample frame into velocity.

    RAW_INTEGRATION works in the sensor axes (optionally removing a fixed 1 g
    from z). ORIENTATION_CORRECTED rotates each sample into the frame of the
    stationary-window reference attitude and removes the gravity magnitude
    measured there. Never raises on degenerate data.

    Returns:
        DataFrame with t, dt, accel_x/y/z (the acceleration that was
        integrated), vel_x/y/z and speed, one row per window sample
    """
    seg = samples.iloc[window.as_slice()]
    t = seg["t"].to_numpy(float)
    dt = time_steps(t)
    accel = seg[list(ACCEL_ROLES)].to_numpy(float).copy()

    if options.mode == VelocityEstimationMode.ORIENTATION_CORRECTED:
        quats = seg[list(QUAT_ROLES)].to_numpy(float)
        if not np.any(quats):
            logger.warning("No orientation quaternion in the flight window; using identity attitude")

        if stationary is not None:
            calib = samples.iloc[stationary.as_slice()]
            reference = reference_orientation(calib[list(QUAT_ROLES)].to_numpy(float))
            g = gravity_estimate(calib[list(ACCEL_ROLES)].to_numpy(float))
        else:
            reference = Rotation.identity()
            g = GRAVITY_MPS2

        accel = rotate_to_reference(accel, quats, reference)
        accel[:, 2] -= g
        logger.debug(f"Orientation-corrected integration, gravity estimate {g:.4f} m/s^2")
    elif options.gravity_compensation:
        accel[:, 2] -= GRAVITY_MPS2

    vel = integrate_velocity(
        accel,
        dt,
        method=options.integration_method,
        drift_suppression=options.drift_suppression,
        threshold_mps2=options.drift_threshold_mps2,
        time_constant_s=options.drift_time_constant_s,
    )

    out = pd.DataFrame({"t": t, "dt": dt})
    for i, col in enumerate(ACCEL_ROLES):
        out[col] = accel[:, i]
    for i, col in enumerate(VEL_COLS):
        out[col] = vel[:, i]
    out["speed"] = np.linalg.norm(vel, axis=1)
    return out

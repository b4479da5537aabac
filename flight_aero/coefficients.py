"""Dynamic-pressure normalisation of lift and drag into CL / CD."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .channels import ACCEL_ROLES
from .domain import COEFF_EPS, GRAVITY_MPS2, MIN_DYNAMIC_PRESSURE_PA, AircraftParameters, ProcessingOptions
from .forces import decompose_forces
from .integrate import VEL_COLS

COEFF_COLS = ["timestamp", "cl", "cd", "velocity", "dynamic_pressure"]


def dynamic_pressure(air_density: float, speed: np.ndarray) -> np.ndarray:
    speed = np.asarray(speed, dtype=float)
    return 0.5 * air_density * speed * speed


def pressure_velocity(pressure: np.ndarray, air_density: float) -> np.ndarray:
    """Airspeed from a differential (dynamic) pressure: v = sqrt(2 q / rho). Negative readings count as 0."""
    q = np.clip(np.asarray(pressure, dtype=float), 0.0, None)
    return np.sqrt(2.0 * q / air_density)


def normalize(force: np.ndarray, q: np.ndarray, wing_area: float) -> np.ndarray:
    """
    C = F / (q * S + eps), reported as 0 wherever q is (near) zero.

    The result is always finite.
    """
    force = np.asarray(force, dtype=float)
    q = np.asarray(q, dtype=float)
    coeff = force / (q * wing_area + COEFF_EPS)
    coeff = np.where(q > MIN_DYNAMIC_PRESSURE_PA, coeff, 0.0)
    return np.where(np.isfinite(coeff), coeff, 0.0)


def _frame(t, cl, cd, velocity, q) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "timestamp": np.asarray(t, dtype=float),
            "cl": cl,
            "cd": cd,
            "velocity": np.asarray(velocity, dtype=float),
            "dynamic_pressure": np.asarray(q, dtype=float),
        },
        columns=COEFF_COLS,
    )


def acceleration_coefficients(
    kinematics: pd.DataFrame,
    params: AircraftParameters,
    options: ProcessingOptions,
) -> pd.DataFrame:
    """
    Coefficients from integrated velocity (RAW_INTEGRATION / ORIENTATION_CORRECTED).

    Args:
        kinematics: Output of integrate.estimate_kinematics
        params: Validated aircraft parameters
        options: Processing options (min_speed_mps is used)

    Returns:
        DataFrame with timestamp, cl, cd, velocity, dynamic_pressure
    """
    lift, drag = decompose_forces(
        kinematics[list(ACCEL_ROLES)].to_numpy(float),
        kinematics[VEL_COLS].to_numpy(float),
        params.mass_kg,
        min_speed_mps=options.min_speed_mps,
    )
    speed = kinematics["speed"].to_numpy(float)
    q = dynamic_pressure(params.air_density, speed)

    cl = normalize(lift, q, params.wing_surface_area)
    cd = normalize(np.abs(drag), q, params.wing_surface_area)
    return _frame(kinematics["t"], cl, cd, speed, q)


def pressure_coefficients(flight: pd.DataFrame, params: AircraftParameters) -> pd.DataFrame:
    """
    Coefficients from the pressure channel under a steady level flight model.

    The pressure channel is taken as dynamic pressure q, velocity follows from
    v = sqrt(2 q / rho), lift equals weight (m * g) and drag equals
    m * |forward acceleration|.
    """
    q = np.clip(flight["pressure"].to_numpy(float), 0.0, None)
    velocity = pressure_velocity(q, params.air_density)

    mass = params.mass_kg
    lift = np.full(len(q), mass * GRAVITY_MPS2)
    drag = mass * np.abs(flight["accel_x"].to_numpy(float))

    cl = normalize(lift, q, params.wing_surface_area)
    cd = normalize(drag, q, params.wing_surface_area)
    return _frame(flight["t"], cl, cd, velocity, q)

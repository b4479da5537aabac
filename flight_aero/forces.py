from __future__ import annotations

import numpy as np


def decompose_forces(
    accel: np.ndarray,
    velocity: np.ndarray,
    mass_kg: float,
    min_speed_mps: float = 1e-8,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Split the net force F = m * a into drag (along v) and lift (across v).

    Args:
        accel: (n, 3) acceleration per sample (m/s^2)
        velocity: (n, 3) velocity per sample in the same frame (m/s)
        mass_kg: Aircraft mass
        min_speed_mps: At or below this speed the direction of flight is
            undefined and both components are reported as 0

    Returns:
        (lift, drag): lift is the magnitude of the component of F normal to v;
        drag is the signed scalar projection F . v_hat (negative when the net
        force opposes the direction of travel)
    """
    accel = np.asarray(accel, dtype=float).reshape(-1, 3)
    velocity = np.asarray(velocity, dtype=float).reshape(-1, 3)

    force = mass_kg * accel
    speed = np.linalg.norm(velocity, axis=1)
    moving = speed > min_speed_mps

    unit = np.zeros_like(velocity)
    unit[moving] = velocity[moving] / speed[moving, None]

    drag = np.einsum("ij,ij->i", force, unit)
    lift_vec = force - drag[:, None] * unit
    lift = np.linalg.norm(lift_vec, axis=1)

    lift[~moving] = 0.0
    drag[~moving] = 0.0
    return lift, drag

from __future__ import annotations
from typing import Dict, Optional
import matplotlib.pyplot as plt
import pandas as pd

from .domain import TimeWindow


def make_coefficient_figure(coefficients: pd.DataFrame, summary: Optional[Dict[str, float]] = None):
    t = coefficients["timestamp"].to_numpy(float)
    t = t - t[0] if len(t) else t

    fig, (ax_cl, ax_cd, ax_v) = plt.subplots(nrows=3, ncols=1, figsize=(14, 9), sharex=True)

    # --- CL ---
    ax_cl.plot(t, coefficients["cl"].to_numpy(float), linewidth=2.0, color="tab:green", label="CL")
    if summary and summary.get("samples"):
        ax_cl.axhline(summary["cl_mean"], linestyle="--", linewidth=1.2, color="tab:green", label="CL mean")
    ax_cl.set_ylabel("CL")
    ax_cl.grid(True, alpha=0.2)
    ax_cl.legend(loc="upper right")

    # --- CD ---
    ax_cd.plot(t, coefficients["cd"].to_numpy(float), linewidth=2.0, color="tab:red", label="CD")
    if summary and summary.get("samples"):
        ax_cd.axhline(summary["cd_mean"], linestyle="--", linewidth=1.2, color="tab:red", label="CD mean")
    ax_cd.set_ylabel("CD")
    ax_cd.grid(True, alpha=0.2)
    ax_cd.legend(loc="upper right")

    # --- Velocity + dynamic pressure ---
    ax_v.plot(t, coefficients["velocity"].to_numpy(float), linewidth=2.0, label="Velocity (m/s)")
    ax_v.set_ylabel("Velocity (m/s)")
    ax_v.set_xlabel("Time in window (s)")
    ax_v.grid(True, alpha=0.2)
    ax_q = ax_v.twinx()
    ax_q.plot(t, coefficients["dynamic_pressure"].to_numpy(float), linewidth=1.2, linestyle=":", color="grey", label="q (Pa)")
    ax_q.set_ylabel("Dynamic pressure (Pa)")
    ax_v.legend(loc="upper left")
    ax_q.legend(loc="upper right")

    fig.suptitle("Aerodynamic coefficients", y=0.995)
    fig.tight_layout(rect=(0.0, 0.0, 1.0, 0.98))
    return fig


def make_sensor_figure(samples: pd.DataFrame, flight: Optional[TimeWindow] = None, stationary: Optional[TimeWindow] = None):
    """Forward acceleration and pressure over the whole record, with the selected windows shaded."""
    t = samples["t"].to_numpy(float)

    fig, (ax_a, ax_p) = plt.subplots(nrows=2, ncols=1, figsize=(14, 6), sharex=True)

    ax_a.plot(t, samples["accel_x"].to_numpy(float), linewidth=1.5, label="Forward accel (m/s²)")
    ax_a.set_ylabel("Accel X (m/s²)")
    ax_a.grid(True, alpha=0.2)

    ax_p.plot(t, samples["pressure"].to_numpy(float), linewidth=1.5, color="tab:green", label="Pressure (Pa)")
    ax_p.set_ylabel("Pressure (Pa)")
    ax_p.set_xlabel("Time (s)")
    ax_p.grid(True, alpha=0.2)

    for window, color, name in ((flight, "tab:blue", "Flight"), (stationary, "tab:orange", "Stationary")):
        if window is None or window.end >= len(t):
            continue
        for ax in (ax_a, ax_p):
            ax.axvspan(t[window.start], t[window.end], alpha=0.15, color=color, label=name if ax is ax_a else None)

    ax_a.legend(loc="upper right")
    ax_p.legend(loc="upper right")
    fig.tight_layout()
    return fig

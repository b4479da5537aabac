from __future__ import annotations
import math

import numpy as np
import pandas as pd
from scipy import signal


def lowpass_alpha(cutoff_hz: float, sample_rate_hz: float) -> float:
    """Pole of the single-pole filter: exp(-2*pi*fc / nyquist), nyquist = fs / 2."""
    if cutoff_hz <= 0 or sample_rate_hz <= 0:
        raise ValueError(f"cutoff and sample rate must be > 0, got {cutoff_hz} Hz / {sample_rate_hz} Hz")
    nyquist = sample_rate_hz / 2.0
    return math.exp(-2.0 * math.pi * cutoff_hz / nyquist)


def lowpass_filter(x: np.ndarray, alpha: float) -> np.ndarray:
    """Exponential IIR filter guaranteed to return same length as x: y[i] = a*y[i-1] + (1-a)*x[i]."""
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return x.copy()

    # initial state a*x[0] makes y[0] == x[0]
    y, _ = signal.lfilter([1.0 - alpha], [1.0, -alpha], x, zi=[alpha * x[0]])
    return y


def smooth_coefficients(coefficients: pd.DataFrame, cutoff_hz: float, sample_rate_hz: float | None) -> pd.DataFrame:
    """
    Low-pass CL and CD independently. Velocity and dynamic pressure are left
    untouched. Without a usable sample rate the frame is returned unchanged.
    """
    out = coefficients.copy()
    if sample_rate_hz is None or len(out) < 2:
        return out

    alpha = lowpass_alpha(cutoff_hz, sample_rate_hz)
    out["cl"] = lowpass_filter(out["cl"].to_numpy(float), alpha)
    out["cd"] = lowpass_filter(out["cd"].to_numpy(float), alpha)
    return out

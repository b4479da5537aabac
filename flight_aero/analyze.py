"""Pipeline orchestration for aerodynamic coefficient estimation."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd
from loguru import logger

from .channels import ChannelBinding, resolve_channels
from .coefficients import COEFF_COLS, acceleration_coefficients, pressure_coefficients
from .domain import AircraftParameters, InvalidWindow, ProcessingOptions, TimeWindow, VelocityEstimationMode, WindowSpec
from .integrate import estimate_kinematics
from .preprocess import CSVSource, load_samples, prepare_samples, sample_rate_hz
from .smoothing import smooth_coefficients
from .windows import FlightBounds, resolve_stationary_window, resolve_window


# Observer for progress reporting: (stage name, fraction complete 0..1)
ProgressCallback = Callable[[str, float], None]

WindowArg = Union[WindowSpec, TimeWindow]
SamplesArg = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class AnalysisResult:
    coefficients: pd.DataFrame  # timestamp, cl, cd, velocity, dynamic_pressure
    summary: dict[str, float]
    binding: ChannelBinding | None = None
    bounds: FlightBounds | None = None
    samples: pd.DataFrame | None = None     # canonical sample frame (whole record)
    kinematics: pd.DataFrame | None = None  # None in pressure-derived mode
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return len(self.coefficients) == 0


def _notify(progress: Optional[ProgressCallback], stage: str, fraction: float) -> None:
    logger.debug(f"[{fraction:4.0%}] {stage}")
    if progress is not None:
        progress(stage, fraction)


def _window(t: np.ndarray, w: WindowArg) -> TimeWindow:
    if isinstance(w, TimeWindow):
        if w.end >= len(t):
            raise InvalidWindow(f"Window [{w.start}, {w.end}] exceeds the record ({len(t)} samples).")
        return w
    return resolve_window(t, w)


def _stationary_window(t: np.ndarray, w: WindowArg) -> TimeWindow | None:
    if isinstance(w, TimeWindow):
        return _window(t, w)
    return resolve_stationary_window(t, w)


def empty_coefficients() -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series(dtype=float) for c in COEFF_COLS})


def summarize(coefficients: pd.DataFrame) -> dict[str, float]:
    """
    Mean / sample standard deviation of CL and CD plus the L/D ratio.

    L/D is mean CL / mean CD when mean CD > 0, else 0.
    """
    n = len(coefficients)
    if n == 0:
        return {
            "samples": 0,
            "cl_mean": 0.0, "cl_std": 0.0,
            "cd_mean": 0.0, "cd_std": 0.0,
            "lift_to_drag": 0.0,
            "velocity_mean": 0.0,
        }

    cl = coefficients["cl"].to_numpy(float)
    cd = coefficients["cd"].to_numpy(float)
    cl_mean = float(np.mean(cl))
    cd_mean = float(np.mean(cd))
    return {
        "samples": n,
        "cl_mean": cl_mean,
        "cl_std": float(np.std(cl, ddof=1)) if n > 1 else 0.0,
        "cd_mean": cd_mean,
        "cd_std": float(np.std(cd, ddof=1)) if n > 1 else 0.0,
        "lift_to_drag": cl_mean / cd_mean if cd_mean > 0 else 0.0,
        "velocity_mean": float(np.mean(coefficients["velocity"].to_numpy(float))),
    }


# -----------------------------
# Core pipeline
# -----------------------------
def compute_coefficients(
    samples: SamplesArg,
    params: AircraftParameters,
    flight: WindowArg,
    options: ProcessingOptions = ProcessingOptions(),
    stationary: Optional[WindowArg] = None,
    progress: Optional[ProgressCallback] = None,
) -> AnalysisResult:
    """
    Run the full estimation pipeline on one recording.

    Stages:
    1. Resolve channel names and build the canonical sample frame
    2. Resolve the flight (and optional stationary) window
    3. Estimate velocity (integration or pressure, per options.mode)
    4. Decompose forces and normalise into CL / CD
    5. Optionally low-pass CL / CD

    The computation is deterministic and has no side effects besides logging
    and the optional progress callback.

    Args:
        samples: Raw dataset, a DataFrame or an iterable of row mappings
        params: Aircraft parameters (validated here)
        flight: Flight window, as WindowSpec or TimeWindow row indices
        options: Processing options
        stationary: Optional calibration window, read only in orientation-corrected
            mode; an empty range gives an identity reference and standard gravity
        progress: Optional observer called as progress(stage, fraction)

    Returns:
        AnalysisResult; an empty coefficient frame when there are no samples

    Raises:
        InvalidParameters: non-positive wing area, weight or air density
        InvalidWindow: reversed, out-of-range or empty flight window, or an
            out-of-range stationary window
        ValueError: no timestamp column in a non-empty dataset
    """
    params.validate()
    frame = samples if isinstance(samples, pd.DataFrame) else pd.DataFrame(list(samples))

    if len(frame) == 0:
        logger.warning("Empty input: no samples to analyze")
        _notify(progress, "done", 1.0)
        return AnalysisResult(coefficients=empty_coefficients(), summary=summarize(empty_coefficients()))

    binding = resolve_channels(frame.columns)
    canon = prepare_samples(frame, binding, options.timestamp_unit)
    warnings = []
    if binding.unresolved:
        warnings.append(f"Unresolved channels (defaulting to 0): {', '.join(binding.unresolved)}")
    _notify(progress, "resolve channels", 0.15)

    if len(canon) == 0:
        logger.warning("No rows with a numeric timestamp")
        _notify(progress, "done", 1.0)
        return AnalysisResult(
            coefficients=empty_coefficients(),
            summary=summarize(empty_coefficients()),
            binding=binding,
            samples=canon,
            warnings=tuple(warnings),
        )

    t = canon["t"].to_numpy(float)
    stationary_window = None
    if stationary is not None:
        if options.mode == VelocityEstimationMode.ORIENTATION_CORRECTED:
            stationary_window = _stationary_window(t, stationary)
            if stationary_window is None:
                warnings.append("Stationary window is empty; using identity attitude and standard gravity")
        else:
            logger.debug(f"Stationary window ignored in {VelocityEstimationMode(options.mode).value} mode")
    bounds = FlightBounds(flight=_window(t, flight), stationary=stationary_window)
    seg = canon.iloc[bounds.flight.as_slice()].reset_index(drop=True)
    _notify(progress, "select window", 0.3)
    logger.debug(f"Flight window rows {bounds.flight.start}..{bounds.flight.end} ({len(seg)} samples)")

    kinematics = None
    if options.mode == VelocityEstimationMode.PRESSURE_DERIVED:
        coeffs = pressure_coefficients(seg, params)
        _notify(progress, "pressure velocity", 0.6)
    else:
        if options.mode == VelocityEstimationMode.ORIENTATION_CORRECTED and not binding.has_orientation:
            warnings.append("Orientation quaternion not found; using identity attitude")
        kinematics = estimate_kinematics(canon, bounds.flight, options, stationary=bounds.stationary)
        _notify(progress, "integrate velocity", 0.6)
        coeffs = acceleration_coefficients(kinematics, params, options)
    _notify(progress, "normalize coefficients", 0.8)

    if options.filter_cutoff_hz:
        fs = options.sample_rate_hz or sample_rate_hz(seg["t"].to_numpy(float))
        if fs is None and canon.attrs.get("dt"):
            # flight window has no distinct times; fall back to the whole record's spacing
            fs = 1.0 / canon.attrs["dt"]
        coeffs = smooth_coefficients(coeffs, options.filter_cutoff_hz, fs)
        _notify(progress, "smooth coefficients", 0.9)

    summary = summarize(coeffs)
    logger.debug(f"CL {summary['cl_mean']:.4f} +/- {summary['cl_std']:.4f}, CD {summary['cd_mean']:.4f} +/- {summary['cd_std']:.4f}")
    _notify(progress, "done", 1.0)

    return AnalysisResult(
        coefficients=coeffs.reset_index(drop=True),
        summary=summary,
        binding=binding,
        bounds=bounds,
        samples=canon,
        kinematics=kinematics,
        warnings=tuple(warnings),
    )


def analyze(
    csv_source: CSVSource,
    params: AircraftParameters,
    flight: WindowArg,
    options: ProcessingOptions = ProcessingOptions(),
    stationary: Optional[WindowArg] = None,
    progress: Optional[ProgressCallback] = None,
) -> tuple[Optional[AnalysisResult], Optional[str]]:
    """
    Load a CSV log and run compute_coefficients on it.

    Returns:
        Tuple of (result, error):
        - On success: (AnalysisResult, None); the result may be empty
        - On failure: (None, error_message)
    """
    try:
        df = load_samples(csv_source)
        return compute_coefficients(df, params, flight, options, stationary=stationary, progress=progress), None

    except Exception as e:
        logger.exception("Analysis failed")
        return None, str(e)

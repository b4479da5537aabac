"""
Flight Aero - Lift / Drag Coefficient Estimator

A toolkit for deriving aerodynamic lift and drag coefficients from IMU
and pressure-sensor flight logs. Resolves loosely named sensor columns,
selects a flight window, integrates acceleration into velocity, splits
the net force into lift and drag, and normalises by dynamic pressure.
"""

from .domain import (
    AerodynamicCoefficient,
    AircraftParameters,
    IntegrationMethod,
    InvalidParameters,
    InvalidWindow,
    ProcessingOptions,
    TimestampUnit,
    TimeWindow,
    VelocityEstimationMode,
    WindowMode,
    WindowSpec,
)
from .channels import ChannelBinding, resolve_channels, extract_channels
from .preprocess import load_samples, prepare_samples, timestamps_to_seconds
from .windows import FlightBounds, resolve_window, window_from_percent, window_from_time
from .integrate import estimate_kinematics, integrate_velocity, reference_orientation
from .forces import decompose_forces
from .coefficients import acceleration_coefficients, pressure_coefficients, pressure_velocity
from .smoothing import lowpass_filter, smooth_coefficients
from .analyze import AnalysisResult, analyze, compute_coefficients, summarize
from .export import coefficient_records, coefficients_to_csv
from .render import make_coefficient_figure, make_sensor_figure

__all__ = [
    # Domain models
    "AerodynamicCoefficient",
    "AircraftParameters",
    "IntegrationMethod",
    "InvalidParameters",
    "InvalidWindow",
    "ProcessingOptions",
    "TimestampUnit",
    "TimeWindow",
    "VelocityEstimationMode",
    "WindowMode",
    "WindowSpec",
    # Channels / loading
    "ChannelBinding",
    "resolve_channels",
    "extract_channels",
    "load_samples",
    "prepare_samples",
    "timestamps_to_seconds",
    # Windows
    "FlightBounds",
    "resolve_window",
    "window_from_percent",
    "window_from_time",
    # Estimation
    "estimate_kinematics",
    "integrate_velocity",
    "reference_orientation",
    "decompose_forces",
    "acceleration_coefficients",
    "pressure_coefficients",
    "pressure_velocity",
    "lowpass_filter",
    "smooth_coefficients",
    # Pipeline
    "AnalysisResult",
    "analyze",
    "compute_coefficients",
    "summarize",
    # Output
    "coefficient_records",
    "coefficients_to_csv",
    "make_coefficient_figure",
    "make_sensor_figure",
]

__version__ = "0.1.0"

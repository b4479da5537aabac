from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math


# -----------------------------
# Physical / numeric constants
# -----------------------------
GRAVITY_MPS2 = 9.81     # constant used by the steady-flight and simple gravity models
COEFF_EPS = 1e-8        # added to q*S so coefficients never divide by zero
DT_FLOOR_S = 1e-6       # smallest time step after the first sample
MIN_DYNAMIC_PRESSURE_PA = 1e-6  # below this q the coefficients are reported as 0
EPOCH_MS_THRESHOLD = 1e9        # AUTO unit detection: larger timestamps are taken as ms


# -----------------------------
# Errors
# -----------------------------
class InvalidParameters(ValueError):
    """Aircraft parameters are missing, non-finite or not strictly positive."""


class InvalidWindow(ValueError):
    """A requested time window is empty, reversed or outside the record."""


# -----------------------------
# Strategy selectors
# -----------------------------
class VelocityEstimationMode(str, Enum):
    RAW_INTEGRATION = "raw_integration"
    ORIENTATION_CORRECTED = "orientation_corrected"
    PRESSURE_DERIVED = "pressure_derived"


class IntegrationMethod(str, Enum):
    EULER = "euler"
    RK4 = "rk4"


class TimestampUnit(str, Enum):
    SECONDS = "s"
    MILLISECONDS = "ms"
    AUTO = "auto"   # opt-in magnitude heuristic, see preprocess.timestamps_to_seconds


class WindowMode(str, Enum):
    PERCENT = "percent"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


# -----------------------------
# Operator inputs
# -----------------------------
@dataclass(frozen=True)
class AircraftParameters:
    wing_surface_area: float    # m^2
    aircraft_weight: float      # kg by default (used directly as mass)
    air_density: float = 1.225  # kg/m^3
    weight_is_force: bool = False   # True: aircraft_weight is in newtons, mass = W / g

    def validate(self) -> "AircraftParameters":
        for name in ("wing_surface_area", "aircraft_weight", "air_density"):
            value = getattr(self, name)
            try:
                ok = math.isfinite(value) and value > 0
            except TypeError:
                ok = False
            if not ok:
                raise InvalidParameters(f"{name} must be a finite number > 0, got {value!r}")
        return self

    @property
    def mass_kg(self) -> float:
        if self.weight_is_force:
            return self.aircraft_weight / GRAVITY_MPS2
        return self.aircraft_weight


@dataclass(frozen=True)
class ProcessingOptions:
    mode: VelocityEstimationMode = VelocityEstimationMode.RAW_INTEGRATION
    integration_method: IntegrationMethod = IntegrationMethod.EULER
    timestamp_unit: TimestampUnit = TimestampUnit.SECONDS

    gravity_compensation: bool = False  # raw mode only: subtract GRAVITY_MPS2 from accel z

    drift_suppression: bool = False
    drift_threshold_mps2: float = 0.05  # |a| below this counts as "no acceleration"
    drift_time_constant_s: float = 1.0  # velocity decays as exp(-dt / tau) while |a| is low

    min_speed_mps: float = 1e-8     # at or below this speed lift and drag are 0

    filter_cutoff_hz: float | None = None   # None disables the low-pass stage
    sample_rate_hz: float | None = None     # None: estimate from the median time step


@dataclass(frozen=True)
class WindowSpec:
    start: float
    end: float
    mode: WindowMode = WindowMode.PERCENT


# -----------------------------
# Derived records
# -----------------------------
@dataclass(frozen=True)
class TimeWindow:
    start: int  # first row index (inclusive)
    end: int    # last row index (inclusive)

    def __post_init__(self):
        if self.start < 0 or self.end <= self.start:
            raise InvalidWindow(f"Window must satisfy 0 <= start < end, got [{self.start}, {self.end}]")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def as_slice(self) -> slice:
        return slice(self.start, self.end + 1)


@dataclass(frozen=True)
class AerodynamicCoefficient:
    timestamp: float        # seconds
    cl: float
    cd: float
    velocity: float         # m/s
    dynamic_pressure: float  # Pa

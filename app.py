import streamlit as st
import pandas as pd

from flight_aero.domain import (
    AircraftParameters,
    IntegrationMethod,
    ProcessingOptions,
    TimestampUnit,
    VelocityEstimationMode,
    WindowMode,
    WindowSpec,
)
from flight_aero.analyze import compute_coefficients
from flight_aero.channels import resolve_channels
from flight_aero.export import coefficients_to_csv
from flight_aero.preprocess import load_samples
from flight_aero.render import make_coefficient_figure, make_sensor_figure

# -----------------------------
# Preset processing options
# -----------------------------
PRESET_OPTIONS: dict[str, ProcessingOptions] = {
    "Pressure (steady level flight)": ProcessingOptions(
        mode=VelocityEstimationMode.PRESSURE_DERIVED,
    ),
    "Raw integration": ProcessingOptions(
        mode=VelocityEstimationMode.RAW_INTEGRATION,
        integration_method=IntegrationMethod.EULER,
    ),
    "Orientation corrected + drift suppression": ProcessingOptions(
        mode=VelocityEstimationMode.ORIENTATION_CORRECTED,
        integration_method=IntegrationMethod.RK4,
        drift_suppression=True,
        filter_cutoff_hz=2.0,
    ),
}


# -----------------------------
# Streamlit page setup
# -----------------------------
st.set_page_config(page_title="Flight Aero", layout="wide")
st.title("✈️ Flight Aero — Lift / Drag Coefficient Estimator")
st.write("Upload an IMU / pressure log, mark the flight segment, and get CL / CD over time.")


# -----------------------------
# Sidebar: aircraft + processing
# -----------------------------
with st.sidebar:
    st.header("Aircraft parameters")
    wing_area = st.number_input("Wing surface area (m²)", min_value=0.0, value=0.5, step=0.05)
    weight = st.number_input("Aircraft weight (kg)", min_value=0.0, value=1.5, step=0.1)
    rho = st.number_input("Air density (kg/m³)", min_value=0.0, value=1.225, step=0.005, format="%.3f")
    weight_is_force = st.checkbox("Weight is given in newtons", value=False)

    st.divider()
    st.header("Processing")
    preset_name = st.selectbox("Preset", options=list(PRESET_OPTIONS.keys()), index=0)
    preset = PRESET_OPTIONS[preset_name]

    unit = st.selectbox(
        "Timestamp unit",
        options=[u.value for u in TimestampUnit],
        index=0,
        help="'auto' treats epoch-like values (> 1e9) as milliseconds.",
    )
    methods = [m.value for m in IntegrationMethod]
    method = st.selectbox(
        "Integration method",
        options=methods,
        index=methods.index(IntegrationMethod(preset.integration_method).value),
        help="rk4 integrates acceleration interpolated linearly between samples.",
    )
    gravity_compensation = st.checkbox(
        "Gravity compensation",
        value=preset.gravity_compensation,
        help="Raw integration only: subtract 1 g from the z axis.",
    )
    drift_suppression = st.checkbox("Drift suppression", value=preset.drift_suppression)
    use_filter = st.checkbox("Low-pass CL / CD", value=preset.filter_cutoff_hz is not None)
    cutoff = st.number_input("Filter cutoff (Hz)", min_value=0.01, value=float(preset.filter_cutoff_hz or 2.0), step=0.1)

options = ProcessingOptions(
    mode=preset.mode,
    integration_method=IntegrationMethod(method),
    timestamp_unit=TimestampUnit(unit),
    gravity_compensation=gravity_compensation,
    drift_suppression=drift_suppression,
    filter_cutoff_hz=float(cutoff) if use_filter else None,
)
params = AircraftParameters(
    wing_surface_area=float(wing_area),
    aircraft_weight=float(weight),
    air_density=float(rho),
    weight_is_force=weight_is_force,
)


# -----------------------------
# Upload + preview
# -----------------------------
uploaded = st.file_uploader("Upload CSV", type=["csv"])

if uploaded is None:
    st.info("Upload a CSV with a timestamp column plus acceleration / pressure channels.")
    st.stop()

raw = load_samples(uploaded)
if len(raw) == 0:
    st.warning("The file contains no rows.")
    st.stop()

st.subheader("Raw preview (as uploaded)")
st.dataframe(raw.head(20), use_container_width=True)

binding = resolve_channels(raw.columns)
with st.expander("Channel mapping"):
    st.json({role: col for role, col in binding.columns.items()})
    if binding.unresolved:
        st.caption(f"Unresolved (treated as 0): {', '.join(binding.unresolved)}")


# -----------------------------
# Bounds
# -----------------------------
st.subheader("Flight boundaries")
c1, c2 = st.columns(2)
flight_pct = c1.slider("Flight period (%)", 0.0, 100.0, (10.0, 90.0), step=0.1)
use_stationary = c2.checkbox("Use stationary period for IMU calibration", value=True)
stationary_pct = c2.slider("Stationary period (%)", 0.0, 100.0, (0.0, 8.0), step=0.1, disabled=not use_stationary)

flight = WindowSpec(flight_pct[0], flight_pct[1], WindowMode.PERCENT)
stationary = WindowSpec(stationary_pct[0], stationary_pct[1], WindowMode.PERCENT) if use_stationary else None


# -----------------------------
# Run analysis
# -----------------------------
progress_bar = st.progress(0.0, text="Waiting")


def _on_progress(stage: str, fraction: float) -> None:
    progress_bar.progress(fraction, text=stage)


try:
    result = compute_coefficients(raw, params, flight, options, stationary=stationary, progress=_on_progress)
except ValueError as e:
    st.error(str(e))
    st.stop()

for w in result.warnings:
    st.warning(w)

if result.bounds is None:
    st.info("No rows with a numeric timestamp; nothing to display.")
    st.stop()

st.pyplot(make_sensor_figure(result.samples, result.bounds.flight, result.bounds.stationary), clear_figure=True)

if result.is_empty:
    st.info("Nothing to display for the selected window.")
    st.stop()


# -----------------------------
# Display results
# -----------------------------
summary = result.summary
col1, col2, col3, col4 = st.columns(4)
col1.metric("Mean CL", f"{summary['cl_mean']:.4f}", help=f"±{summary['cl_std']:.4f} std")
col2.metric("Mean CD", f"{summary['cd_mean']:.4f}", help=f"±{summary['cd_std']:.4f} std")
col3.metric("L/D", f"{summary['lift_to_drag']:.2f}")
col4.metric("Samples", f"{summary['samples']}")

st.subheader("Coefficients")
st.pyplot(make_coefficient_figure(result.coefficients, summary), clear_figure=True)

st.dataframe(pd.DataFrame(result.coefficients), use_container_width=True)
st.download_button(
    "Download results",
    data=coefficients_to_csv(result.coefficients),
    file_name="aerodynamic_coefficients.csv",
    mime="text/csv",
)

"""Tests for channel name resolution in channels.py"""

import numpy as np
import pandas as pd
import pytest

from flight_aero.channels import ChannelBinding, extract_channels, resolve_channels


class TestResolveChannels:
    """Tests for the resolve_channels function."""

    def test_exact_names(self):
        """Canonical short names should resolve directly."""
        b = resolve_channels(["timestamp", "accelX", "accelY", "accelZ", "pressure"])
        assert b.column("timestamp") == "timestamp"
        assert b.column("accel_x") == "accelX"
        assert b.column("accel_z") == "accelZ"
        assert b.column("pressure") == "pressure"

    def test_priority_order(self):
        """Earlier candidates should win when several synonyms are present."""
        b = resolve_channels(["timestamp", "accel_x", "Linear Accel X"])
        assert b.column("accel_x") == "Linear Accel X"

    def test_case_insensitive_fallback(self):
        """Different capitalisation / spacing should still resolve."""
        b = resolve_channels(["TIMESTAMP", "LINEAR ACCEL X", "Linear_Accel_Y", "PRESSURE"])
        assert b.column("timestamp") == "TIMESTAMP"
        assert b.column("accel_x") == "LINEAR ACCEL X"
        assert b.column("accel_y") == "Linear_Accel_Y"
        assert b.column("pressure") == "PRESSURE"

    def test_unresolved_roles_reported(self):
        """Missing channels map to None and appear in unresolved."""
        b = resolve_channels(["timestamp", "accelX"])
        assert b.column("gyro_x") is None
        assert "pressure" in b.unresolved
        assert "quat_w" in b.unresolved
        assert "accel_x" not in b.unresolved

    def test_has_orientation(self):
        """has_orientation requires all four quaternion components."""
        full = resolve_channels(["t", "qw", "qx", "qy", "qz"])
        partial = resolve_channels(["t", "qw", "qx"])
        assert full.has_orientation
        assert not partial.has_orientation

    def test_binding_is_immutable(self):
        """ChannelBinding is a frozen dataclass."""
        b = resolve_channels(["timestamp"])
        with pytest.raises(Exception):
            b.columns = {}


class TestExtractChannels:
    """Tests for the extract_channels function."""

    def test_missing_channels_default_to_zero(self):
        """Unresolved roles should be filled with zeros, not raise."""
        df = pd.DataFrame({"timestamp": [0.0, 0.1], "accelX": [1.0, 2.0]})
        out = extract_channels(df, resolve_channels(df.columns))
        np.testing.assert_array_equal(out["accel_x"].to_numpy(), [1.0, 2.0])
        np.testing.assert_array_equal(out["pressure"].to_numpy(), [0.0, 0.0])
        np.testing.assert_array_equal(out["quat_w"].to_numpy(), [0.0, 0.0])

    def test_non_numeric_cells_become_zero(self):
        """Garbage and infinite cells should not leak into the numeric channels."""
        df = pd.DataFrame({"timestamp": [0.0, 0.1, 0.2], "accelX": ["1.5", "bad", "inf"]})
        out = extract_channels(df, resolve_channels(df.columns))
        np.testing.assert_array_equal(out["accel_x"].to_numpy(), [1.5, 0.0, 0.0])

    def test_raises_on_missing_time(self):
        """A dataset without any time column cannot be analyzed."""
        df = pd.DataFrame({"accelX": [1.0]})
        with pytest.raises(ValueError, match="No time column found"):
            extract_channels(df, resolve_channels(df.columns))

    def test_custom_binding(self):
        """A hand-built binding is honoured as-is."""
        df = pd.DataFrame({"clock": [0.0, 1.0], "fwd": [3.0, 4.0]})
        binding = ChannelBinding(columns={"timestamp": "clock", "accel_x": "fwd"})
        out = extract_channels(df, binding)
        np.testing.assert_array_equal(out["accel_x"].to_numpy(), [3.0, 4.0])
        np.testing.assert_array_equal(out["accel_y"].to_numpy(), [0.0, 0.0])

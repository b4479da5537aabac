"""Tests for the Streamlit sidebar controls in app.py"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP = Path(__file__).resolve().parent.parent / "app.py"


def _widget(widgets, label):
    return next(w for w in widgets if w.label == label)


@pytest.fixture
def app():
    at = AppTest.from_file(str(APP), default_timeout=30)
    at.run()
    assert not at.exception
    return at


class TestProcessingControls:
    """Integration method, gravity compensation and drift suppression follow the preset but can be overridden."""

    def test_defaults_follow_preset(self, app):
        assert _widget(app.sidebar.selectbox, "Integration method").value == "euler"
        assert _widget(app.sidebar.checkbox, "Gravity compensation").value is False
        assert _widget(app.sidebar.checkbox, "Drift suppression").value is False

    def test_preset_change_updates_controls(self, app):
        _widget(app.sidebar.selectbox, "Preset").select("Orientation corrected + drift suppression").run()
        assert not app.exception
        assert _widget(app.sidebar.selectbox, "Integration method").value == "rk4"
        assert _widget(app.sidebar.checkbox, "Drift suppression").value is True

    def test_override_preset(self, app):
        _widget(app.sidebar.selectbox, "Integration method").select("rk4").run()
        _widget(app.sidebar.checkbox, "Gravity compensation").check().run()
        assert not app.exception
        assert _widget(app.sidebar.selectbox, "Integration method").value == "rk4"
        assert _widget(app.sidebar.checkbox, "Gravity compensation").value is True

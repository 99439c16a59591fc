"""
Tests for the shared monitor state.
"""

from gpuz_shm import decode
from gpuz_shm.shm_layout import REGION_SIZE
from gpuz_monitor import state

from conftest import RecordingOpener, build_region


def make_stat(**sensor_values):
    sensors = [
        (i, name, "", 0, value) for i, (name, value) in enumerate(sensor_values.items())
    ]
    return decode(RecordingOpener(build_region(sensors=sensors)), REGION_SIZE)


class TestSensorUpdates:
    def test_first_sample_marks_all_dirty(self):
        state.update_stat(make_stat(a=1.0, b=2.0))
        assert state.get_sensor_updates() == {"a": 1.0, "b": 2.0}
        assert state.get_sensor_updates() == {}

    def test_only_changed_values(self):
        state.update_stat(make_stat(a=1.0, b=2.0))
        state.get_sensor_updates()
        state.update_stat(make_stat(a=1.0, b=3.0))
        assert state.get_sensor_updates() == {"b": 3.0}


class TestStatus:
    def test_empty(self):
        status = state.get_status()
        assert status["sampled_at"] is None
        assert status["sensors"] == 0

    def test_error_cleared_by_sample(self):
        state.set_error(RuntimeError("boom"))
        assert state.get_status()["last_error"] == "boom"
        state.update_stat(make_stat(a=1.0))
        status = state.get_status()
        assert status["last_error"] is None
        assert status["sensors"] == 1
        assert status["sampled_at"] is not None


class TestNanSensors:
    def test_repeated_nan_not_dirty(self):
        state.update_stat(make_stat(Fan=float("nan")))
        first = state.get_sensor_updates()
        assert list(first) == ["Fan"]

        state.update_stat(make_stat(Fan=float("nan")))
        assert state.get_sensor_updates() == {}

    def test_nan_to_number_is_dirty(self):
        state.update_stat(make_stat(Fan=float("nan")))
        state.get_sensor_updates()
        state.update_stat(make_stat(Fan=900.0))
        assert state.get_sensor_updates() == {"Fan": 900.0}

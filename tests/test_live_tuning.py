"""
Tests for the runtime parameter watcher and the tick schedulers.
"""
import json

from motion_tracking.live_tuning import RuntimeParamWatcher
from motion_tracking.scheduler import ManualScheduler


class TestRuntimeParamWatcher:
    """Test hot-reloading of calibration values."""

    def test_missing_file(self, tmp_path):
        watcher = RuntimeParamWatcher(tmp_path / "absent.json")
        assert watcher.params == {}
        assert watcher.maybe_reload() is False

    def test_load_and_coerce(self, tmp_path):
        """Known keys are coerced, unknown ones dropped."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"pixel_threshold": "25", "blend_alpha": 0.4, "gain": 3}))
        watcher = RuntimeParamWatcher(path)
        assert watcher.params == {"pixel_threshold": 25, "blend_alpha": 0.4}
        assert "detect_threshold" not in watcher.params

    def test_reload_on_change(self, tmp_path):
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"detect_threshold": 20}))
        watcher = RuntimeParamWatcher(path)
        assert watcher.maybe_reload() is False

        path.write_text(json.dumps({"detect_threshold": 150}))
        assert watcher.maybe_reload() is True
        assert watcher.params["detect_threshold"] == 150

    def test_bad_json_keeps_old_params(self, tmp_path):
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"downscale": 0.25}))
        watcher = RuntimeParamWatcher(path)

        path.write_text("{not json")
        watcher.maybe_reload()
        assert watcher.params == {"downscale": 0.25}

    def test_bad_json_reported_once(self, tmp_path, capsys):
        """A broken file is logged once and never counts as a reload."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"downscale": 0.25}))
        watcher = RuntimeParamWatcher(path)

        path.write_text("{not json at all")
        results = [watcher.maybe_reload() for _ in range(5)]
        assert results == [False] * 5
        assert capsys.readouterr().out.count("JSON error") == 1
        assert watcher.params == {"downscale": 0.25}

        path.write_text(json.dumps({"downscale": 0.5}))
        assert watcher.maybe_reload() is True
        assert watcher.params == {"downscale": 0.5}

    def test_non_object_is_not_a_reload(self, tmp_path):
        """A JSON list is rejected and the old params stay."""
        path = tmp_path / "params.json"
        path.write_text(json.dumps({"pixel_threshold": 30}))
        watcher = RuntimeParamWatcher(path)

        path.write_text(json.dumps([1, 2, 3, 4, 5, 6]))
        assert watcher.maybe_reload() is False
        assert watcher.maybe_reload() is False
        assert watcher.params == {"pixel_threshold": 30}


class TestManualScheduler:
    """Test deterministic tick scheduling."""

    def setup_method(self):
        self.scheduler = ManualScheduler()
        self.calls = []

    def test_runs_once_per_request(self):
        self.scheduler.request_tick(lambda: self.calls.append("a"))
        assert self.scheduler.step() == 1
        assert self.scheduler.step() == 0
        assert self.calls == ["a"]

    def test_cancel(self):
        handle = self.scheduler.request_tick(lambda: self.calls.append("a"))
        self.scheduler.cancel(handle)
        self.scheduler.cancel(None)
        assert self.scheduler.run(2) == 0
        assert self.calls == []

    def test_requests_from_a_tick_run_next_tick(self):
        """A callback re-requesting itself does not spin within one tick."""
        def again():
            self.calls.append("tick")
            self.scheduler.request_tick(again)

        self.scheduler.request_tick(again)
        assert self.scheduler.run(3) == 3
        assert self.calls == ["tick"] * 3
        assert self.scheduler.pending == 1

"""
Tests for settings, simulated telemetry and the command log.
"""
import random

import pytest

from motion_tracking.robot import (
    CommandLog,
    ObstacleAvoidance,
    RobotSettings,
    RobotState,
    SystemStats,
    TelemetrySimulator,
)


class TestRobotSettings:
    """Test the closed settings structure."""

    def setup_method(self):
        self.settings = RobotSettings()

    def test_defaults(self):
        assert self.settings.movement_speed == 60
        assert self.settings.arm_sensitivity == 75
        assert self.settings.auto_schedule is True
        assert self.settings.night_mode is True
        assert self.settings.obstacle_avoidance is ObstacleAvoidance.BALANCED

    def test_sliders(self):
        """Sliders accept 10-100 and reject anything else."""
        self.settings.set_movement_speed(100)
        self.settings.set_arm_sensitivity(10)
        assert (self.settings.movement_speed, self.settings.arm_sensitivity) == (100, 10)

        for bad in (9, 101, 50.5, True):
            with pytest.raises(ValueError):
                self.settings.set_movement_speed(bad)
        assert self.settings.movement_speed == 100

    def test_toggles(self):
        self.settings.set_auto_schedule(False)
        self.settings.set_night_mode(False)
        assert not self.settings.auto_schedule
        assert not self.settings.night_mode

    def test_obstacle_avoidance(self):
        """Mode accepts the enum or its display string only."""
        self.settings.set_obstacle_avoidance("Aggressive")
        assert self.settings.obstacle_avoidance is ObstacleAvoidance.AGGRESSIVE
        self.settings.set_obstacle_avoidance(ObstacleAvoidance.CONSERVATIVE)
        assert self.settings.obstacle_avoidance is ObstacleAvoidance.CONSERVATIVE
        with pytest.raises(ValueError):
            self.settings.set_obstacle_avoidance("Reckless")


class TestTelemetrySimulator:
    """Test mock telemetry updates."""

    def setup_method(self):
        self.sim = TelemetrySimulator(rng=random.Random(7))

    def test_battery_drains_only_while_working(self):
        self.sim.tick(RobotState.WORKING)
        assert self.sim.stats.battery_level == pytest.approx(86.95)
        self.sim.tick(RobotState.CHARGING)
        assert self.sim.stats.battery_level == pytest.approx(86.95)

    def test_battery_floor(self):
        sim = TelemetrySimulator(SystemStats(battery_level=0.01))
        assert sim.tick(RobotState.WORKING).battery_level == 0.0

    def test_ranges(self):
        for _ in range(50):
            stats = self.sim.tick(RobotState.IDLE)
            assert 30.0 <= stats.temperature <= 35.0
            assert 90 <= stats.connection_strength <= 99


class TestCommandLog:
    """Test the bounded operator log."""

    def setup_method(self):
        self.log = CommandLog()

    def test_newest_first_and_bounded(self):
        for direction in ("forward", "left", "right", "backward", "forward"):
            self.log.move(direction)
        entries = self.log.entries
        assert len(entries) == 5
        assert entries[0] == "Executing command: forward"
        assert entries[-1] == "Executing command: forward"
        assert "System ready, awaiting commands..." not in entries

    def test_unknown_direction(self):
        with pytest.raises(ValueError):
            self.log.move("up")

    def test_emergency_stop(self):
        assert self.log.emergency_stop() is RobotState.IDLE
        assert self.log.entries[0] == "Emergency stop triggered!"

# robot.py
"""In-memory robot state shown around the camera view: settings, mock
telemetry and the command log. Nothing here talks to hardware."""
from __future__ import annotations

import random
import time
from collections import deque
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Deque, List, Optional, Tuple


class RobotState(str, Enum):
    IDLE = "IDLE"
    WORKING = "WORKING"
    RETURNING = "RETURNING"
    CHARGING = "CHARGING"
    ERROR = "ERROR"


class ObstacleAvoidance(str, Enum):
    CONSERVATIVE = "Conservative"
    BALANCED = "Balanced"
    AGGRESSIVE = "Aggressive"


# ---------------------------------------------------------------------- #
#   S E T T I N G S
# ---------------------------------------------------------------------- #
SLIDER_RANGE = (10, 100)


def _check_percent(name: str, value: int) -> int:
    lo, hi = SLIDER_RANGE
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise ValueError(f"{name} must be within {lo}-{hi}, got {value}")
    return value


@dataclass
class RobotSettings:
    movement_speed: int = 60
    arm_sensitivity: int = 75
    auto_schedule: bool = True
    night_mode: bool = True
    obstacle_avoidance: ObstacleAvoidance = ObstacleAvoidance.BALANCED

    def set_movement_speed(self, value: int) -> None:
        self.movement_speed = _check_percent("movement_speed", value)

    def set_arm_sensitivity(self, value: int) -> None:
        self.arm_sensitivity = _check_percent("arm_sensitivity", value)

    def set_auto_schedule(self, enabled: bool) -> None:
        self.auto_schedule = bool(enabled)

    def set_night_mode(self, enabled: bool) -> None:
        self.night_mode = bool(enabled)

    def set_obstacle_avoidance(self, mode: ObstacleAvoidance | str) -> None:
        # ValueError for anything outside the three modes
        self.obstacle_avoidance = ObstacleAvoidance(mode)


# ---------------------------------------------------------------------- #
#   T E L E M E T R Y
# ---------------------------------------------------------------------- #
@dataclass
class SystemStats:
    battery_level: float = 87.0      # %
    storage_capacity: float = 45.0   # % full
    daily_shoes_organized: int = 12
    total_shoes_organized: int = 1403
    temperature: float = 32.5        # °C
    connection_strength: int = 95    # %

    def as_dict(self) -> dict:
        return asdict(self)


class TelemetrySimulator:
    """Random-walk telemetry, ticked every few seconds by the dashboard."""

    def __init__(self, stats: Optional[SystemStats] = None, rng: Optional[random.Random] = None):
        self.stats = stats or SystemStats()
        self.rng = rng or random.Random()

    def tick(self, state: RobotState) -> SystemStats:
        s = self.stats
        drain = 0.05 if state is RobotState.WORKING else 0.0
        s.battery_level = max(0.0, s.battery_level - drain)
        s.temperature = 30.0 + self.rng.random() * 5.0
        s.connection_strength = 90 + self.rng.randint(0, 9)
        return s


# ---------------------------------------------------------------------- #
#   C O M M A N D   L O G
# ---------------------------------------------------------------------- #
DIRECTIONS = ("forward", "backward", "left", "right")


class CommandLog:
    """Newest-first log of operator commands, capped at ``maxlen`` lines."""

    def __init__(self, maxlen: int = 5):
        self._entries: Deque[Tuple[float, str]] = deque(maxlen=maxlen)
        self.add("System ready, awaiting commands...")

    def add(self, message: str) -> None:
        self._entries.appendleft((time.time(), message))

    @property
    def entries(self) -> List[str]:
        return [msg for _, msg in self._entries]

    def move(self, direction: str) -> None:
        if direction not in DIRECTIONS:
            raise ValueError(f"unknown direction {direction!r}")
        self.add(f"Executing command: {direction}")

    def emergency_stop(self) -> RobotState:
        self.add("Emergency stop triggered!")
        return RobotState.IDLE

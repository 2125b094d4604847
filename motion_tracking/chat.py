# chat.py
"""Gemini-backed assistant for the dashboard chat widget."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from google import genai
from google.genai import types

from motion_tracking.config import ChatConfig
from motion_tracking.robot import RobotSettings, RobotState, SystemStats, TelemetrySimulator

NOT_CONFIGURED_REPLY = "API key not configured. Please check your environment settings."
ERROR_REPLY = "An error occurred while communicating with the AI core."
EMPTY_REPLY = "No response received."

SYSTEM_TEMPLATE = """\
You are the AI hub assistant of "Blue Vision", a smart shoe-organizing robot.
Persona: professional, efficient, futuristic.

Current telemetry:
- State: {state}
- Battery level: {battery:.1f}%
- Internal temperature: {temperature:.1f}°C
- Shoes organized today: {daily}
- Storage used: {storage:.0f}%
- Movement speed setting: {speed}%

You can answer questions about the robot's status, maintenance advice, or
explain how the system works (vision-based shoe detection, mecanum-wheel
drive, etc.). Keep answers short; they are shown in a dashboard command
console.
"""


@dataclass(frozen=True)
class TelemetrySnapshot:
    stats: SystemStats
    state: RobotState
    settings: RobotSettings

    @classmethod
    def capture(
        cls, simulator: TelemetrySimulator, state: RobotState, settings: RobotSettings
    ) -> "TelemetrySnapshot":
        """Tick the simulator and freeze a copy of its stats."""
        stats = simulator.tick(state)
        return cls(stats=replace(stats), state=state, settings=settings)


def build_system_instruction(ctx: TelemetrySnapshot) -> str:
    return SYSTEM_TEMPLATE.format(
        state=ctx.state.value,
        battery=ctx.stats.battery_level,
        temperature=ctx.stats.temperature,
        daily=ctx.stats.daily_shoes_organized,
        storage=ctx.stats.storage_capacity,
        speed=ctx.settings.movement_speed,
    )


class ChatAssistant:
    """
    ``respond()`` never raises: missing credentials and service faults are
    turned into fixed replies for the chat widget.
    """

    def __init__(
        self,
        config: ChatConfig,
        *,
        api_key: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.config = config
        if client is None:
            key = api_key or self._key_from_env()
            if key:
                client = genai.Client(api_key=key)
        self.client = client

    def _key_from_env(self) -> Optional[str]:
        for name in (self.config.api_key_env, *self.config.fallback_env):
            value = os.environ.get(name)
            if value:
                return value
        return None

    @property
    def configured(self) -> bool:
        return self.client is not None

    def respond(self, user_text: str, context: TelemetrySnapshot) -> str:
        if self.client is None:
            return NOT_CONFIGURED_REPLY
        try:
            response = self.client.models.generate_content(
                model=self.config.model,
                contents=user_text,
                config=types.GenerateContentConfig(
                    system_instruction=build_system_instruction(context),
                ),
            )
            return response.text or EMPTY_REPLY
        except Exception as exc:  # noqa: BLE001
            print(f"[Chat] Gemini error: {exc}")
            return ERROR_REPLY

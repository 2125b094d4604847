# processor.py
"""Glue logic that wires frame source → sampler → detector → tracker → HUD."""
from __future__ import annotations

import time
import traceback
from typing import Any, Callable, List, Mapping, Optional, Protocol, Tuple

import cv2
import numpy as np

from motion_tracking.common import TrackingSummary
from motion_tracking.config import DetectorConfig, HudConfig, SamplerConfig, TrackerConfig
from motion_tracking.detector import ChangeDetector
from motion_tracking.hud import HudRenderer
from motion_tracking.live_tuning import RuntimeParamWatcher
from motion_tracking.sampler import FrameSampler
from motion_tracking.scheduler import Scheduler
from motion_tracking.tracker import MotionTracker


class FrameSource(Protocol):
    def read(self) -> Tuple[float, Optional[np.ndarray]]: ...


def _to_bgr(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if frame.ndim == 3 and frame.shape[2] == 1:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    return frame


class MotionProcessor:
    """
    Runs one perception cycle per scheduler tick while the camera is active.

    The processor owns all cross-cycle state (previous frame inside the
    detector, tracking box inside the tracker, overlay inside the HUD).
    ``stop()`` is final; a stopped processor never schedules again.
    """

    def __init__(
        self,
        source: FrameSource,
        sampler: FrameSampler,
        detector: ChangeDetector,
        tracker: MotionTracker,
        hud: HudRenderer,
        scheduler: Scheduler,
        *,
        display: Optional[Callable[[np.ndarray], None]] = None,
        tuner: Optional[RuntimeParamWatcher] = None,
    ):
        self.source = source
        self.sampler = sampler
        self.detector = detector
        self.tracker = tracker
        self.hud = hud
        self.scheduler = scheduler
        self.display = display
        self.tuner = tuner

        self.summary = TrackingSummary(locked=False, centroid_x=0, centroid_y=0)
        self._listeners: List[Callable[[TrackingSummary], None]] = []

        # Scheduling
        self._handle: Optional[int] = None
        self._running = False
        self._paused = False
        self._stopped = False

        # Runtime metrics
        self.total_frames = 0
        self.skipped_cycles = 0
        self.fault_count = 0
        self.frame_count = 0
        self.fps_timer_start = time.time()
        self.disp_fps = 0.0

    @classmethod
    def build(
        cls,
        source: FrameSource,
        scheduler: Scheduler,
        sampler_cfg: SamplerConfig,
        detector_cfg: DetectorConfig,
        tracker_cfg: TrackerConfig,
        hud_cfg: HudConfig,
        **kwargs: Any,
    ) -> "MotionProcessor":
        return cls(
            source,
            FrameSampler(sampler_cfg.downscale),
            ChangeDetector(detector_cfg),
            MotionTracker(tracker_cfg),
            HudRenderer(hud_cfg),
            scheduler,
            **kwargs,
        )

    def add_listener(self, callback: Callable[[TrackingSummary], None]) -> None:
        self._listeners.append(callback)

    # ---------------------------------------------------------------------
    #                         Scheduling control
    # ---------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running and not self._paused

    @property
    def stopped(self) -> bool:
        return self._stopped

    def _schedule(self) -> None:
        self._handle = self.scheduler.request_tick(self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self.running:
            return
        self.run_cycle()
        if self.running:
            self._schedule()

    def start(self) -> None:
        if self._stopped:
            print("[Processor] Already stopped; ignoring start()")
            return
        if self._running:
            return
        self._running = True
        self._paused = False
        self._schedule()

    def pause(self) -> None:
        if self.running:
            self._paused = True
            self.scheduler.cancel(self._handle)
            self._handle = None

    def resume(self) -> None:
        if self._stopped or not self._paused:
            return
        self._paused = False
        self._schedule()

    def stop(self) -> None:
        self._stopped = True
        self._running = False
        self.scheduler.cancel(self._handle)
        self._handle = None

    # ---------------------------------------------------------------------
    #                           Live tuning
    # ---------------------------------------------------------------------
    def apply_tuning(self, params: Mapping[str, Any]) -> None:
        """Apply each known key on its own; a bad value only skips that key."""
        appliers = {
            "pixel_threshold": lambda v: self.detector.apply_tuning(pixel_threshold=v),
            "detect_threshold": lambda v: self.tracker.apply_tuning(detect_threshold=v),
            "blend_alpha": lambda v: self.tracker.apply_tuning(blend_alpha=v),
            "downscale": lambda v: self.sampler.set_scale(float(v)),
        }
        for key, value in params.items():
            apply = appliers.get(key)
            if apply is None:
                continue
            try:
                apply(value)
            except (TypeError, ValueError) as exc:
                print(f"[Processor] Ignoring bad runtime parameter '{key}': {exc}")

    # ---------------------------------------------------------------------
    #                          Main per-frame cycle
    # ---------------------------------------------------------------------
    def _update_stats(self, now: float) -> None:
        self.frame_count += 1
        if now - self.fps_timer_start >= 1.0:
            self.disp_fps = self.frame_count / (now - self.fps_timer_start)
            self.frame_count = 0
            self.fps_timer_start = now

    def run_cycle(self) -> bool:
        """One Sampler → Detector → Tracker → HUD pass.

        Returns True when a frame was processed. A missing frame skips the
        cycle; any fault is logged and swallowed so the loop keeps going.
        """
        try:
            if self.tuner is not None and self.tuner.maybe_reload():
                self.apply_tuning(self.tuner.params)

            _, frame = self.source.read()
            if frame is None:
                self.skipped_cycles += 1
                return False

            bgr = _to_bgr(frame)
            h, w = bgr.shape[:2]
            small = self.sampler.sample(bgr)
            if small is None:
                self.skipped_cycles += 1
                return False
            self.hud.ensure_size(w, h)

            extent = self.detector.detect(small)
            self.tracker.update(extent, (w, h), self.sampler.scale)
            self.hud.render(self.tracker.box, self.tracker.state)
            self.summary = self.tracker.summary()

            self.total_frames += 1
            self._update_stats(time.time())

            for listener in self._listeners:
                listener(self.summary)
            if self.display is not None:
                self.display(self.hud.composite(bgr))
            return True
        except Exception as exc:  # noqa: BLE001
            self.fault_count += 1
            print(f"[Processor] Frame processing error: {exc}")
            traceback.print_exc()
            return False

# tracker.py
"""Lock/unlock state machine around an exponentially smoothed motion box."""
from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from motion_tracking.common import ChangeExtent, TrackingBox, TrackingSummary
from motion_tracking.config import TrackerConfig
from motion_tracking.helpers import BoxSmoother, round_half_up


class LockState(str, Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class MotionTracker:
    def __init__(self, cfg: TrackerConfig):
        self.cfg = cfg
        self.smoother = BoxSmoother(cfg.blend_alpha)
        self.box = TrackingBox()
        self.state = LockState.UNLOCKED
        self.idle_frames = 0
        self.locked_frames = 0

    # ------------------------------------------------------------------ #
    #   L I V E   T U N I N G   A P I
    # ------------------------------------------------------------------ #
    def apply_tuning(
        self,
        *,
        detect_threshold: int | None = None,
        blend_alpha: float | None = None,
    ) -> None:
        if detect_threshold is not None and detect_threshold >= 0:
            self.cfg.detect_threshold = int(detect_threshold)
        if blend_alpha is not None:
            self.smoother.set_alpha(blend_alpha)
            self.cfg.blend_alpha = self.smoother.alpha

    def reset(self) -> None:
        """Back to the initial state; called when a camera session restarts."""
        self.smoother.reset()
        self.box = TrackingBox()
        self.state = LockState.UNLOCKED
        self.idle_frames = 0
        self.locked_frames = 0

    # ------------------------------------------------------------------ #
    #   U P D A T E
    # ------------------------------------------------------------------ #
    @staticmethod
    def _clamp(
        box: Tuple[float, float, float, float], frame_size: Tuple[int, int]
    ) -> Tuple[float, float, float, float]:
        fw, fh = frame_size
        x, y, w, h = box
        x = min(max(x, 0.0), float(fw))
        y = min(max(y, 0.0), float(fh))
        w = min(max(w, 0.0), fw - x)
        h = min(max(h, 0.0), fh - y)
        return x, y, w, h

    def update(
        self,
        extent: ChangeExtent,
        frame_size: Tuple[int, int],
        scale: float,
    ) -> LockState:
        """
        Advance one cycle.

        Lock depends only on this cycle's changed-sample count. While locked
        the box is blended toward the extent rescaled to full resolution;
        while unlocked it stays where it was.
        """
        if extent.changed_pixels > self.cfg.detect_threshold:
            target = (
                extent.min_x / scale,
                extent.min_y / scale,
                (extent.max_x - extent.min_x) / scale,
                (extent.max_y - extent.min_y) / scale,
            )
            smoothed = self.smoother.update(target)
            if self.cfg.clamp_to_frame:
                smoothed = self._clamp(smoothed, frame_size)
                self.smoother.state[:] = smoothed
            self.box.x, self.box.y, self.box.width, self.box.height = smoothed
            self.state = LockState.LOCKED
            self.idle_frames = 0
            self.locked_frames += 1
        else:
            self.state = LockState.UNLOCKED
            self.locked_frames = 0
            self.idle_frames += 1
            limit: Optional[int] = self.cfg.reset_after_idle_frames
            if limit is not None and self.idle_frames >= limit:
                self.smoother.reset()
                self.box.x = self.box.y = self.box.width = self.box.height = 0.0

        self.box.locked = self.state is LockState.LOCKED
        return self.state

    # ------------------------------------------------------------------ #
    #   R E P O R T
    # ------------------------------------------------------------------ #
    @property
    def locked(self) -> bool:
        return self.state is LockState.LOCKED

    def summary(self) -> TrackingSummary:
        cx, cy = self.box.centroid()
        return TrackingSummary(
            locked=self.locked,
            centroid_x=round_half_up(cx),
            centroid_y=round_half_up(cy),
        )

# hud.py
"""Heads-up display drawn onto a transparent BGRA overlay."""
from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from motion_tracking.common import TrackingBox
from motion_tracking.config import HudConfig
from motion_tracking.helpers import round_half_up
from motion_tracking.tracker import LockState

FONT = cv2.FONT_HERSHEY_SIMPLEX


class HudRenderer:
    """
    Owns one overlay the size of the video frame. The alpha channel is the
    opacity used by :meth:`composite`; everything is redrawn from scratch on
    every :meth:`render`.
    """

    def __init__(self, config: HudConfig):
        self.config = config
        self.overlay: Optional[np.ndarray] = None
        self.last_label: Optional[str] = None
        self.resizes = 0

    @property
    def size(self) -> Tuple[int, int]:
        if self.overlay is None:
            return 0, 0
        h, w = self.overlay.shape[:2]
        return w, h

    def ensure_size(self, width: int, height: int) -> None:
        if self.size != (width, height):
            self.overlay = np.zeros((height, width, 4), dtype=np.uint8)
            self.resizes += 1

    # ------------------------------------------------------------------ #
    def _draw_frame_marks(self, img: np.ndarray) -> None:
        cfg = self.config
        h, w = img.shape[:2]
        m = cfg.border_margin_px
        cv2.rectangle(img, (m, m), (w - m, h - m), cfg.hud_color, cfg.line_thickness)

        cx, cy, r = w // 2, h // 2, cfg.reticle_half_px
        cv2.line(img, (cx - r, cy), (cx + r, cy), cfg.reticle_color, 1)
        cv2.line(img, (cx, cy - r), (cx, cy + r), cfg.reticle_color, 1)

    def _draw_lock(self, img: np.ndarray, box: TrackingBox) -> None:
        cfg = self.config
        h, w = img.shape[:2]
        pad = cfg.box_padding_px
        dx = box.x - pad
        dy = box.y - pad
        dw = box.width + pad * 2
        dh = box.height + pad * 2
        x0, y0 = round_half_up(dx), round_half_up(dy)
        x1, y1 = round_half_up(dx + dw), round_half_up(dy + dh)

        # Low-opacity fill, clipped to the overlay
        fx0, fy0 = max(x0, 0), max(y0, 0)
        fx1, fy1 = min(x1, w), min(y1, h)
        if fx1 > fx0 and fy1 > fy0:
            img[fy0:fy1, fx0:fx1] = (*cfg.lock_color[:3], cfg.lock_fill_alpha)

        cv2.rectangle(img, (x0, y0), (x1, y1), cfg.lock_color, cfg.line_thickness)

        label = f"TARGET LOCKED [{round_half_up(dw)}x{round_half_up(dh)}]"
        ty = y0 - 8 if y0 - 8 > 12 else y1 + 16
        cv2.putText(img, label, (max(x0, 0), ty), FONT, cfg.font_scale,
                    cfg.lock_color, 1, cv2.LINE_AA)
        self.last_label = label

    def render(self, box: TrackingBox, state: LockState) -> np.ndarray:
        if self.overlay is None or self.overlay.size == 0:
            raise ValueError("overlay has no size; call ensure_size() first")
        img = self.overlay
        img[:] = 0
        self.last_label = None

        self._draw_frame_marks(img)
        if state is LockState.LOCKED:
            self._draw_lock(img, box)
        else:
            cv2.putText(img, "SEARCHING...", (30, 40), FONT, self.config.font_scale,
                        self.config.reticle_color, 1, cv2.LINE_AA)
        return img

    def composite(self, frame: np.ndarray) -> np.ndarray:
        """Alpha-blend the overlay over a BGR(A) frame of the same size."""
        bgr = frame[..., :3] if frame.ndim == 3 else cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        if self.overlay is None or self.size != (bgr.shape[1], bgr.shape[0]):
            return bgr.copy()
        alpha = self.overlay[..., 3:4].astype(np.float32) / 255.0
        out = bgr.astype(np.float32) * (1.0 - alpha) + self.overlay[..., :3].astype(np.float32) * alpha
        return out.astype(np.uint8)

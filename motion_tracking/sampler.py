# sampler.py
"""Downsample full-resolution frames into one reusable working buffer."""
from __future__ import annotations

import math
from typing import Optional, Tuple

import cv2
import numpy as np


class FrameSampler:
    def __init__(self, scale: float = 0.2) -> None:
        if not 0.0 < scale <= 1.0:
            raise ValueError(f"downscale must be in (0, 1], got {scale}")
        self.scale = scale
        self._buffer: Optional[np.ndarray] = None
        self._source_shape: Optional[Tuple[int, ...]] = None
        self.reallocations = 0

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        return math.floor(width * self.scale), math.floor(height * self.scale)

    @property
    def buffer(self) -> Optional[np.ndarray]:
        return self._buffer

    def _ensure_buffer(self, frame: np.ndarray) -> Tuple[int, int]:
        h, w = frame.shape[:2]
        tw, th = self.target_size(w, h)
        if frame.shape != self._source_shape:
            self._source_shape = frame.shape
            channels = frame.shape[2:]  # () for grayscale
            self._buffer = np.zeros((th, tw) + channels, dtype=frame.dtype)
            self.reallocations += 1
        return tw, th

    def sample(self, frame: Optional[np.ndarray]) -> Optional[np.ndarray]:
        """
        Resize *frame* into the persistent buffer and return it.

        Returns ``None`` when there is nothing to sample: no frame yet, or a
        frame so small that the scaled size collapses to zero.
        """
        if frame is None or frame.size == 0:
            return None
        tw, th = self._ensure_buffer(frame)
        if tw == 0 or th == 0:
            return None
        out = cv2.resize(frame, (tw, th), dst=self._buffer, interpolation=cv2.INTER_AREA)
        if out is not self._buffer:
            # OpenCV drops a trailing singleton channel and allocates its own
            self._buffer = out
        return self._buffer

    def set_scale(self, scale: float) -> None:
        """Change the downscale factor; the buffer is rebuilt on next sample."""
        if not 0.0 < scale <= 1.0:
            raise ValueError(f"downscale must be in (0, 1], got {scale}")
        if scale != self.scale:
            self.scale = scale
            self._source_shape = None

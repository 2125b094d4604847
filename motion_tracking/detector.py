# detector.py
"""Frame-difference motion detector."""
from typing import Optional

import numpy as np

from motion_tracking.common import ChangeExtent
from motion_tracking.config import DetectorConfig


class ChangeDetector:
    def __init__(self, config: DetectorConfig):
        if config.stride < 1:
            raise ValueError(f"stride must be >= 1, got {config.stride}")
        self.config = config
        self._previous: Optional[np.ndarray] = None

    @property
    def previous(self) -> Optional[np.ndarray]:
        return self._previous

    def reset(self) -> None:
        self._previous = None

    def _compare(self, current: np.ndarray, previous: np.ndarray) -> ChangeExtent:
        s = self.config.stride
        cur = current[::s, ::s]
        prev = previous[::s, ::s]
        if cur.ndim == 3:
            # Colour channels only; alpha never counts as motion
            cur = cur[..., :3]
            prev = prev[..., :3]
        delta = np.abs(cur.astype(np.int16) - prev.astype(np.int16))
        if delta.ndim == 3:
            channels = delta.shape[2]
            score = delta.sum(axis=2)
        else:
            channels = 1
            score = delta

        ys, xs = np.nonzero(score > self.config.pixel_threshold * channels)
        if xs.size == 0:
            return ChangeExtent()
        return ChangeExtent(
            min_x=int(xs.min()) * s,
            min_y=int(ys.min()) * s,
            max_x=int(xs.max()) * s,
            max_y=int(ys.max()) * s,
            changed_pixels=int(xs.size),
        )

    def detect(self, current: np.ndarray) -> ChangeExtent:
        """
        Compare *current* with the frame seen on the previous call.

        The first frame of a session (or the first after a size change) has
        nothing to compare against and yields an empty extent. *current* is
        copied before being kept, since the sampler reuses its buffer.
        """
        previous = self._previous
        if previous is None or previous.shape != current.shape:
            extent = ChangeExtent()
        else:
            extent = self._compare(current, previous)
        self._previous = current.copy()
        return extent

    def apply_tuning(self, *, pixel_threshold: Optional[int] = None) -> None:
        if pixel_threshold is not None and pixel_threshold >= 0:
            self.config.pixel_threshold = int(pixel_threshold)

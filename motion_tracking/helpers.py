# helpers.py
"""Small utility classes that don’t fit elsewhere."""
import math
from typing import Tuple

import numpy as np


def lerp(start: float, end: float, factor: float) -> float:
    return start + (end - start) * factor


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up (builtin round() goes to even)."""
    return int(math.floor(value + 0.5))


class BoxSmoother:
    """
    Exponential smoother for (x, y, w, h) boxes.

    Unlike a seed-on-first-sample smoother the state starts at the origin
    with zero size, so the first lock visibly grows out of the corner.
    """

    def __init__(self, alpha: float = 0.2):
        self.set_alpha(alpha)
        self.state = np.zeros(4, dtype=float)

    def set_alpha(self, alpha: float) -> None:
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"blend alpha must be in (0, 1], got {alpha}")
        self.alpha = float(alpha)

    def update(self, bbox: Tuple[float, float, float, float]) -> Tuple[float, float, float, float]:
        target = np.asarray(bbox, dtype=float)
        self.state = lerp(self.state, target, self.alpha)
        return tuple(float(v) for v in self.state)

    def reset(self) -> None:
        self.state = np.zeros(4, dtype=float)

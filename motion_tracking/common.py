# common.py
"""Objects that are shared across multiple modules."""
from dataclasses import dataclass


@dataclass(frozen=True)
class ChangeExtent:
    """
    Bounding extent of the changed samples between two downsampled frames.
    All coordinates are in *downsampled* pixel space.
    """
    min_x: int = 0
    min_y: int = 0
    max_x: int = 0
    max_y: int = 0
    changed_pixels: int = 0

    @property
    def empty(self) -> bool:
        return self.changed_pixels == 0


@dataclass
class TrackingBox:
    """Smoothed target box in full-resolution pixel space."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    locked: bool = False

    def as_tuple(self):
        return (self.x, self.y, self.width, self.height)

    def centroid(self):
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


@dataclass(frozen=True)
class TrackingSummary:
    """Read-only per-cycle projection of the tracking box for the UI."""
    locked: bool
    centroid_x: int
    centroid_y: int

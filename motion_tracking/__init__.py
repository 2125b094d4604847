# motion_tracking/__init__.py
"""Motion-tracking package – re-export high-level API."""
from .processor import MotionProcessor                # noqa: F401
from .camera import Camera, CameraSession            # noqa: F401
from .config import (                                 # noqa: F401
    CameraConfig, SamplerConfig, DetectorConfig,
    TrackerConfig, HudConfig, ChatConfig,
)

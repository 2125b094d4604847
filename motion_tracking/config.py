# config.py
"""Typed configuration blobs for the whole system."""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class CameraConfig:
    device_index: int = 0
    width: int = 640
    height: int = 480
    fps_request: int = 30
    use_v4l2: bool = True
    fourcc_str: str = "MJPG"


@dataclass
class SamplerConfig:
    # Fraction of the full frame kept for differencing (0 < s <= 1)
    downscale: float = 0.2


@dataclass
class DetectorConfig:
    pixel_threshold: int = 30  # mean per-channel delta
    stride: int = 2            # sample every Nth pixel in both axes


@dataclass
class TrackerConfig:
    # Changed samples needed to call it motion rather than sensor noise
    detect_threshold: int = 20
    blend_alpha: float = 0.2
    clamp_to_frame: bool = True
    # None keeps the last box on screen while searching
    reset_after_idle_frames: Optional[int] = None


@dataclass
class HudConfig:
    border_margin_px: int = 20
    box_padding_px: int = 20
    reticle_half_px: int = 10
    # BGRA; alpha is the overlay opacity
    hud_color: Tuple[int, int, int, int] = (212, 182, 6, 77)
    reticle_color: Tuple[int, int, int, int] = (212, 182, 6, 128)
    lock_color: Tuple[int, int, int, int] = (94, 197, 34, 255)
    lock_fill_alpha: int = 26
    font_scale: float = 0.45
    line_thickness: int = 2


@dataclass
class ChatConfig:
    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    fallback_env: Tuple[str, ...] = field(default_factory=lambda: ("API_KEY",))

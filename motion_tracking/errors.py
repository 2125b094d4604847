# errors.py
"""Exceptions raised by the camera layer."""
from __future__ import annotations

from enum import Enum


class AcquisitionFailure(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    DEVICE_BUSY = "device_busy"
    UNKNOWN = "unknown"


_REASONS = {
    AcquisitionFailure.PERMISSION_DENIED: "Camera permission denied",
    AcquisitionFailure.DEVICE_BUSY: "Camera is in use by another application (device busy)",
    AcquisitionFailure.UNKNOWN: "Camera initialisation failed",
}


class CameraError(RuntimeError):
    """Base class for frame-source failures."""


class CameraAcquisitionError(CameraError):
    """Raised when the camera cannot be opened; terminal for a session."""

    def __init__(self, kind: AcquisitionFailure, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(self.reason)

    @property
    def reason(self) -> str:
        """Human-readable text suitable for the status panel."""
        base = _REASONS[self.kind]
        return f"{base} ({self.detail})" if self.detail else base

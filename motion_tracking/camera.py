# camera.py
"""Thin VideoCapture wrapper **and** a scoped camera session that survives
teardown while acquisition is still in flight."""

from __future__ import annotations

import os
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

import cv2
import numpy as np

from motion_tracking.config import CameraConfig
from motion_tracking.errors import AcquisitionFailure, CameraAcquisitionError


class Camera:
    def __init__(self, config: CameraConfig) -> None:
        self.config = config
        self.cap: Optional[cv2.VideoCapture] = None

        # Exposed runtime-queryable values
        self.actual_width: int = 0
        self.actual_height: int = 0
        self.actual_fps: float = 0.0
        self.actual_fourcc_str: str = ""

    # ------------------------------------------------------------------ #
    #   I N T E R N A L   H E L P E R S
    # ------------------------------------------------------------------ #
    @staticmethod
    def _get_fourcc_str(fourcc_val: int) -> str:
        if fourcc_val == 0:
            return ""
        return "".join(chr((fourcc_val >> (8 * i)) & 0xFF) for i in range(4))

    def _device_node(self) -> Path:
        dev = self.config.device_index
        return Path(f"/dev/video{dev}") if isinstance(dev, int) else Path(str(dev))

    def _classify_failure(self) -> CameraAcquisitionError:
        """
        OpenCV only says "not opened"; inspect the device node to give the
        user a better reason.
        """
        node = self._device_node()
        if not node.exists():
            return CameraAcquisitionError(
                AcquisitionFailure.UNKNOWN, f"no device at {node}"
            )
        if not os.access(node, os.R_OK | os.W_OK):
            return CameraAcquisitionError(AcquisitionFailure.PERMISSION_DENIED, str(node))
        return CameraAcquisitionError(AcquisitionFailure.DEVICE_BUSY, str(node))

    # ------------------------------------------------------------------ #
    #   P U B L I C   A P I
    # ------------------------------------------------------------------ #
    def open(self) -> None:
        """Open the device and apply resolution/fps.

        Raises
        ------
        CameraAcquisitionError
            When the device cannot be opened or reports a zero resolution.
        """
        backend = cv2.CAP_V4L2 if self.config.use_v4l2 else 0
        self.cap = cv2.VideoCapture(self.config.device_index, backend)
        if not self.cap or not self.cap.isOpened():
            print(f"[Camera] Could not open device {self.config.device_index}")
            self.cap = None
            raise self._classify_failure()

        try:
            self._configure()
        except Exception:
            # Never leave an opened device behind on a failed open
            self.release()
            raise

    def _configure(self) -> None:
        if self.config.fourcc_str:
            self.cap.set(
                cv2.CAP_PROP_FOURCC, cv2.VideoWriter_fourcc(*self.config.fourcc_str)
            )
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        if self.config.fps_request > 0:
            self.cap.set(cv2.CAP_PROP_FPS, self.config.fps_request)

        time.sleep(0.1)  # Let driver settle

        self.actual_fourcc_str = self._get_fourcc_str(
            int(self.cap.get(cv2.CAP_PROP_FOURCC))
        )
        self.actual_width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.actual_height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.actual_fps = self.cap.get(cv2.CAP_PROP_FPS)

        print(
            f"[Camera] {self.actual_width}x{self.actual_height}@{self.actual_fps:.1f} FPS "
            f"(FOURCC='{self.actual_fourcc_str}')"
        )
        if self.actual_width == 0 or self.actual_height == 0:
            print("[Camera] Error: camera returned zero resolution")
            raise CameraAcquisitionError(
                AcquisitionFailure.UNKNOWN, "camera returned zero resolution"
            )

    def read(self) -> Tuple[float, Optional[np.ndarray]]:
        if not self.is_opened():
            return time.time(), None
        ts = time.time()
        ret, frame = self.cap.read()
        return (ts, frame) if ret and frame is not None else (ts, None)

    def is_opened(self) -> bool:
        return bool(self.cap and self.cap.isOpened())

    def release(self) -> None:
        if self.cap:
            print("[Camera] Releasing capture device")
            self.cap.release()
            self.cap = None


def open_camera(config: CameraConfig) -> Camera:
    """Default opener used by :class:`CameraSession`."""
    camera = Camera(config)
    camera.open()
    return camera


# ---------------------------------------------------------------------- #
#   S E S S I O N
# ---------------------------------------------------------------------- #
class SessionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    ACTIVE = "active"
    UNAVAILABLE = "unavailable"
    CLOSED = "closed"


class CameraSession:
    """
    Owns the camera for one remote-control session.

    Acquisition runs once, on a worker thread, so the caller can tear the
    session down while the device is still being opened. A camera that
    arrives after :meth:`close` is released straight away and never read.
    There is no retry: a failed acquisition leaves the session
    ``UNAVAILABLE`` with a human-readable :attr:`reason`.
    """

    def __init__(
        self,
        opener: Callable[[], Camera],
        on_ready: Optional[Callable[[Camera], None]] = None,
        on_unavailable: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._opener = opener
        self._on_ready = on_ready
        self._on_unavailable = on_unavailable
        self._lock = threading.Lock()
        self._alive = True
        self._thread: Optional[threading.Thread] = None

        self.camera: Optional[Camera] = None
        self.status = SessionStatus.IDLE
        self.reason = ""

    @classmethod
    def from_config(cls, config: CameraConfig, **kwargs) -> "CameraSession":
        return cls(lambda: open_camera(config), **kwargs)

    # ------------------------------------------------------------------ #
    def start(self) -> None:
        with self._lock:
            if self._thread is not None or not self._alive:
                raise RuntimeError("camera session can only be started once")
            self.status = SessionStatus.PENDING
            self._thread = threading.Thread(
                target=self._acquire, name="camera-acquire", daemon=True
            )
        self._thread.start()

    def _acquire(self) -> None:
        try:
            camera = self._opener()
        except CameraAcquisitionError as exc:
            self._fail(exc)
            return
        except Exception as exc:  # noqa: BLE001
            self._fail(CameraAcquisitionError(AcquisitionFailure.UNKNOWN, str(exc)))
            return

        with self._lock:
            if not self._alive:
                # Torn down while we were opening; hand the device back.
                camera.release()
                return
            self.camera = camera
            self.status = SessionStatus.ACTIVE
        print("[Camera] Session active")
        if self._on_ready:
            self._on_ready(camera)

    def _fail(self, exc: CameraAcquisitionError) -> None:
        with self._lock:
            if not self._alive:
                return
            self.status = SessionStatus.UNAVAILABLE
            self.reason = exc.reason
        print(f"[Camera] Unavailable: {exc.reason}")
        if self._on_unavailable:
            self._on_unavailable(exc.reason)

    def wait(self, timeout: Optional[float] = None) -> SessionStatus:
        """Block until acquisition finished (or *timeout*), return status."""
        if self._thread is not None:
            self._thread.join(timeout)
        return self.status

    @property
    def active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    # Frame-source protocol used by the processor
    def read(self) -> Tuple[float, Optional[np.ndarray]]:
        camera = self.camera
        if camera is None:
            return time.time(), None
        return camera.read()

    def close(self) -> None:
        with self._lock:
            self._alive = False
            camera, self.camera = self.camera, None
            self.status = SessionStatus.CLOSED
        if camera is not None:
            camera.release()

    def __enter__(self) -> "CameraSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

# main.py
"""
Entry-point for the remote-control camera view.

Live calibration
----------------
While the program is running you can edit ``runtime_params.json`` and the new
thresholds (``pixel_threshold``, ``detect_threshold``, ``blend_alpha``,
``downscale``) take effect on the very next frame.  See
``motion_tracking/live_tuning.py`` for details.

Chat
----
``python cli/main.py chat "how is the battery?"`` sends one question to the
assistant with the current (simulated) telemetry and prints the reply.
"""
from __future__ import annotations

import sys
from typing import Optional

import cv2
import numpy as np

from motion_tracking.camera import CameraSession, SessionStatus
from motion_tracking.chat import ChatAssistant, TelemetrySnapshot
from motion_tracking.common import TrackingSummary
from motion_tracking.config import (
    CameraConfig,
    ChatConfig,
    DetectorConfig,
    HudConfig,
    SamplerConfig,
    TrackerConfig,
)
from motion_tracking.live_tuning import RuntimeParamWatcher
from motion_tracking.processor import MotionProcessor
from motion_tracking.robot import CommandLog, RobotSettings, RobotState, TelemetrySimulator
from motion_tracking.scheduler import DisplayScheduler

WINDOW = "Remote Control - Live Feed"

_MOVE_KEYS = {
    ord("w"): "forward",
    ord("s"): "backward",
    ord("a"): "left",
    ord("d"): "right",
}


# ────────────────────────────────────────────────────────────────────────────
#   S T A T U S   P A N E L
# ────────────────────────────────────────────────────────────────────────────
def _draw_status_panel(img: np.ndarray, summary: TrackingSummary, fps: float, log: CommandLog) -> None:
    h, w = img.shape[:2]
    if summary.locked:
        cv2.putText(img, "* TARGET ACQUIRED", (w - 210, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (94, 197, 34), 2)
        cv2.putText(img, f"X: {summary.centroid_x}", (30, h - 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (94, 197, 34), 1)
        cv2.putText(img, f"Y: {summary.centroid_y}", (30, h - 40), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (94, 197, 34), 1)
    else:
        cv2.putText(img, "o SCANNING", (w - 150, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (212, 182, 6), 2)
        cv2.putText(img, "SYSTEM READY", (30, h - 40), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (212, 182, 6), 1)
    cv2.putText(img, f"FPS:{fps:.1f}", (w - 110, h - 30), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 255, 0), 1)
    if log.entries:
        cv2.putText(img, f"> {log.entries[0]}", (30, 70), cv2.FONT_HERSHEY_SIMPLEX, 0.45, (200, 200, 200), 1)


# ────────────────────────────────────────────────────────────────────────────
#   C H A T
# ────────────────────────────────────────────────────────────────────────────
def run_chat(question: str) -> None:
    assistant = ChatAssistant(ChatConfig())
    ctx = TelemetrySnapshot.capture(TelemetrySimulator(), RobotState.WORKING, RobotSettings())
    print(assistant.respond(question, ctx))


# ────────────────────────────────────────────────────────────────────────────
#   C A M E R A   V I E W
# ────────────────────────────────────────────────────────────────────────────
def run_camera() -> None:
    print("Initializing Motion-Tracking View…")
    print("Hint: edit 'runtime_params.json' at any time to tweak thresholds.\n")

    # -------------------- Config blobs --------------------
    cam_cfg = CameraConfig()
    smp_cfg = SamplerConfig()
    det_cfg = DetectorConfig()
    trk_cfg = TrackerConfig()
    hud_cfg = HudConfig()

    # ------------------------ Banner ----------------------
    print(
        f"Camera: idx={cam_cfg.device_index}, "
        f"{cam_cfg.width}x{cam_cfg.height}@{cam_cfg.fps_request} FPS"
    )
    print(
        f"Detector: downscale={smp_cfg.downscale}, stride={det_cfg.stride}, "
        f"pixel_threshold={det_cfg.pixel_threshold}"
    )
    print(
        f"Tracker: detect_threshold={trk_cfg.detect_threshold}, "
        f"alpha={trk_cfg.blend_alpha}, clamp={trk_cfg.clamp_to_frame}"
    )

    log = CommandLog()
    state = RobotState.WORKING
    processor: Optional[MotionProcessor] = None

    def show(img: np.ndarray) -> None:
        _draw_status_panel(img, processor.summary, processor.disp_fps, log)
        cv2.imshow(WINDOW, img)

    def on_key(key: int) -> bool:
        nonlocal state
        if key == ord("q"):
            return False
        if key in _MOVE_KEYS:
            log.move(_MOVE_KEYS[key])
        elif key == ord("x"):
            state = log.emergency_stop()
            print(f"[Control] State -> {state.value}")
        elif key == ord("p") and processor is not None:
            if processor.running:
                processor.pause()
                log.add("Tracking paused")
            else:
                processor.resume()
                log.add("Tracking resumed")
        return True

    scheduler = DisplayScheduler(on_key=on_key)
    session = CameraSession.from_config(cam_cfg)
    processor = MotionProcessor.build(
        session, scheduler, smp_cfg, det_cfg, trk_cfg, hud_cfg,
        display=show, tuner=RuntimeParamWatcher(),
    )

    try:
        session.start()
        if session.wait() is not SessionStatus.ACTIVE:
            print(f"Sensor connection failed: {session.reason}")
            return
        log.add("Vision sensor connected")

        cv2.namedWindow(WINDOW, cv2.WINDOW_NORMAL)
        print("Keys: w/a/s/d move, x emergency stop, p pause, q quit")
        processor.start()
        scheduler.run()
    except KeyboardInterrupt:
        print("\n[Main] Stopped by user.")
    finally:
        processor.stop()
        session.close()
        cv2.destroyAllWindows()
        print(
            f"[Main] Exited. Frames: {processor.total_frames}, "
            f"skipped: {processor.skipped_cycles}, faults: {processor.fault_count}"
        )


def main() -> None:
    if len(sys.argv) > 2 and sys.argv[1] == "chat":
        run_chat(" ".join(sys.argv[2:]))
        return
    run_camera()


if __name__ == "__main__":
    main()

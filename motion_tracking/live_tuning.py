# live_tuning.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Tuple

# Calibration knobs that may be changed while the camera is running
TUNABLE_KEYS = {
    "pixel_threshold": int,
    "detect_threshold": int,
    "blend_alpha": float,
    "downscale": float,
}


class RuntimeParamWatcher:
    """Watch a JSON file of detector/tracker thresholds and hot-reload it."""

    def __init__(self, path: str | Path = "runtime_params.json") -> None:
        self.path = Path(path).expanduser().resolve()
        self._stamp: Tuple[float, int] = (0.0, -1)  # (mtime, size)
        self.params: Dict[str, Any] = {}

        print(f"[Runtime] Watching: {self.path}")
        self._load(initial=True)

    # ------------------------------------------------------------------
    #   Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _coerce(raw: Dict[str, Any]) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, value in raw.items():
            kind = TUNABLE_KEYS.get(key)
            if kind is None:
                print(f"[Runtime] Unknown parameter '{key}' ignored")
                continue
            try:
                out[key] = kind(value)
            except (TypeError, ValueError):
                print(f"[Runtime] Bad value for '{key}': {value!r}")
        return out

    def _load(self, *, initial: bool = False) -> bool:
        """Read the file; return True when new params were taken."""
        try:
            # Stamp first so a broken file is reported once, not every frame
            stat = self.path.stat()
            self._stamp = (stat.st_mtime, stat.st_size)
            with self.path.open("r", encoding="utf-8") as fp:
                raw = json.load(fp)
            if not isinstance(raw, dict):
                print(f"[Runtime] {self.path} must hold a JSON object")
                return False
            self.params = self._coerce(raw)
            if not initial:
                print(f"[Runtime] Reloaded parameters from {self.path}")
            return True
        except FileNotFoundError:
            if initial:
                print(
                    f"[Runtime] {self.path} not found – live calibration disabled "
                    "(create the file to enable)."
                )
            else:
                print(f"[Runtime] {self.path} was deleted – keeping old params.")
        except json.JSONDecodeError as exc:
            print(f"[Runtime] JSON error in {self.path}: {exc}")
        except OSError as exc:
            print(f"[Runtime] Failed to reload {self.path}: {exc}")
        return False

    # ------------------------------------------------------------------
    #   Public API
    # ------------------------------------------------------------------
    def maybe_reload(self) -> bool:
        """
        If the watched file changed since the last call reload it and
        return **True** when it yielded new params, else **False**.
        """
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return False

        mtime, fsize = self._stamp
        # Coarse filesystem timestamps: size change or >=1 s counts as modified
        if stat.st_size != fsize or stat.st_mtime - mtime >= 1.0:
            return self._load()
        return False

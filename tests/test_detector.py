"""
Tests for the frame-difference change detector.
"""
import numpy as np
import pytest

from motion_tracking.common import ChangeExtent
from motion_tracking.config import DetectorConfig
from motion_tracking.detector import ChangeDetector
from tests.frames import make_frame, with_block


class TestChangeDetector:
    """Test change extents between consecutive downsampled frames."""

    def setup_method(self):
        self.detector = ChangeDetector(DetectorConfig(pixel_threshold=30, stride=2))
        self.black = make_frame(128, 96, channels=4)

    def test_cold_start_reports_nothing(self):
        """The first frame has no predecessor and yields an empty extent."""
        extent = self.detector.detect(with_block(self.black, 40, 40, 60, 60))
        assert extent == ChangeExtent()
        assert extent.empty

    def test_identical_frames_report_nothing(self):
        """Static input never produces changed pixels."""
        frame = with_block(self.black, 10, 10, 30, 30, value=120)
        self.detector.detect(frame)
        extent = self.detector.detect(frame.copy())
        assert extent.changed_pixels == 0

    def test_white_block_extent(self):
        """A 20x20 block is found with stride-2 resolution."""
        self.detector.detect(self.black)
        extent = self.detector.detect(with_block(self.black, 40, 40, 60, 60))

        assert extent.changed_pixels == 100
        assert extent.changed_pixels > 20
        assert (extent.min_x, extent.min_y) == (40, 40)
        assert (extent.max_x, extent.max_y) == (58, 58)

    def test_extent_stays_inside_odd_block(self):
        """Sampled extent never reaches outside the changed block."""
        self.detector.detect(self.black)
        extent = self.detector.detect(with_block(self.black, 41, 33, 52, 40))

        assert extent.changed_pixels > 0
        assert 41 <= extent.min_x <= extent.max_x <= 51
        assert 33 <= extent.min_y <= extent.max_y <= 39

    def test_alpha_is_ignored(self):
        """Only colour channels count as motion."""
        self.detector.detect(self.black)
        changed = self.black.copy()
        changed[..., 3] = 0
        assert self.detector.detect(changed).changed_pixels == 0

    def test_threshold_is_strict(self):
        """Average delta must exceed the threshold, not equal it."""
        self.detector.detect(self.black)
        assert self.detector.detect(make_frame(128, 96, value=30, channels=4)).changed_pixels == 0

        self.detector.reset()
        self.detector.detect(self.black)
        extent = self.detector.detect(make_frame(128, 96, value=31, channels=4))
        assert extent.changed_pixels == 64 * 48

    def test_previous_is_a_copy(self):
        """The sampler reuses its buffer, so the detector must not alias it."""
        buffer = make_frame(128, 96)
        self.detector.detect(buffer)
        buffer[:] = 255
        assert self.detector.previous.max() == 0
        assert self.detector.detect(buffer).changed_pixels == 64 * 48

    def test_size_change_is_a_cold_start(self):
        """A new frame size has nothing comparable to diff against."""
        self.detector.detect(self.black)
        extent = self.detector.detect(make_frame(64, 48, value=255, channels=4))
        assert extent.empty
        assert self.detector.previous.shape == (48, 64, 4)

    def test_grayscale_frames(self):
        """Single-channel buffers use the plain threshold."""
        prev = np.zeros((20, 20), dtype=np.uint8)
        cur = prev.copy()
        cur[4:8, 4:8] = 31
        self.detector.detect(prev)
        extent = self.detector.detect(cur)
        assert extent.changed_pixels == 4
        assert (extent.min_x, extent.max_x) == (4, 6)

    def test_invalid_stride(self):
        """Stride must be at least one."""
        with pytest.raises(ValueError):
            ChangeDetector(DetectorConfig(stride=0))

    def test_apply_tuning(self):
        """Pixel threshold can be recalibrated at runtime."""
        self.detector.apply_tuning(pixel_threshold=100)
        self.detector.detect(self.black)
        assert self.detector.detect(make_frame(128, 96, value=90, channels=4)).empty

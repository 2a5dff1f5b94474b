"""
Integration tests for the complete detection pipeline
"""

import pytest
import numpy as np
from PIL import Image

from blob_analysis import (
    Candidate,
    DetectionConfig,
    InvalidArgument,
    InvalidImage,
    batch_detect,
    detect_and_crop,
    detect_candidates,
    run_detection
)
from blob_analysis.preprocessing import validate_binary_mask


class TestDetectCandidates:
    """Tests for the binarize + extract pipeline"""

    def test_dark_frame_has_no_candidates(self, rgba_factory):
        """Test that an all-background frame yields nothing"""
        frame = rgba_factory(120, 160)

        assert detect_candidates(frame, threshold=128) == []

    def test_bright_squares(self, rgba_factory, grid_squares):
        """Test detection of bright squares on an RGBA frame"""
        frame = rgba_factory(80, 80, grid_squares)

        candidates = detect_candidates(frame, threshold=128)

        assert len(candidates) == 9
        assert all(isinstance(c, Candidate) for c in candidates)
        assert {(c.x, c.y) for c in candidates} == {(x + 3, y + 3) for x, y, _ in grid_squares}

    def test_threshold_above_foreground(self, rgba_factory, grid_squares):
        """Test that a threshold at the blob brightness removes every blob"""
        frame = rgba_factory(80, 80, grid_squares)

        assert detect_candidates(frame, threshold=255) == []

    def test_return_mask(self, rgba_factory):
        frame = rgba_factory(40, 50, [(10, 10, 6)])

        candidates, mask = detect_candidates(frame, threshold=128, return_mask=True)

        assert len(candidates) == 1
        assert mask.shape == (40, 50)
        assert validate_binary_mask(mask)
        assert np.count_nonzero(mask) == 36

    def test_min_area_passed_through(self, rgba_factory):
        frame = rgba_factory(40, 40, [(2, 2, 3), (20, 20, 10)])

        candidates = detect_candidates(frame, threshold=128, min_area=10.0)

        assert [(c.x, c.y) for c in candidates] == [(24, 24)]

    def test_pil_input(self):
        pil_image = Image.new('RGB', (40, 30), color=(0, 0, 0))
        pil_image.paste((255, 255, 255), (10, 10, 20, 20))

        candidates = detect_candidates(pil_image, threshold=100)

        assert [(c.x, c.y, c.area) for c in candidates] == [(14, 14, 81.0)]

    def test_invalid_image(self):
        with pytest.raises(InvalidImage):
            detect_candidates(None, threshold=128)

        with pytest.raises(InvalidImage):
            detect_candidates(np.zeros((0, 0, 4), dtype=np.uint8), threshold=128)


class TestDetectAndCrop:
    """Tests for detection followed by cropping"""

    def test_crop_contains_detected_region(self, rgba_factory, grid_squares):
        """Test that each crop covers all foreground pixels of its square"""
        frame = rgba_factory(80, 80, grid_squares)
        mask = frame[:, :, 0] == 255

        results = detect_and_crop(frame, threshold=128, region_size=16)

        assert len(results) == len(grid_squares)
        for candidate, region in results:
            x0, y0 = candidate.x - 3, candidate.y - 3
            window = mask[region.start_y:region.start_y + region.height,
                          region.start_x:region.start_x + region.width]

            assert np.count_nonzero(window[y0 - region.start_y:y0 - region.start_y + 8,
                                           x0 - region.start_x:x0 - region.start_x + 8]) == 64
            assert region.contains(x0, y0)
            assert region.contains(x0 + 7, y0 + 7)

    def test_crops_are_views_unless_copied(self, rgba_factory):
        frame = rgba_factory(40, 40, [(10, 10, 6)])

        [(_, view)] = detect_and_crop(frame, threshold=128)
        [(_, copied)] = detect_and_crop(frame, threshold=128, copy=True)

        assert np.shares_memory(view.pixels, frame)
        assert not np.shares_memory(copied.pixels, frame)

    def test_region_near_edge_is_clamped(self, rgba_factory):
        frame = rgba_factory(30, 30, [(0, 24, 6)])

        [(candidate, region)] = detect_and_crop(frame, threshold=128, region_size=40)

        assert (candidate.x, candidate.y) == (2, 26)
        assert region.bbox == (0, 0, 30, 30)

    def test_invalid_region_size(self, rgba_factory):
        frame = rgba_factory(30, 30, [(5, 5, 6)])

        with pytest.raises(InvalidArgument):
            detect_and_crop(frame, threshold=128, region_size=0)


class TestRunDetection:
    """Tests for config-driven detection"""

    def test_result_structure(self, rgba_factory, grid_squares):
        frame = rgba_factory(80, 80, grid_squares)

        result = run_detection(frame, DetectionConfig(threshold=128, min_area=10.0))

        assert result['summary']['count'] == 9
        assert result['summary']['largest_area'] == 49.0
        assert result['threshold_used'] == 128
        assert result['min_area_used'] == 10.0
        assert result['processing_time_ms'] >= 0
        assert result['candidates'][0] == {'x': 13, 'y': 13, 'area': 49.0}

    def test_default_config(self, rgba_factory):
        frame = rgba_factory(40, 40, [(10, 10, 6)])

        result = run_detection(frame)

        assert result['threshold_used'] == 127
        assert result['summary']['count'] == 1

    def test_no_crops_by_default(self, rgba_factory):
        frame = rgba_factory(40, 40, [(10, 10, 6)])

        assert 'crops' not in run_detection(frame)

    def test_include_crops(self, rgba_factory, grid_squares):
        """Test that crops follow the configured size and ownership"""
        frame = rgba_factory(80, 80, grid_squares)
        config = DetectionConfig(threshold=128, region_size=12, copy_crops=True)

        result = run_detection(frame, config, include_crops=True)

        assert len(result['crops']) == 9
        for region in result['crops']:
            assert (region.width, region.height) == (12, 12)
            assert region.is_view is False
            assert not np.shares_memory(region.pixels, frame)

    def test_min_area_from_config(self, rgba_factory, grid_squares):
        frame = rgba_factory(80, 80, grid_squares)

        result = run_detection(frame, DetectionConfig(min_area=50.0))

        assert result['candidates'] == []
        assert result['summary']['count'] == 0

    def test_invalid_image_propagates(self):
        with pytest.raises(InvalidImage):
            run_detection(None)


class TestBatchDetect:
    """Tests for batch detection"""

    def test_batch_detection(self, rgba_factory, grid_squares):
        frames = [
            rgba_factory(80, 80, grid_squares),
            rgba_factory(80, 80),
            rgba_factory(80, 80, grid_squares[:2]),
        ]

        results = batch_detect(frames, threshold=128)

        assert [len(r) for r in results] == [9, 0, 2]

    def test_batch_ignores_return_mask(self, rgba_factory):
        frames = [rgba_factory(40, 40, [(10, 10, 6)])]

        results = batch_detect(frames, threshold=128, return_mask=True)

        assert isinstance(results[0], list)
        assert isinstance(results[0][0], Candidate)

    def test_batch_propagates_errors(self, rgba_factory):
        with pytest.raises(InvalidImage):
            batch_detect([rgba_factory(10, 10), None], threshold=128)

"""Tests for sample persistence and mask images."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from riverterrain.config import TerrainConfig
from riverterrain.exceptions import SampleFileError
from riverterrain.persistence import load_sample, mask_to_image, save_mask_image, save_sample
from riverterrain.sampling import SampleResult, sample_terrain


@pytest.fixture
def sample(calm_config: TerrainConfig) -> SampleResult:
    return sample_terrain(calm_config)


class TestSaveLoad:
    """Tests for .npz persistence."""

    def test_save_and_load(self, tmp_path: Path, sample: SampleResult) -> None:
        """Saved rasters and config load back unchanged."""
        path = tmp_path / "sample.npz"
        save_sample(path, sample)

        loaded, metadata = load_sample(path)

        np.testing.assert_array_equal(loaded.heights, sample.heights)
        np.testing.assert_array_equal(loaded.mask, sample.mask)
        np.testing.assert_array_equal(loaded.river_margin, sample.river_margin)
        assert loaded.config == sample.config
        assert metadata["seed"] == sample.config.terrain.seed
        assert metadata["version"] == 1

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_sample(tmp_path / "missing.npz")

    def test_missing_arrays_raise(self, tmp_path: Path) -> None:
        """Files without the expected arrays are rejected."""
        path = tmp_path / "bad.npz"
        np.savez_compressed(path, heights=np.zeros((2, 2)))
        with pytest.raises(SampleFileError):
            load_sample(path)

    def test_sample_file_error_is_value_error(self) -> None:
        """SampleFileError can be caught as ValueError."""
        assert issubclass(SampleFileError, ValueError)


class TestMaskImage:
    """Tests for river mask image output."""

    def test_mask_levels(self) -> None:
        """Mask levels map to 0, 128 and 255."""
        image = mask_to_image(np.array([[0.0, 0.5, 1.0]], dtype=np.float32))
        assert image.mode == "L"
        np.testing.assert_array_equal(np.asarray(image), [[0, 128, 255]])

    def test_save_mask_image(self, tmp_path: Path, sample: SampleResult) -> None:
        """Saved PNG has the grid size and only mask levels."""
        path = tmp_path / "masks" / "river_mask.png"
        save_mask_image(path, sample.mask)

        with Image.open(path) as image:
            assert image.size == (25, 25)
            assert set(np.unique(np.asarray(image))).issubset({0, 128, 255})

"""Tests for sample validation."""

import numpy as np
import pytest

from riverterrain.config import GridConfig, TerrainConfig
from riverterrain.sampling import SampleResult, sample_terrain
from riverterrain.validation import ValidationResult, grid_matches_cell_step, validate_sample


def _blank_result(size: int = 6) -> SampleResult:
    """Level, dry sample with upward normals and no river."""
    normals = np.zeros((size, size, 3))
    normals[..., 1] = 1.0
    return SampleResult(
        heights=np.ones((size, size)),
        normals=normals,
        terrain=np.full((size, size), 2, dtype=np.uint8),
        water=np.zeros((size, size), dtype=bool),
        river=np.zeros((size, size), dtype=bool),
        river_margin=np.zeros((size, size), dtype=bool),
        mask=np.zeros((size, size), dtype=np.float32),
        config=TerrainConfig(),
    )


class TestValidationResult:
    """Tests for the result accumulator."""

    def test_error_fails(self) -> None:
        """Adding an error marks the result failed."""
        result = ValidationResult()
        result.add_error("broken")
        assert not result.passed
        assert result.errors == ["broken"]

    def test_warning_passes(self) -> None:
        """Warnings do not fail the result."""
        result = ValidationResult()
        result.add_warning("odd")
        assert result.passed


class TestValidateSample:
    """Tests for sample validation checks."""

    def test_real_sample_passes(self, calm_config: TerrainConfig) -> None:
        """A sampled window with a river passes without warnings."""
        validation = validate_sample(sample_terrain(calm_config))
        assert validation.passed, validation.errors
        assert validation.warnings == []

    def test_no_river_warns(self) -> None:
        """A window without river cells passes with a warning."""
        validation = validate_sample(_blank_result())
        assert validation.passed
        assert len(validation.warnings) == 1

    def test_non_finite_height_fails(self) -> None:
        """NaN heights are reported."""
        result = _blank_result()
        result.heights[2, 3] = np.nan
        assert not validate_sample(result).passed

    def test_bad_normals_fail(self) -> None:
        """Non-unit or downward normals are reported."""
        result = _blank_result()
        result.normals[1, 1] = [0.0, -1.0, 0.0]
        validation = validate_sample(result)
        assert any("non-positive y" in error for error in validation.errors)

    def test_unexpected_mask_value_fails(self) -> None:
        """Mask values outside {0, 0.5, 1} are reported."""
        result = _blank_result()
        result.mask[0, 0] = 0.25
        validation = validate_sample(result)
        assert any("mask values" in error for error in validation.errors)

    def test_river_margin_overlap_fails(self) -> None:
        """A cell that is both river and margin is reported."""
        result = _blank_result()
        result.river[2, 2] = True
        result.river_margin[2, 2] = True
        validation = validate_sample(result)
        assert any("both river and margin" in error for error in validation.errors)

    @pytest.mark.parametrize("cell", [(3, 3), (2, 3)])
    def test_margin_adjacency(self, cell: tuple[int, int]) -> None:
        """Margin must surround the river when grid spacing equals cell step."""
        result = _blank_result()
        result.river[3, 3] = True
        result.mask[3, 3] = 1.0
        # Only one neighbor marked: remaining neighbors are missing margins
        if cell != (3, 3):
            result.river_margin[cell] = True
        validation = validate_sample(result)
        assert any("not marked as margin" in error for error in validation.errors)

    def test_margin_check_skipped_off_cell_step(self) -> None:
        """Grids whose spacing differs from the cell step skip the adjacency check."""
        result = _blank_result()
        result.config = TerrainConfig(grid=GridConfig(spacing=3.0))
        result.river[3, 3] = True
        result.mask[3, 3] = 1.0
        assert validate_sample(result).passed


class TestGridMatchesCellStep:
    """Tests for the exact neighbor coordinate check."""

    def test_integer_grid_matches(self) -> None:
        """Integer coordinates step exactly onto their neighbors."""
        x, z = np.meshgrid(np.arange(-6.0, 6.0, 2.0), np.arange(0.0, 10.0, 2.0))
        assert grid_matches_cell_step(x, z, 2.0)

    def test_rounded_neighbor_does_not_match(self) -> None:
        """0.7 + 0.1 rounds below 0.8, so the neighbor coordinate is off."""
        x, z = np.meshgrid([0.7, 0.8], [0.0, 0.1])
        assert not grid_matches_cell_step(x, z, 0.1)

    def test_different_spacing_does_not_match(self) -> None:
        """A step other than the spacing never matches."""
        x, z = np.meshgrid(np.arange(0.0, 8.0, 2.0), np.arange(0.0, 8.0, 2.0))
        assert not grid_matches_cell_step(x, z, 1.0)

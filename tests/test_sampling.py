"""Tests for grid sampling."""

import numpy as np
import pytest

from riverterrain.config import GridConfig, TerrainConfig
from riverterrain.exceptions import InvalidGridError
from riverterrain.heightfield import HeightField
from riverterrain.sampling import make_grid, sample_stats, sample_terrain
from riverterrain.terrain_types import TerrainType


class TestMakeGrid:
    """Tests for grid coordinates."""

    def test_shape_and_coordinates(self) -> None:
        """Rows follow z, columns follow x."""
        x, z = make_grid(GridConfig(origin_x=10.0, origin_z=-5.0, width=4, height=3, spacing=2.5))
        assert x.shape == (3, 4)
        np.testing.assert_array_equal(x[0], [10.0, 12.5, 15.0, 17.5])
        np.testing.assert_array_equal(z[:, 0], [-5.0, -2.5, 0.0])

    @pytest.mark.parametrize(
        "grid",
        [
            GridConfig(width=0),
            GridConfig(height=-3),
            GridConfig(spacing=0.0),
        ],
    )
    def test_invalid_grid_raises(self, grid: GridConfig) -> None:
        """Non-positive size or spacing is rejected."""
        with pytest.raises(InvalidGridError):
            make_grid(grid)


class TestSampleTerrain:
    """Tests for raster sampling."""

    def test_output_shapes(self, calm_config: TerrainConfig) -> None:
        """All rasters share the grid shape."""
        result = sample_terrain(calm_config)
        assert result.heights.shape == (25, 25)
        assert result.normals.shape == (25, 25, 3)
        for raster in (result.terrain, result.water, result.river, result.river_margin, result.mask):
            assert raster.shape == (25, 25)
        assert result.terrain.dtype == np.uint8
        assert result.mask.dtype == np.float32

    def test_heights_match_field(self, calm_config: TerrainConfig) -> None:
        """Raster heights equal direct height field queries."""
        result = sample_terrain(calm_config)
        x, z = make_grid(calm_config.grid)
        np.testing.assert_array_equal(result.heights, HeightField(calm_config).height(x, z))

    def test_chunking_does_not_change_output(self, calm_config: TerrainConfig) -> None:
        """Chunk size and worker count do not affect the result."""
        single = sample_terrain(calm_config, chunk_rows=100)
        chunked = sample_terrain(calm_config, chunk_rows=4, workers=3)
        np.testing.assert_array_equal(single.heights, chunked.heights)
        np.testing.assert_array_equal(single.normals, chunked.normals)
        np.testing.assert_array_equal(single.mask, chunked.mask)
        np.testing.assert_array_equal(single.terrain, chunked.terrain)

    def test_river_crosses_window(self, calm_config: TerrainConfig) -> None:
        """The straight river produces river and margin rows."""
        result = sample_terrain(calm_config)
        assert np.all(result.river[12])
        assert np.any(result.river_margin)
        assert not np.any(result.river & result.river_margin)

    def test_stats(self, calm_config: TerrainConfig) -> None:
        """Type fractions sum to one."""
        stats = sample_stats(sample_terrain(calm_config))
        total = sum(stats[f"{t.value}_fraction"] for t in TerrainType)
        assert total == pytest.approx(1.0)
        assert stats["height_min"] <= stats["height_mean"] <= stats["height_max"]

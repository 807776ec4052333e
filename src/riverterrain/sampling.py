"""Raster sampling of the height field over a grid window."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import structlog
from numpy.typing import NDArray

from .classification import classify
from .config import GridConfig, TerrainConfig
from .exceptions import InvalidGridError
from .heightfield import HeightField
from .terrain_types import TerrainType

logger = structlog.get_logger()

DEFAULT_CHUNK_ROWS = 64


class SampleResult:
    """Sampled rasters for one grid window, shape (height, width)."""

    def __init__(
        self,
        heights: NDArray[np.float64],
        normals: NDArray[np.float64],
        terrain: NDArray[np.uint8],
        water: NDArray[np.bool_],
        river: NDArray[np.bool_],
        river_margin: NDArray[np.bool_],
        mask: NDArray[np.float32],
        config: TerrainConfig,
    ):
        self.heights = heights
        self.normals = normals
        self.terrain = terrain
        self.water = water
        self.river = river
        self.river_margin = river_margin
        self.mask = mask
        self.config = config

    @property
    def grid(self) -> GridConfig:
        return self.config.grid


def make_grid(grid: GridConfig) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """World coordinates of every grid sample.

    Args:
        grid: Grid window.

    Returns:
        Tuple of (x, z) arrays with shape (height, width).

    Raises:
        InvalidGridError: If the size or spacing is not positive.
    """
    if grid.width <= 0 or grid.height <= 0:
        raise InvalidGridError(
            f"Grid size must be positive, got {grid.width}x{grid.height}"
        )
    if grid.spacing <= 0:
        raise InvalidGridError(f"Grid spacing must be positive, got {grid.spacing}")

    xs = grid.origin_x + np.arange(grid.width, dtype=np.float64) * grid.spacing
    zs = grid.origin_z + np.arange(grid.height, dtype=np.float64) * grid.spacing
    x, z = np.meshgrid(xs, zs)
    return x, z


def _sample_rows(
    field: HeightField,
    x: NDArray[np.float64],
    z: NDArray[np.float64],
) -> tuple[NDArray, ...]:
    """Sample one block of rows."""
    config = field.config
    classification = classify(field, x, z, config.terrain, config.classification)
    return (
        classification.height,
        classification.normals,
        classification.terrain,
        classification.water,
        classification.river,
        classification.river_margin,
        classification.mask,
    )


def sample_terrain(
    config: TerrainConfig,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
    workers: int = 1,
) -> SampleResult:
    """Sample heights, normals and classes over the configured grid.

    Rows are processed in independent chunks; with workers > 1 the chunks
    run on a thread pool. Output does not depend on chunking or workers.

    Args:
        config: Terrain configuration, including the grid window.
        chunk_rows: Rows per chunk.
        workers: Number of worker threads.

    Returns:
        SampleResult with all rasters.
    """
    x, z = make_grid(config.grid)
    field = HeightField(config)

    chunk_rows = max(1, chunk_rows)
    starts = range(0, config.grid.height, chunk_rows)
    blocks = [(x[s : s + chunk_rows], z[s : s + chunk_rows]) for s in starts]

    logger.info(
        "sampling_terrain",
        width=config.grid.width,
        height=config.grid.height,
        spacing=config.grid.spacing,
        seed=config.terrain.seed,
        chunks=len(blocks),
        workers=workers,
    )

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            parts = list(pool.map(lambda block: _sample_rows(field, *block), blocks))
    else:
        parts = [_sample_rows(field, bx, bz) for bx, bz in blocks]

    heights, normals, terrain, water, river, margin, mask = (
        np.concatenate(layer, axis=0) for layer in zip(*parts)
    )

    result = SampleResult(
        heights=heights,
        normals=normals,
        terrain=terrain,
        water=water,
        river=river,
        river_margin=margin,
        mask=mask,
        config=config,
    )
    _log_sample_stats(result)
    return result


def sample_stats(result: SampleResult) -> dict[str, float]:
    """Summary statistics of a sampled window."""
    total = result.heights.size
    stats = {
        "height_min": float(result.heights.min()),
        "height_max": float(result.heights.max()),
        "height_mean": float(result.heights.mean()),
        "water_fraction": float(np.mean(result.water)),
        "margin_fraction": float(np.mean(result.river_margin)),
    }
    for terrain_type in TerrainType:
        count = int(np.sum(result.terrain == terrain_type.code))
        stats[f"{terrain_type.value}_fraction"] = count / total
    return stats


def _log_sample_stats(result: SampleResult) -> None:
    """Log terrain sampling statistics."""
    stats = sample_stats(result)
    logger.info("terrain_sampled", **{k: round(v, 4) for k, v in stats.items()})

"""Terrain classification: river, margin, water, mountain, flat and slope."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import ClassificationConfig, TerrainParams
from .noise import as_float_arrays
from .normals import HeightFunction, estimate_normals, slope_from_normals
from .terrain_types import MASK_MARGIN, MASK_NONE, MASK_RIVER, TerrainType

# 8-neighborhood in units of the margin cell step
NEIGHBOR_OFFSETS = np.array(
    [
        (-1.0, -1.0),
        (0.0, -1.0),
        (1.0, -1.0),
        (-1.0, 0.0),
        (1.0, 0.0),
        (-1.0, 1.0),
        (0.0, 1.0),
        (1.0, 1.0),
    ]
)


@dataclass(frozen=True)
class Classification:
    """Per-position classification output."""

    terrain: NDArray[np.uint8]
    water: NDArray[np.bool_]
    river: NDArray[np.bool_]
    river_margin: NDArray[np.bool_]
    mask: NDArray[np.float32]
    height: NDArray[np.float64]
    normals: NDArray[np.float64]
    slope: NDArray[np.float64]


def river_threshold(terrain: TerrainParams, config: ClassificationConfig) -> float:
    """Height below which a position counts as river."""
    return -terrain.river_depth * config.river_depth_fraction


def is_river(
    height: ArrayLike, terrain: TerrainParams, config: ClassificationConfig
) -> NDArray[np.bool_]:
    """River test on final heights."""
    return np.asarray(height, dtype=np.float64) < river_threshold(terrain, config)


def classify_heights(
    height: ArrayLike,
    slope: ArrayLike,
    terrain: TerrainParams,
    config: ClassificationConfig,
) -> NDArray[np.uint8]:
    """Assign terrain codes by priority: river > mountain > flat > slope.

    Args:
        height: Final terrain heights.
        slope: Slope measure (1 - normal.y).
        terrain: Terrain parameters (river depth, amplitude).
        config: Classification thresholds.

    Returns:
        Array of TerrainType codes as uint8.
    """
    height = np.asarray(height, dtype=np.float64)
    slope = np.asarray(slope, dtype=np.float64)

    return np.select(
        [
            is_river(height, terrain, config),
            height > terrain.amplitude * config.mountain_fraction,
            slope < config.flat_slope_threshold,
        ],
        [
            TerrainType.RIVER.code,
            TerrainType.MOUNTAIN.code,
            TerrainType.FLAT.code,
        ],
        default=TerrainType.SLOPE.code,
    ).astype(np.uint8)


def river_margin(
    height_fn: HeightFunction,
    x: ArrayLike,
    z: ArrayLike,
    center_is_river: ArrayLike,
    terrain: TerrainParams,
    config: ClassificationConfig,
) -> NDArray[np.bool_]:
    """Non-river positions with at least one river neighbor.

    The 8 neighbor heights are evaluated as one batched (8, ...) query.
    """
    shape, (x, z) = as_float_arrays(x, z)
    step = config.margin_cell_step
    offset_shape = (len(NEIGHBOR_OFFSETS),) + (1,) * x.ndim
    neighbor_x = x + (NEIGHBOR_OFFSETS[:, 0] * step).reshape(offset_shape)
    neighbor_z = z + (NEIGHBOR_OFFSETS[:, 1] * step).reshape(offset_shape)

    neighbor_river = is_river(height_fn(neighbor_x, neighbor_z), terrain, config)
    center = np.broadcast_to(np.asarray(center_is_river, dtype=bool), x.shape)
    return (~center & np.any(neighbor_river, axis=0)).reshape(shape)


def river_mask_values(
    river: NDArray[np.bool_], margin: NDArray[np.bool_]
) -> NDArray[np.float32]:
    """Auxiliary mask: 1.0 river, 0.5 margin, 0.0 otherwise."""
    return np.where(
        river, MASK_RIVER, np.where(margin, MASK_MARGIN, MASK_NONE)
    ).astype(np.float32)


def classify(
    height_fn: HeightFunction,
    x: ArrayLike,
    z: ArrayLike,
    terrain: TerrainParams,
    config: ClassificationConfig | None = None,
) -> Classification:
    """Classify terrain at world positions.

    Args:
        height_fn: Final height function (e.g. a HeightField).
        x: World x coordinates.
        z: World z coordinates.
        terrain: Terrain parameters.
        config: Classification thresholds (defaults if omitted).

    Returns:
        Classification with terrain codes, flags and the mask value.
    """
    config = config or ClassificationConfig()
    shape, (x, z) = as_float_arrays(x, z)

    height = np.asarray(height_fn(x, z), dtype=np.float64).reshape(x.shape)
    normals = estimate_normals(height_fn, x, z, config.normal_epsilon)
    slope = slope_from_normals(normals)

    terrain_codes = classify_heights(height, slope, terrain, config)
    river = terrain_codes == TerrainType.RIVER.code
    margin = river_margin(height_fn, x, z, river, terrain, config)

    return Classification(
        terrain=terrain_codes.reshape(shape),
        water=(height < 0.0).reshape(shape),
        river=river.reshape(shape),
        river_margin=margin.reshape(shape),
        mask=river_mask_values(river, margin).reshape(shape),
        height=height.reshape(shape),
        normals=normals.reshape(shape + (3,)),
        slope=slope.reshape(shape),
    )

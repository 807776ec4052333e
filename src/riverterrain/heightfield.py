"""Height field composition: base terrain, erosion and river carving."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import TerrainConfig
from .erosion import ErosionBlender
from .noise import as_float_arrays
from .river import RiverPath, RiverProfile
from .synthesis import TerrainSynthesizer


@dataclass(frozen=True)
class HeightSample:
    """Final height plus the intermediate layers it was built from."""

    height: NDArray[np.float64]
    base: NDArray[np.float64]
    eroded: NDArray[np.float64]
    carve: NDArray[np.float64]
    erosion_factor: NDArray[np.float64]
    river_distance: NDArray[np.float64]
    river_width: NDArray[np.float64]
    distance_along: NDArray[np.float64]


class HeightField:
    """Deterministic terrain height function of world position.

    Holds no mutable state; all queries are pure functions of position and
    the configuration given at construction.
    """

    def __init__(self, config: TerrainConfig):
        self.config = config
        self.synthesizer = TerrainSynthesizer(
            config.terrain, config.features, config.noise
        )
        self.river_path = RiverPath(
            config.river_position, config.river, config.terrain.seed
        )
        self.river_profile = RiverProfile(
            config.river, config.terrain, config.erosion
        )
        self.erosion = ErosionBlender(
            config.terrain, config.erosion, self.synthesizer
        )

    def sample(self, x: ArrayLike, z: ArrayLike) -> HeightSample:
        """Evaluate the height and every intermediate layer."""
        shape, (x, z) = as_float_arrays(x, z)
        base = self.synthesizer.height(x, z)

        along = self.river_path.distance_along(x, z)
        distance = self.river_path.distance_to_river(x, z)
        width = self.river_profile.width_at(along)
        factor = self.river_profile.erosion_factor(distance, width)

        eroded = self.erosion.apply_erosion(base, x, z, factor, along)
        # Carving goes on top of the eroded surface and is never smoothed
        carve = self.river_profile.carve(distance, width)

        return HeightSample(
            height=(eroded + carve).reshape(shape),
            base=base.reshape(shape),
            eroded=eroded.reshape(shape),
            carve=carve.reshape(shape),
            erosion_factor=factor.reshape(shape),
            river_distance=distance.reshape(shape),
            river_width=width.reshape(shape),
            distance_along=along.reshape(shape),
        )

    def height(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Final terrain height at world positions."""
        return self.sample(x, z).height

    __call__ = height


def generate_height(
    config: TerrainConfig, x: ArrayLike, z: ArrayLike
) -> NDArray[np.float64]:
    """Convenience wrapper: final height for one configuration."""
    return HeightField(config).height(x, z)

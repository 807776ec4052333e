"""Erosion blending toward a valley floor near the river."""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import ErosionParams, TerrainParams
from .noise import as_float_arrays
from .synthesis import TerrainSynthesizer

VALLEY_SLOPE = 0.001
# Valley floor samples the base terrain noise at this fraction of its frequency
VALLEY_FREQUENCY_RATIO = 0.3

# Ring of unsmoothed base samples used for local smoothing
SMOOTHING_RADIUS = 2.0
SMOOTHING_OFFSETS = np.array(
    [
        (SMOOTHING_RADIUS, 0.0),
        (0.0, SMOOTHING_RADIUS),
        (-SMOOTHING_RADIUS, 0.0),
        (0.0, -SMOOTHING_RADIUS),
    ]
)


class ErosionBlender:
    """Pulls base terrain toward a valley floor and smooths it locally."""

    def __init__(
        self,
        terrain: TerrainParams,
        erosion: ErosionParams,
        synthesizer: TerrainSynthesizer,
    ):
        self.terrain = terrain
        self.erosion = erosion
        self.synthesizer = synthesizer

    def valley_floor_height(
        self, x: ArrayLike, z: ArrayLike, distance_along: ArrayLike
    ) -> NDArray[np.float64]:
        """Target height of the valley floor: coarse noise plus a gentle slope."""
        shape, (x, z, along) = as_float_arrays(x, z, distance_along)
        scale = self.terrain.scale * VALLEY_FREQUENCY_RATIO
        coarse = self.synthesizer.base_noise(x * scale, z * scale)
        floor = coarse * self.terrain.amplitude * 0.3 + along * VALLEY_SLOPE
        return floor.reshape(shape)

    def apply_erosion(
        self,
        base: ArrayLike,
        x: ArrayLike,
        z: ArrayLike,
        factor: ArrayLike,
        distance_along: ArrayLike,
    ) -> NDArray[np.float64]:
        """Blend base height toward the valley floor.

        Points with a zero erosion factor are returned unchanged and are not
        evaluated further.

        Args:
            base: Base terrain height at each position.
            x: World x coordinates.
            z: World z coordinates.
            factor: Erosion factor in [0, 1].
            distance_along: Distance along the river baseline.

        Returns:
            Eroded heights with the broadcast shape of the inputs.
        """
        shape, (base, x, z, factor, along) = as_float_arrays(
            base, x, z, factor, distance_along
        )
        result = base.reshape(-1).copy()

        active = factor.reshape(-1) != 0.0
        if not np.any(active):
            return result.reshape(shape)

        ax = x.reshape(-1)[active]
        az = z.reshape(-1)[active]
        a_base = result[active]
        a_factor = factor.reshape(-1)[active]

        valley = self.valley_floor_height(ax, az, along.reshape(-1)[active])
        blended = a_base + (valley - a_base) * (a_factor * self.erosion.valley_flattening)

        ring = self.synthesizer.height(
            ax + SMOOTHING_OFFSETS[:, 0:1], az + SMOOTHING_OFFSETS[:, 1:2]
        )
        # Blended center plus the 4 ring samples
        neighborhood = (blended + ring.sum(axis=0)) / (len(SMOOTHING_OFFSETS) + 1)

        weight = self.erosion.smoothing * a_factor
        result[active] = blended + (neighborhood - blended) * weight
        return result.reshape(shape)

"""River centerline and cross-section profile.

The river is a straight baseline (start + direction * distance) displaced
laterally by a meander offset. Distance to the river is measured against the
centerline point found by projecting onto the straight baseline once; this
is an approximation of the true nearest point and the terrain shape depends
on it.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import ErosionParams, RiverParams, RiverPosition, TerrainParams
from .noise import as_float_arrays, fbm, value_noise

# Seed offsets for river noise layers
CHAOS_SEED_OFFSET = 600
ASYMMETRY_SEED_OFFSET = 700
WIDTH_SEED_OFFSET = 800

SECONDARY_FREQUENCY_RATIO = 1.7
CHAOS_FREQUENCY = 0.001
ASYMMETRY_PHASE_SCALE = 0.8
# Fixed z coordinate that decorrelates the asymmetry sample from the chaos sample
ASYMMETRY_COORD_OFFSET = 1000.0

WIDTH_NOISE_FREQUENCY = 0.0005
WIDTH_VARIATION = 0.3

_EPSILON = 1e-6


def normalize_direction(direction: tuple[float, float]) -> tuple[float, float]:
    """Normalize a 2D direction, mapping the zero vector to zero."""
    dx, dz = direction
    length = float(np.hypot(dx, dz))
    if length < _EPSILON:
        return 0.0, 0.0
    return dx / length, dz / length


class RiverPath:
    """Parametric meandering river centerline."""

    def __init__(self, position: RiverPosition, river: RiverParams, seed: int):
        self.start_x, self.start_z = position.start
        self.dir_x, self.dir_z = normalize_direction(position.direction)
        # Left-hand perpendicular of the heading
        self.perp_x, self.perp_z = -self.dir_z, self.dir_x
        self.river = river
        self.seed = seed

    def distance_along(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Signed distance along the straight baseline."""
        shape, (x, z) = as_float_arrays(x, z)
        along = (x - self.start_x) * self.dir_x + (z - self.start_z) * self.dir_z
        return along.reshape(shape)

    def meander_wave(self, distance_along: ArrayLike) -> NDArray[np.float64]:
        """Periodic part of the meander: primary and secondary sinusoids.

        meander_frequency is in cycles per world unit.
        """
        shape, (d,) = as_float_arrays(distance_along)
        phase = d * self.river.meander_frequency
        primary = np.sin(phase * (2.0 * np.pi))
        secondary = np.sin(phase * SECONDARY_FREQUENCY_RATIO * (2.0 * np.pi)) * 0.4
        return (primary + secondary).reshape(shape)

    def meander_offset(self, distance_along: ArrayLike) -> NDArray[np.float64]:
        """Lateral centerline offset as a function of distance along the river.

        The periodic wave plus a low-frequency fBm chaos term and a
        decorrelated asymmetry term, scaled by the meander amplitude.
        """
        shape, (d,) = as_float_arrays(distance_along)
        phase = d * self.river.meander_frequency

        chaos = fbm(d * CHAOS_FREQUENCY, 0.0, self.seed + CHAOS_SEED_OFFSET, octaves=3)
        chaos = chaos * 0.6 * 0.5

        asymmetry = (
            2.0
            * value_noise(
                phase * ASYMMETRY_PHASE_SCALE,
                ASYMMETRY_COORD_OFFSET,
                self.seed + ASYMMETRY_SEED_OFFSET,
            )
            - 1.0
        )

        total = self.meander_wave(d) + 0.3 * chaos + 0.2 * asymmetry
        return (total * self.river.meander_amplitude).reshape(shape)

    def river_center(
        self, x: ArrayLike, z: ArrayLike
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Centerline point matched to each position via baseline projection."""
        shape, (x, z) = as_float_arrays(x, z)
        along = self.distance_along(x, z)
        offset = self.meander_offset(along)
        center_x = self.start_x + self.dir_x * along + self.perp_x * offset
        center_z = self.start_z + self.dir_z * along + self.perp_z * offset
        return center_x.reshape(shape), center_z.reshape(shape)

    def distance_to_river(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Euclidean distance from each position to its centerline point."""
        shape, (x, z) = as_float_arrays(x, z)
        center_x, center_z = self.river_center(x, z)
        return np.hypot(x - center_x, z - center_z).reshape(shape)


class RiverProfile:
    """River cross-section: channel width, bank carving and erosion falloff."""

    def __init__(
        self,
        river: RiverParams,
        terrain: TerrainParams,
        erosion: ErosionParams,
    ):
        self.river = river
        self.terrain = terrain
        self.erosion = erosion

    def width_at(self, distance_along: ArrayLike) -> NDArray[np.float64]:
        """Channel width, varying slowly with distance along the river."""
        shape, (d,) = as_float_arrays(distance_along)
        variation = value_noise(
            d * WIDTH_NOISE_FREQUENCY, 0.0, self.terrain.seed + WIDTH_SEED_OFFSET
        )
        return (self.river.width * (1.0 + variation * WIDTH_VARIATION)).reshape(shape)

    def carve(self, distance: ArrayLike, width: ArrayLike) -> NDArray[np.float64]:
        """Height offset carved by the river.

        Flat bed at -river_depth inside the channel, a blended bank falloff
        reaching exactly 0 at width/2 + bank_slope_distance, and 0 beyond.

        Args:
            distance: Distance to the river centerline.
            width: Channel width at the matching centerline point.

        Returns:
            Carve offsets (<= 0).
        """
        shape, (dist, width) = as_float_arrays(distance, width)
        inner = width * 0.5
        bank = max(self.river.bank_slope_distance, 0.0)
        outer = inner + bank

        t = np.clip((dist - inner) / max(bank, _EPSILON), 0.0, 1.0)
        cubic = 1.0 - t**3
        quarter_cosine = np.cos(t * (np.pi * 0.5))
        raised_cosine = 0.5 * (1.0 + np.cos(t * np.pi))
        falloff = 0.5 * cubic + 0.3 * quarter_cosine + 0.2 * raised_cosine

        depth = self.terrain.river_depth
        bank_value = -depth * falloff
        carved = np.where(
            dist <= inner,
            -depth,
            np.where(dist >= outer, 0.0, bank_value),
        )
        return carved.reshape(shape)

    def erosion_factor(self, distance: ArrayLike, width: ArrayLike) -> NDArray[np.float64]:
        """Erosion weight: full strength in the channel, quadratic falloff outside."""
        shape, (dist, width) = as_float_arrays(distance, width)
        inner = width * 0.5
        radius = max(self.erosion.radius, 0.0)

        t = np.clip((dist - inner) / max(radius, _EPSILON), 0.0, 1.0)
        strength = self.erosion.strength
        factor = np.where(
            dist <= inner,
            strength,
            np.where(dist >= inner + radius, 0.0, strength * (1.0 - t) ** 2),
        )
        return factor.reshape(shape)

"""Base terrain synthesis: shaped fBm hills, detail layers and flat areas."""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import FeatureParams, NoiseConfig, TerrainParams
from .noise import as_float_arrays, fbm, fbm_rotated, value_noise

HILL_SEED_OFFSET = 100
DETAIL_SEED_OFFSET = 200
FLAT_SEED_OFFSET = 300

DETAIL_FREQUENCY = 0.05
FLAT_FREQUENCY = 0.002
FLAT_THRESHOLD = 0.6
FLAT_SAMPLE_COUNT = 8
# Flat regions keep this fraction of their amplitude
FLAT_AMPLITUDE = 0.3

_MIN_STEEPNESS = 1e-3


class TerrainSynthesizer:
    """Base terrain height before river erosion and carving."""

    def __init__(
        self,
        terrain: TerrainParams,
        features: FeatureParams,
        noise: NoiseConfig | None = None,
    ):
        self.terrain = terrain
        self.features = features
        self.noise = noise or NoiseConfig()
        self.seed = terrain.seed + self.noise.seed

    def flat_mask(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Plateau weight in [0, 1].

        Zero wherever the low-frequency center sample is at or below the
        threshold; elsewhere the mean of a ring of samples scaled by how far
        the center sits above the threshold.
        """
        shape, (x, z) = as_float_arrays(x, z)
        seed = self.seed + FLAT_SEED_OFFSET
        center = value_noise(x * FLAT_FREQUENCY, z * FLAT_FREQUENCY, seed)

        radius = self.features.flat_area_radius * 0.5
        angles = np.arange(FLAT_SAMPLE_COUNT) * (2.0 * np.pi / FLAT_SAMPLE_COUNT)
        ring_shape = (FLAT_SAMPLE_COUNT,) + (1,) * x.ndim
        ring_x = x + (radius * np.cos(angles)).reshape(ring_shape)
        ring_z = z + (radius * np.sin(angles)).reshape(ring_shape)
        ring = value_noise(ring_x * FLAT_FREQUENCY, ring_z * FLAT_FREQUENCY, seed)
        average = ring.mean(axis=0)

        distance_factor = 1.0 - (center - FLAT_THRESHOLD) / (1.0 - FLAT_THRESHOLD)
        mask = np.clip(
            average * distance_factor * self.features.flat_area_strength, 0.0, 1.0
        )
        return np.where(center > FLAT_THRESHOLD, mask, 0.0).reshape(shape)

    def base_noise(self, nx: ArrayLike, nz: ArrayLike) -> NDArray[np.float64]:
        """Unshaped base terrain fBm at noise-space coordinates."""
        return fbm_rotated(
            nx,
            nz,
            self.seed,
            octaves=self.noise.octaves,
            lacunarity=self.noise.lacunarity,
            persistence=self.noise.persistence,
        )

    def height(self, x: ArrayLike, z: ArrayLike) -> NDArray[np.float64]:
        """Base terrain height at world positions."""
        shape, (x, z) = as_float_arrays(x, z)
        scale = self.terrain.scale
        roughness = self.features.roughness

        base = self.base_noise(x * scale, z * scale)
        steepness = max(self.features.hill_steepness, _MIN_STEEPNESS)
        shaped = np.sign(base) * np.abs(base) ** steepness

        hills = fbm_rotated(
            x * scale * 2.0, z * scale * 2.0, self.seed + HILL_SEED_OFFSET, octaves=4
        )
        detail = fbm(
            x * DETAIL_FREQUENCY,
            z * DETAIL_FREQUENCY,
            self.seed + DETAIL_SEED_OFFSET,
            octaves=3,
        )

        enhanced = (shaped + hills * 0.3 * roughness + detail * 0.1 * roughness)
        enhanced = enhanced * self.terrain.amplitude

        mask = self.flat_mask(x, z)
        final = enhanced * (1.0 - mask) + enhanced * FLAT_AMPLITUDE * mask
        return final.reshape(shape)

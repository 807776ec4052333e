"""Noise primitives for terrain synthesis.

Provides seeded lattice value noise and fBm (fractal Brownian motion) with
optional per-octave rotation. Every function is a pure, element-wise function
of its coordinates, so a point query and the same point inside a large grid
produce identical values.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Per-octave rotation (radians) applied by rotated fBm
OCTAVE_ROTATION = 0.5

_MASK32 = np.uint64(0xFFFFFFFF)
_PRIME_X = np.uint64(0x8DA6B343)
_PRIME_Z = np.uint64(0xD8163841)
_PRIME_SEED = 0xCB1AB31F
_MIX_1 = np.uint64(0x7FEB352D)
_MIX_2 = np.uint64(0x846CA68B)


def as_float_arrays(
    *values: ArrayLike,
) -> tuple[tuple[int, ...], list[NDArray[np.float64]]]:
    """Broadcast inputs to float64 arrays with at least one dimension.

    Scalars become 1-element arrays so that point queries run through the
    same vectorized loops as grid queries and round identically. Callers
    reshape their result back to the returned broadcast shape.
    """
    arrays = np.broadcast_arrays(*(np.asarray(v, dtype=np.float64) for v in values))
    shape = arrays[0].shape
    return shape, [np.atleast_1d(a) for a in arrays]


def _hash_lattice(
    ix: NDArray[np.int64],
    iz: NDArray[np.int64],
    seed: int,
) -> NDArray[np.float64]:
    """Hash integer lattice coordinates to values in [0, 1].

    32-bit avalanche hash evaluated in uint64 so that products never wrap.
    """
    hx = (ix & 0xFFFFFFFF).astype(np.uint64)
    hz = (iz & 0xFFFFFFFF).astype(np.uint64)
    seed_term = np.uint64((seed * _PRIME_SEED) & 0xFFFFFFFF)

    h = ((hx * _PRIME_X) & _MASK32) ^ ((hz * _PRIME_Z) & _MASK32) ^ seed_term
    h = h ^ (h >> np.uint64(16))
    h = (h * _MIX_1) & _MASK32
    h = h ^ (h >> np.uint64(15))
    h = (h * _MIX_2) & _MASK32
    h = h ^ (h >> np.uint64(16))

    return h.astype(np.float64) / 4294967295.0


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic fade curve (6t^5 - 15t^4 + 10t^3)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def value_noise(x: ArrayLike, z: ArrayLike, seed: int) -> NDArray[np.float64]:
    """Sample smooth 2D value noise.

    Args:
        x: World or noise-space x coordinates.
        z: World or noise-space z coordinates.
        seed: Random seed.

    Returns:
        Noise values in range [0, 1], broadcast shape of x and z.
    """
    shape, (x, z) = as_float_arrays(x, z)

    x0 = np.floor(x)
    z0 = np.floor(z)
    u = _fade(x - x0)
    v = _fade(z - z0)

    ix = x0.astype(np.int64)
    iz = z0.astype(np.int64)

    n00 = _hash_lattice(ix, iz, seed)
    n10 = _hash_lattice(ix + 1, iz, seed)
    n01 = _hash_lattice(ix, iz + 1, seed)
    n11 = _hash_lattice(ix + 1, iz + 1, seed)

    nx0 = n00 + u * (n10 - n00)
    nx1 = n01 + u * (n11 - n01)
    return (nx0 + v * (nx1 - nx0)).reshape(shape)


def fbm(
    x: ArrayLike,
    z: ArrayLike,
    seed: int,
    octaves: int = 6,
    lacunarity: float = 2.0,
    persistence: float = 0.5,
    rotate: bool = False,
    normalize: bool = True,
) -> NDArray[np.float64]:
    """Generate fractal Brownian motion noise.

    Sums signed octaves of value noise at increasing frequencies and
    decreasing amplitudes. Octave i uses seed + i.

    Args:
        x: Sample x coordinates (already scaled to noise space).
        z: Sample z coordinates.
        seed: Random seed for the first octave.
        octaves: Number of noise layers to sum.
        lacunarity: Frequency multiplier between octaves.
        persistence: Amplitude multiplier between octaves.
        rotate: Rotate coordinates by OCTAVE_ROTATION before each octave.
        normalize: Divide by the total octave amplitude.

    Returns:
        Noise values, in range [-1, 1] when normalized.
    """
    shape, (px, pz) = as_float_arrays(x, z)
    total = np.zeros(px.shape, dtype=np.float64)

    cos_r = np.cos(OCTAVE_ROTATION)
    sin_r = np.sin(OCTAVE_ROTATION)

    amplitude = 1.0
    max_amplitude = 0.0

    for i in range(octaves):
        if rotate:
            px, pz = cos_r * px - sin_r * pz, sin_r * px + cos_r * pz

        total += amplitude * (2.0 * value_noise(px, pz, seed + i) - 1.0)
        max_amplitude += amplitude

        px = px * lacunarity
        pz = pz * lacunarity
        amplitude *= persistence

    if normalize and max_amplitude > 0.0:
        total /= max_amplitude
    return total.reshape(shape)


def fbm_rotated(
    x: ArrayLike,
    z: ArrayLike,
    seed: int,
    octaves: int = 6,
    lacunarity: float = 2.0,
    persistence: float = 0.5,
) -> NDArray[np.float64]:
    """Normalized fBm with per-octave rotation to break axis-aligned artifacts."""
    return fbm(
        x,
        z,
        seed,
        octaves=octaves,
        lacunarity=lacunarity,
        persistence=persistence,
        rotate=True,
    )

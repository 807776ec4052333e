"""Surface normals from central differences of a height function."""

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .noise import as_float_arrays

HeightFunction = Callable[[ArrayLike, ArrayLike], NDArray[np.float64]]

DEFAULT_EPSILON = 0.1

# Offsets for +x, -x, +z, -z in units of epsilon
_DIFFERENCE_OFFSETS = np.array(
    [
        (1.0, 0.0),
        (-1.0, 0.0),
        (0.0, 1.0),
        (0.0, -1.0),
    ]
)


def estimate_normals(
    height_fn: HeightFunction,
    x: ArrayLike,
    z: ArrayLike,
    epsilon: float = DEFAULT_EPSILON,
) -> NDArray[np.float64]:
    """Estimate unit surface normals (y up).

    The four offset heights are evaluated as one batched query.

    Args:
        height_fn: Height function of world (x, z).
        x: World x coordinates.
        z: World z coordinates.
        epsilon: Central difference step.

    Returns:
        Array of shape (..., 3) holding (nx, ny, nz).
    """
    shape, (x, z) = as_float_arrays(x, z)
    epsilon = max(float(epsilon), 1e-6)

    offset_shape = (len(_DIFFERENCE_OFFSETS),) + (1,) * x.ndim
    off_x = (_DIFFERENCE_OFFSETS[:, 0] * epsilon).reshape(offset_shape)
    off_z = (_DIFFERENCE_OFFSETS[:, 1] * epsilon).reshape(offset_shape)
    h_right, h_left, h_up, h_down = np.asarray(height_fn(x + off_x, z + off_z))

    span = 2.0 * epsilon
    dh_x = h_right - h_left
    dh_z = h_up - h_down

    # Cross product of tangent_z (0, dh_z, span) and tangent_x (span, dh_x, 0)
    normal = np.stack(
        [-span * dh_x, np.full(x.shape, span * span), -span * dh_z], axis=-1
    )
    length = np.linalg.norm(normal, axis=-1, keepdims=True)
    return (normal / length).reshape(shape + (3,))


def slope_from_normals(normals: NDArray[np.float64]) -> NDArray[np.float64]:
    """Slope measure 1 - normal.y (0 for level ground)."""
    return 1.0 - normals[..., 1]

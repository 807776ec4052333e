"""Post-sampling validation of rasters against terrain invariants."""

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy import ndimage

from .sampling import SampleResult, make_grid
from .terrain_types import MASK_MARGIN, MASK_NONE, MASK_RIVER

logger = structlog.get_logger()

_NORMAL_TOLERANCE = 1e-6


class ValidationResult:
    """Result of sample validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_sample(result: SampleResult) -> ValidationResult:
    """Validate sampled rasters.

    Args:
        result: Sampled rasters and their configuration.

    Returns:
        ValidationResult with any errors/warnings.
    """
    validation = ValidationResult()

    _check_finite(result, validation)
    _check_normals(result, validation)
    _check_mask_values(result, validation)
    _check_margin_exclusive(result, validation)
    _check_margin_adjacency(result, validation)

    if not np.any(result.river):
        validation.add_warning("No river cells inside the sampled window")

    if validation.passed:
        logger.info("sample_validation_passed", warnings=len(validation.warnings))
    else:
        logger.warning("sample_validation_failed", errors=len(validation.errors))
        for error in validation.errors:
            logger.error("validation_error", detail=error)

    for warning in validation.warnings:
        logger.warning("validation_warning", detail=warning)

    return validation


def _check_finite(result: SampleResult, validation: ValidationResult) -> None:
    """Heights and normals contain no NaN or Inf."""
    if not np.all(np.isfinite(result.heights)):
        validation.add_error(
            f"{int(np.sum(~np.isfinite(result.heights)))} non-finite heights"
        )
    if not np.all(np.isfinite(result.normals)):
        validation.add_error("Non-finite normals")


def _check_normals(result: SampleResult, validation: ValidationResult) -> None:
    """Normals are unit length and point up."""
    lengths = np.linalg.norm(result.normals, axis=-1)
    if np.any(np.abs(lengths - 1.0) > _NORMAL_TOLERANCE):
        validation.add_error("Normals are not unit length")
    if np.any(result.normals[..., 1] <= 0.0):
        validation.add_error("Normals with non-positive y component")


def _check_mask_values(result: SampleResult, validation: ValidationResult) -> None:
    """Mask only holds the river, margin and empty values."""
    allowed = np.array([MASK_NONE, MASK_MARGIN, MASK_RIVER], dtype=np.float32)
    unexpected = ~np.isin(result.mask, allowed)
    if np.any(unexpected):
        validation.add_error(f"{int(np.sum(unexpected))} mask values outside {{0, 0.5, 1}}")


def _check_margin_exclusive(result: SampleResult, validation: ValidationResult) -> None:
    """No cell is both river and river margin."""
    overlap = result.river & result.river_margin
    if np.any(overlap):
        validation.add_error(f"{int(np.sum(overlap))} cells are both river and margin")


def grid_matches_cell_step(
    x: NDArray[np.float64], z: NDArray[np.float64], step: float
) -> bool:
    """True when a sample shifted by `step` lands exactly on its raster neighbor."""
    return (
        np.array_equal(x[:, :-1] + step, x[:, 1:])
        and np.array_equal(x[:, 1:] - step, x[:, :-1])
        and np.array_equal(z[:-1, :] + step, z[1:, :])
        and np.array_equal(z[1:, :] - step, z[:-1, :])
    )


def _check_margin_adjacency(result: SampleResult, validation: ValidationResult) -> None:
    """Interior margin cells touch a river cell of the raster.

    Skipped unless the raster neighbors sit exactly on the coordinates used
    for margin classification.
    """
    x, z = make_grid(result.grid)
    if not grid_matches_cell_step(x, z, result.config.classification.margin_cell_step):
        logger.debug("margin_adjacency_skipped", spacing=result.grid.spacing)
        return

    near_river = ndimage.binary_dilation(
        result.river, structure=np.ones((3, 3), dtype=bool)
    )
    interior = np.zeros_like(result.river)
    interior[1:-1, 1:-1] = True

    detached = result.river_margin & interior & ~near_river
    if np.any(detached):
        validation.add_error(
            f"{int(np.sum(detached))} margin cells have no neighboring river cell"
        )

    missing = ~result.river & ~result.river_margin & near_river & interior
    if np.any(missing):
        validation.add_error(
            f"{int(np.sum(missing))} cells next to the river are not marked as margin"
        )

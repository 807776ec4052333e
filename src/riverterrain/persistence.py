"""Sample persistence: save and load sampled rasters and the river mask image."""

import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import structlog
from numpy.typing import NDArray
from PIL import Image

from .config import TerrainConfig
from .exceptions import SampleFileError
from .sampling import SampleResult

logger = structlog.get_logger()

FORMAT_VERSION = 1

_ARRAY_NAMES = (
    "heights",
    "normals",
    "terrain",
    "water",
    "river",
    "river_margin",
    "mask",
)


def save_sample(path: Path, result: SampleResult) -> None:
    """Save sampled rasters to disk.

    Uses numpy's compressed .npz format; the generating configuration is
    stored as JSON metadata so the sample can be reproduced.

    Args:
        path: Output path (should end with .npz).
        result: Sampled rasters.
    """
    metadata = {
        "version": FORMAT_VERSION,
        "seed": result.config.terrain.seed,
        "width": result.grid.width,
        "height": result.grid.height,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "config": result.config.model_dump(mode="json"),
    }

    np.savez_compressed(
        path,
        **{name: getattr(result, name) for name in _ARRAY_NAMES},
        metadata=json.dumps(metadata).encode("utf-8"),
    )

    file_size = path.stat().st_size / (1024 * 1024)
    logger.info("sample_saved", path=str(path), size_mb=round(file_size, 2))


def load_sample(path: Path) -> tuple[SampleResult, dict]:
    """Load sampled rasters from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (SampleResult, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        SampleFileError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {path}")

    with np.load(path) as data:
        missing = [name for name in (*_ARRAY_NAMES, "metadata") if name not in data]
        if missing:
            raise SampleFileError(
                f"Invalid sample file {path}: missing {', '.join(missing)}"
            )
        arrays = {name: data[name] for name in _ARRAY_NAMES}
        metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))

    if "config" not in metadata:
        raise SampleFileError(f"Invalid sample file {path}: metadata has no config")
    config = TerrainConfig.model_validate(metadata["config"])

    logger.info(
        "sample_loaded",
        path=str(path),
        width=arrays["heights"].shape[1],
        height=arrays["heights"].shape[0],
    )
    return SampleResult(config=config, **arrays), metadata


def mask_to_image(mask: NDArray[np.float32]) -> Image.Image:
    """Convert a river mask (0, 0.5, 1) to an 8-bit grayscale image."""
    pixels = np.round(np.clip(mask, 0.0, 1.0) * 255.0).astype(np.uint8)
    return Image.fromarray(pixels)


def save_mask_image(path: Path, mask: NDArray[np.float32]) -> None:
    """Save the river mask as a single-channel PNG.

    Rows follow increasing world z, columns increasing world x.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mask_to_image(mask).save(path)
    logger.info("mask_image_saved", path=str(path), size=list(mask.shape[::-1]))

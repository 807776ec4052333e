"""Procedural river terrain synthesis.

This package implements a deterministic height field for terrain cut by a
single meandering river: fractal noise hills, river carving and erosion,
surface normals and terrain classification, plus grid sampling, validation
and persistence around that core.
"""

from .classification import Classification, classify
from .config import (
    ClassificationConfig,
    ErosionParams,
    FeatureParams,
    GridConfig,
    NoiseConfig,
    RiverParams,
    RiverPosition,
    TerrainConfig,
    TerrainParams,
    load_config,
)
from .heightfield import HeightField, HeightSample, generate_height
from .normals import estimate_normals
from .persistence import load_sample, save_mask_image, save_sample
from .sampling import SampleResult, sample_terrain
from .terrain_types import TerrainType
from .validation import ValidationResult, validate_sample

__all__ = [
    "Classification",
    "ClassificationConfig",
    "ErosionParams",
    "FeatureParams",
    "GridConfig",
    "HeightField",
    "HeightSample",
    "NoiseConfig",
    "RiverParams",
    "RiverPosition",
    "SampleResult",
    "TerrainConfig",
    "TerrainParams",
    "TerrainType",
    "ValidationResult",
    "classify",
    "estimate_normals",
    "generate_height",
    "load_config",
    "load_sample",
    "sample_terrain",
    "save_mask_image",
    "save_sample",
    "validate_sample",
]

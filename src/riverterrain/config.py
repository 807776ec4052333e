"""Terrain synthesis configuration models and TOML loading."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field


class TerrainParams(BaseModel, frozen=True):
    """Global terrain shape parameters."""

    scale: float = Field(default=0.005, description="World-to-noise frequency")
    amplitude: float = Field(default=50.0, description="Peak terrain height")
    river_depth: float = Field(default=8.0, description="Depth of the river bed")
    seed: int = Field(default=42, description="Random seed for reproducibility")


class RiverParams(BaseModel, frozen=True):
    """River channel and meander parameters."""

    width: float = Field(default=20.0, description="Base river width")
    bank_slope_distance: float = Field(
        default=80.0, description="Horizontal extent of the bank slope"
    )
    meander_frequency: float = Field(
        default=0.008, description="Meander oscillations per world unit"
    )
    meander_amplitude: float = Field(
        default=40.0, description="Lateral meander offset scale"
    )


class ErosionParams(BaseModel, frozen=True):
    """Valley erosion parameters."""

    strength: float = Field(default=0.8, description="Erosion factor inside the channel")
    radius: float = Field(default=120.0, description="Falloff distance beyond the channel")
    valley_flattening: float = Field(
        default=0.7, description="Pull toward the valley floor height"
    )
    smoothing: float = Field(default=0.6, description="Local smoothing weight")


class FeatureParams(BaseModel, frozen=True):
    """Hill shaping and flat-area (plateau) parameters."""

    flat_area_radius: float = Field(default=100.0, description="Flat-area sampling radius")
    flat_area_strength: float = Field(default=0.8, description="Flat-area mask weight")
    hill_steepness: float = Field(default=1.2, description="Exponent applied to base noise")
    roughness: float = Field(default=0.5, description="Weight of hill and fine detail")


class RiverPosition(BaseModel, frozen=True):
    """River baseline origin and heading in world space (x, z)."""

    start: tuple[float, float] = (-256.0, 0.0)
    direction: tuple[float, float] = (1.0, 0.1)


class NoiseConfig(BaseModel, frozen=True):
    """Base terrain fBm parameters."""

    octaves: int = Field(default=6, description="Number of octaves for fBm")
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    persistence: float = Field(default=0.5, description="Amplitude multiplier per octave")
    seed: int = Field(default=0, description="Offset added to the terrain seed")


class ClassificationConfig(BaseModel, frozen=True):
    """Terrain classification thresholds."""

    river_depth_fraction: float = Field(
        default=0.5, description="Fraction of river depth below which a cell is river"
    )
    mountain_fraction: float = Field(
        default=0.7, description="Fraction of amplitude above which a cell is mountain"
    )
    flat_slope_threshold: float = Field(
        default=0.1, description="Slope (1 - normal.y) below which a cell is flat"
    )
    margin_cell_step: float = Field(
        default=2.0, description="Neighbor offset for river margin detection"
    )
    normal_epsilon: float = Field(
        default=0.1, description="Central difference step for normals"
    )


class GridConfig(BaseModel, frozen=True):
    """Raster window used for sampling and mask output."""

    origin_x: float = Field(default=-256.0, description="World x of the first column")
    origin_z: float = Field(default=-256.0, description="World z of the first row")
    width: int = Field(default=256, description="Number of columns")
    height: int = Field(default=256, description="Number of rows")
    spacing: float = Field(default=2.0, description="World units between samples")


class TerrainConfig(BaseModel, frozen=True):
    """Complete terrain synthesis configuration."""

    terrain: TerrainParams = Field(default_factory=TerrainParams)
    river: RiverParams = Field(default_factory=RiverParams)
    erosion: ErosionParams = Field(default_factory=ErosionParams)
    features: FeatureParams = Field(default_factory=FeatureParams)
    river_position: RiverPosition = Field(default_factory=RiverPosition)
    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    grid: GridConfig = Field(default_factory=GridConfig)

    def with_seed(self, seed: int) -> "TerrainConfig":
        """Return a copy with a different terrain seed."""
        terrain = self.terrain.model_copy(update={"seed": seed})
        return self.model_copy(update={"terrain": terrain})


def load_config(config_path: Path) -> TerrainConfig:
    """Load terrain configuration from a TOML file.

    Missing tables and keys fall back to their defaults.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values have the wrong type.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return TerrainConfig.model_validate(data)

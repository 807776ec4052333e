"""Discrete terrain categories and their mask values."""

from enum import Enum


class TerrainType(str, Enum):
    """Terrain categories in classification priority order."""

    RIVER = "river"
    MOUNTAIN = "mountain"
    FLAT = "flat"
    SLOPE = "slope"

    @property
    def code(self) -> int:
        """Compact uint8 code used in raster output."""
        return _TYPE_CODES[self]


_TYPE_CODES = {
    TerrainType.RIVER: 0,
    TerrainType.MOUNTAIN: 1,
    TerrainType.FLAT: 2,
    TerrainType.SLOPE: 3,
}


def terrain_type_from_code(value: int) -> TerrainType:
    """Convert a uint8 code back to TerrainType (unknown codes are SLOPE)."""
    for terrain_type, code in _TYPE_CODES.items():
        if code == value:
            return terrain_type
    return TerrainType.SLOPE


# Auxiliary single-channel mask values
MASK_RIVER = 1.0
MASK_MARGIN = 0.5
MASK_NONE = 0.0

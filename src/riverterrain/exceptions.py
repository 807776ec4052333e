"""Custom exceptions for terrain sampling and persistence."""


class TerrainError(Exception):
    """Base exception for terrain errors."""

    pass


class InvalidGridError(TerrainError):
    """Raised when a sampling grid has non-positive size or spacing."""

    pass


class SampleFileError(TerrainError, ValueError):
    """Raised when a saved sample file is missing required arrays."""

    pass

"""Core data model: raster frames and categorical types."""

from .frame import RasterFrame
from .types import (
    AnalysisType,
    CameraMovementType,
    LightingType,
    LineType,
    MotionLevel,
    SceneType,
    SettingType,
    ShotType,
    TimeOfDay,
)

__all__ = [
    "RasterFrame",
    "AnalysisType",
    "CameraMovementType",
    "LightingType",
    "LineType",
    "MotionLevel",
    "SceneType",
    "SettingType",
    "ShotType",
    "TimeOfDay",
]

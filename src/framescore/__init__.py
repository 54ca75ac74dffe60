"""FrameScore - single-frame composition, quality, scene and engagement analysis."""
__version__ = "0.1.0"

from .config import AnalyzerConfig
from .core import (
    AnalysisType,
    CameraMovementType,
    LightingType,
    LineType,
    MotionLevel,
    RasterFrame,
    SceneType,
    SettingType,
    ShotType,
    TimeOfDay,
)
from .exceptions import (
    AnalysisError,
    ConfigurationError,
    FramescoreError,
    ImageLoadError,
    InvalidFrameError,
    is_frame_error,
)
from .analysis import (
    CompositionAnalyzer,
    CompositionResult,
    ComprehensiveAnalysis,
    EngagementAnalysis,
    EngagementCalculator,
    FrameAnalyzer,
    SceneClassification,
    SceneClassifier,
    TechnicalQualityAnalyzer,
    TechnicalQualityResult,
    analyze_composition,
    analyze_frame,
    analyze_technical_quality,
    calculate_engagement,
    classify_scene,
    create_composition_analyzer,
    create_engagement_calculator,
    create_frame_analyzer,
    create_scene_classifier,
    create_technical_analyzer,
)
from .utils.logging import (
    FramescoreLogger,
    LogConfig,
    configure_from_cli,
    configure_logging,
    get_logger,
    set_level,
)

__all__ = [
    "__version__",
    "AnalyzerConfig",
    # Frame model
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
    # Exceptions
    "FramescoreError",
    "InvalidFrameError",
    "ConfigurationError",
    "AnalysisError",
    "ImageLoadError",
    "is_frame_error",
    # Analyzers
    "CompositionAnalyzer",
    "CompositionResult",
    "ComprehensiveAnalysis",
    "EngagementAnalysis",
    "EngagementCalculator",
    "FrameAnalyzer",
    "SceneClassification",
    "SceneClassifier",
    "TechnicalQualityAnalyzer",
    "TechnicalQualityResult",
    "analyze_composition",
    "analyze_frame",
    "analyze_technical_quality",
    "calculate_engagement",
    "classify_scene",
    "create_composition_analyzer",
    "create_engagement_calculator",
    "create_frame_analyzer",
    "create_scene_classifier",
    "create_technical_analyzer",
    # Logging
    "FramescoreLogger",
    "LogConfig",
    "configure_from_cli",
    "configure_logging",
    "get_logger",
    "set_level",
]

"""Frame analyzers.

- ``pixels``: shared numeric primitives
- ``composition``: layout and aesthetics
- ``technical``: capture quality
- ``scene``: scene, shot and motion classification
- ``engagement``: weighted engagement aggregation
- ``frame_analyzer``: concurrent orchestration of all four
"""

from .composition import (
    CompositionAnalyzer,
    CompositionResult,
    analyze_composition,
    create_composition_analyzer,
)
from .engagement import (
    EngagementAnalysis,
    EngagementCalculator,
    calculate_engagement,
    create_engagement_calculator,
)
from .frame_analyzer import (
    ComprehensiveAnalysis,
    FrameAnalyzer,
    analyze_frame,
    create_frame_analyzer,
)
from .scene import (
    SceneClassification,
    SceneClassifier,
    classify_scene,
    create_scene_classifier,
)
from .technical import (
    TechnicalQualityAnalyzer,
    TechnicalQualityResult,
    analyze_technical_quality,
    create_technical_analyzer,
)

__all__ = [
    "CompositionAnalyzer",
    "CompositionResult",
    "analyze_composition",
    "create_composition_analyzer",
    "EngagementAnalysis",
    "EngagementCalculator",
    "calculate_engagement",
    "create_engagement_calculator",
    "ComprehensiveAnalysis",
    "FrameAnalyzer",
    "analyze_frame",
    "create_frame_analyzer",
    "SceneClassification",
    "SceneClassifier",
    "classify_scene",
    "create_scene_classifier",
    "TechnicalQualityAnalyzer",
    "TechnicalQualityResult",
    "analyze_technical_quality",
    "create_technical_analyzer",
]

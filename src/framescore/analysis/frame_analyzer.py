"""Frame Analyzer - runs every analyzer over one frame.

Composition, technical and scene analysis share no state and have no
data dependency on each other, so they run concurrently in a thread
pool. Engagement aggregation waits for all three.

Example:
    >>> analyzer = FrameAnalyzer()
    >>> analysis = analyzer.analyze(frame)
    >>> print(analysis.engagement.overall_engagement_score)
    >>> payload = analysis.to_json()
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from ..config import AnalyzerConfig
from ..core.frame import RasterFrame
from ..core.types import AnalysisType
from ..exceptions import AnalysisError, FramescoreError
from ..utils.logging import get_logger
from .composition import CompositionAnalyzer, CompositionResult
from .engagement import EngagementAnalysis, EngagementCalculator
from .scene import SceneClassification, SceneClassifier
from .technical import TechnicalQualityAnalyzer, TechnicalQualityResult

logger = get_logger("frame_analyzer")


@dataclass
class ComprehensiveAnalysis:
    """All four analyses of one frame plus its content hash."""
    content_hash: str
    width: int
    height: int
    composition: CompositionResult
    technical: TechnicalQualityResult
    scene: SceneClassification
    engagement: EngagementAnalysis

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "content_hash": self.content_hash,
            "width": self.width,
            "height": self.height,
            "composition": self.composition.to_dict(),
            "technical_quality": self.technical.to_dict(),
            "scene_classification": self.scene.to_dict(),
            "engagement": self.engagement.to_dict(),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to JSON with sorted keys for stable output."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComprehensiveAnalysis":
        """Create from dictionary."""
        return cls(
            content_hash=data["content_hash"],
            width=data["width"],
            height=data["height"],
            composition=CompositionResult.from_dict(data["composition"]),
            technical=TechnicalQualityResult.from_dict(data["technical_quality"]),
            scene=SceneClassification.from_dict(data["scene_classification"]),
            engagement=EngagementAnalysis.from_dict(data["engagement"]),
        )


AnalysisResult = Union[
    CompositionResult, TechnicalQualityResult, SceneClassification, EngagementAnalysis
]


class FrameAnalyzer:
    """Orchestrates the four analyzers for single frames.

    The analyzer holds only configuration and stateless analyzer objects,
    so one instance may serve concurrent callers.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None) -> None:
        self.config = config or AnalyzerConfig()
        self.composition_analyzer = CompositionAnalyzer()
        self.technical_analyzer = TechnicalQualityAnalyzer()
        self.scene_classifier = SceneClassifier()
        self.engagement_calculator = EngagementCalculator(
            composition_analyzer=self.composition_analyzer,
            technical_analyzer=self.technical_analyzer,
            scene_classifier=self.scene_classifier,
        )

    def _stages(self) -> Dict[AnalysisType, Callable[[RasterFrame], Any]]:
        return {
            AnalysisType.COMPOSITION: self.composition_analyzer.analyze,
            AnalysisType.TECHNICAL: self.technical_analyzer.analyze,
            AnalysisType.SCENE: self.scene_classifier.analyze,
        }

    def analyze(self, frame: RasterFrame) -> ComprehensiveAnalysis:
        """Run all analyses on a frame.

        Args:
            frame: Validated RGBA raster

        Returns:
            ComprehensiveAnalysis with all four results

        Raises:
            AnalysisError: If any analyzer fails; no partial result is returned
        """
        start = time.perf_counter()
        logger.processing_start("frame analysis", width=frame.width, height=frame.height)

        if self.config.parallel and self.config.max_workers > 1:
            results = self._run_parallel(frame)
        else:
            results = self._run_sequential(frame)

        engagement = self._run_stage(
            AnalysisType.ENGAGEMENT,
            lambda f: self.engagement_calculator.calculate(
                f,
                results[AnalysisType.COMPOSITION],
                results[AnalysisType.TECHNICAL],
                results[AnalysisType.SCENE],
            ),
            frame,
        )

        analysis = ComprehensiveAnalysis(
            content_hash=frame.content_hash(),
            width=frame.width,
            height=frame.height,
            composition=results[AnalysisType.COMPOSITION],
            technical=results[AnalysisType.TECHNICAL],
            scene=results[AnalysisType.SCENE],
            engagement=engagement,
        )

        logger.processing_complete(
            "frame analysis",
            duration_seconds=time.perf_counter() - start,
            engagement=round(engagement.overall_engagement_score, 2),
        )
        return analysis

    def analyze_type(
        self,
        frame: RasterFrame,
        analysis_type: Union[AnalysisType, str],
    ) -> AnalysisResult:
        """Run a single analysis family.

        Engagement needs the other three, so it runs the full pipeline.
        """
        analysis_type = AnalysisType(analysis_type)
        if analysis_type == AnalysisType.ENGAGEMENT:
            return self.analyze(frame).engagement
        return self._run_stage(analysis_type, self._stages()[analysis_type], frame)

    def _run_sequential(self, frame: RasterFrame) -> Dict[AnalysisType, Any]:
        return {
            analysis_type: self._run_stage(analysis_type, stage, frame)
            for analysis_type, stage in self._stages().items()
        }

    def _run_parallel(self, frame: RasterFrame) -> Dict[AnalysisType, Any]:
        results: Dict[AnalysisType, Any] = {}
        workers = min(self.config.max_workers, len(self._stages()))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_type = {
                executor.submit(self._run_stage, analysis_type, stage, frame): analysis_type
                for analysis_type, stage in self._stages().items()
            }
            for future in as_completed(future_to_type):
                # Re-raises the stage's AnalysisError; the pool drains on exit
                results[future_to_type[future]] = future.result()

        return results

    def _run_stage(
        self,
        analysis_type: AnalysisType,
        stage: Callable[[RasterFrame], Any],
        frame: RasterFrame,
    ) -> Any:
        start = time.perf_counter()
        try:
            result = stage(frame)
        except FramescoreError:
            raise
        except Exception as e:
            logger.error(
                f"{analysis_type.value} analysis failed",
                analysis_type=analysis_type.value,
                error_type=type(e).__name__,
            )
            raise AnalysisError(
                f"{analysis_type.value} analysis failed: {e}",
                analysis_type=analysis_type.value,
                stage=getattr(stage, "__name__", None),
                cause=e,
            ) from e

        logger.metric(
            f"{analysis_type.value}_seconds",
            round(time.perf_counter() - start, 4),
            unit="s",
        )
        return result


# =============================================================================
# Factory and convenience functions
# =============================================================================

def create_frame_analyzer(
    parallel: bool = True,
    max_workers: int = 3,
) -> FrameAnalyzer:
    """Create a frame analyzer.

    Args:
        parallel: Run the independent analyzers concurrently
        max_workers: Thread pool size when parallel
    """
    return FrameAnalyzer(AnalyzerConfig(parallel=parallel, max_workers=max_workers))


def analyze_frame(frame: RasterFrame, config: Optional[AnalyzerConfig] = None) -> ComprehensiveAnalysis:
    """Run every analysis on a frame."""
    return FrameAnalyzer(config).analyze(frame)

"""Closed categorical types shared by the analyzers."""

from enum import Enum


class AnalysisType(str, Enum):
    """Analysis families, also used as cache-key prefixes."""
    COMPOSITION = "composition"
    TECHNICAL = "technical"
    SCENE = "scene"
    ENGAGEMENT = "engagement"


class SceneType(str, Enum):
    """Narrative or visual category of a frame."""
    ESTABLISHING_SHOT = "establishing_shot"
    WIDE_SHOT = "wide_shot"
    MEDIUM_SHOT = "medium_shot"
    CLOSE_UP = "close_up"
    EXTREME_CLOSE_UP = "extreme_close_up"
    ACTION_SCENE = "action_scene"
    DIALOGUE_SCENE = "dialogue_scene"
    TRANSITION = "transition"
    TITLE_CARD = "title_card"
    MONTAGE = "montage"
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    CROWD_SCENE = "crowd_scene"
    INTERIOR = "interior"
    EXTERIOR = "exterior"


class ShotType(str, Enum):
    """Framing distance of a shot."""
    EXTREME_WIDE_SHOT = "extreme_wide_shot"
    WIDE_SHOT = "wide_shot"
    MEDIUM_WIDE_SHOT = "medium_wide_shot"
    MEDIUM_SHOT = "medium_shot"
    MEDIUM_CLOSE_UP = "medium_close_up"
    CLOSE_UP = "close_up"
    EXTREME_CLOSE_UP = "extreme_close_up"
    CUTAWAY = "cutaway"
    INSERT = "insert"


class MotionLevel(str, Enum):
    """Amount of apparent movement, ordered from least to most."""
    STATIC = "static"
    LOW_MOTION = "low_motion"
    MEDIUM_MOTION = "medium_motion"
    HIGH_MOTION = "high_motion"
    EXTREME_MOTION = "extreme_motion"


class LightingType(str, Enum):
    NATURAL = "natural"
    ARTIFICIAL = "artificial"
    MIXED = "mixed"
    LOW_LIGHT = "low_light"


class SettingType(str, Enum):
    INDOOR = "indoor"
    OUTDOOR = "outdoor"
    STUDIO = "studio"
    UNKNOWN = "unknown"


class TimeOfDay(str, Enum):
    MORNING = "morning"
    DAY = "day"
    EVENING = "evening"
    NIGHT = "night"
    UNKNOWN = "unknown"


class CameraMovementType(str, Enum):
    PAN = "pan"
    TILT = "tilt"
    ZOOM = "zoom"
    DOLLY = "dolly"
    SHAKE = "shake"


class LineType(str, Enum):
    """Orientation tag of a dominant line."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"

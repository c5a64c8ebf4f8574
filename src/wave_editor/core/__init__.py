"""Qt-free editing and playback core."""

from .curve import CurveStore, Insertion
from .defaults import build_default_points
from .editor import WaveformEditor
from .geometry import Position
from .gestures import GestureManager, GestureMode, Modifiers
from .history import HistoryManager, HistorySnapshot, SessionStore
from .normalize import NormalizedCurve, NormalizedMetadata, NormalizedSharp, NormalizedSmooth, export_normalized
from .playback import PhaseClock, PlaybackSession, PreviewScroller, SweepTrace, monitor_baseline
from .points import SHARP, SMOOTH, AnchorPoint
from .respiratory import CompanionTraces, LoopTrail
from .sampler import sample, sample_many
from .selection import SelectionSnapshot, SelectionState
from .view import ViewTransform

__all__ = [
    "AnchorPoint",
    "CompanionTraces",
    "CurveStore",
    "GestureManager",
    "GestureMode",
    "HistoryManager",
    "HistorySnapshot",
    "Insertion",
    "LoopTrail",
    "Modifiers",
    "NormalizedCurve",
    "NormalizedMetadata",
    "NormalizedSharp",
    "NormalizedSmooth",
    "PhaseClock",
    "PlaybackSession",
    "Position",
    "PreviewScroller",
    "SHARP",
    "SMOOTH",
    "SelectionSnapshot",
    "SelectionState",
    "SessionStore",
    "SweepTrace",
    "ViewTransform",
    "WaveformEditor",
    "build_default_points",
    "export_normalized",
    "monitor_baseline",
    "sample",
    "sample_many",
]

"""Canvas components for curve editing, preview and live playback."""

from .curve_canvas import CurveCanvas
from .monitor_widget import MonitorWidget, PlaybackController
from .painter_surface import PainterPathSurface
from .preview_controller import PreviewController

__all__ = ["CurveCanvas", "MonitorWidget", "PainterPathSurface", "PlaybackController", "PreviewController"]

"""
Configuration models and loader for the editor.

Every tunable constant of the editor lives here so that a YAML file can
override it; omitted sections fall back to the defaults below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import yaml
from pydantic import BaseModel, Field, conint, confloat, model_validator


PositiveFloat = confloat(gt=0)
NonNegativeFloat = confloat(ge=0)


class CanvasConfig(BaseModel):
    """Logical size of the authoring canvas in author-space units."""

    width: conint(gt=0) = Field(default=1000, description="Canvas width")
    height: conint(gt=0) = Field(default=400, description="Canvas height")

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def baseline(self) -> float:
        return self.height / 2.0


class ZoomConfig(BaseModel):
    min_zoom: PositiveFloat = Field(default=0.1, description="Lower zoom bound")
    max_zoom: PositiveFloat = Field(default=10.0, description="Upper zoom bound")
    wheel_in: PositiveFloat = Field(default=1.1, description="Zoom factor for a wheel step away from the user")
    wheel_out: PositiveFloat = Field(default=0.9, description="Zoom factor for a wheel step toward the user")

    @model_validator(mode="after")
    def _check_bounds(self) -> "ZoomConfig":
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        return self


class InteractionConfig(BaseModel):
    hit_radius_px: PositiveFloat = Field(
        default=5.0, description="Screen-space radius used to hit-test anchors and handles"
    )
    scale_sensitivity_px: PositiveFloat = Field(
        default=100.0, description="Screen pixels of drag that change the scale factor by 1.0"
    )


class PlacementConfig(BaseModel):
    spacing: PositiveFloat = Field(default=100.0, description="Distance between a new point and its neighbour")
    margin: NonNegativeFloat = Field(default=50.0, description="Distance kept free at the canvas edges")


class HistoryConfig(BaseModel):
    capacity: conint(gt=1) = Field(default=50, description="Maximum number of snapshots kept")


class PlaybackConfig(BaseModel):
    cycles_per_minute: PositiveFloat = Field(default=12.0, description="Waveform cycles per minute")
    gain: float = Field(default=840.0, description="Scalar applied to normalized samples for display")
    sweep_width: conint(gt=1) = Field(default=600, description="Samples kept in the sweep trace")
    default_baseline_ratio: confloat(ge=0, le=1) = Field(
        default=0.67, description="Monitor baseline when a curve carries no provenance"
    )
    loop_trail_points: conint(gt=1) = Field(default=500, description="Points kept in the P-V loop trail")
    tick_interval_ms: conint(gt=0) = Field(default=16, description="Scheduler period")


class PreviewConfig(BaseModel):
    scroll_step: PositiveFloat = Field(default=2.0, description="Pixels scrolled per preview tick")
    tick_interval_ms: conint(gt=0) = Field(default=16, description="Scheduler period")


class EditorConfig(BaseModel):
    """Top-level configuration object for an editing session."""

    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    zoom: ZoomConfig = Field(default_factory=ZoomConfig)
    interaction: InteractionConfig = Field(default_factory=InteractionConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)


def load_editor_config(path: Union[str, Path]) -> EditorConfig:
    """
    Load and validate an editor configuration from a YAML file.

    Parameters
    ----------
    path:
        Path to the YAML configuration file.

    Returns
    -------
    EditorConfig
        Parsed configuration; sections missing from the file keep their defaults.
    """

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    return EditorConfig.model_validate(raw_data)

"""
Pydantic models for the two on-disk formats.

* The author-space file (``save_wave`` / ``load_wave``) keeps every attribute
  of every point.
* The normalized playback file is what a monitor consumes; its points are a
  tagged union on ``type``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .core.geometry import Position
from .core.normalize import (
    NormalizedCurve,
    NormalizedMetadata,
    NormalizedSharp,
    NormalizedSmooth,
)
from .core.points import DEFAULT_POINT_COLOR, SMOOTH, AnchorPoint, sort_by_x


class HandleModel(BaseModel):
    x: float
    y: float


# ---------------------------------------------------------------------------
# Author-space file
# ---------------------------------------------------------------------------


class AuthoredPointModel(BaseModel):
    """One authored anchor point as stored on disk."""

    x: float
    y: float
    name: str = Field(..., min_length=1, description="Unique point name")
    color: str = Field(default=DEFAULT_POINT_COLOR)
    type: Literal["smooth", "sharp"] = Field(default=SMOOTH)
    starred: bool = Field(default=False)
    cp1: Optional[HandleModel] = Field(default=None, description="Incoming control handle")
    cp2: Optional[HandleModel] = Field(default=None, description="Outgoing control handle")

    @model_validator(mode="after")
    def _smooth_needs_handles(self) -> "AuthoredPointModel":
        if self.type == SMOOTH and (self.cp1 is None or self.cp2 is None):
            raise ValueError(f"Smooth point {self.name!r} requires cp1 and cp2")
        return self

    def to_point(self) -> AnchorPoint:
        return AnchorPoint(
            name=self.name,
            x=self.x,
            y=self.y,
            type=self.type,
            color=self.color,
            cp1=Position(self.cp1.x, self.cp1.y) if self.cp1 else None,
            cp2=Position(self.cp2.x, self.cp2.y) if self.cp2 else None,
            starred=self.starred,
        )


class AuthoredWave(BaseModel):
    points: List[AuthoredPointModel] = Field(..., min_length=2)

    @field_validator("points")
    @classmethod
    def _unique_names(cls, value: List[AuthoredPointModel]) -> List[AuthoredPointModel]:
        seen = set()
        for point in value:
            if point.name in seen:
                raise ValueError(f"Duplicate point name: {point.name}")
            seen.add(point.name)
        return value

    @classmethod
    def from_points(cls, points: List[AnchorPoint]) -> "AuthoredWave":
        return cls.model_validate({"points": [point.to_dict() for point in sort_by_x(points)]})

    def to_points(self) -> List[AnchorPoint]:
        return [point.to_point() for point in self.points]


# ---------------------------------------------------------------------------
# Normalized playback file
# ---------------------------------------------------------------------------


class SmoothPointModel(BaseModel):
    type: Literal["smooth"]
    x: float = Field(..., ge=0, le=1)
    y: float
    cp1: HandleModel
    cp2: HandleModel


class SharpPointModel(BaseModel):
    type: Literal["sharp"]
    x: float = Field(..., ge=0, le=1)
    y: float
    cp1: Optional[HandleModel] = None
    cp2: Optional[HandleModel] = None


NormalizedPointModel = Annotated[Union[SmoothPointModel, SharpPointModel], Field(discriminator="type")]


class MetadataModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_width: float = Field(..., gt=0, alias="originalWidth")
    original_height: float = Field(..., gt=0, alias="originalHeight")
    baseline_ratio: float = Field(..., alias="baselineRatio")
    original_baseline: float = Field(..., alias="originalBaseline")


class NormalizedWave(BaseModel):
    points: List[NormalizedPointModel] = Field(..., min_length=2)
    metadata: Optional[MetadataModel] = None

    def to_curve(self) -> NormalizedCurve:
        converted = []
        for point in sorted(self.points, key=lambda item: item.x):
            if isinstance(point, SmoothPointModel):
                converted.append(
                    NormalizedSmooth(
                        x=point.x,
                        y=point.y,
                        cp1=(point.cp1.x, point.cp1.y),
                        cp2=(point.cp2.x, point.cp2.y),
                    )
                )
            else:
                converted.append(NormalizedSharp(x=point.x, y=point.y))
        metadata = None
        if self.metadata is not None:
            metadata = NormalizedMetadata(
                original_width=self.metadata.original_width,
                original_height=self.metadata.original_height,
                baseline_ratio=self.metadata.baseline_ratio,
                original_baseline=self.metadata.original_baseline,
            )
        return NormalizedCurve(points=tuple(converted), metadata=metadata)


def authored_payload(points: List[AnchorPoint]) -> Dict[str, Any]:
    return AuthoredWave.from_points(points).model_dump(mode="json")


def normalized_payload(curve: NormalizedCurve) -> Dict[str, Any]:
    return curve.to_dict()


__all__ = [
    "AuthoredPointModel",
    "AuthoredWave",
    "HandleModel",
    "MetadataModel",
    "NormalizedWave",
    "SharpPointModel",
    "SmoothPointModel",
    "authored_payload",
    "normalized_payload",
]

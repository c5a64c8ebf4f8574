"""Readers and writers for waveform files.

Provides helpers for the author-space wave file, the normalized playback
file handed to monitors, and CSV tables of sampled values.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import IO, List, Sequence, Union

import numpy as np
from pydantic import ValidationError

from .core.normalize import NormalizedCurve
from .core.points import AnchorPoint
from .errors import CurveImportError, CurveValidationError
from .formats import AuthoredWave, NormalizedWave, authored_payload, normalized_payload


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> object:
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Wave file not found: {source}")
    try:
        with source.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except ValueError as exc:
        raise CurveImportError(f"{source} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise CurveImportError(f"Could not read {source}: {exc}") from exc


def _write_json(payload: dict, path: PathLike) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
    return target


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


# ---------------------------------------------------------------------------
# Author-space wave file
# ---------------------------------------------------------------------------


def parse_wave(payload: object, source: str = "<memory>") -> List[AnchorPoint]:
    try:
        return AuthoredWave.model_validate(payload).to_points()
    except ValidationError as exc:
        raise CurveImportError(f"Invalid wave file {source}: {_describe(exc)}") from exc


def save_wave(points: Sequence[AnchorPoint], path: PathLike) -> Path:
    """
    Write every attribute of ``points`` to an author-space JSON file.
    """
    target = _write_json(authored_payload(list(points)), path)
    logger.info("Saved %d points to %s", len(points), target)
    return target


def load_wave(path: PathLike) -> List[AnchorPoint]:
    """
    Read an author-space JSON file.

    Raises ``FileNotFoundError`` for a missing file and
    :class:`CurveImportError` for anything structurally wrong.
    """
    return parse_wave(_read_json(path), source=str(path))


# ---------------------------------------------------------------------------
# Normalized playback file
# ---------------------------------------------------------------------------


def parse_normalized(payload: object, source: str = "<memory>") -> NormalizedCurve:
    try:
        return NormalizedWave.model_validate(payload).to_curve()
    except ValidationError as exc:
        raise CurveImportError(f"Invalid normalized curve {source}: {_describe(exc)}") from exc
    except CurveValidationError as exc:
        raise CurveImportError(f"Invalid normalized curve {source}: {exc}") from exc


def write_normalized(curve: NormalizedCurve, path: PathLike) -> Path:
    target = _write_json(normalized_payload(curve), path)
    logger.info("Exported normalized curve (%d points) to %s", len(curve.points), target)
    return target


def load_normalized(path: PathLike) -> NormalizedCurve:
    return parse_normalized(_read_json(path), source=str(path))


# ---------------------------------------------------------------------------
# Sample tables
# ---------------------------------------------------------------------------


def export_samples_csv(phases: np.ndarray, values: np.ndarray, handle: IO[str]) -> None:
    """
    Write one ``phase,value`` row per sample to an open text stream.
    """
    if len(phases) != len(values):
        raise ValueError("phases and values must have the same length")
    writer = csv.DictWriter(handle, fieldnames=["phase", "value"], lineterminator="\n")
    writer.writeheader()
    for phase, value in zip(phases, values):
        writer.writerow({"phase": f"{float(phase):.6f}", "value": f"{float(value):.6f}"})

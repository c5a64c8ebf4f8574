"""
Command-line interface for the waveform editor.

Usage:
    wave-editor gui [wave.json]
    wave-editor default path/to/wave.json
    wave-editor validate path/to/file.json [--normalized]
    wave-editor export wave.json monitor.json [--baseline 200] [--height 400]
    wave-editor sample monitor.json [--count 100] [--gain 1.0]
    wave-editor preview monitor.json --output preview.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .config import EditorConfig, load_editor_config
from .core.defaults import build_default_points
from .core.normalize import NormalizedCurve, export_normalized
from .core.points import SMOOTH, AnchorPoint
from .core.sampler import sample_many
from .errors import WaveEditorError
from .exporters import export_samples_csv, load_normalized, load_wave, save_wave, write_normalized
from .settings import get_settings

Logger = logging.getLogger(__name__)

PREVIEW_CYCLES = 3
PREVIEW_SAMPLES_PER_CYCLE = 400


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def resolve_editor_config(path: Optional[Path]) -> EditorConfig:
    """Explicit ``--config`` first, then ``WAVE_EDITOR_CONFIG``, then defaults."""
    if path is None:
        path = get_settings().config_file
    if path is None:
        return EditorConfig()
    return load_editor_config(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wave-editor",
        description="Author cyclic waveforms and export them for monitor playback.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML editor configuration (defaults to WAVE_EDITOR_CONFIG or built-in values).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # gui command
    gui_parser = subparsers.add_parser("gui", help="Launch the interactive editor.")
    gui_parser.add_argument(
        "wave",
        type=Path,
        nargs="?",
        help="Optional wave file to open instead of the saved session.",
    )

    # default command
    default_parser = subparsers.add_parser("default", help="Write the default PQRST wave to a file.")
    default_parser.add_argument("output", type=Path, help="Destination wave file.")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Check a wave or normalized file and summarise it.")
    validate_parser.add_argument("file", type=Path, help="File to validate.")
    validate_parser.add_argument(
        "--normalized",
        action="store_true",
        help="Treat the file as a normalized playback curve instead of an authored wave.",
    )

    # export command
    export_parser = subparsers.add_parser("export", help="Convert an authored wave into the normalized playback format.")
    export_parser.add_argument("wave", type=Path, help="Authored wave file.")
    export_parser.add_argument("output", type=Path, help="Destination normalized file.")
    export_parser.add_argument("--baseline", type=float, default=None, help="Baseline y (defaults to half the canvas height).")
    export_parser.add_argument("--height", type=float, default=None, help="Canvas height (defaults to the configured height).")

    # sample command
    sample_parser = subparsers.add_parser("sample", help="Sample one cycle of a normalized curve as CSV on stdout.")
    sample_parser.add_argument("file", type=Path, help="Normalized curve file.")
    sample_parser.add_argument("--count", type=int, default=100, help="Number of evenly spaced phases (default 100).")
    sample_parser.add_argument("--gain", type=float, default=1.0, help="Scalar applied to every value (default 1.0).")

    # preview command
    preview_parser = subparsers.add_parser("preview", help="Plot three cycles of a normalized curve to a PNG.")
    preview_parser.add_argument("file", type=Path, help="Normalized curve file.")
    preview_parser.add_argument("--output", type=Path, required=True, help="Destination PNG path.")

    return parser


def summarize_wave(path: Path, points: Sequence[AnchorPoint]) -> str:
    smooth = sum(1 for point in points if point.type == SMOOTH)
    xs = [point.x for point in points]
    lines = [
        f"Wave: {path}",
        f"  Points: {len(points)} ({smooth} smooth, {len(points) - smooth} sharp)",
        f"  X span: {min(xs):.1f} .. {max(xs):.1f}",
    ]
    starred = [point.name for point in points if point.starred]
    if starred:
        lines.append(f"  Starred: {', '.join(starred)}")
    return "\n".join(lines)


def summarize_curve(path: Path, curve: NormalizedCurve) -> str:
    smooth = sum(1 for point in curve.points if point.type == SMOOTH)
    lines = [
        f"Normalized curve: {path}",
        f"  Points: {len(curve.points)} ({smooth} smooth, {len(curve.points) - smooth} sharp)",
    ]
    if curve.metadata is not None:
        meta = curve.metadata
        lines.append(
            f"  Authored span {meta.original_width:.1f} on a {meta.original_height:.0f} px canvas, "
            f"baseline {meta.original_baseline:.1f} (ratio {meta.baseline_ratio:.3f})"
        )
    return "\n".join(lines)


def default_command(args: argparse.Namespace, config: EditorConfig) -> int:
    try:
        points = build_default_points(config.canvas.width, config.canvas.height)
        save_wave(points, args.output)
    except (OSError, ValueError) as exc:
        Logger.error("Could not write default wave: %s", exc)
        return 1
    return 0


def validate_command(args: argparse.Namespace) -> int:
    path: Path = args.file
    if not path.exists():
        Logger.error("File not found: %s", path)
        return 2

    try:
        if args.normalized:
            summary = summarize_curve(path, load_normalized(path))
        else:
            summary = summarize_wave(path, load_wave(path))
    except WaveEditorError as exc:
        Logger.error("Validation failed: %s", exc)
        return 1

    print(summary)
    Logger.info("Validation succeeded.")
    return 0


def export_command(args: argparse.Namespace, config: EditorConfig) -> int:
    path: Path = args.wave
    if not path.exists():
        Logger.error("Wave file not found: %s", path)
        return 2

    height = args.height if args.height is not None else float(config.canvas.height)
    baseline = args.baseline if args.baseline is not None else height / 2.0
    try:
        curve = export_normalized(load_wave(path), baseline, height)
        write_normalized(curve, args.output)
    except WaveEditorError as exc:
        Logger.error("Export failed: %s", exc)
        return 1
    except OSError as exc:
        Logger.error("Could not write %s: %s", args.output, exc)
        return 1
    return 0


def sample_command(args: argparse.Namespace) -> int:
    path: Path = args.file
    if not path.exists():
        Logger.error("Normalized curve not found: %s", path)
        return 2
    if args.count < 1:
        Logger.error("--count must be positive")
        return 1

    try:
        curve = load_normalized(path)
    except WaveEditorError as exc:
        Logger.error("Sampling failed: %s", exc)
        return 1

    phases = np.arange(args.count, dtype=float) / args.count
    values = sample_many(curve, phases) * args.gain
    export_samples_csv(phases, values, sys.stdout)
    return 0


def preview_command(args: argparse.Namespace) -> int:
    path: Path = args.file
    if not path.exists():
        Logger.error("Normalized curve not found: %s", path)
        return 2

    try:
        curve = load_normalized(path)
    except WaveEditorError as exc:
        Logger.error("Preview failed: %s", exc)
        return 1

    try:
        _write_preview_image(args.output, curve)
    except Exception as exc:  # noqa: BLE001
        Logger.error("Failed to write preview image: %s", exc)
        return 1
    Logger.info("Preview image saved to %s", args.output)
    return 0


def run_gui_with_args(args: argparse.Namespace, config: EditorConfig) -> int:
    wave_path = None
    if args.wave:
        wave_path = Path(args.wave)
        if not wave_path.exists():
            Logger.error("Wave file not found: %s", wave_path)
            return 2
    from .gui import run as run_gui  # Local import to avoid Qt initialization unless needed

    return run_gui(wave_path, config=config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = resolve_editor_config(args.config)
    except FileNotFoundError as exc:
        Logger.error("%s", exc)
        return 2
    except Exception as exc:  # noqa: BLE001
        Logger.error("Invalid editor configuration: %s", exc)
        return 1

    if args.command == "gui":
        return run_gui_with_args(args, config)
    if args.command == "default":
        return default_command(args, config)
    if args.command == "validate":
        return validate_command(args)
    if args.command == "export":
        return export_command(args, config)
    if args.command == "sample":
        return sample_command(args)
    if args.command == "preview":
        return preview_command(args)

    parser.print_help()
    return 1


def _write_preview_image(output_path: Path, curve: NormalizedCurve) -> None:
    import matplotlib.pyplot as plt

    total = PREVIEW_CYCLES * PREVIEW_SAMPLES_PER_CYCLE
    cycles = np.arange(total, dtype=float) / PREVIEW_SAMPLES_PER_CYCLE
    values = sample_many(curve, cycles)

    fig, ax = plt.subplots(figsize=(8, 3))
    ax.plot(cycles, values, color="#00c000", linewidth=1.5)
    for point in curve.points:
        ax.axvline(point.x, color="#cccccc", linewidth=0.5, zorder=0)
    ax.axhline(0.0, color="#888888", linewidth=0.8)
    ax.set_title("Waveform Preview")
    ax.set_xlabel("Cycle")
    ax.set_ylabel("Normalized value")
    fig.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


if __name__ == "__main__":
    sys.exit(main())

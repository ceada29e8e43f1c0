"""
Command line interface.

Renders a stretch artwork from an image file and writes it as PNG:

    pixelstretch photo.jpg --mode spiral --tightness 5 -o spiral.png
    pixelstretch photo.jpg --settings preset.json --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import numpy as np

from .config import settings as runtime
from .exceptions import ConfigurationError, StretchError
from .image import export_png, load_image
from .pipeline import render
from .settings import (
    BlendMode,
    Direction,
    GeometricShape,
    StretchMode,
    StretchSettings,
    TextureType,
)

logger = logging.getLogger(__name__)

# CLI flag destination -> settings alias
FLAG_FIELDS = {
    'mode': 'stretchMode',
    'direction': 'direction',
    'slice_position': 'slicePosition',
    'slice_size': 'sliceSize',
    'origin_x': 'originX',
    'origin_y': 'originY',
    'tightness': 'spiralTightness',
    'shape': 'geometricShape',
    'blur': 'blurStrength',
    'brightness': 'brightness',
    'contrast': 'contrast',
    'saturation': 'saturation',
    'opacity': 'opacity',
    'blend_mode': 'blendMode',
    'texture': 'texture',
    'texture_intensity': 'textureIntensity',
    'texture_scale': 'textureScale',
    'noise': 'noise',
}


def _options(enum_cls) -> str:
    return ', '.join(member.value for member in enum_cls)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pixelstretch',
        description='Render a pixel-stretch artwork from a still image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s photo.jpg                              # Linear stretch with defaults
  %(prog)s photo.jpg --mode geometric --shape star
  %(prog)s photo.jpg --settings look.json -o out.png
  %(prog)s photo.jpg --texture vhs --seed 42     # Reproducible grain
  %(prog)s photo.jpg --randomize --seed 7       # Surprise me
"""
    )
    parser.add_argument('input', help='Source image file')
    parser.add_argument(
        '--output', '-o',
        default=None,
        help=f'Output PNG file (default: {runtime.EXPORT_FILENAME})'
    )
    parser.add_argument('--settings', type=Path, help='JSON settings record (camelCase keys)')
    parser.add_argument('--randomize', action='store_true',
                        help='Start from randomly drawn settings (file and flags still override)')
    parser.add_argument('--seed', type=int, help='Seed for --randomize, grain and canvas texture')
    parser.add_argument('--workers', type=int, help='Row shards for mapping and grain')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    mapping = parser.add_argument_group('mapping')
    mapping.add_argument('--mode', help=f'Stretch mode: {_options(StretchMode)}')
    mapping.add_argument('--direction', help=f'Direction: {_options(Direction)}')
    mapping.add_argument('--slice-position', type=float, help='Slice position in percent (0-100)')
    mapping.add_argument('--slice-size', type=float, help='Band thickness in pixels, linear mode (1-500)')
    mapping.add_argument('--origin-x', type=float, help='Origin x in percent (0-100)')
    mapping.add_argument('--origin-y', type=float, help='Origin y in percent (0-100)')
    mapping.add_argument('--tightness', type=float, help='Spiral twist (0-20)')
    mapping.add_argument('--shape', help=f'Geometric shape: {_options(GeometricShape)}')

    grading = parser.add_argument_group('grading')
    grading.add_argument('--blur', type=float, help='Blur strength (0-100)')
    grading.add_argument('--brightness', type=float, help='Brightness multiplier (0-2)')
    grading.add_argument('--contrast', type=float, help='Contrast multiplier (0-2)')
    grading.add_argument('--saturation', type=float, help='Saturation multiplier (0-3)')
    grading.add_argument('--opacity', type=float, help='Effect layer opacity (0-1)')
    grading.add_argument('--blend-mode', help=f'Blend mode: {_options(BlendMode)}')

    post = parser.add_argument_group('post-processing')
    post.add_argument('--texture', help=f'Texture: {_options(TextureType)}')
    post.add_argument('--texture-intensity', type=float, help='Texture intensity (0-100)')
    post.add_argument('--texture-scale', type=float, help='Texture scale (0.1-5)')
    post.add_argument('--noise', type=float, help='Grain amount (0-100)')
    return parser


def settings_from_args(
    args: argparse.Namespace,
    rng: Optional[np.random.Generator] = None,
) -> StretchSettings:
    """Merge settings sources: random draw, then the JSON record, then flags.

    Later sources win.
    """
    data: dict[str, Any] = {}
    if args.randomize:
        data.update(StretchSettings.random(rng).to_dict())
    if args.settings is not None:
        try:
            record = json.loads(args.settings.read_text())
        except json.JSONDecodeError as e:
            raise StretchError(f"Cannot parse settings file {args.settings}: {e}") from e
        if not isinstance(record, dict):
            raise ConfigurationError(
                f"Settings file {args.settings} must hold a JSON object, got {type(record).__name__}")
        data.update(record)
    for dest, alias in FLAG_FIELDS.items():
        value = getattr(args, dest)
        if value is not None:
            data[alias] = value
    return StretchSettings.from_dict(data)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else runtime.LOG_LEVEL,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        rng = np.random.default_rng(args.seed)
        stretch_settings = settings_from_args(args, rng=rng)
        image = load_image(args.input)
        result = render(image, stretch_settings, rng=rng, workers=args.workers)
        target = export_png(result, args.output)
    except (StretchError, OSError) as e:
        print(f'pixelstretch: error: {e}', file=sys.stderr)
        return 2

    print(f'Wrote {target}')
    return 0


__all__ = ['build_parser', 'settings_from_args', 'main']

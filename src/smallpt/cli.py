"""Command line entry point: render the reference scene to a PNG file.

Usage:
    smallpt [SAMPLES] [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --output OUTPUT     Output file path (default: image.png)
    --seed SEED         Random seed (default: 0)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --duke PATH         Picture for the picture plane and its emissive cut-out
    --earth PATH        Texture for the globe
    --no-mesh           Leave out the cube mesh
    --quiet             Only report errors
    --verbose           Report debug details

Example:
    smallpt 100 --width 256 --height 192 --output preview.png
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from smallpt.camera.pinhole import DEFAULT_CAMERA
from smallpt.config import ARCHES, RenderConfig
from smallpt.core.renderer import Renderer
from smallpt.errors import SmallPTError
from smallpt.logging_config import setup_logging
from smallpt.runtime import init_taichi
from smallpt.scene.default_scene import SceneParams, create_default_scene


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    defaults = RenderConfig()
    parser = argparse.ArgumentParser(
        prog="smallpt",
        description="Render the smallpt scene with Monte Carlo path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "samples",
        nargs="?",
        type=_positive_int,
        default=defaults.samples,
        help=f"Samples per pixel (default: {defaults.samples})",
    )
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=defaults.width,
        help=f"Image width in pixels (default: {defaults.width})",
    )
    parser.add_argument(
        "--height",
        type=_positive_int,
        default=defaults.height,
        help=f"Image height in pixels (default: {defaults.height})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=defaults.output,
        help=f"Output file path (default: {defaults.output})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help=f"Random seed (default: {defaults.seed})",
    )
    parser.add_argument(
        "--arch",
        choices=ARCHES,
        default=defaults.arch,
        help=f"Taichi backend (default: {defaults.arch})",
    )
    parser.add_argument(
        "--duke",
        type=Path,
        default=None,
        metavar="PATH",
        help="Picture shown on a plane and as an emissive cut-out",
    )
    parser.add_argument(
        "--earth",
        type=Path,
        default=None,
        metavar="PATH",
        help="Equirectangular texture for the globe",
    )
    parser.add_argument(
        "--no-mesh",
        action="store_true",
        help="Leave out the cube mesh",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only report errors",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Report debug details",
    )
    return parser


def render(config: RenderConfig, picture=None, globe=None, mesh: bool = True) -> Path:
    """Render the reference scene and save it.

    Taichi must already be initialized.

    Returns:
        Path to the saved image.

    Raises:
        AssetLoadError: If a bitmap asset cannot be loaded.
        InvariantViolation: If the integrator meets an unknown material kind.
        OSError: If the image cannot be written.
    """
    scene = create_default_scene(SceneParams(picture=picture, globe=globe, mesh=mesh))
    renderer = Renderer(scene, DEFAULT_CAMERA, config.width, config.height, backend=config.arch)
    renderer.render(config.samples, config.seed)
    return renderer.save(config.output, config.gamma)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point; returns the process exit status."""
    args = build_parser().parse_args(argv)

    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    setup_logging(level)

    try:
        config = RenderConfig(
            width=args.width,
            height=args.height,
            samples=args.samples,
            seed=args.seed,
            arch=args.arch,
            output=args.output,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    init_taichi(config.arch)

    try:
        output_file = render(config, picture=args.duke, globe=args.earth, mesh=not args.no_mesh)
    except (SmallPTError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Map Converter - command line entry point.

Usage:
    mapconverter convert photo.png -o map.svg
    mapconverter convert photo.png --blur 2 --edge-threshold 40 --steps-dir steps/
    mapconverter settings show
    mapconverter settings save --min-region-area 250
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from mapconverter.config_manager import ConfigManager
from mapconverter.errors import ImageDecodeError
from mapconverter.image_processing import ImageConverter
from mapconverter.models import CONFIG_FILE, ConversionSettings

# (flag, settings field, type, help)
SETTING_OPTIONS = [
    ("--edge-threshold", "edge_threshold", float, "Edge threshold, 0-100"),
    ("--edge-radius", "edge_radius", int, "Edge kernel half-width"),
    ("--blur", "blur", int, "Box blur radius, 0 to skip"),
    ("--posterize", "posterize", int, "Posterize levels, 0 to skip"),
    ("--min-region-area", "min_region_area", float, "Drop regions smaller than this (px)"),
    ("--simplify-tolerance", "simplify_tolerance", float, "Douglas-Peucker tolerance (px)"),
    ("--smoothing", "smoothing", float, "Smoothing factor, 0 to skip"),
    ("--stroke-width", "stroke_width", float, "SVG stroke width"),
    ("--fill-opacity", "fill_opacity", float, "SVG fill opacity"),
]
SETTING_FLAGS = [
    ("--grayscale", "grayscale", "Convert to grayscale first"),
    ("--invert", "invert", "Invert edges before thresholding"),
]


def add_setting_arguments(parser: argparse.ArgumentParser):
    """Add one optional flag per conversion setting."""
    group = parser.add_argument_group("conversion settings")
    group.add_argument(
        "--settings",
        type=Path,
        default=CONFIG_FILE,
        help=f"Settings file (default: {CONFIG_FILE})",
    )
    for flag, dest, value_type, help_text in SETTING_OPTIONS:
        group.add_argument(flag, dest=dest, type=value_type, default=None, help=help_text)
    for flag, dest, help_text in SETTING_FLAGS:
        group.add_argument(
            flag,
            dest=dest,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=help_text,
        )


def resolve_settings(args: argparse.Namespace) -> ConversionSettings:
    """Settings file values with command line overrides applied."""
    settings = ConfigManager(args.settings).load()
    names = [dest for _, dest, *_ in SETTING_OPTIONS + SETTING_FLAGS]
    overrides = {
        name: getattr(args, name) for name in names if getattr(args, name) is not None
    }
    return settings.with_overrides(**overrides)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mapconverter",
        description="Convert a raster image into an SVG map of closed regions.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser("convert", help="Convert an image to an SVG map")
    convert_parser.add_argument("input", type=Path, help="Image file (PNG, JPG, etc.)")
    convert_parser.add_argument(
        "-o", "--output", type=Path, help="SVG output path (default: stdout)"
    )
    convert_parser.add_argument(
        "--regions-json", type=Path, help="Also write region geometry as JSON"
    )
    convert_parser.add_argument(
        "--steps-dir", type=Path, help="Save a PNG preview of each pipeline stage"
    )
    add_setting_arguments(convert_parser)

    settings_parser = subparsers.add_parser("settings", help="Show or save settings")
    settings_parser.add_argument("action", choices=["show", "save"])
    add_setting_arguments(settings_parser)

    return parser


def run_convert(args: argparse.Namespace) -> int:
    """Run the pipeline and write the requested outputs."""
    settings = resolve_settings(args)
    converter = ImageConverter(settings)

    try:
        result = converter.process(args.input)
    except ImageDecodeError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(result.svg)
        print(f"✓ Saved map with {len(result.regions)} regions to {args.output}")
    else:
        print(result.svg)

    if args.regions_json:
        args.regions_json.write_text(json.dumps(result.to_dict(), indent=2))
        print(f"✓ Saved region data to {args.regions_json}", file=sys.stderr)

    if args.steps_dir:
        args.steps_dir.mkdir(parents=True, exist_ok=True)
        for index, step in enumerate(result.steps):
            image = step.to_image()
            if image is None:
                continue
            path = args.steps_dir / f"{index:02d}_{step.name.lower()}.png"
            image.save(path)
        print(f"✓ Saved stage previews to {args.steps_dir}", file=sys.stderr)

    return 0


def run_settings(args: argparse.Namespace) -> int:
    """Show the effective settings, or save them to the settings file."""
    settings = resolve_settings(args)

    if args.action == "save":
        success, error = ConfigManager(args.settings).save(settings)
        if not success:
            print(f"✗ Could not save settings: {error}", file=sys.stderr)
            return 1
        print(f"✓ Settings saved to {args.settings}")
        return 0

    print(json.dumps(settings.to_dict(), indent=2))
    return 0


def main(argv: "list[str] | None" = None) -> int:
    """Parse arguments and dispatch to a command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "convert":
        return run_convert(args)
    if args.command == "settings":
        return run_settings(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())

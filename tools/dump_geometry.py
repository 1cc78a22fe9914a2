#!/usr/bin/env python3
"""
Dump the display geometry of a loudspeaker layout as JSON.

Prints the sector (2D) or the clipped top/bottom cells (3D) of every
channel, as a renderer would receive them.

Usage:
    python tools/dump_geometry.py --azimuths 0 90 180 270
    python tools/dump_geometry.py --azimuths 0 120 240 0 --elevations 0 0 0 90
    python tools/dump_geometry.py --count 12 --sphere --rotation 15

Angles are in degrees.

Exit codes:
    0 = Geometry written
    1 = Layout rejected or tessellation failed
"""

from __future__ import annotations

import argparse
import json
import math
import sys

from spatial_meter import LayoutModel, MeterError, create_meter


def build_layout(args: argparse.Namespace) -> LayoutModel:
    """Build the layout described by the command line."""
    if args.azimuths:
        return LayoutModel.from_degrees(args.azimuths, args.elevations, args.rotation)
    
    if args.sphere:
        return LayoutModel.spherical(args.count, math.radians(args.rotation))
    return LayoutModel.regular(args.count, math.radians(args.rotation))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Print the display geometry of a loudspeaker layout"
    )
    parser.add_argument(
        "--azimuths",
        type=float,
        nargs="+",
        help="Channel azimuths in degrees"
    )
    parser.add_argument(
        "--elevations",
        type=float,
        nargs="+",
        help="Channel elevations in degrees (makes the layout 3D)"
    )
    parser.add_argument(
        "--count",
        type=int,
        default=8,
        help="Number of evenly spread channels when --azimuths is not given (default: 8)"
    )
    parser.add_argument(
        "--sphere",
        action="store_true",
        help="Spread --count channels on a sphere instead of a circle"
    )
    parser.add_argument(
        "--rotation",
        type=float,
        default=0.0,
        help="Layout rotation in degrees (default: 0)"
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)"
    )
    
    args = parser.parse_args(argv)
    
    try:
        meter = create_meter(build_layout(args))
        meter.compute_rendering()
    except MeterError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    
    print(json.dumps(meter.snapshot(), indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())

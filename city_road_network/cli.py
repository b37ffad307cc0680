#!/usr/bin/env python3
"""
Command-line front end.

Usage:
    city-road-network generate 42
    city-road-network export 42 city.json
    city-road-network load city.json --save city.png --stats
"""

import argparse
import sys
from typing import List, Optional

from .city_map import CityMap
from .config import GeneratorConfig
from .errors import CityMapError
from .generator import CityGenerator
from .metrics import compute_map_metrics, format_metrics_report
from .serialization import load_city_map, write_city_map


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="city-road-network",
        description="Generate, export and inspect procedural city road networks"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config JSON (optional)"
    )
    parser.add_argument(
        "--save",
        type=str,
        default=None,
        help="Render the map to this image file instead of opening a window"
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print map metrics"
    )

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.required = True

    generate = commands.add_parser("generate", help="Build a city and show it")
    generate.add_argument("seed", type=int, help="Generation seed")

    export = commands.add_parser("export", help="Build a city and write it to JSON")
    export.add_argument("seed", type=int, help="Generation seed")
    export.add_argument("path", type=str, help="Output JSON path")

    load = commands.add_parser("load", help="Read a city JSON file and show it")
    load.add_argument("path", type=str, help="Input JSON path")

    return parser


def _show(city_map: CityMap, config: GeneratorConfig, save_path: Optional[str]):
    # Imported lazily so export never touches a GUI backend.
    from .visualization import CityMapViewer, render_city_map

    if save_path:
        written = render_city_map(city_map, save_path, config)
        print(f"Rendered {len(city_map)} segments to {written}")
    else:
        CityMapViewer(city_map, config).show()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = GeneratorConfig.from_json(args.config) if args.config else GeneratorConfig()
    except (OSError, ValueError, TypeError) as e:
        print(f"failed to load config {args.config}: {e}", file=sys.stderr)
        return 1

    city_map = CityMap()
    try:
        if args.command == "generate":
            CityGenerator(config, seed=args.seed, verbose=True).generate(city_map)
        elif args.command == "export":
            CityGenerator(config, seed=args.seed, verbose=True).generate(city_map)
            write_city_map(args.path, city_map, config.coordinate_precision)
            print(f"Wrote {len(city_map)} segments to {args.path}")
        else:
            load_city_map(args.path, city_map)
            print(f"Loaded {len(city_map)} segments from {args.path}")

        if args.stats:
            print(format_metrics_report(
                compute_map_metrics(city_map, config.endpoint_epsilon_m)
            ))

        if args.command != "export":
            _show(city_map, config, args.save)
    except CityMapError as e:
        print(f"failed to {args.command} city map: {e}", file=sys.stderr)
        return 1

    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()

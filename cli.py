#!/usr/bin/env python
"""
Command-line interface for mapcanvas

Usage:
    python cli.py fetch --bbox 51.50,-0.13,51.52,-0.10 --zoom 14 --output map.json
    python cli.py render --bbox 51.50,-0.13,51.52,-0.10 --zoom 14 --output map.png
    python cli.py countries --input country-boundaries.json
    python cli.py serve --port 8000
"""

import sys
import json
import argparse

from loguru import logger

from mapcanvas.config import get_config, validate_config
from mapcanvas.geometry.bbox import BoundingBox
from mapcanvas.collectors.osm.api_client import OverpassAPIClient, OverpassError
from mapcanvas.collectors.osm.cache import BBoxCache
from mapcanvas.collectors.osm.collector import MapDataCollector
from mapcanvas.collectors.osm.query import OverpassQueryBuilder
from mapcanvas.collectors.boundary import CountryBoundaryStore, BoundaryDatasetError
from mapcanvas.render import MapRenderer, PillowSurface, Viewport


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def _parse_bbox(value: str) -> BoundingBox:
    try:
        return BoundingBox.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def cmd_countries(args):
    """Assemble country boundaries from a local dataset"""
    setup_logging(args.verbose)

    store = CountryBoundaryStore(args.input)
    try:
        boundaries = store.get()
    except BoundaryDatasetError as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"✓ Assembled {len(boundaries)} country boundaries")
    for boundary in boundaries:
        logger.debug(f"  {boundary.name}: {len(boundary.rings)} rings, {len(boundary.holes)} holes")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump([b.model_dump() for b in boundaries], f)
        logger.info(f"✓ Saved: {args.output}")
    return 0


def cmd_download_countries(args):
    """Download admin_level=2 relations from Overpass"""
    setup_logging(args.verbose)

    config = get_config()
    client = OverpassAPIClient(config.api)
    query = OverpassQueryBuilder(config.api.overpass_timeout, config.fetch).world_boundaries_query()

    logger.info("Downloading country boundaries from Overpass API...")
    try:
        response = client.query(query)
    except OverpassError as e:
        logger.error(f"Download failed ({e.outcome.value}): {e}")
        return 1

    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(response, f)

    logger.info(f"✓ Saved {len(response.get('elements', []))} elements to {args.output}")
    return 0


def _collect(args):
    config = get_config()
    cache = BBoxCache(args.cache_dir) if args.cache_dir else None
    collector = MapDataCollector(config, cache=cache)
    return collector.fetch(args.bbox, args.zoom)


def cmd_fetch(args):
    """Fetch and assemble map data for a bbox"""
    setup_logging(args.verbose)

    result = _collect(args)
    if not result.ok:
        logger.error(f"Fetch failed: {result.outcome.value} {result.detail or ''}")
        return 1

    logger.info(f"✓ {result.outcome.value}: {result.data.summary()}")
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.data.model_dump_json())
        logger.info(f"✓ Saved: {args.output}")
    else:
        print(result.data.model_dump_json(indent=2))
    return 0


def cmd_render(args):
    """Fetch map data for a bbox and render it to PNG"""
    setup_logging(args.verbose)

    result = _collect(args)
    if not result.ok:
        logger.error(f"Fetch failed: {result.outcome.value} {result.detail or ''}")
        return 1

    config = get_config()
    viewport = Viewport.from_bbox(args.bbox, args.zoom, args.width, args.height)
    surface = PillowSurface(args.width, args.height)
    MapRenderer(config.render, show_labels=not args.no_labels).render(result.data, viewport, surface)
    surface.save(args.output)

    logger.info(f"✓ Rendered: {args.output}")
    return 0


def cmd_serve(args):
    """Run the HTTP API"""
    setup_logging(args.verbose)
    import uvicorn

    logger.info(f"Serving on http://{args.host}:{args.port}")
    uvicorn.run("mapcanvas.api:app", host=args.host, port=args.port)
    return 0


def main():
    config = get_config()
    parser = argparse.ArgumentParser(
        description="mapcanvas CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Fetch map data:
    python cli.py fetch --bbox 51.50,-0.13,51.52,-0.10 --zoom 14 --output map.json

  Render a map:
    python cli.py render --bbox 51.50,-0.13,51.52,-0.10 --zoom 14 --output map.png

  Build country boundaries:
    python cli.py download-countries --output country-boundaries.json
    python cli.py countries --input country-boundaries.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Countries command
    countries_parser = subparsers.add_parser("countries", help="Assemble country boundaries from a dataset")
    countries_parser.add_argument("--input", "-i", default=config.boundaries.dataset_path, help="Overpass JSON dataset")
    countries_parser.add_argument("--output", "-o", help="Output JSON file")
    countries_parser.set_defaults(func=cmd_countries)

    # Download command
    download_parser = subparsers.add_parser("download-countries", help="Download country boundary dataset")
    download_parser.add_argument("--output", "-o", default=config.boundaries.dataset_path, help="Output JSON file")
    download_parser.set_defaults(func=cmd_download_countries)

    # Fetch and render commands
    for name, func, help_text in (
        ("fetch", cmd_fetch, "Fetch map data for a bbox"),
        ("render", cmd_render, "Render a bbox to PNG"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--bbox", type=_parse_bbox, required=True, help="south,west,north,east")
        sub.add_argument("--zoom", "-z", type=float, required=True, help="Map zoom level")
        sub.add_argument("--cache-dir", default=config.fetch.cache_dir, help="Result cache directory")
        sub.set_defaults(func=func)
        if name == "fetch":
            sub.add_argument("--output", "-o", help="Output JSON file (stdout if not specified)")
        else:
            sub.add_argument("--output", "-o", required=True, help="Output PNG file")
            sub.add_argument("--width", type=int, default=config.canvas_width, help="Canvas width in pixels")
            sub.add_argument("--height", type=int, default=config.canvas_height, help="Canvas height in pixels")
            sub.add_argument("--no-labels", action="store_true", help="Skip place labels")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="Port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

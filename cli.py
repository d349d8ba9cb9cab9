#!/usr/bin/env python
"""
Command-line interface for Kreuzungen

Usage:
    python cli.py crossings --gpx ride.gpx --output crossed.geojson
    python cli.py area "Leipzig" --main
    python cli.py choose --region 62649 --type cafe
"""

import os
import sys
import json
import argparse

from loguru import logger

from kreuzungen.analysis.messages import waterway_names
from kreuzungen.collectors import AreaGeocoder, StravaClient, WaterwayCollector
from kreuzungen.config import get_config, validate_config
from kreuzungen.errors import KreuzungenError
from kreuzungen.models import FeatureCollection, ResultStatus
from kreuzungen.pipeline import CrossingsPipeline
from kreuzungen.roulette import Category, POIRoulette
from kreuzungen.routes import decode_polyline, parse_gpx


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def save_geojson(fc: FeatureCollection, output_path: str):
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(fc.to_geojson(), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved {len(fc)} features to {output_path}")


def load_route(args):
    if args.gpx:
        with open(args.gpx, "r", encoding="utf-8") as f:
            return parse_gpx(f.read())
    if args.polyline:
        return decode_polyline(args.polyline)
    token = args.strava_token or get_config().strava_access_token
    return StravaClient(token).get_activity_route(args.strava_activity)


def cmd_crossings(args):
    """List the waterways a route crosses, in crossing order"""
    setup_logging(args.verbose)
    config = get_config()

    try:
        validate_config(config)
        route = load_route(args)
        report = CrossingsPipeline(config).run(route, check_completion=args.completed)
    except (KreuzungenError, ValueError, OSError) as e:
        logger.error(f"Failed to process route: {e}")
        return 1

    if report.result.status == ResultStatus.FAILED:
        logger.error(f"Request failed: {report.result.error}")
        return 1
    if report.result.status == ResultStatus.NO_DATA:
        logger.warning("No waterway data returned for this route")
        return 2

    for record in report.records:
        print(f"{record.distance_km:8.2f} km  {record.feature.name}")
    if report.message:
        print(report.message)
    else:
        print("No intersecting waterways found")
    print(report.share_url)

    if args.completed:
        print(f"Completed areas: {', '.join(map(str, report.completed_area_ids)) or 'none'}")
    if args.output:
        save_geojson(report.result.features, args.output)

    if args.update_strava and report.message:
        if not args.strava_activity:
            logger.error("--update-strava needs --strava-activity")
            return 1
        token = args.strava_token or config.strava_access_token
        try:
            StravaClient(token).update_activity_description(args.strava_activity, report.message)
        except (KreuzungenError, ValueError) as e:
            logger.error(f"Failed to update the activity description: {e}")
            return 1
        logger.info(f"Updated https://www.strava.com/activities/{args.strava_activity}")
    return 0


def cmd_area(args):
    """List the named waterways of an area"""
    setup_logging(args.verbose)
    logger.info("There is a lot of data to compute. This may take a while...")
    collector = WaterwayCollector(get_config())
    result = collector.waterways_for_area(args.area, relations_only=args.main)

    if not result.ok:
        logger.error(f"No waterways for '{args.area}': {result.error}")
        return 1 if result.status == ResultStatus.FAILED else 2

    names = waterway_names(result.features)
    print(f"Waterways: {len(names)}")
    for name in names:
        print(f"  {name}")
    if args.output:
        save_geojson(result.features, args.output)
    return 0


def cmd_search(args):
    """Geocode an area name"""
    setup_logging(args.verbose)
    try:
        results = AreaGeocoder(get_config().api).search(args.query, limit=args.limit)
    except KreuzungenError as e:
        logger.error(f"Search failed: {e}")
        return 1
    print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0


def cmd_choose(args):
    """Pick a random POI in a region"""
    setup_logging(args.verbose)
    try:
        choice = POIRoulette(config=get_config()).choose(args.region, args.type, node_id=args.id)
    except (KreuzungenError, ValueError) as e:
        logger.error(str(e))
        return 1
    print(json.dumps(choice.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Kreuzungen CLI - reveal the waterways that shape your adventures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Waterways crossed by a GPX track:
    python cli.py crossings --gpx ride.gpx --output crossed.geojson

  Waterways crossed by a Strava activity, written back to its description:
    python cli.py crossings --strava-activity 123456 --update-strava

  Major waterways of an area:
    python cli.py area "Leipzig" --main

  Random cafe in a region:
    python cli.py choose --region 62649 --type cafe
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Crossings command
    crossings_parser = subparsers.add_parser("crossings", help="Waterways crossed by a route")
    source = crossings_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--gpx", help="GPX file")
    source.add_argument("--polyline", help="Encoded polyline")
    source.add_argument("--strava-activity", type=int, help="Strava activity id")
    crossings_parser.add_argument("--strava-token", help="Strava access token (default: STRAVA_ACCESS_TOKEN)")
    crossings_parser.add_argument("--update-strava", action="store_true", help="Write the summary to the activity description")
    crossings_parser.add_argument("--completed", action="store_true", help="Check which cities/towns/villages are completed")
    crossings_parser.add_argument("--output", "-o", help="Output GeoJSON file")
    crossings_parser.set_defaults(func=cmd_crossings)

    # Area command
    area_parser = subparsers.add_parser("area", help="Named waterways in an area")
    area_parser.add_argument("area", help="Area name or OSM relation id")
    area_parser.add_argument("--main", action="store_true", help="Only major waterways (OSM relations)")
    area_parser.add_argument("--output", "-o", help="Output GeoJSON file")
    area_parser.set_defaults(func=cmd_area)

    # Search command
    search_parser = subparsers.add_parser("search", help="Geocode an area name")
    search_parser.add_argument("query", help="Free-text place name")
    search_parser.add_argument("--limit", type=int, default=5, help="Maximum results")
    search_parser.set_defaults(func=cmd_search)

    # Choose command
    choose_parser = subparsers.add_parser("choose", help="Random POI in a region")
    choose_parser.add_argument("--region", required=True, help="OSM relation id of the region")
    choose_parser.add_argument("--type", default=Category.DRINKS.value,
                               help=f"One of: {', '.join(c.value for c in Category)}")
    choose_parser.add_argument("--id", help="Specific node id (node/123 or 123)")
    choose_parser.set_defaults(func=cmd_choose)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

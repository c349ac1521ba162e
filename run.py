#!/usr/bin/env python3
"""
Command line front end for the Landmark Bangladesh client.

Lists, adds, edits and deletes landmarks on the remote api.php endpoint, and
can start a local sandbox server implementing the same endpoint.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

from app.config import ConfigLoader, LogLevel, Settings, load_config_for_environment
from app.core.exceptions import LocationUnavailableError
from app.core.logging import configure_logging
from app.core.metrics import get_metrics_snapshot
from app.core.validation import (
    ValidationError,
    parse_coordinate,
    validate_landmark_form,
    validate_latitude,
    validate_longitude,
    validate_title,
)
from app.services.api_client import LandmarkApiClient
from app.services.api_diagnostics import probe_endpoint
from app.services.image_processor import ImageProcessor
from app.services.landmark_repository import LandmarkRepository
from app.services.location_service import LocationService, StaticLocationProvider
from app.services.map_pins import map_view_for
from app.viewmodels import (
    CrudError,
    CrudSuccess,
    LandmarkViewModel,
    ListError,
    ListLoading,
    ListSuccess,
)

logger = logging.getLogger("landmark.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Landmark Bangladesh client")
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        default=None,
        help="Environment to load (default: from ENVIRONMENT env var or development)"
    )
    parser.add_argument("--base-url", default=None, help="API base URL (overrides config)")
    parser.add_argument("--log-level", type=str.upper, choices=[level.value for level in LogLevel], default=None, help="Log level (overrides config)")
    parser.add_argument(
        "--list-envs",
        action="store_true",
        help="List available environment configurations"
    )
    parser.add_argument(
        "--create-sample",
        help="Create a sample .env file for the specified environment"
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="List all landmarks")

    add = sub.add_parser("add", help="Create a landmark")
    add.add_argument("--title", required=True)
    add.add_argument("--lat", help="Latitude in decimal degrees")
    add.add_argument("--lon", help="Longitude in decimal degrees")
    add.add_argument("--gps", help="Device fix as LAT,LON; fills --lat/--lon when omitted")
    add.add_argument("--image", help="Path to a local photo")

    edit = sub.add_parser("edit", help="Update a landmark")
    edit.add_argument("id", type=int)
    edit.add_argument("--title")
    edit.add_argument("--lat")
    edit.add_argument("--lon")
    edit.add_argument("--image")

    delete = sub.add_parser("delete", help="Delete a landmark")
    delete.add_argument("id", type=int)

    sub.add_parser("pins", help="Print map pins and view as JSON")
    sub.add_parser("probe", help="Diagnose the API endpoint")

    serve = sub.add_parser("serve", help="Run the local sandbox api.php server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--seed", action="store_true", help="Pre-populate sample landmarks")

    return parser


async def build_view_model(settings: Settings) -> LandmarkViewModel:
    client = LandmarkApiClient(settings.api)
    repository = LandmarkRepository(client, ImageProcessor(settings.images))
    return await LandmarkViewModel.create(repository)


def print_list_state(view_model: LandmarkViewModel) -> int:
    state = view_model.ui_state.value
    if isinstance(state, ListSuccess):
        if not state.landmarks:
            print("No landmarks found")
        for landmark in state.landmarks:
            print(f"[{landmark.id}] {landmark.title} ({landmark.latitude}, {landmark.longitude})")
            if landmark.image:
                print(f"      {landmark.image}")
        return 0
    if isinstance(state, ListError):
        print(f"✗ Failed to load landmarks: {state.message}")
        return 1
    if isinstance(state, ListLoading):
        print("… still loading")
        return 1
    raise TypeError(f"Unhandled list state: {state!r}")


def print_crud_state(view_model: LandmarkViewModel) -> int:
    state = view_model.crud_operation_state.value
    view_model.clear_crud_operation_state()
    if isinstance(state, CrudSuccess):
        print(f"✓ {state.message}")
        return 0
    if isinstance(state, CrudError):
        print(f"✗ {state.message}")
        return 1
    print(f"✗ Operation did not complete ({type(state).__name__})")
    return 1


async def resolve_coordinates(args, settings: Settings):
    lat_text, lon_text = args.lat, args.lon
    if (lat_text is None or lon_text is None) and args.gps:
        try:
            lat_gps, lon_gps = (parse_coordinate(part, "GPS") for part in args.gps.split(",", 1))
        except ValueError:
            raise ValidationError("--gps must look like LAT,LON")
        service = LocationService(StaticLocationProvider(lat_gps, lon_gps), settings.location)
        try:
            fix = await service.current_location()
        except LocationUnavailableError as e:
            print(f"! Location unavailable: {e.reason}; enter coordinates manually")
        else:
            lat_text = lat_text if lat_text is not None else str(fix.latitude)
            lon_text = lon_text if lon_text is not None else str(fix.longitude)
    return lat_text, lon_text


async def read_form(args, settings: Settings):
    """Validated (title, lat, lon) for add/edit; None where edit leaves a field unchanged."""
    if args.command == "add":
        lat_text, lon_text = await resolve_coordinates(args, settings)
        return validate_landmark_form(args.title, lat_text, lon_text)
    title = validate_title(args.title) if args.title is not None else None
    lat = validate_latitude(parse_coordinate(args.lat, "Latitude")) if args.lat is not None else None
    lon = validate_longitude(parse_coordinate(args.lon, "Longitude")) if args.lon is not None else None
    return title, lat, lon


async def run_command(args, settings: Settings, view_model_factory=build_view_model) -> int:
    if args.command == "probe":
        async with LandmarkApiClient(settings.api) as client:
            probe = await probe_endpoint(client)
        print(json.dumps(asdict(probe), indent=2))
        return 0 if probe.ok else 1

    form = await read_form(args, settings) if args.command in ("add", "edit") else None

    view_model = await view_model_factory(settings)
    try:
        if args.command == "list":
            return print_list_state(view_model)

        if args.command == "pins":
            payload = {
                "view": asdict(map_view_for(view_model.landmarks, settings.map)),
                "pins": [asdict(pin) for pin in view_model.map_pins()],
            }
            print(json.dumps(payload, indent=2))
            return 0 if isinstance(view_model.ui_state.value, ListSuccess) else 1

        if args.command == "add":
            await view_model.create_landmark(*form, args.image)
            return print_crud_state(view_model)

        if args.command == "edit":
            await view_model.update_landmark(args.id, *form, args.image)
            return print_crud_state(view_model)

        if args.command == "delete":
            await view_model.delete_landmark(args.id)
            return print_crud_state(view_model)
    finally:
        await view_model.aclose()
        logger.debug("API call metrics", extra={"metrics": get_metrics_snapshot()})

    return 2


def serve(args, settings: Settings) -> None:
    import uvicorn

    if args.seed:
        settings.sandbox.seed_sample_data = True
    host = args.host or settings.sandbox.host
    port = args.port or settings.sandbox.port

    print(f"🚀 Starting {settings.app_name} sandbox on http://{host}:{port}/{settings.api.endpoint}")

    from app.main import create_app
    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        log_level=settings.log_level.value.lower(),
        access_log=False,
    )


def main(argv: Optional[list] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_envs:
        envs = ConfigLoader.get_available_environments()
        print("Available environment configurations:")
        for env in envs:
            print(f"  - {env}")
        return 0

    if args.create_sample:
        try:
            sample_file = ConfigLoader.create_sample_env_file(args.create_sample)
            print(f"✓ Sample configuration created: {sample_file}")
        except (ValueError, OSError) as e:
            print(f"✗ Failed to create sample configuration: {e}")
            return 1
        return 0

    if args.command is None:
        parser.print_help()
        return 2

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"✗ Failed to load configuration: {e}")
        return 1

    if args.base_url:
        settings.api.base_url = args.base_url if args.base_url.endswith("/") else args.base_url + "/"
    if args.log_level:
        settings.log_level = LogLevel(args.log_level)

    configure_logging(settings.log_level.value, settings.log_format, settings.log_file)

    if args.command == "serve":
        serve(args, settings)
        return 0

    try:
        return asyncio.run(run_command(args, settings))
    except ValidationError as e:
        print(f"✗ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

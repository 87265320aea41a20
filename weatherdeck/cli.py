"""CLI entry point for weatherdeck."""

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable

from weatherdeck.chart.mapper import CoordinateMapper, daily_polylines
from weatherdeck.config.loader import dump_config, get_config_value, load_config
from weatherdeck.config.schema import AppConfig
from weatherdeck.ingest.geolocation import FixedGeolocator, UnsupportedGeolocator
from weatherdeck.ingest.openweather_client import OpenWeatherClient
from weatherdeck.models.common import MetricKind
from weatherdeck.models.search import Notification
from weatherdeck.pipeline.request_coordinator import RequestCoordinator
from weatherdeck.reporting.formatters import (
    format_chart_text,
    format_daily_text,
    format_hourly_text,
    format_state_json,
    format_weather_text,
)

DEFAULT_CONFIG = "weatherdeck.yaml"

Submit = Callable[[RequestCoordinator], Awaitable[None]]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherdeck",
        description="Current weather and forecast for a city or position",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--json", action="store_true", help="Print state as JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    city_p = sub.add_parser("city", help="Weather for a city name")
    city_p.add_argument("name", nargs="*", help="City name (defaults to config)")

    coords_p = sub.add_parser("coords", help="Weather for a coordinate pair")
    coords_p.add_argument("lat", type=float)
    coords_p.add_argument("lon", type=float)

    here_p = sub.add_parser("here", help="Weather at the device position")
    here_p.add_argument("--lat", type=float, help="Override position latitude")
    here_p.add_argument("--lon", type=float, help="Override position longitude")

    chart_p = sub.add_parser("chart", help="Chart geometry for the hourly window")
    chart_p.add_argument("name", nargs="+", help="City name")
    chart_p.add_argument(
        "--metric", choices=[m.value for m in MetricKind], default=MetricKind.TEMPERATURE.value
    )
    chart_p.add_argument("--daily", action="store_true", help="Daily temperature lines instead")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. search.debounce_ms")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "city":
        name = " ".join(args.name) or config.search.default_city
        return _run(config, lambda c: _submit_city(c, name), args.json)
    elif args.command == "coords":
        return _run(
            config, lambda c: _submit_coords(c, args.lat, args.lon), args.json
        )
    elif args.command == "here":
        return _cmd_here(config, args)
    elif args.command == "chart":
        return _cmd_chart(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


async def _submit_city(coordinator: RequestCoordinator, name: str) -> None:
    coordinator.search_by_city(name)


async def _submit_coords(coordinator: RequestCoordinator, lat: float, lon: float) -> None:
    coordinator.search_by_coordinates(lat, lon)


async def _submit_locate(coordinator: RequestCoordinator) -> None:
    await coordinator.locate()


def _run(
    config: AppConfig,
    submit: Submit,
    as_json: bool,
    geolocator: object = None,
    render: Callable[[RequestCoordinator], None] | None = None,
) -> int:
    return asyncio.run(_search(config, submit, as_json, geolocator, render))


async def _search(
    config: AppConfig,
    submit: Submit,
    as_json: bool,
    geolocator: object,
    render: Callable[[RequestCoordinator], None] | None,
) -> int:
    client = OpenWeatherClient.from_config(config.provider)
    notices: list[Notification] = []
    try:
        async with RequestCoordinator.from_config(config, client, geolocator) as coordinator:
            coordinator.notifications.subscribe(notices.append)
            await submit(coordinator)
            await coordinator.settle()

            for notice in notices:
                print(f"Error: {notice.message}")
            weather = coordinator.weather.value
            if weather is None:
                return 1

            if render is not None:
                render(coordinator)
            elif as_json:
                print(format_state_json(weather, coordinator.forecast.value))
            else:
                print(format_weather_text(weather, coordinator.city_time.value))
                print(format_daily_text(coordinator.forecast.value))
                print(format_hourly_text(coordinator.forecast.value.hourly))
            return 0
    finally:
        await client.aclose()


def _cmd_here(config: AppConfig, args) -> int:
    if args.lat is not None and args.lon is not None:
        geolocator = FixedGeolocator(args.lat, args.lon)
    else:
        geolocator = UnsupportedGeolocator()
    return _run(config, _submit_locate, args.json, geolocator=geolocator)


def _cmd_chart(config: AppConfig, args) -> int:
    name = " ".join(args.name)
    metric = MetricKind(args.metric)

    def render(coordinator: RequestCoordinator) -> None:
        views = coordinator.forecast.value
        if args.daily:
            for line_name, line in daily_polylines(views.daily, config.charts.daily).items():
                print(f"{line_name}: {line or '-'}")
            return
        mapper = CoordinateMapper(config.charts.hourly)
        print(format_chart_text(mapper.build_chart(views.hourly, metric)))

    return _run(config, lambda c: _submit_city(c, name), args.json, render=render)


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(dump_config(config))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except KeyError as e:
            print(f"Error: {e}")
            return 1
        print(f"{args.key} = {value}")
        return 0
    else:
        print("Usage: weatherdeck config {show|get}")
        return 1

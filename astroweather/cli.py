"""CLI entry point for the Astrospheric weather engine."""

import argparse
import logging

from astroweather.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from astroweather.config.schema import WeatherConfig
from astroweather.daemon import WeatherDaemon, daemon_status, stop_daemon
from astroweather.models.common import Mode, utc_now
from astroweather.models.forecast import TickStatus
from astroweather.pipeline.update_controller import UpdateController
from astroweather.reporting.formatters import format_result_json, format_result_text

DEFAULT_CONFIG = "astroweather.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="astroweather",
        description="Astrospheric forecast current-conditions engine",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # tick
    tick_p = sub.add_parser("tick", help="Fetch if needed and print current conditions")
    tick_p.add_argument("--lat", type=float, help="Override latitude")
    tick_p.add_argument("--lon", type=float, help="Override longitude")
    tick_p.add_argument(
        "--from-device",
        metavar="NAME",
        help="Treat --lat/--lon as a GEOGRAPHIC_COORD broadcast snooped from NAME",
    )
    tick_p.add_argument(
        "--simulated", action="store_true", help="Report simulated readings"
    )
    tick_p.add_argument("--json", action="store_true", help="JSON output")

    # daemon
    daemon_p = sub.add_parser("daemon", help="Run ticks on the refresh period")
    daemon_p.add_argument("--interval", type=int, help="Seconds between ticks")
    daemon_p.add_argument("--stop", action="store_true", help="Stop running daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon status")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value and save it")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command == "tick":
        if (args.lat is None) != (args.lon is None):
            parser.error("--lat and --lon must be given together")
        if args.from_device and args.lat is None:
            parser.error("--from-device requires --lat and --lon")

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "daemon" and args.stop:
        return stop_daemon()
    if args.command == "daemon" and args.status:
        return daemon_status()

    config = load_config(args.config)

    if args.command == "tick":
        return _cmd_tick(config, args)
    elif args.command == "daemon":
        return _cmd_daemon(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_tick(config: WeatherConfig, args) -> int:
    if args.simulated:
        config = config.model_copy(update={"mode": Mode.SIMULATED})
    controller = UpdateController(config)
    if args.from_device:
        controller.location.apply_snooped(
            args.from_device, {"LAT": args.lat, "LONG": args.lon}
        )
    elif args.lat is not None:
        controller.location.set_location(args.lat, args.lon)
    result = controller.tick(utc_now())
    if args.json:
        print(format_result_json(result))
    else:
        print(format_result_text(result))
        if result.summary:
            print(result.summary)
    return 0 if result.status == TickStatus.OK else 1


def _cmd_daemon(config: WeatherConfig, args) -> int:
    daemon = WeatherDaemon(config, interval=args.interval)
    daemon.start()
    return 0


def _cmd_config(config: WeatherConfig, args) -> int:
    if args.config_command == "show":
        data = config.model_copy(
            update={
                "provider": config.provider.model_copy(
                    update={"api_key": "***" if config.provider.api_key else ""}
                )
            }
        )
        print(data.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1

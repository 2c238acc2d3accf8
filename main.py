import argparse
import json
import sys
from pathlib import Path

import services.error as error
import services.logger as log
import services.config as config
import services.config_io as config_io
from drivers.manager import DriverManager

l = log.get_logger()


def cmd_convert(src: str, dst: str) -> int:
    src_path = Path(src)
    dst_path = Path(dst)

    if not src_path.is_file():
        print(f"Error: source file not found: {src_path}", file=sys.stderr)
        return 1

    try:
        data = config_io.load_config(src_path)
    except Exception as e:
        print(f"Error reading {src_path}: {e}", file=sys.stderr)
        return 1

    try:
        config_io.save_config(data, dst_path)
    except Exception as e:
        print(f"Error writing {dst_path}: {e}", file=sys.stderr)
        return 1

    print(f"Converted {src_path} → {dst_path}")
    return 0


def cmd_list(manager: DriverManager, category: str | None = None, status: int | None = None) -> int:
    drivers = manager.get_list(category, status)
    if not drivers:
        print("No drivers installed.")
        return 0

    for d in drivers:
        state = "enabled" if d.enabled else "disabled"
        print(f"{d.name:<20} {d.category or '-':<14} {d.version:<8} {state:<9} {d.title}")
    return 0


def cmd_show(manager: DriverManager, name: str) -> int:
    descriptor = manager.get_driver(name)
    if descriptor is None:
        print(f"Error: driver not found: {name}", file=sys.stderr)
        return 1

    print(json.dumps(descriptor.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="drivers", description="Driver registry inspection")
    subparsers = parser.add_subparsers(dest="command", required=True)

    conv = subparsers.add_parser("convert", help="Convert a config file between formats (json/yaml/toml)")
    conv.add_argument("src", help="Source config file (e.g. config.json)")
    conv.add_argument("dst", help="Destination config file (e.g. config.yaml)")

    lst = subparsers.add_parser("list", help="List installed drivers")
    lst.add_argument("--category", help="Only drivers in this category")
    lst.add_argument("--status", type=int, choices=(0, 1), help="1 = enabled, 0 = disabled")

    show = subparsers.add_parser("show", help="Show one driver with its stored config")
    show.add_argument("name", help="Driver name")

    return parser


def main(argv: list[str] | None = None) -> int:
    error.install_excepthook()
    args = build_parser().parse_args(argv)

    if args.command == "convert":
        return cmd_convert(args.src, args.dst)

    settings = config.load_settings()
    log.set_level("DEBUG" if settings.verbose else settings.log_level)
    l.debug(f"Using {settings.registry.backend} registry")

    manager = DriverManager(config.create_registry(settings))
    if args.command == "list":
        return cmd_list(manager, args.category, args.status)
    return cmd_show(manager, args.name)


if __name__ == "__main__":
    sys.exit(main())

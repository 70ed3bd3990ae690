"""
Command-line interface for ergogen-router.

Provides CLI commands via the `ergogen-router` command:

    ergogen-router route <route>       - Render a single route string
    ergogen-router render <placements> - Render every router footprint in a YAML file
    ergogen-router check <placements>  - Interpret every route and report problems
    ergogen-router config              - Show or initialize configuration

Examples:
    ergogen-router route "f(-8.275,5.1)(-8.275,7.26)" --at "100 50 0" --net 3
    ergogen-router route "b(0,0)(1,1)v(2,2)" --format legacy --locked
    ergogen-router render keyboard.yaml -o routes.kicad_sexp
    ergogen-router check keyboard.yaml --format json
    ergogen-router config --show
"""

import argparse
import sys
from typing import List, Optional

from ergogen_router import __version__
from ergogen_router.primitives import RecordFormat

__all__ = ["main"]


def _add_router_options(parser: argparse.ArgumentParser) -> None:
    """Options overriding the [router] config section."""
    parser.add_argument("--width", type=float, help="Trace width in mm")
    parser.add_argument("--via-size", type=float, help="Via pad diameter in mm")
    parser.add_argument("--via-drill", type=float, help="Via drill diameter in mm")
    parser.add_argument(
        "--locked", action="store_true", default=None, help="Mark traces and vias as locked"
    )
    parser.add_argument(
        "--format",
        dest="record_format",
        choices=[f.value for f in RecordFormat],
        help="Record syntax (default: kicad8)",
    )
    parser.add_argument("--precision", type=int, help="Decimal digits of emitted coordinates")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for ergogen-router CLI."""
    parser = argparse.ArgumentParser(
        prog="ergogen-router",
        description="Render keyboard footprint route strings as KiCad traces and vias",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"ergogen-router {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Route subcommand
    route_parser = subparsers.add_parser("route", help="Render a single route string")
    route_parser.add_argument("route", help="Route string, e.g. 'f(0,0)(1,1)v'")
    route_parser.add_argument(
        "--at", default="0 0 0", help="Anchor as 'X Y [R]' or '(at X Y R)' (default: origin)"
    )
    route_parser.add_argument("--net", help="Default net: index or name")
    route_parser.add_argument(
        "--nets", default="", help="Comma-separated global net names for <net> commands"
    )
    _add_router_options(route_parser)

    # Render subcommand
    render_parser = subparsers.add_parser(
        "render", help="Render every router footprint in a placement file"
    )
    render_parser.add_argument("placements", help="Path to YAML placement file")
    render_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    render_parser.add_argument(
        "--no-global-nets",
        action="store_true",
        help="Reject <net> commands as unsupported",
    )
    _add_router_options(render_parser)

    # Check subcommand
    check_parser = subparsers.add_parser(
        "check", help="Interpret every route and report problems"
    )
    check_parser.add_argument("placements", help="Path to YAML placement file")
    check_parser.add_argument("--format", choices=["table", "json"], default="table")
    check_parser.add_argument("-q", "--quiet", action="store_true", help="Only show errors")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Show or initialize configuration")
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--show", action="store_true", help="Show effective configuration with sources"
    )
    config_group.add_argument(
        "--init", action="store_true", help="Create template config file in current directory"
    )
    config_group.add_argument("--paths", action="store_true", help="Show config file paths")
    config_parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/ergogen-router/config.toml) for --init",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        from ergogen_router.logging import enable_verbose

        enable_verbose("DEBUG")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "route":
        from .render_cmd import run_route

        return run_route(args)
    elif args.command == "render":
        from .render_cmd import run_render

        return run_render(args)
    elif args.command == "check":
        from .check_cmd import run_check

        return run_check(args)
    elif args.command == "config":
        from .config_cmd import run_config

        return run_config(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())

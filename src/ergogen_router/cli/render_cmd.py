"""
Render commands for ergogen-router CLI.

Usage:
    ergogen-router route <route> [--at "X Y R"] [--net N] [options]
    ergogen-router render <placements.yaml> [-o OUTPUT] [options]
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from ergogen_router.config import Config, ConfigError, RouterConfig
from ergogen_router.exceptions import RouterError
from ergogen_router.geometry import Anchor
from ergogen_router.loader import load_placements
from ergogen_router.nets import NetTable
from ergogen_router.router import RouterFootprint, render


def load_router_config(args: argparse.Namespace) -> RouterConfig:
    """Load the [router] config section and apply command-line overrides.

    Raises:
        ConfigError: If a config file is invalid
    """
    router = Config.load().router
    overrides = {
        "width": args.width,
        "via_size": args.via_size,
        "via_drill": args.via_drill,
        "locked": args.locked,
        "precision": args.precision,
        "format": args.record_format,
    }
    return dataclasses.replace(
        router, **{key: value for key, value in overrides.items() if value is not None}
    )


def parse_at(text: str) -> Anchor:
    """Parse an anchor given as ``X Y [R]`` or ``(at X Y [R])``."""
    if text.strip().startswith("("):
        return Anchor.from_at(text)
    return Anchor.from_at(f"(at {text})")


def run_route(args: argparse.Namespace) -> int:
    """Render a single route string to stdout."""
    try:
        router = load_router_config(args)
        anchor = parse_at(args.at)
        nets = NetTable(name.strip() for name in args.nets.split(",") if name.strip())
        net = args.net if args.net is None or not args.net.isdigit() else int(args.net)
        params = RouterFootprint.from_params({"net": net, "route": args.route}, router, nets)
        text = render(params, anchor, nets)
    except (ConfigError, RouterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(text)
    return 0


def run_render(args: argparse.Namespace) -> int:
    """Render every footprint of a placement file."""
    try:
        router = load_router_config(args)
        placement = load_placements(args.placements, router)
        text = placement.render(resolve_nets=not args.no_global_nets)
    except (ConfigError, RouterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        print(
            f"Wrote {len(placement.instances)} footprint(s) to {output}",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(text)
    return 0

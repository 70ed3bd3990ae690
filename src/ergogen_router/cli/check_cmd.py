"""Check command: interpret every route of a placement file.

Reports per-footprint segment and via counts and trace length, and every
route error with its position, without writing any output file.

Usage:
    ergogen-router check keyboard.yaml
    ergogen-router check keyboard.yaml --format json
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ergogen_router.config import Config, ConfigError
from ergogen_router.exceptions import RouteError, RouterError
from ergogen_router.geometry import distance
from ergogen_router.loader import FootprintInstance, load_placements
from ergogen_router.nets import NetTable
from ergogen_router.primitives import Segment, Via
from ergogen_router.router import collect_records


@dataclass
class FootprintReport:
    """Outcome of interpreting one footprint's routes."""

    name: str
    segments: int = 0
    vias: int = 0
    length_mm: float = 0.0
    error: str | None = None
    position: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ok": self.ok,
            "segments": self.segments,
            "vias": self.vias,
            "length_mm": round(self.length_mm, 3),
            "error": self.error,
            "position": self.position,
        }


def check_instance(instance: FootprintInstance, nets: NetTable) -> FootprintReport:
    """Interpret a footprint's routes and summarize the result."""
    report = FootprintReport(name=instance.name)
    try:
        records = collect_records(instance.params, instance.anchor, nets)
    except RouteError as e:
        report.error = e.message
        report.position = e.position
        return report

    for record in records:
        if isinstance(record, Segment):
            report.segments += 1
            report.length_mm += distance(record.start, record.end)
        elif isinstance(record, Via):
            report.vias += 1
    return report


def run_check(args: argparse.Namespace) -> int:
    """Run the check command."""
    try:
        router = Config.load().router
        placement = load_placements(args.placements, router)
    except (ConfigError, RouterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reports = [check_instance(instance, placement.nets) for instance in placement.instances]

    if args.format == "json":
        _output_json(reports)
    else:
        _output_table(reports, args.placements, quiet=args.quiet)

    return 0 if all(r.ok for r in reports) else 1


def _output_json(reports: list[FootprintReport]) -> None:
    """Output reports as JSON."""
    output = {
        "footprints": [r.to_dict() for r in reports],
        "summary": {
            "total": len(reports),
            "failed": sum(1 for r in reports if not r.ok),
            "segments": sum(r.segments for r in reports),
            "vias": sum(r.vias for r in reports),
        },
    }
    print(json.dumps(output, indent=2))


def _output_table(reports: list[FootprintReport], filename: str, quiet: bool = False) -> None:
    """Output reports as a formatted table."""
    console = Console()
    failed = [r for r in reports if not r.ok]

    if quiet:
        for report in failed:
            console.print(f"[red]{escape(report.name)}[/red]: {escape(report.error)}")
        return

    table = Table(title=f"Routes: {escape(filename)}")
    table.add_column("Footprint")
    table.add_column("Segments", justify="right")
    table.add_column("Vias", justify="right")
    table.add_column("Length (mm)", justify="right")
    table.add_column("Status")

    for report in reports:
        if report.ok:
            status = "[green]ok[/green]"
        else:
            status = f"[red]{escape(report.error)}[/red]"
        table.add_row(
            escape(report.name),
            str(report.segments),
            str(report.vias),
            f"{report.length_mm:.3f}",
            status,
        )

    console.print(table)
    if failed:
        console.print(f"[red]{len(failed)} of {len(reports)} footprint(s) failed[/red]")
    else:
        console.print(f"[green]All {len(reports)} footprint(s) routed[/green]")

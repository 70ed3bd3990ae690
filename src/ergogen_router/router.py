"""
Router footprint: renders route strings into KiCad traces and vias.

The router footprint takes a single ``route`` and/or a list of ``routes``
that share the same net and sizes. Each route string is interpreted on its
own: layer and cursor never carry over, and every route string starts on
the footprint's default net.

Usage:
    from ergogen_router import Anchor, Net, RouterFootprint, render

    params = RouterFootprint(
        net=Net(3, "ROW0"),
        route="f(-8.275,5.1)(-8.275,7.26)",
        routes=["b(0,0)(1,1)", "f(2,2)v"],
    )
    text = render(params, Anchor(100, 50, 0))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .config import RouterConfig
from .exceptions import ConfigurationError
from .geometry import Anchor
from .interpreter import RouteInterpreter
from .nets import NO_NET, Net, NetResolver, NetTable
from .primitives import (
    DEFAULT_TRACE_WIDTH,
    DEFAULT_VIA_DRILL,
    DEFAULT_VIA_SIZE,
    Record,
    RecordFormat,
    format_record,
)

logger = logging.getLogger(__name__)

__all__ = ["PARAM_NAMES", "RouterFootprint", "collect_records", "render"]

PARAM_NAMES = (
    "net",
    "width",
    "via_size",
    "via_drill",
    "locked",
    "route",
    "routes",
    "precision",
    "format",
)


@dataclass
class RouterFootprint:
    """Parameters of one router footprint instance.

    Attributes:
        net: Default net for every route of this footprint (default: no net,
            which KiCad fills in when the board is opened)
        width: Trace width in mm. Not recommended below 0.15mm.
        via_size: Via pad diameter in mm
        via_drill: Via drill diameter in mm
        locked: Mark traces and vias as locked in KiCad
        route: A single route string
        routes: Further route strings, each standing on its own
        precision: Decimal digits of emitted coordinates (None: format default)
        record_format: Output syntax of the records
    """

    net: Net = NO_NET
    width: float = DEFAULT_TRACE_WIDTH
    via_size: float = DEFAULT_VIA_SIZE
    via_drill: float = DEFAULT_VIA_DRILL
    locked: bool = False
    route: str = ""
    routes: List[str] = field(default_factory=list)
    precision: Optional[int] = None
    record_format: RecordFormat = RecordFormat.KICAD8

    @property
    def all_routes(self) -> List[str]:
        """Route strings in render order: ``route`` first, then ``routes``."""
        ordered = [self.route] if self.route else []
        ordered.extend(self.routes)
        return ordered

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        defaults: Optional[RouterConfig] = None,
        nets: Optional[NetTable] = None,
    ) -> RouterFootprint:
        """Build footprint parameters from a loose mapping (e.g. YAML).

        Missing values come from ``defaults``. The ``net`` value may be a net
        name (resolved through ``nets``), an index, or a mapping with
        ``index`` and ``name``.

        Raises:
            ConfigurationError: On unknown keys or values of the wrong type
        """
        if defaults is None:
            defaults = RouterConfig()
        if nets is None:
            nets = NetTable()

        unknown = sorted(set(params) - set(PARAM_NAMES))
        if unknown:
            raise ConfigurationError(
                f"Unknown router parameter(s): {', '.join(unknown)}",
                context={"known": ", ".join(PARAM_NAMES)},
            )

        route = params.get("route", "") or ""
        if not isinstance(route, str):
            raise ConfigurationError(f"'route' must be a string, got {type(route).__name__}")

        routes = params.get("routes", []) or []
        if isinstance(routes, str) or not all(isinstance(r, str) for r in routes):
            raise ConfigurationError("'routes' must be a list of strings")

        precision = params.get("precision", defaults.precision)
        if precision is not None and (
            isinstance(precision, bool) or not isinstance(precision, int) or precision < 0
        ):
            raise ConfigurationError(
                f"'precision' must be a non-negative integer, got {precision!r}"
            )

        format_name = params.get("format", defaults.format)
        if not isinstance(format_name, str):
            raise ConfigurationError(f"'format' must be a string, got {format_name!r}")
        try:
            record_format = RecordFormat.from_string(format_name)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        locked = params.get("locked", defaults.locked)
        if not isinstance(locked, bool):
            raise ConfigurationError(f"'locked' must be true or false, got {locked!r}")

        return cls(
            net=_coerce_net(params.get("net"), nets),
            width=_coerce_size(params, "width", defaults.width),
            via_size=_coerce_size(params, "via_size", defaults.via_size),
            via_drill=_coerce_size(params, "via_drill", defaults.via_drill),
            locked=locked,
            route=route,
            routes=list(routes),
            precision=precision,
            record_format=record_format,
        )


def _coerce_net(value: Any, nets: NetTable) -> Net:
    if value is None or value == "":
        return NO_NET
    if isinstance(value, Net):
        return value
    if isinstance(value, str):
        return nets.resolve(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Net(index=value)
    if isinstance(value, Mapping) and "index" in value:
        try:
            index = int(value["index"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid net index: {value['index']!r}") from e
        return Net(index=index, name=str(value.get("name", "")))
    raise ConfigurationError(f"Invalid net: {value!r}")


def _coerce_size(params: Mapping[str, Any], key: str, default: float) -> float:
    value = params.get(key, default)
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value <= 0
    ):
        raise ConfigurationError(f"'{key}' must be a positive number, got {value!r}")
    return float(value)


def collect_records(
    params: RouterFootprint,
    anchor: Anchor = Anchor(),
    resolver: Optional[NetResolver] = None,
) -> List[Record]:
    """Interpret every route of a footprint, in render order.

    Raises:
        RouteError: From the first route string that fails; nothing is
            returned for the footprint in that case
    """
    interpreter = RouteInterpreter(
        anchor=anchor,
        width=params.width,
        via_size=params.via_size,
        via_drill=params.via_drill,
        resolver=resolver,
    )
    records: List[Record] = []
    for route in params.all_routes:
        records.extend(interpreter.run(route, params.net))
    return records


def render(
    params: RouterFootprint,
    anchor: Anchor = Anchor(),
    resolver: Optional[NetResolver] = None,
) -> str:
    """Render a router footprint to KiCad text.

    Args:
        params: Footprint parameters
        anchor: Footprint placement
        resolver: Optional net-name lookup for ``<net_name>`` commands

    Returns:
        Concatenated segment and via records
    """
    records = collect_records(params, anchor, resolver)
    logger.debug(f"Rendered {len(records)} record(s) at {anchor}")
    return "".join(
        format_record(
            record,
            locked=params.locked,
            precision=params.precision,
            style=params.record_format,
        )
        for record in records
    )

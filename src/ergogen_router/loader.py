"""
YAML placement loader for router footprints.

A placement file stands in for the layout host: it lists router footprint
instances with their anchor and parameters, plus the board's global nets.

Example YAML placement::

    nets: [GND, ROW0, COL0]

    footprints:
      row_route:
        at: {x: 100, y: 50, r: 0}
        params:
          net: ROW0
          route: "f(-8.275,5.1)(-8.275,7.26)"

      col_route:
        at: "(at 119.05 50 90)"
        params:
          net: COL0
          routes:
            - "b(0,0)(0,2)v(1,2)"
            - "f(3,3)<GND>(4,4)"

``at`` accepts a mapping (``x``, ``y`` and ``r``/``rotation``/``angle``), a
``[x, y, r]`` list, or a KiCad ``(at X Y R)`` string.

Usage::

    from ergogen_router.loader import load_placements

    placement = load_placements("keyboard.yaml")
    text = placement.render()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .config import RouterConfig
from .exceptions import ConfigurationError, FileFormatError, FileNotFoundError, RouterError
from .geometry import Anchor
from .nets import NetTable
from .router import RouterFootprint, render

logger = logging.getLogger(__name__)

__all__ = ["FootprintInstance", "Placement", "load_placements", "parse_anchor", "parse_placements"]

_ANGLE_KEYS = ("r", "rotation", "angle")


@dataclass
class FootprintInstance:
    """A placed router footprint.

    Attributes:
        name: Footprint name from the placement file
        anchor: Absolute placement
        params: Router parameters
    """

    name: str
    anchor: Anchor
    params: RouterFootprint

    def render(self, nets: Optional[NetTable] = None) -> str:
        return render(self.params, self.anchor, nets)


@dataclass
class Placement:
    """All router footprints of a board, with the board's net table."""

    instances: List[FootprintInstance] = field(default_factory=list)
    nets: NetTable = field(default_factory=NetTable)
    source: Optional[Path] = None

    def render(self, resolve_nets: bool = True) -> str:
        """Render every footprint in file order.

        Args:
            resolve_nets: Whether ``<net_name>`` commands may use the net table

        Raises:
            RouteError: From the first footprint that fails
        """
        resolver = self.nets if resolve_nets else None
        return "".join(instance.render(resolver) for instance in self.instances)


def parse_anchor(value: Any, name: str = "") -> Anchor:
    """Build an anchor from a placement ``at`` value.

    Raises:
        ConfigurationError: If the value has an unsupported shape
    """
    if value is None:
        return Anchor()
    if isinstance(value, str):
        try:
            return Anchor.from_at(value)
        except RouterError as e:
            raise ConfigurationError(
                f"Invalid placement for footprint '{name}': {value}"
            ) from e
    if isinstance(value, (list, tuple)) and len(value) in (2, 3):
        if all(_is_number(v) for v in value):
            return Anchor(*(float(v) for v in value))
    if isinstance(value, dict):
        angle = next((value[key] for key in _ANGLE_KEYS if key in value), 0)
        x, y = value.get("x", 0), value.get("y", 0)
        if all(_is_number(v) for v in (x, y, angle)):
            return Anchor(float(x), float(y), float(angle))
    raise ConfigurationError(
        f"Invalid placement for footprint '{name}': {value!r}",
        suggestions=["Use {x: X, y: Y, r: R}, [X, Y, R] or '(at X Y R)'"],
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_placements(
    data: Any,
    config: Optional[RouterConfig] = None,
    source: Optional[Path] = None,
) -> Placement:
    """Build a placement from already-loaded YAML data.

    Raises:
        FileFormatError: If the document structure is wrong
        ConfigurationError: If a footprint's parameters are invalid
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FileFormatError(
            "Placement file must contain a mapping at the top level",
            file_path=source,
        )

    net_names = data.get("nets") or []
    if not isinstance(net_names, list) or not all(isinstance(n, str) for n in net_names):
        raise FileFormatError("'nets' must be a list of net names", file_path=source)
    nets = NetTable(net_names)

    footprints = data.get("footprints") or {}
    if not isinstance(footprints, dict):
        raise FileFormatError(
            "'footprints' must be a mapping of footprint names to definitions",
            file_path=source,
        )

    instances = []
    for name, definition in footprints.items():
        definition = definition or {}
        if not isinstance(definition, dict):
            raise FileFormatError(f"Footprint '{name}' must be a mapping", file_path=source)
        try:
            params = RouterFootprint.from_params(definition.get("params") or {}, config, nets)
        except ConfigurationError as e:
            e.context.setdefault("footprint", name)
            raise
        instances.append(
            FootprintInstance(str(name), parse_anchor(definition.get("at"), name), params)
        )

    logger.info(f"Loaded {len(instances)} router footprint(s), {len(nets.names)} net(s)")
    return Placement(instances=instances, nets=nets, source=source)


def load_placements(path: str | Path, config: Optional[RouterConfig] = None) -> Placement:
    """Load a YAML placement file.

    Args:
        path: Path to the YAML file
        config: Router defaults for parameters a footprint leaves unset

    Raises:
        FileNotFoundError: If the file does not exist
        FileFormatError: If the file is not valid YAML or has the wrong shape
        ConfigurationError: If a footprint's parameters are invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            "Placement file not found",
            context={"file": str(path)},
            suggestions=["Check the path passed on the command line"],
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise FileFormatError(f"Invalid YAML: {e}", file_path=path) from e

    logger.info(f"Reading placements from {path}")
    return parse_placements(data, config, source=path)

"""
ergogen-router: Route strings to KiCad traces and vias for keyboard footprints.

Keyboard layouts repeat the same routing under tens of keys. The router
footprint describes that routing once, as a compact string relative to the
footprint's anchor, and renders it wherever the footprint is placed.

Modules:
    geometry: Anchor placement and coordinate transform
    interpreter: Route mini-language tokenizer and interpreter
    primitives: Segment and via records and their KiCad text
    router: Router footprint parameters and rendering
    nets: Net references and net-name resolution
    loader: YAML placement files
    config: TOML configuration defaults

Quick Start::

    from ergogen_router import Anchor, Net, RouterFootprint, render

    params = RouterFootprint(net=Net(1, "ROW0"), route="f(-8.275,5.1)(-8.275,7.26)")
    print(render(params, Anchor(x=100, y=50, angle=0)))
"""

__version__ = "0.1.0"

from ergogen_router.exceptions import (
    RouteError,
    RouterError,
    RouteStateError,
    RouteSyntaxError,
    RouteValueError,
    UnsupportedFeatureError,
)
from ergogen_router.geometry import Anchor, transform
from ergogen_router.interpreter import RouteInterpreter, interpret, tokenize
from ergogen_router.layers import Layer
from ergogen_router.nets import NO_NET, Net, NetTable
from ergogen_router.primitives import RecordFormat, Segment, Via
from ergogen_router.router import RouterFootprint, collect_records, render

__all__ = [
    # Version
    "__version__",
    # Geometry
    "Anchor",
    "transform",
    # Interpreter
    "RouteInterpreter",
    "interpret",
    "tokenize",
    # Records
    "Layer",
    "RecordFormat",
    "Segment",
    "Via",
    # Nets
    "Net",
    "NetTable",
    "NO_NET",
    # Router
    "RouterFootprint",
    "collect_records",
    "render",
    # Errors
    "RouterError",
    "RouteError",
    "RouteSyntaxError",
    "RouteStateError",
    "RouteValueError",
    "UnsupportedFeatureError",
]

"""
Route mini-language tokenizer and interpreter.

A route is a string of one-letter commands and positions that follows, to
some extent, KiCad's routing key presses:

    f            route on the front layer
    b            route on the back layer (there is no default layer)
    v            place a via at the cursor and switch layer
    x or |       lift the pen; the next position starts a new trace
    (x, y)       route to the position, relative to the footprint anchor.
                 The comma is optional and spaces are allowed. The first
                 position (or the first after 'x') only places the cursor.
    <net_name>   use the named net for the following records

Commands are case-insensitive and whitespace between them is ignored.

Usage:
    from ergogen_router.interpreter import RouteInterpreter
    from ergogen_router.geometry import Anchor

    interpreter = RouteInterpreter(anchor=Anchor(10, 20, 0))
    records = interpreter.run("f(-8.275,5.1)(-8.275,7.26)v(0,7.26)")
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional

from .exceptions import (
    RouteStateError,
    RouteSyntaxError,
    RouteValueError,
    UnsupportedFeatureError,
)
from .geometry import Anchor, Point
from .layers import Layer
from .nets import NO_NET, Net, NetResolver
from .primitives import (
    DEFAULT_TRACE_WIDTH,
    DEFAULT_VIA_DRILL,
    DEFAULT_VIA_SIZE,
    Record,
    Segment,
    Via,
)

logger = logging.getLogger(__name__)

__all__ = [
    "InterpreterState",
    "RouteInterpreter",
    "Token",
    "TokenKind",
    "interpret",
    "parse_point",
    "tokenize",
]

_NUMBER = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")
_SEPARATORS = re.compile(r"[\s,]+")


class TokenKind(Enum):
    """Kinds of route tokens."""

    LAYER = "layer"
    POINT = "point"
    VIA = "via"
    PEN_UP = "pen_up"
    NET = "net"


@dataclass(frozen=True)
class Token:
    """A route token.

    Attributes:
        kind: Token kind
        position: Index of the token's first character in the route
        text: Source text of the token
        value: Layer for LAYER, local (x, y) for POINT, name for NET
    """

    kind: TokenKind
    position: int
    text: str
    value: Any = None


@dataclass
class InterpreterState:
    """Mutable state of a single route execution."""

    net: Net = NO_NET
    layer: Optional[Layer] = None
    cursor: Optional[Point] = None


def parse_point(text: str, route: Optional[str] = None, position: Optional[int] = None) -> Point:
    """Parse a position group such as ``(1.5,-2)`` or ``( 1.5 -2 )``.

    Commas and whitespace are interchangeable separators; repeated, leading
    and trailing separators are ignored.

    Raises:
        RouteValueError: If the group does not hold exactly two numbers
    """
    inner = text
    if inner.startswith("("):
        inner = inner[1:]
    if inner.endswith(")"):
        inner = inner[:-1]
    parts = [part for part in _SEPARATORS.split(inner) if part]

    if len(parts) == 2 and all(_NUMBER.match(part) for part in parts):
        x, y = float(parts[0]), float(parts[1])
        # overflowing exponents such as 1e999 become inf
        if math.isfinite(x) and math.isfinite(y):
            return (x, y)
    raise RouteValueError(
        f"Invalid position encountered: {text}",
        route=route,
        position=position,
        text=text,
        suggestions=["Positions are written as (x,y) or (x y) with finite numeric x and y"],
    )


def tokenize(route: str) -> Iterator[Token]:
    """Scan a route string left to right.

    Tokens are produced lazily, so an error late in the string is raised
    only after every earlier token has been consumed.

    Raises:
        RouteSyntaxError: On an unsupported character or an unclosed group
        RouteValueError: On a malformed position group
    """
    i = 0
    length = len(route)
    while i < length:
        ch = route[i]
        command = ch.lower()

        if ch.isspace():
            i += 1
            continue

        if command in ("f", "b"):
            yield Token(TokenKind.LAYER, i, ch, Layer.from_command(command))
        elif command == "v":
            yield Token(TokenKind.VIA, i, ch)
        elif command in ("x", "|"):
            yield Token(TokenKind.PEN_UP, i, ch)
        elif ch == "(":
            close = route.find(")", i + 1)
            if close == -1:
                raise RouteSyntaxError(
                    f"Unclosed position parenthesis in {route} at character position {i}",
                    route=route,
                    position=i,
                    character=ch,
                )
            text = route[i : close + 1]
            yield Token(TokenKind.POINT, i, text, parse_point(text, route, i))
            i = close + 1
            continue
        elif ch == "<":
            close = route.find(">", i + 1)
            if close == -1:
                raise RouteSyntaxError(
                    f"Unclosed net parenthesis in {route} at character position {i}",
                    route=route,
                    position=i,
                    character=ch,
                )
            name = route[i + 1 : close].strip()
            if not name:
                raise RouteSyntaxError(
                    f"Empty net name at character position {i}",
                    route=route,
                    position=i,
                    character=ch,
                )
            yield Token(TokenKind.NET, i, route[i : close + 1], name)
            i = close + 1
            continue
        else:
            raise RouteSyntaxError(
                f"Unsupported character '{ch}' at position {i}.",
                route=route,
                position=i,
                character=ch,
                suggestions=["Valid commands are f, b, v, x, |, (x,y) and <net_name>"],
            )
        i += 1


class RouteInterpreter:
    """Turns route strings into segment and via records.

    The interpreter holds the render-wide settings (anchor, sizes and net
    resolver); each call to :meth:`run` starts from a fresh state.

    Args:
        anchor: Footprint placement that route positions are relative to
        width: Trace width in mm
        via_size: Via pad diameter in mm
        via_drill: Via drill diameter in mm
        resolver: Optional net-name lookup used by ``<net_name>`` commands
    """

    def __init__(
        self,
        anchor: Anchor = Anchor(),
        width: float = DEFAULT_TRACE_WIDTH,
        via_size: float = DEFAULT_VIA_SIZE,
        via_drill: float = DEFAULT_VIA_DRILL,
        resolver: Optional[NetResolver] = None,
    ):
        self.anchor = anchor
        self.width = width
        self.via_size = via_size
        self.via_drill = via_drill
        self.resolver = resolver

    def run(self, route: str, net: Net = NO_NET) -> List[Record]:
        """Interpret one route string.

        Args:
            route: Route string
            net: Net used until a ``<net_name>`` command overrides it

        Returns:
            Records in program order, with board coordinates

        Raises:
            RouteError: Any syntax, value, state or unsupported-feature error
        """
        state = InterpreterState(net=net)
        records: List[Record] = []

        for token in tokenize(route):
            if token.kind is TokenKind.LAYER:
                state.layer = token.value

            elif token.kind is TokenKind.POINT:
                if state.cursor is not None:
                    if state.layer is None:
                        raise RouteStateError(
                            "Can't place segment before layer is set, "
                            "use 'f' or 'b', to set starting layer",
                            route=route,
                            position=token.position,
                        )
                    records.append(self._segment(state.cursor, token.value, state))
                state.cursor = token.value

            elif token.kind is TokenKind.VIA:
                if state.cursor is None:
                    raise RouteStateError(
                        "Can't place via when position is not set, "
                        "use (x,y) to set position",
                        route=route,
                        position=token.position,
                    )
                records.append(self._via(state.cursor, state))
                if state.layer is not None:
                    state.layer = state.layer.flipped

            elif token.kind is TokenKind.PEN_UP:
                state.cursor = None

            elif token.kind is TokenKind.NET:
                if self.resolver is None:
                    raise UnsupportedFeatureError(
                        f"Global nets are not supported by this host "
                        f"(character position {token.position})",
                        route=route,
                        position=token.position,
                        suggestions=["Pass a net resolver (e.g. a NetTable) to the router"],
                    )
                state.net = self.resolver(token.value)
                logger.debug(f"Switched to net {state.net} at position {token.position}")

        logger.debug(f"Route {route!r}: {len(records)} record(s)")
        return records

    def _segment(self, start: Point, end: Point, state: InterpreterState) -> Segment:
        return Segment(
            start=self.anchor.transform(*start),
            end=self.anchor.transform(*end),
            width=self.width,
            layer=state.layer,
            net=state.net,
        )

    def _via(self, at: Point, state: InterpreterState) -> Via:
        return Via(
            at=self.anchor.transform(*at),
            size=self.via_size,
            drill=self.via_drill,
            net=state.net,
        )


def interpret(
    route: str,
    net: Net = NO_NET,
    anchor: Anchor = Anchor(),
    width: float = DEFAULT_TRACE_WIDTH,
    via_size: float = DEFAULT_VIA_SIZE,
    via_drill: float = DEFAULT_VIA_DRILL,
    resolver: Optional[NetResolver] = None,
) -> List[Record]:
    """Interpret a single route string with a one-off interpreter."""
    interpreter = RouteInterpreter(anchor, width, via_size, via_drill, resolver)
    return interpreter.run(route, net)

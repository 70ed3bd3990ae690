"""
Footprint-local to board coordinate transform.

Route coordinates are written relative to the footprint anchor. This module
places them on the board using the same rotation convention as KiCad's
footprint placement, so a route keeps its shape when the footprint rotates.

Usage:
    from ergogen_router.geometry import Anchor

    anchor = Anchor(x=100.0, y=50.0, angle=90.0)
    anchor.transform(1.0, 0.0)   # (100.0, 49.0)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Tuple

from .exceptions import RouteValueError

__all__ = [
    "Anchor",
    "DEFAULT_PRECISION",
    "LEGACY_PRECISION",
    "Point",
    "distance",
    "fmt_coord",
    "fmt_number",
    "transform",
]

Point = Tuple[float, float]

# Decimal digits kept in emitted coordinates
DEFAULT_PRECISION = 3
LEGACY_PRECISION = 5

_AT_PATTERN = re.compile(
    r"^\s*\(\s*at\s+(-?[\d.]+(?:[eE][-+]?\d+)?)\s+(-?[\d.]+(?:[eE][-+]?\d+)?)"
    r"(?:\s+(-?[\d.]+(?:[eE][-+]?\d+)?))?\s*\)\s*$"
)


@dataclass(frozen=True)
class Anchor:
    """Absolute position and rotation of a footprint instance.

    Attributes:
        x: Board X position in mm
        y: Board Y position in mm
        angle: Rotation in degrees
    """

    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0

    def transform(self, dx: float, dy: float) -> Point:
        """Convert a footprint-local offset to board coordinates.

        The rotation is the board-style one used by KiCad, not the textbook
        counter-clockwise matrix: Y grows downwards on the board.
        """
        radians = math.radians(self.angle)
        cos = math.cos(radians)
        sin = math.sin(radians)
        return (
            cos * dx + sin * dy + self.x,
            cos * dy - sin * dx + self.y,
        )

    @classmethod
    def from_at(cls, text: str) -> Anchor:
        """Parse a KiCad placement expression such as ``(at 10 20 90)``.

        The rotation is optional and defaults to 0.

        Raises:
            RouteValueError: If the expression is not a valid ``at`` node
        """
        match = _AT_PATTERN.match(text)
        if match is None:
            raise RouteValueError(
                f"Could not get x and y coordinates from placement: {text}",
                text=text,
                suggestions=["Use the form '(at X Y)' or '(at X Y ROTATION)'"],
            )
        try:
            x = float(match.group(1))
            y = float(match.group(2))
            angle = float(match.group(3)) if match.group(3) is not None else 0.0
        except ValueError as e:
            raise RouteValueError(
                f"Invalid number in placement: {text}", text=text
            ) from e
        return cls(x, y, angle)


def transform(anchor: Anchor, point: Point) -> Point:
    """Module-level form of :meth:`Anchor.transform`."""
    return anchor.transform(point[0], point[1])


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def fmt_coord(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Format a coordinate for output.

    Rounds to ``precision`` decimals and trims trailing zeros, so
    ``1.50000`` becomes ``1.5`` and ``2.0`` becomes ``2``. Negative zero
    is printed as ``0``.
    """
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def fmt_number(value: float) -> str:
    """Format a size parameter (width, drill) without float noise.

    Integral values print without a fraction, e.g. ``1`` instead of ``1.0``.
    """
    if float(value) == int(value):
        return str(int(value))
    return repr(float(value))

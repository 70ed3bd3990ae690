"""
Records emitted by the route interpreter.

This module provides:
- RecordFormat: KiCad 8 multi-line blocks or the legacy single-line form
- Segment: Trace segment between two points on one layer
- Via: Layer transition point
- format_record: Render a record as the text chunk appended to a footprint

Coordinates stored on records are absolute board coordinates; rounding only
happens when the record is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .geometry import DEFAULT_PRECISION, LEGACY_PRECISION, Point, fmt_coord, fmt_number
from .layers import VIA_LAYERS, Layer
from .nets import NO_NET, Net

# Defaults of the router footprint, in mm
DEFAULT_TRACE_WIDTH = 0.25
DEFAULT_VIA_SIZE = 0.6
DEFAULT_VIA_DRILL = 0.3


class RecordFormat(Enum):
    """Output syntax for emitted records."""

    KICAD8 = "kicad8"  # Multi-line blocks with (locked yes|no)
    LEGACY = "legacy"  # Single line with a bare 'locked' flag

    @classmethod
    def from_string(cls, value: str) -> RecordFormat:
        """Parse a format name, accepting any case."""
        try:
            return cls(value.lower().strip())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(
                f"Unknown record format {value!r} (expected one of: {choices})"
            ) from None

    @property
    def default_precision(self) -> int:
        return LEGACY_PRECISION if self is RecordFormat.LEGACY else DEFAULT_PRECISION


def _xy(point: Point, precision: int) -> str:
    return f"{fmt_coord(point[0], precision)} {fmt_coord(point[1], precision)}"


def _locked_flag(locked: bool, style: RecordFormat) -> str:
    if style is RecordFormat.LEGACY:
        return "locked " if locked else ""
    return "yes" if locked else "no"


@dataclass(frozen=True)
class Segment:
    """A trace segment."""

    start: Point
    end: Point
    width: float
    layer: Layer
    net: Net = NO_NET

    def to_sexp(
        self,
        locked: bool = False,
        precision: Optional[int] = None,
        style: RecordFormat = RecordFormat.KICAD8,
        indent: str = "  ",
    ) -> str:
        """Generate the KiCad S-expression for this segment."""
        if precision is None:
            precision = style.default_precision
        start = _xy(self.start, precision)
        end = _xy(self.end, precision)

        if style is RecordFormat.LEGACY:
            return (
                f"(segment {_locked_flag(locked, style)}(start {start}) (end {end}) "
                f"(width {fmt_number(self.width)}) (layer {self.layer.kicad_name}) "
                f"(net {self.net.index}))"
            )

        inner = indent * 2
        return (
            f"{indent}(segment\n"
            f"{inner}(start {start})\n"
            f"{inner}(end {end})\n"
            f"{inner}(width {fmt_number(self.width)})\n"
            f"{inner}(locked {_locked_flag(locked, style)})\n"
            f"{inner}(layer {self.layer.kicad_name})\n"
            f"{inner}(net {self.net.index})\n"
            f"{indent})"
        )


@dataclass(frozen=True)
class Via:
    """A through via connecting the front and back copper."""

    at: Point
    size: float
    drill: float
    net: Net = NO_NET
    layers: Tuple[Layer, Layer] = VIA_LAYERS

    def to_sexp(
        self,
        locked: bool = False,
        precision: Optional[int] = None,
        style: RecordFormat = RecordFormat.KICAD8,
        indent: str = "  ",
    ) -> str:
        """Generate the KiCad S-expression for this via."""
        if precision is None:
            precision = style.default_precision
        at = _xy(self.at, precision)
        layers = " ".join(f'"{layer.kicad_name}"' for layer in self.layers)

        if style is RecordFormat.LEGACY:
            return (
                f"(via {_locked_flag(locked, style)}(at {at}) "
                f"(size {fmt_number(self.size)}) (drill {fmt_number(self.drill)}) "
                f"(layers {layers}) (net {self.net.index}))"
            )

        inner = indent * 2
        return (
            f"{indent}(via\n"
            f"{inner}(at {at})\n"
            f"{inner}(size {fmt_number(self.size)})\n"
            f"{inner}(drill {fmt_number(self.drill)})\n"
            f"{inner}(layers {layers})\n"
            f"{inner}(locked {_locked_flag(locked, style)})\n"
            f"{inner}(net {self.net.index})\n"
            f"{indent})"
        )


Record = Union[Segment, Via]


def format_record(
    record: Record,
    locked: bool = False,
    precision: Optional[int] = None,
    style: RecordFormat = RecordFormat.KICAD8,
) -> str:
    """Render a record as the chunk appended to the footprint body.

    KiCad 8 blocks start on a fresh line; every chunk ends with a newline.
    """
    sexp = record.to_sexp(locked=locked, precision=precision, style=style)
    if style is RecordFormat.KICAD8:
        return f"\n{sexp}\n"
    return f"{sexp}\n"

"""
Copper layers reachable from a footprint route.

This module provides:
- Layer: Enum for the two outer copper layers (F.Cu, B.Cu)
"""

from enum import Enum


class Layer(Enum):
    """Routing layers of a two-layer keyboard PCB."""

    F_CU = 0  # Top copper
    B_CU = 1  # Bottom copper

    @property
    def kicad_name(self) -> str:
        return {
            Layer.F_CU: "F.Cu",
            Layer.B_CU: "B.Cu",
        }[self]

    @property
    def flipped(self) -> "Layer":
        """The opposite copper layer, used when passing through a via."""
        return Layer.B_CU if self is Layer.F_CU else Layer.F_CU

    @classmethod
    def from_command(cls, command: str) -> "Layer":
        """Map a route layer command ('f' or 'b', any case) to a layer."""
        return {"f": cls.F_CU, "b": cls.B_CU}[command.lower()]


# Layer pair joined by every through via
VIA_LAYERS = (Layer.F_CU, Layer.B_CU)

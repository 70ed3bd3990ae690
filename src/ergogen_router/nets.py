"""
Net references and net-name resolution.

This module provides:
- Net: A net reference (index + display name) used by emitted records
- NetResolver: Type of the optional ``<net_name>`` lookup capability
- NetTable: A host-owned table that resolves names to nets
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List

from .exceptions import NetLookupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Net:
    """A net reference.

    Index 0 with an empty name is KiCad's "no net"; KiCad fills in the
    missing nets when the board is opened.
    """

    index: int = 0
    name: str = ""

    def __str__(self) -> str:
        return self.name or f"Net_{self.index}"


NO_NET = Net()

NetResolver = Callable[[str], Net]


class NetTable:
    """Global net table for a board.

    Names are resolved to nets with sequential indices starting at 1, in
    the order they are first seen. The empty name always maps to net 0.

    Example::

        nets = NetTable(["GND", "ROW0"])
        nets("ROW0")       # Net(index=2, name="ROW0")
        nets("COL3")       # allocated: Net(index=3, name="COL3")

        strict = NetTable(["GND"], allocate=False)
        strict("COL3")     # raises NetLookupError

    Args:
        names: Net names to register up front
        allocate: Whether unknown names are added on lookup
    """

    def __init__(self, names: Iterable[str] = (), allocate: bool = True):
        self.allocate = allocate
        self._nets: Dict[str, Net] = {"": NO_NET}
        for name in names:
            self.add(name)

    def add(self, name: str) -> Net:
        """Register a net name, returning its net (existing or new)."""
        if name in self._nets:
            return self._nets[name]
        net = Net(index=len(self._nets), name=name)
        self._nets[name] = net
        logger.debug(f"Registered net {name!r} as index {net.index}")
        return net

    def resolve(self, name: str) -> Net:
        """Resolve a net name.

        Raises:
            NetLookupError: If the name is unknown and allocation is disabled
        """
        net = self._nets.get(name)
        if net is not None:
            return net
        if not self.allocate:
            raise NetLookupError(
                f"Unknown net: {name}",
                context={"net": name, "known": self.names},
                suggestions=["Declare the net in the placement file 'nets' list"],
            )
        return self.add(name)

    __call__ = resolve

    @property
    def names(self) -> List[str]:
        """Registered net names in index order, excluding the empty net."""
        return [name for name in self._nets if name]

    def __contains__(self, name: object) -> bool:
        return name in self._nets

    def __iter__(self) -> Iterator[Net]:
        return iter(self._nets.values())

    def __len__(self) -> int:
        return len(self._nets)

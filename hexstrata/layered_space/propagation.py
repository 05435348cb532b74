"""Per-turn effect propagation to same-layer neighbors."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hexstrata.layered_space.location import Location


def propagate(source: Location | None, effect: Callable[[Location], object]) -> None:
    """Apply effect once to every neighbor of source on exactly the same layer.

    Neighbors on any other layer value, missing neighbors and a missing source
    are skipped.

    Args:
        source: the location the effect emanates from
        effect: called as ``effect(neighbor)``, its return value is ignored
    """
    if source is None:
        return

    layer = source.coordinate.layer
    seen: set[int] = set()
    for neighbor in source.connections.values():
        if neighbor is None or id(neighbor) in seen:
            continue
        seen.add(id(neighbor))
        if neighbor.coordinate.layer == layer:
            effect(neighbor)

"""Layer-aware filtering of observed locations."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hexstrata.layered_space.entities import MobileEntity
    from hexstrata.layered_space.location import Location


def visible_locations(
    entity: MobileEntity | None, raw_visible: Iterable[Location | None]
) -> set[Location]:
    """Restrict raw_visible to what entity can observe given layers.

    Locations of another layer class are dropped unless the entity can see
    across layers. Entries without a coordinate are always dropped, and an
    entity without a location observes nothing.

    Args:
        entity: the observer
        raw_visible: locations produced by line-of-sight or radius computations
    """
    if entity is None or entity.location is None:
        return set()

    layer_class = entity.location.coordinate.layer_class
    see_across = entity.can_see_across_layers
    visible = set()
    for location in raw_visible:
        coordinate = getattr(location, "coordinate", None)
        if coordinate is None:
            continue
        if see_across or coordinate.layer_class is layer_class:
            visible.add(location)
    return visible

"""Structures and mobile entities, configured by kind records.

Per-kind behavior is data: a StructureKind or EntityKind holds the layer
constraint, capability flags and turn callbacks of everything created from it.

- Structure: immobile, bound to exactly one location at construction
- MobileEntity: moves between locations, with layer crossing and vision flags
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from hexstrata.hex_logging import create_module_logger
from hexstrata.layered_space.coordinate import LayerClass
from hexstrata.layered_space.propagation import propagate

if TYPE_CHECKING:
    from hexstrata.layered_space.location import Location
    from hexstrata.simulation import Simulation

_hexstrata_logger = create_module_logger()


class LayerConstraint(enum.Flag):
    """The layer classes a structure kind may be placed on."""

    SURFACE = enum.auto()
    UNDERGROUND = enum.auto()
    ANY = SURFACE | UNDERGROUND

    def allows(self, layer_class: LayerClass) -> bool:  # noqa: D102
        required = (
            LayerConstraint.UNDERGROUND
            if layer_class is LayerClass.UNDERGROUND
            else LayerConstraint.SURFACE
        )
        return bool(self & required)


@dataclass(frozen=True)
class StructureKind:
    """Configuration shared by all structures of one kind.

    Attributes:
        name: unique name of the kind
        layer_constraint: the layer classes the kind may be placed on
        description: free text
        placement_rules: extra predicates a location must satisfy, checked after the layer gate
        neighbor_effect: called as ``neighbor_effect(structure, neighbor)`` for every
            same-layer neighbor each turn
        on_turn: called as ``on_turn(structure, simulation)`` each turn
    """

    name: str
    layer_constraint: LayerConstraint = LayerConstraint.ANY
    description: str = ""
    placement_rules: tuple[Callable[[Location], bool], ...] = ()
    neighbor_effect: Callable[[Structure, Location], None] | None = field(
        default=None, compare=False
    )
    on_turn: Callable[[Structure, Simulation], None] | None = field(
        default=None, compare=False
    )


@dataclass(frozen=True)
class EntityKind:
    """Configuration shared by all mobile entities of one kind.

    Attributes:
        name: unique name of the kind
        can_cross_layers: default for moving between surface and underground
        can_see_across_layers: default for observing other layer classes
        description: free text
        on_surface_turn: called as ``on_surface_turn(entity, simulation)`` on surface turns
        on_underground_turn: called as ``on_underground_turn(entity, simulation)``
            on underground turns
    """

    name: str
    can_cross_layers: bool = False
    can_see_across_layers: bool = False
    description: str = ""
    on_surface_turn: Callable[[MobileEntity, Simulation], None] | None = field(
        default=None, compare=False
    )
    on_underground_turn: Callable[[MobileEntity, Simulation], None] | None = field(
        default=None, compare=False
    )


class Structure:
    """A placed, immobile entity bound permanently to one location.

    Attributes:
        kind (StructureKind): the kind of this structure
        location (Location | None): the location it is bound to, None once removed
    """

    def __init__(self, kind: StructureKind, location: Location) -> None:
        """Bind a new structure to location.

        Args:
            kind: the kind of the structure
            location: the location to bind to

        Raises:
            StructureBindingError: if location already holds a structure
        """
        self.kind = kind
        self._location: Location | None = None
        location._bind_structure(self)
        self._location = location

    @property
    def location(self) -> Location | None:  # noqa: D102
        return self._location

    def remove(self) -> None:
        """Detach the structure from its location; it cannot be bound again."""
        if self._location is not None:
            self._location._release_structure(self)
            self._location = None

    def is_on_valid_layer(self) -> bool:
        """Check the kind's layer constraint against the current location."""
        if self._location is None:
            return False
        layer_class = self._location.coordinate.layer_class
        if not self.kind.layer_constraint.allows(layer_class):
            _hexstrata_logger.warning(
                f"{self.kind.name} at {self._location.coordinate} is on invalid layer class {layer_class.value}"
            )
            return False
        return True

    def on_turn_tick(self, simulation: Simulation) -> None:
        """Run the kind's turn callback, then affect same-layer neighbors."""
        if not self.is_on_valid_layer():
            return

        if self.kind.on_turn is not None:
            self.kind.on_turn(self, simulation)
        if self.kind.neighbor_effect is not None:
            propagate(self._location, partial(self.kind.neighbor_effect, self))

    def __repr__(self):  # noqa: D105
        return f"Structure({self.kind.name!r}, {self._location!r})"


class MobileEntity:
    """A movable actor.

    Attributes:
        kind (EntityKind): the kind of this entity
        unique_id (int | None): id assigned by the simulation
        location (Location | None): the current location
        can_cross_layers (bool): whether the entity may change layer class
        can_see_across_layers (bool): whether the entity observes other layer classes
    """

    def __init__(
        self,
        kind: EntityKind,
        location: Location | None = None,
        unique_id: int | None = None,
    ) -> None:
        """Create an entity, optionally placing it at location.

        Args:
            kind: the kind of the entity
            location: the starting location
            unique_id: identifier, normally assigned by the simulation
        """
        self.kind = kind
        self.unique_id = unique_id
        self._location: Location | None = None
        self._can_cross_layers: bool | None = None
        self._can_see_across_layers: bool | None = None
        self.location = location

    @property
    def location(self) -> Location | None:  # noqa: D102
        return self._location

    @location.setter
    def location(self, location: Location | None) -> None:
        if self._location is not None:
            self._location._remove_entity(self)

        self._location = location

        if location is not None:
            location._add_entity(self)

    @property
    def can_cross_layers(self) -> bool:
        """Kind default unless upgraded or revoked for this entity."""
        if self._can_cross_layers is None:
            return self.kind.can_cross_layers
        return self._can_cross_layers

    @can_cross_layers.setter
    def can_cross_layers(self, value: bool) -> None:
        self._can_cross_layers = value

    @property
    def can_see_across_layers(self) -> bool:
        """Kind default unless upgraded or revoked for this entity."""
        if self._can_see_across_layers is None:
            return self.kind.can_see_across_layers
        return self._can_see_across_layers

    @can_see_across_layers.setter
    def can_see_across_layers(self, value: bool) -> None:
        self._can_see_across_layers = value

    def move_to(self, location: Location) -> None:
        """Commit a move without checking its legality."""
        self.location = location

    def remove(self) -> None:
        """Take the entity off the map."""
        self.location = None

    def on_turn_tick(self, simulation: Simulation) -> None:
        """Dispatch to the kind's surface or underground turn callback."""
        if self._location is None:
            return

        if self._location.coordinate.is_underground:
            callback = self.kind.on_underground_turn
        else:
            callback = self.kind.on_surface_turn
        if callback is not None:
            callback(self, simulation)

    def __repr__(self):  # noqa: D105
        return f"MobileEntity({self.kind.name!r}, id={self.unique_id})"

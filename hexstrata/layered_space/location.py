"""Locations: the hexes of a layered map.

A Location has a fixed coordinate, a set of features, at most one structure and
any number of mobile entities. Its connections only ever link it to the
same-layer hexes around it; crossing layers is handled by the transition
registry instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from hexstrata.errors import StructureBindingError
from hexstrata.layered_space.coordinate import HexCoordinate
from hexstrata.layered_space.feature import Feature, FeatureCapability

if TYPE_CHECKING:
    from hexstrata.layered_space.entities import MobileEntity, Structure


class Location:
    """A hex on one layer of the map.

    Attributes:
        coordinate (HexCoordinate): position and layer, fixed at creation
        features (set[Feature]): the features attached to this location
        connections (dict[tuple[int, int], Location]): same-layer neighbors by direction
        structure (Structure | None): the structure bound to this location
        entities (list[MobileEntity]): the mobile entities currently here
    """

    __slots__ = ["_coordinate", "_entities", "_structure", "connections", "features"]

    def __init__(
        self,
        coordinate: HexCoordinate,
        features: Iterable[Feature] = (),
    ) -> None:
        """Initialise the location.

        Args:
            coordinate: the coordinate of the location
            features: features to attach
        """
        self._coordinate = coordinate
        self.features: set[Feature] = set(features)
        self.connections: dict[tuple[int, int], Location] = {}
        self._structure: Structure | None = None
        self._entities: list[MobileEntity] = []

    @property
    def coordinate(self) -> HexCoordinate:  # noqa: D102
        return self._coordinate

    @property
    def layer(self) -> int:  # noqa: D102
        return self._coordinate.layer

    @property
    def structure(self) -> Structure | None:  # noqa: D102
        return self._structure

    @property
    def entities(self) -> list[MobileEntity]:
        """The mobile entities at this location (a copy)."""
        return list(self._entities)

    @property
    def is_occupied(self) -> bool:
        """Whether a structure is bound to this location."""
        return self._structure is not None

    @property
    def neighbors(self) -> list[Location]:
        """Return the connected same-layer neighbors."""
        return list(self.connections.values())

    def connect(self, other: Location, key: tuple[int, int]) -> None:
        """Connect this location to other under the direction key.

        Args:
            other: the location to connect to
            key: the direction from this location to other
        """
        self.connections[key] = other

    def disconnect(self, other: Location) -> None:
        """Remove every connection from this location to other."""
        keys_to_remove = [k for k, v in self.connections.items() if v is other]
        for key in keys_to_remove:
            del self.connections[key]

    def is_neighbor(self, other: Location) -> bool:  # noqa: D102
        return any(n is other for n in self.connections.values())

    def add_feature(self, feature: Feature) -> None:  # noqa: D102
        self.features.add(feature)

    def remove_feature(self, feature: Feature) -> None:  # noqa: D102
        self.features.discard(feature)

    def has_capability(self, capability: FeatureCapability) -> bool:
        """Whether any attached feature is classified into capability."""
        return any(feature.has_capability(capability) for feature in self.features)

    def _bind_structure(self, structure: Structure) -> None:
        if self._structure is not None:
            raise StructureBindingError(structure, self)
        self._structure = structure

    def _release_structure(self, structure: Structure) -> None:
        if self._structure is structure:
            self._structure = None

    def _add_entity(self, entity: MobileEntity) -> None:
        self._entities.append(entity)

    def _remove_entity(self, entity: MobileEntity) -> None:
        self._entities.remove(entity)

    def __getstate__(self) -> dict[str, Any]:
        """Return the state without connections, which the map rebuilds."""
        return {
            "coordinate": self._coordinate,
            "features": self.features,
            "structure": self._structure,
            "entities": self._entities,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:  # noqa: D105
        self._coordinate = state["coordinate"]
        self.features = state["features"]
        self._structure = state["structure"]
        self._entities = state["entities"]
        self.connections = {}

    def __repr__(self):  # noqa: D105
        return f"Location({self._coordinate})"

"""The layered hex map.

LayeredHexMap owns every location of every layer and provides:
- Location creation, lookup and removal
- Same-layer neighbor connections (six per hex on the axial grid)
- Per-layer NetworkX graphs used for pathfinding
- Per-layer KD-Trees for nearest-location lookups in pixel space
- Vectorised feature masks over a layer

Layers are parallel copies of the same planar patch. Locations at the same
planar position on different layers are counterparts of each other; whether
one can travel between them is decided by the transition registry.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterator, Sequence
from itertools import product
from random import Random
from typing import Any

import networkx as nx
import numpy as np
from scipy.spatial import KDTree

from hexstrata.errors import ConfigurationError, DuplicateLocationError
from hexstrata.hex_logging import create_module_logger
from hexstrata.layered_space.coordinate import (
    HEX_DIRECTIONS,
    HexCoordinate,
    LayerClass,
    hex_to_pixel,
)
from hexstrata.layered_space.feature import FeatureCapability
from hexstrata.layered_space.location import Location

_hexstrata_logger = create_module_logger()


class LayeredHexMap:
    """A rectangular axial hex patch repeated on several layers.

    Attributes:
        width (int): number of q columns per layer
        height (int): number of r rows per layer
        layers (tuple[int, ...]): the layer values, in creation order
        random (Random): the random number generator
        location_klass (type[Location]): the class used for new locations

    Notes:
        A `UserWarning` is issued if `random=None`. Pass the simulation's random
        number generator to keep runs reproducible.

    """

    def __init__(
        self,
        width: int,
        height: int,
        layers: Sequence[int] = (0, -1),
        random: Random | None = None,
        location_klass: type[Location] = Location,
    ) -> None:
        """Build the map.

        Args:
            width: number of q columns per layer
            height: number of r rows per layer
            layers: the layer values to create
            random: a random number generator
            location_klass: the class to use for the locations
        """
        if random is None:
            warnings.warn(
                "Random number generator not specified, this can make runs non-reproducible. Please pass a random number generator explicitly",
                UserWarning,
                stacklevel=2,
            )
            random = Random()
        self.random = random
        self.width = width
        self.height = height
        self.layers = tuple(layers)
        self.location_klass = location_klass
        self._validate_parameters()

        self._locations: dict[HexCoordinate, Location] = {}
        self._by_planar: dict[tuple[int, int], dict[int, Location]] = {}
        self._graphs: dict[int, nx.DiGraph] = {}
        self._kdtrees: dict[int, tuple[KDTree, list[Location]]] = {}

        for layer, q, r in product(self.layers, range(width), range(height)):
            self._insert(self.location_klass(HexCoordinate(q, r, layer)))
        self._connect_locations()

        _hexstrata_logger.debug(
            f"created {len(self._locations)} locations on layers {self.layers}"
        )

    def _validate_parameters(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(name, "must be a positive integer")
        if len(set(self.layers)) != len(self.layers):
            raise ConfigurationError("layers", "must not contain duplicates")

    def _insert(self, location: Location) -> None:
        coord = location.coordinate
        self._locations[coord] = location
        self._by_planar.setdefault(coord.planar, {})[coord.layer] = location

    def _connect_locations(self) -> None:
        for location in self._locations.values():
            self._connect_single_location(location)

    def _connect_single_location(self, location: Location) -> None:
        coord = location.coordinate
        for direction in HEX_DIRECTIONS:
            neighbor = self._locations.get(coord.neighbor(direction))
            if neighbor is not None:
                location.connect(neighbor, direction)

    def _invalidate(self, layer: int) -> None:
        self._graphs.pop(layer, None)
        self._kdtrees.pop(layer, None)

    def add_location(self, location: Location) -> None:
        """Add a location and connect it to its existing same-layer neighbors.

        Raises:
            DuplicateLocationError: if the coordinate is already taken
        """
        coord = location.coordinate
        if coord in self._locations:
            raise DuplicateLocationError(coord)
        if coord.layer not in self.layers:
            self.layers = (*self.layers, coord.layer)

        self._insert(location)
        for direction in HEX_DIRECTIONS:
            neighbor = self._locations.get(coord.neighbor(direction))
            if neighbor is not None:
                location.connect(neighbor, direction)
                neighbor.connect(location, (-direction[0], -direction[1]))
        self._invalidate(coord.layer)

    def remove_location(self, location: Location) -> None:
        """Remove a location and all connections to it."""
        coord = location.coordinate
        self._locations.pop(coord)
        counterparts = self._by_planar[coord.planar]
        del counterparts[coord.layer]
        if not counterparts:
            del self._by_planar[coord.planar]

        for neighbor in location.neighbors:
            neighbor.disconnect(location)
            location.disconnect(neighbor)
        self._invalidate(coord.layer)

    def get(self, coordinate: HexCoordinate | None) -> Location | None:
        """Return the location at coordinate, or None if there is none."""
        if coordinate is None:
            return None
        return self._locations.get(coordinate)

    def locations_on_layer(self, layer: int) -> list[Location]:
        """Return all locations with exactly this layer value."""
        return [loc for loc in self._locations.values() if loc.layer == layer]

    def counterparts(self, location: Location) -> list[Location]:
        """Locations at the same planar position on other layers, by layer value."""
        coord = location.coordinate
        others = self._by_planar.get(coord.planar, {})
        return [others[layer] for layer in sorted(others) if layer != coord.layer]

    def select_locations(
        self,
        predicate: Callable[[Location], bool] | None = None,
        layer_class: LayerClass | None = None,
    ) -> list[Location]:
        """Select locations, optionally restricted to one layer class.

        Args:
            predicate: keep only locations for which this returns True
            layer_class: keep only locations of this layer class
        """
        return [
            loc
            for loc in self._locations.values()
            if (layer_class is None or loc.coordinate.layer_class is layer_class)
            and (predicate is None or predicate(loc))
        ]

    def select_random_empty_location(self, layer: int | None = None) -> Location:
        """Select a random location without a structure."""
        candidates = [
            loc
            for loc in self._locations.values()
            if not loc.is_occupied and (layer is None or loc.layer == layer)
        ]
        if not candidates:
            raise IndexError("No empty location available")
        return self.random.choice(candidates)

    def layer_graph(self, layer: int) -> nx.DiGraph:
        """Directed adjacency graph of one layer.

        Nodes are coordinates with the location stored under the ``location``
        attribute; every connection appears as an edge in both directions.
        The graph is cached until the topology of the layer changes.
        """
        try:
            return self._graphs[layer]
        except KeyError:
            pass

        graph = nx.DiGraph()
        locations = self.locations_on_layer(layer)
        graph.add_nodes_from((loc.coordinate, {"location": loc}) for loc in locations)
        graph.add_edges_from(
            (loc.coordinate, neighbor.coordinate)
            for loc in locations
            for neighbor in loc.neighbors
        )
        self._graphs[layer] = graph
        return graph

    def layer_mask(self, layer: int, capability: FeatureCapability) -> np.ndarray:
        """Boolean ``(width, height)`` mask of hexes carrying capability.

        Only the rectangular patch the map was built with is covered, indexed
        as ``mask[q, r]``.
        """
        mask = np.zeros((self.width, self.height), dtype=bool)
        points = np.array(
            [
                loc.coordinate.planar
                for loc in self.locations_on_layer(layer)
                if loc.has_capability(capability)
            ],
            dtype=int,
        ).reshape(-1, 2)
        inside = (
            (points[:, 0] >= 0)
            & (points[:, 0] < self.width)
            & (points[:, 1] >= 0)
            & (points[:, 1] < self.height)
        )
        points = points[inside]
        mask[points[:, 0], points[:, 1]] = True
        return mask

    def find_nearest_location(self, position: np.ndarray, layer: int) -> Location:
        """Find the location on layer whose hex centre is closest to position.

        Args:
            position: pixel position [x, y]
            layer: the layer to search

        Raises:
            ValueError: if the layer has no locations
        """
        try:
            kdtree, locations = self._kdtrees[layer]
        except KeyError:
            locations = self.locations_on_layer(layer)
            if not locations:
                raise ValueError(f"No locations on layer {layer}") from None
            positions = np.array(
                [hex_to_pixel(*loc.coordinate.planar) for loc in locations]
            )
            kdtree = KDTree(positions)
            self._kdtrees[layer] = (kdtree, locations)

        _, index = kdtree.query(np.asarray(position))
        return locations[index]

    def __iter__(self) -> Iterator[Location]:  # noqa: D105
        return iter(self._locations.values())

    def __len__(self) -> int:  # noqa: D105
        return len(self._locations)

    def __contains__(self, coordinate: object) -> bool:  # noqa: D105
        return coordinate in self._locations

    def __getitem__(self, coordinate: HexCoordinate) -> Location:  # noqa: D105
        return self._locations[coordinate]

    def __getstate__(self) -> dict[str, Any]:
        """Drop derived caches, they are rebuilt on demand."""
        state = self.__dict__.copy()
        state["_graphs"] = {}
        state["_kdtrees"] = {}
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        """Restore the state and rebuild the neighbor connections."""
        self.__dict__ = state
        self._connect_locations()

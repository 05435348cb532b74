"""Layer-aware pathfinding.

Paths are lists of locations from source to target. Consecutive entries are
either same-layer neighbors or a layer transition at one planar position.
An empty list means no route exists; a route from a location to itself is the
single-element list ``[location]``.

Routes that change layer class are built from three segments:

1. a same-layer path from the source to a transition location E,
2. the transition from E to its counterpart E' on the target's layer,
3. a same-layer path from E' to the target.

Every transition location reachable on the source layer is tried, and the one
with the shortest combined segments wins. Ties go to the lowest planar
coordinate of E.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING

import networkx as nx

from hexstrata.hex_logging import create_module_logger
from hexstrata.layered_space.traversal import TraversalGate

if TYPE_CHECKING:
    from hexstrata.layered_space.entities import MobileEntity
    from hexstrata.layered_space.hex_map import LayeredHexMap
    from hexstrata.layered_space.location import Location

Path = list["Location"]
PathSearch = Callable[["Location", "Location"], Path]

_hexstrata_logger = create_module_logger()


class CrossLayerPathfinder:
    """Finds routes for mobile entities, across layers when they are allowed to.

    Attributes:
        hex_map (LayeredHexMap): the map to search
        gate (TraversalGate): movement rules and transition registry
        base_pathfind (PathSearch): same-layer shortest-path search
    """

    def __init__(
        self,
        hex_map: LayeredHexMap,
        gate: TraversalGate | None = None,
        base_pathfind: PathSearch | None = None,
    ) -> None:
        """Create a pathfinder.

        Args:
            hex_map: the map to search
            gate: the traversal gate, a default gate if None
            base_pathfind: same-layer search, defaults to a breadth-first search
                over the layer graph restricted by the gate's base movement rule
        """
        self.hex_map = hex_map
        self.gate = gate if gate is not None else TraversalGate()
        self._default_search = base_pathfind is None
        self.base_pathfind = (
            base_pathfind if base_pathfind is not None else self.same_layer_path
        )

    def _layer_view(self, layer: int) -> tuple[nx.DiGraph, nx.DiGraph]:
        graph = self.hex_map.layer_graph(layer)
        rule = self.gate.base_can_move_to

        def allowed(u, v):
            return rule(graph.nodes[u]["location"], graph.nodes[v]["location"])

        return graph, nx.subgraph_view(graph, filter_edge=allowed)

    def same_layer_path(self, source: Location, target: Location) -> Path:
        """Shortest path between two locations on the same layer.

        Edges are the layer's connections accepted by the gate's base movement
        rule. Returns an empty list if the locations are on different layers or
        no path exists.
        """
        if source.layer != target.layer:
            return []

        graph, view = self._layer_view(source.layer)
        try:
            coords = nx.shortest_path(view, source.coordinate, target.coordinate)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return []
        return [graph.nodes[coord]["location"] for coord in coords]

    def find_path(self, entity: MobileEntity | None, target: Location | None) -> Path:
        """Find a route for entity from its current location to target.

        Returns:
            the route including both ends, or an empty list if there is none
        """
        if entity is None or target is None:
            return []
        source = entity.location
        if source is None:
            return []
        if source is target:
            return [source]

        if source.coordinate.same_layer_class(target.coordinate):
            return self.base_pathfind(source, target)

        if not entity.can_cross_layers:
            return []
        return self._find_transition_path(source, target)

    def _transition_candidates(
        self, source: Location, target: Location
    ) -> list[tuple[Location, Location]]:
        registry = self.gate.registry
        candidates = []
        for location in self.hex_map.locations_on_layer(source.layer):
            counterpart = self.hex_map.get(
                location.coordinate.with_layer(target.layer)
            )
            if registry.provides_access_between(location, counterpart):
                candidates.append((location, counterpart))
        candidates.sort(key=lambda pair: pair[0].coordinate.planar)
        return candidates

    def _segments_from(self, source: Location) -> Callable[[Location], Path]:
        """Paths from source to any location on its layer."""
        if not self._default_search:
            return partial(self.base_pathfind, source)

        graph, view = self._layer_view(source.layer)
        try:
            paths = nx.single_source_shortest_path(view, source.coordinate)
        except nx.NodeNotFound:
            paths = {}

        def lookup(location: Location) -> Path:
            coords = paths.get(location.coordinate, [])
            return [graph.nodes[coord]["location"] for coord in coords]

        return lookup

    def _segments_to(self, target: Location) -> Callable[[Location], Path]:
        """Paths from any location on the target's layer to target."""
        if not self._default_search:
            return partial(self._base_pathfind_to, target)

        graph, view = self._layer_view(target.layer)
        try:
            paths = nx.single_source_shortest_path(
                nx.reverse_view(view), target.coordinate
            )
        except nx.NodeNotFound:
            paths = {}

        def lookup(location: Location) -> Path:
            coords = paths.get(location.coordinate, [])
            return [graph.nodes[coord]["location"] for coord in reversed(coords)]

        return lookup

    def _base_pathfind_to(self, target: Location, location: Location) -> Path:
        return self.base_pathfind(location, target)

    def _find_transition_path(self, source: Location, target: Location) -> Path:
        to_entrance = self._segments_from(source)
        from_exit = self._segments_to(target)
        best: Path = []
        best_length: int | None = None

        for entrance, exit_ in self._transition_candidates(source, target):
            first = to_entrance(entrance)
            if not first:
                continue
            # a later candidate only wins with a strictly shorter route
            if best_length is not None and len(first) - 1 >= best_length:
                continue
            last = from_exit(exit_)
            if not last:
                continue

            length = len(first) - 1 + len(last) - 1
            if best_length is None or length < best_length:
                best = first + last
                best_length = length

        if not best:
            _hexstrata_logger.debug(
                f"no layer transition route from {source.coordinate} to {target.coordinate}"
            )
        return best

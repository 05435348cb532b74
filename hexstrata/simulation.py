"""The simulation bootstrap.

Core Objects: Simulation

A Simulation owns the map, the kind registry and the layer-aware query objects.
Startup state belongs to the instance: ``start()`` runs the registrations once,
closes the registry and makes the core queries available until ``teardown()``.
"""

# Postpone annotation evaluation to avoid NameError from forward references (PEP 563).
from __future__ import annotations

import random
from collections.abc import Callable, Iterable

import numpy as np

from hexstrata.config import SimulationConfig
from hexstrata.errors import SimulationNotStartedError
from hexstrata.hex_logging import create_module_logger, method_logger
from hexstrata.layered_space import (
    CrossLayerPathfinder,
    FeatureCapability,
    HexCoordinate,
    LayeredHexMap,
    Location,
    MobileEntity,
    Structure,
    TransitionRegistry,
    TraversalGate,
    is_valid_placement,
    visible_locations,
)
from hexstrata.registry import KindRegistry

_hexstrata_logger = create_module_logger()


class Simulation:
    """A turn-based simulation over a layered hex map.

    Attributes:
        config (SimulationConfig): the parameters of this simulation
        random (Random): a seeded python.random number generator
        hex_map (LayeredHexMap): the map, owner of all locations
        registry (KindRegistry): registered structure and entity kinds
        transitions (TransitionRegistry): transition access queries
        gate (TraversalGate): single-step movement legality
        pathfinder (CrossLayerPathfinder): route search
        structures (list[Structure]): the structures built so far
        entities (dict[int, MobileEntity]): the mobile entities by unique id
        running (bool): True between start() and teardown()
        turn (int): number of completed turns

    """

    @method_logger(__name__)
    def __init__(
        self,
        config: SimulationConfig | None = None,
        hex_map: LayeredHexMap | None = None,
    ) -> None:
        """Create a simulation.

        Args:
            config: the parameters, defaults to ``SimulationConfig()``
            hex_map: an existing map to use instead of building one from config

        """
        if config is None:
            config = SimulationConfig()
        self.config = config
        config.simulation = self

        rng = config.rng
        try:
            self.random = random.Random(rng)
        except TypeError:
            seed = int(np.random.default_rng(rng).integers(np.iinfo(np.int32).max))
            self.random = random.Random(seed)

        if hex_map is None:
            hex_map = LayeredHexMap(
                config.width, config.height, layers=config.layers, random=self.random
            )
        self.hex_map = hex_map

        self._build_queries()

        self.registry = KindRegistry()
        self.structures: list[Structure] = []
        self.entities: dict[int, MobileEntity] = {}
        self.running = False
        self.turn = 0
        self._entity_id_counter = 1
        self._initialized = False

    def _build_queries(self) -> None:
        self.transitions = TransitionRegistry(self.config.transition_policy)
        self.gate = TraversalGate(self.transitions)
        self.pathfinder = CrossLayerPathfinder(self.hex_map, self.gate)

    @property
    def initialized(self) -> bool:
        """Whether start() has completed and teardown() has not been called since."""
        return self._initialized

    def start(self, setup: Callable[[KindRegistry], None] | None = None) -> bool:
        """Run the registrations and open the simulation for queries.

        The transition policy is read from the config here, so it may be
        changed between construction and startup. If setup raises, the kinds
        it registered are discarded and start can be called again.

        Args:
            setup: called once with the open registry to register kinds

        Returns:
            True if startup ran, False if the simulation was already started

        """
        if self._initialized:
            _hexstrata_logger.info(
                "startup already completed, skipping duplicate initialization call"
            )
            return False

        _hexstrata_logger.info("initializing layered simulation")
        self._build_queries()
        if setup is not None:
            try:
                setup(self.registry)
            except Exception:
                _hexstrata_logger.error(
                    "initialization failed, discarding partial registrations"
                )
                self.registry = KindRegistry()
                raise
        self.registry.freeze()

        self._initialized = True
        self.running = True
        _hexstrata_logger.info(
            f"initialization complete: {len(self.registry.structure_kinds)} structure kinds, "
            f"{len(self.registry.entity_kinds)} entity kinds, {len(self.hex_map)} locations"
        )
        return True

    def teardown(self) -> None:
        """Remove all structures and entities and close the simulation."""
        for structure in self.structures:
            structure.remove()
        for entity in self.entities.values():
            entity.remove()
        self.structures = []
        self.entities = {}
        self.registry = KindRegistry()
        self.running = False
        self._initialized = False
        _hexstrata_logger.info(f"simulation torn down after {self.turn} turns")

    def _require_started(self) -> None:
        if not self._initialized:
            raise SimulationNotStartedError(
                "Simulation.start() must complete before the simulation is used."
            )

    def location(self, coordinate: HexCoordinate | None) -> Location | None:
        """Return the location at coordinate, or None if there is none."""
        return self.hex_map.get(coordinate)

    def is_valid_placement(self, location: Location | None, kind_name: str) -> bool:
        """Whether a structure of the named kind may be placed at location."""
        self._require_started()
        return is_valid_placement(location, self.registry.structure_kind(kind_name))

    def build_structure(
        self, kind_name: str, coordinate: HexCoordinate
    ) -> Structure | None:
        """Place a structure of the named kind, if placement is valid.

        Returns:
            the new structure, or None if the placement was rejected

        """
        self._require_started()
        kind = self.registry.structure_kind(kind_name)
        location = self.hex_map.get(coordinate)
        if not is_valid_placement(location, kind):
            _hexstrata_logger.debug(f"rejected {kind_name} at {coordinate}")
            return None

        structure = Structure(kind, location)
        self.structures.append(structure)
        _hexstrata_logger.debug(f"built {kind_name} at {coordinate}")
        return structure

    def spawn_entity(
        self, kind_name: str, coordinate: HexCoordinate
    ) -> MobileEntity | None:
        """Create an entity of the named kind at coordinate.

        Returns:
            the new entity, or None if there is no location at coordinate

        """
        self._require_started()
        kind = self.registry.entity_kind(kind_name)
        location = self.hex_map.get(coordinate)
        if location is None:
            return None

        entity = MobileEntity(kind, location, unique_id=self._entity_id_counter)
        self._entity_id_counter += 1
        self.entities[entity.unique_id] = entity
        _hexstrata_logger.debug(
            f"spawned {kind_name} with unique_id {entity.unique_id} at {coordinate}"
        )
        return entity

    def remove_entity(self, entity: MobileEntity) -> None:
        """Take the entity off the map and out of the simulation."""
        entity.remove()
        self.entities.pop(entity.unique_id, None)

    def can_move_to(self, entity: MobileEntity | None, target: Location | None) -> bool:
        """Whether entity may move straight to target."""
        self._require_started()
        return self.gate.can_move_to(entity, target)

    def move_entity(self, entity: MobileEntity | None, target: Location | None) -> bool:
        """Move entity to target if the move is legal.

        Returns:
            whether the move happened

        """
        if not self.can_move_to(entity, target):
            return False
        entity.move_to(target)
        return True

    def find_path(
        self, entity: MobileEntity | None, target: Location | None
    ) -> list[Location]:
        """Route for entity to target, empty if there is none."""
        self._require_started()
        return self.pathfinder.find_path(entity, target)

    def compute_raw_visibility(self, entity: MobileEntity) -> set[Location]:
        """Every location within the vision radius, on any layer.

        A location is hidden when a hex strictly between it and the observer,
        on the location's own layer, carries a vision-blocking feature. The
        blocking hex itself stays visible.
        """
        if entity.location is None:
            return set()
        origin = entity.location.coordinate
        radius = self.config.vision_radius
        visible = set()
        for location in self.hex_map:
            coordinate = location.coordinate
            if origin.distance(coordinate) > radius:
                continue
            between = origin.with_layer(coordinate.layer).line_to(coordinate)[1:-1]
            if not any(self._blocks_vision(step) for step in between):
                visible.add(location)
        return visible

    def _blocks_vision(self, coordinate: HexCoordinate) -> bool:
        location = self.hex_map.get(coordinate)
        return location is not None and location.has_capability(
            FeatureCapability.BLOCKS_VISION
        )

    def observe(
        self,
        entity: MobileEntity | None,
        raw_visible: Iterable[Location | None] | None = None,
    ) -> set[Location]:
        """Locations entity observes, filtered by layer.

        Args:
            entity: the observer
            raw_visible: the unfiltered locations, defaults to compute_raw_visibility

        """
        self._require_started()
        if entity is None:
            return set()
        if raw_visible is None:
            raw_visible = self.compute_raw_visibility(entity)
        return visible_locations(entity, raw_visible)

    def valid_targets(
        self, predicate: Callable[[Location], bool] | None = None
    ) -> list[Location]:
        """Locations on every layer accepted by predicate, all of them if None."""
        return self.hex_map.select_locations(predicate)

    def turn_tick(self) -> None:
        """Run one turn: every structure, then every entity, ticks exactly once."""
        self._require_started()
        for structure in list(self.structures):
            structure.on_turn_tick(self)
        for entity in list(self.entities.values()):
            entity.on_turn_tick(self)
        self.turn += 1
        _hexstrata_logger.debug(f"completed turn {self.turn}")

    def run_for(self, turns: int) -> None:
        """Run a number of turns."""
        for _ in range(turns):
            self.turn_tick()

"""Layered hex spaces: locations, layers, and who may reach what across them.

This module provides the spatial core of hexstrata:
- HexCoordinate and LayerClass: where a location is and which layer class it belongs to
- Location and LayeredHexMap: the hexes of every layer and their same-layer neighbors
- Feature and TransitionRegistry: which hexes offer a way between surface and underground
- Structure and MobileEntity: placed and moving occupants, configured by kind records
- is_valid_placement, TraversalGate, CrossLayerPathfinder, visible_locations, propagate:
  the layer-aware queries used by the simulation each turn
"""

from hexstrata.layered_space.coordinate import (
    HEX_DIRECTIONS,
    HexCoordinate,
    LayerClass,
    classify_layer,
    hex_to_pixel,
)
from hexstrata.layered_space.entities import (
    EntityKind,
    LayerConstraint,
    MobileEntity,
    Structure,
    StructureKind,
)
from hexstrata.layered_space.feature import (
    CAVE_ENTRANCE,
    CHASM,
    MINE_SHAFT,
    STAIRWAY,
    Feature,
    FeatureCapability,
)
from hexstrata.layered_space.hex_map import LayeredHexMap
from hexstrata.layered_space.location import Location
from hexstrata.layered_space.pathfinding import CrossLayerPathfinder
from hexstrata.layered_space.placement import is_valid_placement
from hexstrata.layered_space.propagation import propagate
from hexstrata.layered_space.transitions import TransitionPolicy, TransitionRegistry
from hexstrata.layered_space.traversal import TraversalGate, adjacent_move_rule
from hexstrata.layered_space.visibility import visible_locations

__all__ = [
    "CAVE_ENTRANCE",
    "CHASM",
    "HEX_DIRECTIONS",
    "MINE_SHAFT",
    "STAIRWAY",
    "CrossLayerPathfinder",
    "EntityKind",
    "Feature",
    "FeatureCapability",
    "HexCoordinate",
    "LayerClass",
    "LayerConstraint",
    "LayeredHexMap",
    "Location",
    "MobileEntity",
    "Structure",
    "StructureKind",
    "TransitionPolicy",
    "TransitionRegistry",
    "TraversalGate",
    "adjacent_move_rule",
    "classify_layer",
    "hex_to_pixel",
    "is_valid_placement",
    "propagate",
    "visible_locations",
]

"""Single-step movement legality across layers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from hexstrata.layered_space.feature import FeatureCapability
from hexstrata.layered_space.transitions import TransitionRegistry

if TYPE_CHECKING:
    from hexstrata.layered_space.entities import MobileEntity
    from hexstrata.layered_space.location import Location

MoveRule = Callable[["Location", "Location"], bool]


def adjacent_move_rule(origin: Location, target: Location) -> bool:
    """Default same-layer rule: step to a connected hex without a movement blocker."""
    return origin.is_neighbor(target) and not target.has_capability(
        FeatureCapability.BLOCKS_MOVEMENT
    )


class TraversalGate:
    """Decides whether an entity may move directly to a target location.

    Attributes:
        registry (TransitionRegistry): answers transition access between layers
        base_can_move_to (MoveRule): movement rule used within one layer class
    """

    def __init__(
        self,
        registry: TransitionRegistry | None = None,
        base_can_move_to: MoveRule = adjacent_move_rule,
    ) -> None:
        """Create a gate.

        Args:
            registry: the transition registry, a default ORIGIN policy registry if None
            base_can_move_to: movement rule used when no layer change is involved
        """
        self.registry = registry if registry is not None else TransitionRegistry()
        self.base_can_move_to = base_can_move_to

    def can_move_to(self, entity: MobileEntity | None, target: Location | None) -> bool:
        """Whether entity may move from its location straight to target.

        Within one layer class the base rule decides. Changing layer class needs
        an entity able to cross layers and a transition link from the current
        location to target.
        """
        if entity is None or target is None:
            return False
        origin = entity.location
        if origin is None:
            return False

        if origin.coordinate.same_layer_class(target.coordinate):
            return self.base_can_move_to(origin, target)

        if not entity.can_cross_layers:
            return False
        return self.registry.provides_access_between(origin, target)

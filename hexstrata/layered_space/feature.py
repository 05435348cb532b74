"""Immutable terrain features attached to locations."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class FeatureCapability(enum.Enum):
    """Capability kinds a feature can be classified into."""

    PROVIDES_LAYER_TRANSITION = "provides_layer_transition"
    BLOCKS_MOVEMENT = "blocks_movement"
    BLOCKS_VISION = "blocks_vision"


@dataclass(frozen=True, slots=True)
class Feature:
    """A named tag with a fixed set of capabilities.

    Attributes:
        name: the name of the feature
        capabilities: the capability kinds this feature is classified into
    """

    name: str
    capabilities: frozenset[FeatureCapability] = frozenset()

    def __post_init__(self):  # noqa: D105
        object.__setattr__(self, "capabilities", frozenset(self.capabilities))

    def has_capability(self, capability: FeatureCapability) -> bool:  # noqa: D102
        return capability in self.capabilities

    @property
    def provides_layer_transition(self) -> bool:  # noqa: D102
        return FeatureCapability.PROVIDES_LAYER_TRANSITION in self.capabilities


CAVE_ENTRANCE = Feature(
    "cave entrance", frozenset({FeatureCapability.PROVIDES_LAYER_TRANSITION})
)
MINE_SHAFT = Feature(
    "mine shaft", frozenset({FeatureCapability.PROVIDES_LAYER_TRANSITION})
)
STAIRWAY = Feature("stairway", frozenset({FeatureCapability.PROVIDES_LAYER_TRANSITION}))
CHASM = Feature("chasm", frozenset({FeatureCapability.BLOCKS_MOVEMENT}))

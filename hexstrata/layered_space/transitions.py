"""Transition feature registry.

Answers whether a location offers a way between surface and underground, and
whether two locations are linked by such a transition. The registry only reads
the feature sets of locations, it holds no state of its own besides its policy.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from hexstrata.layered_space.feature import FeatureCapability

if TYPE_CHECKING:
    from hexstrata.layered_space.location import Location


class TransitionPolicy(enum.Enum):
    """Which side of a transition must carry a transition feature.

    ORIGIN: the location being left must have access (a single opening suffices)
    EITHER: access on either side is enough
    BOTH: both sides need access
    """

    ORIGIN = "origin"
    EITHER = "either"
    BOTH = "both"


class TransitionRegistry:
    """Pure query layer over location features."""

    def __init__(self, policy: TransitionPolicy = TransitionPolicy.ORIGIN) -> None:
        """Create a registry.

        Args:
            policy: which side of a transition needs access
        """
        self.policy = TransitionPolicy(policy)

    @staticmethod
    def has_transition_access(location: Location | None) -> bool:
        """Whether any feature at location provides a layer transition."""
        if location is None:
            return False
        return location.has_capability(FeatureCapability.PROVIDES_LAYER_TRANSITION)

    def provides_access_between(
        self, origin: Location | None, destination: Location | None
    ) -> bool:
        """Whether origin and destination are linked by a layer transition.

        They must share their planar position, differ in layer class, and satisfy
        the access policy.
        """
        if origin is None or destination is None:
            return False

        a, b = origin.coordinate, destination.coordinate
        if not a.same_planar(b) or a.same_layer_class(b):
            return False

        origin_access = self.has_transition_access(origin)
        if self.policy is TransitionPolicy.ORIGIN:
            return origin_access
        destination_access = self.has_transition_access(destination)
        if self.policy is TransitionPolicy.EITHER:
            return origin_access or destination_access
        return origin_access and destination_access

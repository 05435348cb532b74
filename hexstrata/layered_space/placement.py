"""Structure placement validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hexstrata.layered_space.entities import StructureKind
    from hexstrata.layered_space.location import Location


def is_valid_placement(location: Location | None, structure_kind: StructureKind) -> bool:
    """Whether a structure of structure_kind may be placed at location.

    The layer constraint is checked first and short-circuits everything else.
    After that the location must be free of structures and pass every extra
    placement rule of the kind, in order.

    Args:
        location: the candidate location
        structure_kind: the kind of structure to place
    """
    if location is None:
        return False
    if not structure_kind.layer_constraint.allows(location.coordinate.layer_class):
        return False
    if location.is_occupied:
        return False
    return all(rule(location) for rule in structure_kind.placement_rules)

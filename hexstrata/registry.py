"""Registration of structure and entity kinds.

Kinds are registered once while a simulation starts up. After ``freeze()`` the
registry is read-only for the rest of the simulation's life.
"""

from __future__ import annotations

from hexstrata.errors import RegistrationError, RegistrationFrozenError, UnknownKindError
from hexstrata.hex_logging import create_module_logger
from hexstrata.layered_space.entities import EntityKind, StructureKind

_hexstrata_logger = create_module_logger()


class KindRegistry:
    """Named structure and entity kinds.

    Attributes:
        frozen (bool): whether registrations are closed
    """

    def __init__(self) -> None:
        """Create an empty, open registry."""
        self._structure_kinds: dict[str, StructureKind] = {}
        self._entity_kinds: dict[str, EntityKind] = {}
        self.frozen = False

    def _check_open(self, name: str) -> None:
        if self.frozen:
            raise RegistrationFrozenError(name)
        if name in self._structure_kinds or name in self._entity_kinds:
            raise RegistrationError(f"A kind named '{name}' is already registered.")

    def register_structure_kind(self, kind: StructureKind) -> StructureKind:
        """Register a structure kind under its name."""
        self._check_open(kind.name)
        self._structure_kinds[kind.name] = kind
        _hexstrata_logger.info(
            f"registered structure kind {kind.name} ({kind.layer_constraint.name})"
        )
        return kind

    def register_entity_kind(self, kind: EntityKind) -> EntityKind:
        """Register an entity kind under its name."""
        self._check_open(kind.name)
        self._entity_kinds[kind.name] = kind
        _hexstrata_logger.info(
            f"registered entity kind {kind.name} "
            f"(crosses layers: {kind.can_cross_layers}, sees across layers: {kind.can_see_across_layers})"
        )
        return kind

    def structure_kind(self, name: str) -> StructureKind:
        """Look up a structure kind.

        Raises:
            UnknownKindError: if no structure kind has this name
        """
        try:
            return self._structure_kinds[name]
        except KeyError:
            raise UnknownKindError(name) from None

    def entity_kind(self, name: str) -> EntityKind:
        """Look up an entity kind.

        Raises:
            UnknownKindError: if no entity kind has this name
        """
        try:
            return self._entity_kinds[name]
        except KeyError:
            raise UnknownKindError(name) from None

    @property
    def structure_kinds(self) -> dict[str, StructureKind]:  # noqa: D102
        return dict(self._structure_kinds)

    @property
    def entity_kinds(self) -> dict[str, EntityKind]:  # noqa: D102
        return dict(self._entity_kinds)

    def freeze(self) -> None:
        """Close the registry for further registrations."""
        self.frozen = True

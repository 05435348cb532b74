"""Simulation configuration.

A SimulationConfig is a mutable mapping of parameters. Every change is
validated. While the owning simulation runs nothing can be changed, and the
map parameters stay fixed once the simulation has built its map.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, ClassVar

from hexstrata.errors import ConfigurationError
from hexstrata.layered_space.transitions import TransitionPolicy

if TYPE_CHECKING:
    from hexstrata.simulation import Simulation


class SimulationConfig(MutableMapping):
    """Parameters of a simulation.

    Attributes:
        simulation: the simulation this configuration belongs to, if any

    Notes:
        Unknown keyword arguments are stored as additional parameters, so
        callers can carry their own settings alongside the built-in ones.

    """

    defaults: ClassVar[dict[str, Any]] = {
        "width": 10,
        "height": 10,
        "layers": (0, -1),
        "transition_policy": TransitionPolicy.ORIGIN,
        "vision_radius": 2,
        "rng": None,
    }
    # read once when the simulation builds its map
    map_parameters: ClassVar[frozenset[str]] = frozenset(
        {"width", "height", "layers", "rng"}
    )

    __slots__ = ("__dict__", "simulation")

    def __init__(self, **kwargs: Any):
        """Initialize a SimulationConfig.

        Args:
            kwargs: configuration parameters, see ``SimulationConfig.defaults``

        """
        self.simulation: Simulation | None = None
        self.__dict__.update(self.defaults)
        self.__dict__.update(kwargs)
        self._coerce()
        self.validate()

    def _coerce(self) -> None:
        self.__dict__["transition_policy"] = TransitionPolicy(self.transition_policy)
        self.__dict__["layers"] = tuple(self.layers)

    def validate(self) -> None:
        """Check the map parameters, raising ConfigurationError when invalid."""
        for name in ("width", "height"):
            value = self.__dict__[name]
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(name, "must be a positive integer")
        layers = self.__dict__["layers"]
        if not layers or not all(isinstance(layer, int) for layer in layers):
            raise ConfigurationError("layers", "must be a non-empty sequence of ints")
        if len(set(layers)) != len(layers):
            raise ConfigurationError("layers", "must not contain duplicates")
        radius = self.__dict__["vision_radius"]
        if not isinstance(radius, int) or radius < 0:
            raise ConfigurationError("vision_radius", "must be a non-negative int")

    def __setitem__(self, key, value):  # noqa: D105
        self._check_mutable(key)

        missing = key not in self.__dict__
        previous = self.__dict__.get(key)
        self.__dict__[key] = value
        try:
            self._coerce()
            self.validate()
        except (ConfigurationError, TypeError, ValueError):
            if missing:
                del self.__dict__[key]
            else:
                self.__dict__[key] = previous
            raise

    def __getitem__(self, key):  # noqa: D105
        return self.__dict__[key]

    def __delitem__(self, key):  # noqa: D105
        self._check_mutable(key)
        if key in self.defaults:
            raise KeyError(f"Cannot delete built-in parameter '{key}'")
        del self.__dict__[key]

    def _check_mutable(self, key) -> None:
        if self.simulation is None:
            return
        if self.simulation.running:
            raise ValueError("Cannot mutate configuration while simulation is running")
        if key in self.map_parameters:
            raise ValueError(
                f"Cannot change '{key}' after the simulation has built its map"
            )

    def __iter__(self):  # noqa: D105
        return iter(self.__dict__)

    def __len__(self):  # noqa: D105
        return len(self.__dict__)

    def __setattr__(self, key, value):  # noqa: D105
        if key not in self.__slots__:
            self.__setitem__(key, value)
        else:
            super().__setattr__(key, value)

    def __delattr__(self, key):  # noqa: D105
        if key not in self.__slots__:
            self.__delitem__(key)
        else:
            super().__delattr__(key)

    def to_dict(self) -> dict[str, Any]:
        """Return a dict representation of the configuration."""
        return self.__dict__.copy()

"""hexstrata exception hierarchy.

Expected outcomes such as a denied move or a missing route are reported through
return values. The exceptions below cover misconfiguration and programming
errors only.
"""

import hexstrata


class HexStrataError(Exception):
    """Base class for all hexstrata exceptions.

    It automatically prepends the hexstrata version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.hexstrata_version = getattr(hexstrata, "__version__", "unknown")
        # keep the plain message around for programmatic access
        self.original_message = message
        super().__init__(f"[hexstrata {self.hexstrata_version}] {message}")


class ConfigurationError(HexStrataError):
    """Raised when simulation or map parameters are invalid."""

    def __init__(self, param_name: str | None = None, reason: str | None = None):
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None

        super().__init__(message)


# Registration Errors
class RegistrationError(HexStrataError):
    """Raised when a structure or entity kind cannot be registered."""


class RegistrationFrozenError(RegistrationError):
    """Raised when registering a kind after startup has completed."""

    def __init__(self, kind_name: str):
        self.kind_name = kind_name
        super().__init__(
            f"Cannot register '{kind_name}': registrations are closed after startup."
        )


class UnknownKindError(RegistrationError):
    """Raised when looking up a kind that was never registered."""

    def __init__(self, kind_name: str):
        self.kind_name = kind_name
        super().__init__(f"No kind registered under the name '{kind_name}'.")


# Simulation Errors
class SimulationNotStartedError(HexStrataError):
    """Raised when a simulation is used before start() has completed."""


# Space Errors
class SpaceError(HexStrataError):
    """Generic errors related to the layered map."""


class DuplicateLocationError(SpaceError):
    """Raised when adding a location whose coordinate is already on the map."""

    def __init__(self, coordinate):
        self.coordinate = coordinate
        super().__init__(f"A location at {coordinate} already exists on the map.")


class StructureBindingError(SpaceError):
    """Raised when a structure would be bound to an occupied or second location."""

    def __init__(self, structure, location):
        self.structure = structure
        self.location = location
        super().__init__(f"Cannot bind {structure} to {location}.")

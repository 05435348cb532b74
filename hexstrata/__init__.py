"""hexstrata: layered spatial reasoning for multi-layer hex maps.

Core Objects: Simulation, SimulationConfig, LayeredHexMap, Location
"""

import datetime

import hexstrata.layered_space as layered_space
from hexstrata.config import SimulationConfig
from hexstrata.registry import KindRegistry
from hexstrata.simulation import Simulation

__all__ = [
    "KindRegistry",
    "Simulation",
    "SimulationConfig",
    "layered_space",
]

__title__ = "hexstrata"
__version__ = "1.0.0"
__license__ = "Apache 2.0"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} hexstrata contributors"

"""citysim-runtime - Fixed-timestep host for the city simulation engine."""

from citysim_runtime.clock import Clock
from citysim_runtime.simulation import Simulation
from citysim_runtime.types import System, TickContext

__all__ = [
    "Simulation",
    "Clock",
    "TickContext",
    "System",
]

"""Utilities for stochastic SLIR contact simulations.

Provides a small namespace that re-exports common helpers so notebooks and
scripts can import from src.slir without deep module paths.
"""


# Re-export core helpers for convenience (avoid heavy imports here).
from .config import DEFAULTS, SimulationConfig, set_global_seed  # noqa: F401
from .errors import ConfigurationError, SinkError  # noqa: F401
from .population import Compartment, Individual, Population  # noqa: F401
from .graphs import ContactGraphs, GraphSnapshot, VertexLabel  # noqa: F401
from .sinks import DayRecord  # noqa: F401
from .simulate import Simulation, SimulationResult, run_simulation  # noqa: F401
from .ensemble import run_ensemble, stack_compartment  # noqa: F401
from .metrics import records_to_array, summarize_records  # noqa: F401

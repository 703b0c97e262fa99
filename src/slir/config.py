"""Central defaults and run configuration for SLIR contact simulations.

Defines the Defaults dataclass with shared settings (epidemic parameters,
seed, output paths), the validated SimulationConfig used by the engine, and
a global seed setter. Imported by scripts and modules to keep runs
reproducible and consistent.
"""


from dataclasses import asdict, dataclass
from numbers import Integral, Real
from pathlib import Path
import random
from typing import Dict

import numpy as np

from src.slir.errors import ConfigurationError


# Central defaults for reproducible runs.
@dataclass(frozen=True)
class Defaults:
    seed: int = 42
    population_size: int = 20
    contacts_per_person: float = 5.0
    transmission_rate: float = 0.25
    days_latent: int = 3
    days_infectious: int = 4
    n_runs: int = 100
    runs_dir: Path = Path("runs")


# Shared defaults instance used across scripts.
DEFAULTS = Defaults()


@dataclass(frozen=True)
class SimulationConfig:
    """Epidemic parameters for one run, read once and never mutated.

    Attributes:
        population_size: Number of individuals N (at least 2).
        contacts_per_person: Average daily contacts per person C; the daily
            contact budget is N * C.
        transmission_rate: Probability TR in [0, 1] that a
            susceptible-infected contact makes the susceptible latent.
        days_latent: Days DL spent latent before becoming infected.
        days_infectious: Days DI spent infected before recovering.
    """

    population_size: int = DEFAULTS.population_size
    contacts_per_person: float = DEFAULTS.contacts_per_person
    transmission_rate: float = DEFAULTS.transmission_rate
    days_latent: int = DEFAULTS.days_latent
    days_infectious: int = DEFAULTS.days_infectious

    def __post_init__(self) -> None:
        validate_config(self)

    @property
    def contact_budget(self) -> float:
        return self.population_size * self.contacts_per_person

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _is_int(value: object) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def validate_config(config: SimulationConfig) -> None:
    """Raise ConfigurationError if any parameter is out of range."""
    n = config.population_size
    # A single individual has no distinct contact partner.
    if not _is_int(n) or n < 2:
        raise ConfigurationError(f"population_size must be an integer >= 2, got {n!r}")
    c = config.contacts_per_person
    if not isinstance(c, Real) or isinstance(c, bool) or not c > 0:
        raise ConfigurationError(f"contacts_per_person must be positive, got {c!r}")
    tr = config.transmission_rate
    if not isinstance(tr, Real) or isinstance(tr, bool) or not 0.0 <= tr <= 1.0:
        raise ConfigurationError(f"transmission_rate must lie in [0, 1], got {tr!r}")
    for name in ("days_latent", "days_infectious"):
        days = getattr(config, name)
        if not _is_int(days) or days < 1:
            raise ConfigurationError(f"{name} must be an integer >= 1, got {days!r}")


def set_global_seed(seed: int) -> None:
    """Set global seeds for reproducibility."""
    # Keep Python and NumPy PRNGs aligned; the engine itself takes an explicit Generator.
    random.seed(seed)
    np.random.seed(seed)

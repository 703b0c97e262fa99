"""Repeated independent runs for statistical aggregation.

Each run gets its own child Generator spawned from one SeedSequence and its
own Simulation, so no state is shared between runs.
"""


from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from src.slir.config import SimulationConfig
from src.slir.metrics import COLUMNS, records_to_array
from src.slir.simulate import SimulationResult, run_simulation


logger = logging.getLogger(__name__)


def spawn_generators(seed: Optional[int], n: int) -> List[np.random.Generator]:
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]


def run_ensemble(
    config: SimulationConfig,
    n_runs: int,
    seed: Optional[int] = None,
    progress_every: int = 0,
) -> List[SimulationResult]:
    """Run `n_runs` isolated simulations sharing one config."""
    if n_runs < 1:
        raise ValueError("n_runs must be positive")
    results = []
    for k, rng in enumerate(spawn_generators(seed, n_runs)):
        results.append(run_simulation(config, rng=rng))
        if progress_every and (k + 1) % progress_every == 0:
            logger.info("Ensemble progress: %s/%s", k + 1, n_runs)
    return results


def stack_compartment(results: Sequence[SimulationResult], name: str) -> np.ndarray:
    """Stack one compartment's daily counts into (n_runs, T_max).

    Shorter runs are padded with their last value, since every run ends
    quiescent.
    """
    col = COLUMNS.index(name)
    series = [records_to_array(r.records)[:, col] for r in results]
    max_len = max((s.shape[0] for s in series), default=0)
    stacked = np.zeros((len(series), max_len), dtype=np.int64)
    for i, s in enumerate(series):
        if s.shape[0] == 0:
            continue
        stacked[i, : s.shape[0]] = s
        stacked[i, s.shape[0]:] = s[-1]
    return stacked

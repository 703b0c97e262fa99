"""Daily contact sampling.

Each day draws random pairs of distinct individuals until the contact
budget N * C is used up. A pair adds 2 to the running count, and the loop
keeps going while the count is still <= budget, so the last pair of a day
may overshoot the budget by up to 2 events.
"""


from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from src.slir.graphs import ContactGraphs
from src.slir.population import Population
from src.slir.transmission import apply_transmission


logger = logging.getLogger(__name__)


def contact_budget(population_size: int, contacts_per_person: float) -> float:
    return population_size * contacts_per_person


def draw_pair(rng: np.random.Generator, n: int) -> Tuple[int, int]:
    """Draw two distinct indices in [0, n); only the second is redrawn on a clash."""
    i = int(rng.integers(0, n))
    j = int(rng.integers(0, n))
    while i == j:
        j = int(rng.integers(0, n))
    return i, j


def run_contact_phase(
    population: Population,
    graphs: ContactGraphs,
    budget: float,
    transmission_rate: float,
    rng: np.random.Generator,
) -> Tuple[int, int]:
    """Run one day of contacts.

    Returns (contact events counted, new latent infections).
    """
    n = len(population)
    events = 0
    new_latent = 0
    while events <= budget:
        i, j = draw_pair(rng, n)
        graphs.record_contact(i, j)
        population.register_contact(i, j)
        events += 2
        if apply_transmission(population, i, j, transmission_rate, rng):
            new_latent += 1
    logger.debug("Contact phase: %s events, %s new latent", events, new_latent)
    return events, new_latent

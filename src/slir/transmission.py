"""Transmission rule applied to each contact event."""


from __future__ import annotations

from typing import Optional

import numpy as np

from src.slir.population import Compartment, Population


def transmission_threshold(transmission_rate: float) -> float:
    """Lottery threshold on the 1..100 scale."""
    return transmission_rate * 100


def susceptible_member(a: Compartment, b: Compartment) -> Optional[int]:
    """Return 0 or 1 for the susceptible side of a susceptible-infected pair, else None."""
    if a is Compartment.SUSCEPTIBLE and b is Compartment.INFECTED:
        return 0
    if a is Compartment.INFECTED and b is Compartment.SUSCEPTIBLE:
        return 1
    return None


def apply_transmission(
    population: Population,
    i: int,
    j: int,
    transmission_rate: float,
    rng: np.random.Generator,
) -> bool:
    """Possibly convert the susceptible member of a contact to latent.

    Only a {Susceptible, Infected} pair qualifies. A qualifying pair draws
    one integer in [1, 100]; the susceptible member becomes latent when the
    draw is at most `transmission_rate * 100`. Returns True on conversion.
    """
    side = susceptible_member(population.compartment(i), population.compartment(j))
    if side is None:
        return False
    lottery = int(rng.integers(1, 101))
    if lottery > transmission_threshold(transmission_rate):
        return False
    population.transition((i, j)[side], Compartment.LATENT)
    return True

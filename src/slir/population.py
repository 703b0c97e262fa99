"""Per-individual compartment state and compartment counters.

The Population owns N Individuals and the four S/L/I/R counters. State only
changes through `transition` and `register_contact`, so the counters are
updated in lockstep with the individuals and never recomputed.
"""


from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Dict, List, Tuple

import numpy as np


logger = logging.getLogger(__name__)


class Compartment(Enum):
    """SLIR compartments, in progression order."""

    SUSCEPTIBLE = 0
    LATENT = 1
    INFECTED = 2
    RECOVERED = 3

    @property
    def color(self) -> str:
        return COMPARTMENT_COLORS[self]

    @property
    def next(self) -> "Compartment":
        if self is Compartment.RECOVERED:
            raise ValueError("RECOVERED is terminal")
        return Compartment(self.value + 1)


# Vertex colors used when contact graphs are drawn.
COMPARTMENT_COLORS: Dict[Compartment, str] = {
    Compartment.SUSCEPTIBLE: "green",
    Compartment.LATENT: "yellow",
    Compartment.INFECTED: "red",
    Compartment.RECOVERED: "blue",
}


@dataclass
class Individual:
    compartment: Compartment = Compartment.SUSCEPTIBLE
    daily_contacts: int = 0
    total_contacts: int = 0
    days_latent: int = 0
    days_infectious: int = 0


class Population:
    """Fixed population with one initially infected individual.

    Attributes:
        individuals (list): One Individual per index 0..N-1.
        counts (dict): Number of individuals per Compartment; sums to N.
        index_case (int): Index of the individual infected at start.
    """

    def __init__(self, size: int, rng: np.random.Generator) -> None:
        self.individuals: List[Individual] = [Individual() for _ in range(size)]
        self.counts: Dict[Compartment, int] = {c: 0 for c in Compartment}
        self.counts[Compartment.SUSCEPTIBLE] = size
        self.index_case = int(rng.integers(0, size))
        self.transition(self.index_case, Compartment.INFECTED, force=True)
        logger.debug("Index case: %s", self.index_case)

    def __len__(self) -> int:
        return len(self.individuals)

    def __getitem__(self, idx: int) -> Individual:
        return self.individuals[idx]

    def compartment(self, idx: int) -> Compartment:
        return self.individuals[idx].compartment

    @property
    def susceptible(self) -> int:
        return self.counts[Compartment.SUSCEPTIBLE]

    @property
    def latent(self) -> int:
        return self.counts[Compartment.LATENT]

    @property
    def infected(self) -> int:
        return self.counts[Compartment.INFECTED]

    @property
    def recovered(self) -> int:
        return self.counts[Compartment.RECOVERED]

    def snapshot_counts(self) -> Tuple[int, int, int, int]:
        """Return (S, L, I, R)."""
        return self.susceptible, self.latent, self.infected, self.recovered

    def transition(self, idx: int, target: Compartment, force: bool = False) -> None:
        """Move one individual to `target` and update the counters.

        Only single forward steps are allowed, except the forced
        Susceptible -> Infected move used to seed the index case.
        """
        person = self.individuals[idx]
        source = person.compartment
        if force:
            allowed = source is Compartment.SUSCEPTIBLE and target is Compartment.INFECTED
        else:
            allowed = source is not Compartment.RECOVERED and source.next is target
        if not allowed:
            raise ValueError(f"Illegal transition {source.name} -> {target.name} for {idx}")
        person.compartment = target
        self.counts[source] -= 1
        self.counts[target] += 1

    def register_contact(self, i: int, j: int) -> None:
        for idx in (i, j):
            person = self.individuals[idx]
            person.daily_contacts += 1
            person.total_contacts += 1

    def reset_daily_contacts(self) -> None:
        for person in self.individuals:
            person.daily_contacts = 0

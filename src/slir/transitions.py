"""End-of-day timer updates and compartment promotion."""


from __future__ import annotations

from typing import Tuple

from src.slir.graphs import ContactGraphs
from src.slir.population import Compartment, Population


def advance_day(
    population: Population,
    graphs: ContactGraphs,
    days_latent: int,
    days_infectious: int,
) -> Tuple[int, int]:
    """Age latent/infectious timers, promote on exact thresholds, reset daily state.

    Returns (latent promoted to infected, infected promoted to recovered).
    """
    became_infected = 0
    became_recovered = 0
    for idx, person in enumerate(population.individuals):
        if person.compartment is Compartment.INFECTED:
            person.days_infectious += 1
            if person.days_infectious == days_infectious:
                population.transition(idx, Compartment.RECOVERED)
                became_recovered += 1
        elif person.compartment is Compartment.LATENT:
            person.days_latent += 1
            # Newly infected individuals start aging on the next day.
            if person.days_latent == days_latent:
                population.transition(idx, Compartment.INFECTED)
                became_infected += 1

    population.reset_daily_contacts()
    graphs.reset_daily()
    return became_infected, became_recovered

"""SLIR contact simulation driver.

Provides the Simulation context (config, random source, population and
contact graphs for one run) and `run_simulation`, the single entry point
used by scripts and ensembles. Each day runs the contact phase, emits the
daily graph and a (day, S, L, I, R) record to the sinks, then ages timers.
The run ends one buffer day after no latent or infected individuals remain,
so the quiescent state is recorded, and finally emits the cumulative graph.
"""


from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, List, Optional

import numpy as np

from src.slir.config import SimulationConfig
from src.slir.contacts import run_contact_phase
from src.slir.errors import SinkError
from src.slir.graphs import ContactGraphs, GraphSnapshot
from src.slir.population import Population
from src.slir.sinks import DayRecord, GraphSink, RecordSink
from src.slir.transitions import advance_day


logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    config: SimulationConfig
    records: List[DayRecord] = field(default_factory=list)
    total_graph: Optional[GraphSnapshot] = None
    index_case: int = -1

    @property
    def days(self) -> int:
        return len(self.records)


def _emit(description: str, call: Callable[[], None]) -> None:
    """Invoke a sink, turning any failure into a run-aborting SinkError."""
    try:
        call()
    except SinkError:
        logger.error("Sink failed on %s; aborting run", description)
        raise
    except Exception as exc:
        logger.error("Sink failed on %s; aborting run", description)
        raise SinkError(f"Sink failed on {description}: {exc}") from exc


class Simulation:
    """State for a single run, owned by one thread of control.

    Attributes:
        config (SimulationConfig): Validated epidemic parameters.
        rng (np.random.Generator): Source of every random draw in the run.
        population (Population): Individuals and S/L/I/R counters.
        graphs (ContactGraphs): Daily and cumulative contact graphs.
        day (int): Index of the next day to simulate.
        buffer (bool): True until the first quiescent day has started.
    """

    def __init__(
        self,
        config: SimulationConfig,
        rng: Optional[np.random.Generator] = None,
        graph_sink: Optional[GraphSink] = None,
        record_sink: Optional[RecordSink] = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.graph_sink = graph_sink
        self.record_sink = record_sink
        self.population = Population(config.population_size, self.rng)
        self.graphs = ContactGraphs()
        self.day = 0
        self.buffer = True
        self.finished = False
        self.result = SimulationResult(config=config, index_case=self.population.index_case)

    def is_active(self) -> bool:
        return self.population.latent > 0 or self.population.infected > 0

    def should_continue(self) -> bool:
        return self.is_active() or self.buffer

    def step(self) -> DayRecord:
        """Simulate one day and return its record."""
        if self.finished:
            raise RuntimeError("Simulation has already finished")
        if not self.should_continue():
            raise RuntimeError("Simulation has reached its termination condition")
        if not self.is_active():
            self.buffer = False

        events, new_latent = run_contact_phase(
            self.population,
            self.graphs,
            self.config.contact_budget,
            self.config.transmission_rate,
            self.rng,
        )

        record = DayRecord(self.day, *self.population.snapshot_counts())
        if self.graph_sink is not None:
            snapshot = self.graphs.snapshot_daily(self.population)
            _emit(f"day {self.day} graph", lambda: self.graph_sink.emit_daily(record.day, snapshot))
        if self.record_sink is not None:
            _emit(f"day {self.day} record", lambda: self.record_sink.emit(record))
        self.result.records.append(record)

        became_infected, became_recovered = advance_day(
            self.population,
            self.graphs,
            self.config.days_latent,
            self.config.days_infectious,
        )
        logger.debug(
            "Day %s: events=%s new_latent=%s L->I=%s I->R=%s counts=%s",
            record.day,
            events,
            new_latent,
            became_infected,
            became_recovered,
            record[1:],
        )
        self.day += 1
        return record

    def finish(self) -> SimulationResult:
        """Emit the cumulative graph once and freeze the run."""
        if not self.finished:
            total = self.graphs.snapshot_total(self.population)
            if self.graph_sink is not None:
                _emit("total graph", lambda: self.graph_sink.emit_total(total))
            self.result.total_graph = total
            self.finished = True
        return self.result

    def run(self) -> SimulationResult:
        while self.should_continue():
            self.step()
        result = self.finish()
        logger.info(
            "Simulation finished after %s days: S=%s L=%s I=%s R=%s",
            result.days,
            *self.population.snapshot_counts(),
        )
        return result


def run_simulation(
    config: Optional[SimulationConfig] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    graph_sink: Optional[GraphSink] = None,
    record_sink: Optional[RecordSink] = None,
) -> SimulationResult:
    """Run one SLIR simulation to termination.

    Either pass a Generator via `rng` or a `seed` for a fresh one; with
    neither the run is unseeded.
    """
    config = config or SimulationConfig()
    if rng is None:
        rng = np.random.default_rng(seed)
    logger.info(
        "Simulation start: N=%s C=%s TR=%s DL=%s DI=%s",
        config.population_size,
        config.contacts_per_person,
        config.transmission_rate,
        config.days_latent,
        config.days_infectious,
    )
    return Simulation(config, rng=rng, graph_sink=graph_sink, record_sink=record_sink).run()

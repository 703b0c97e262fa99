from collections import Counter

import numpy as np
import pytest

from src.slir import contacts
from src.slir.config import SimulationConfig
from src.slir.errors import ConfigurationError, SinkError
from src.slir.sinks import DayRecord
from src.slir.simulate import Simulation, run_simulation
from tests.conftest import RecordingGraphSink, RecordingRecordSink, ScriptedRng


# N=4, C=1 (three pairs a day), TR=1.0, DL=1, DI=1.
SCENARIO_CONFIG = dict(
    population_size=4,
    contacts_per_person=1,
    transmission_rate=1.0,
    days_latent=1,
    days_infectious=1,
)
SCENARIO_DRAWS = [
    0,  # index case
    # day 0: (0,1) I-S with lottery 50, (1,2) L-S, (2,2) redrawn to (2,3)
    0, 1, 50, 1, 2, 2, 2, 3,
    # day 1: (1,2) I-S lottery 1, (3,1) S-I lottery 100, (0,3) R-L
    1, 2, 1, 3, 1, 100, 0, 3,
    # day 2: (2,3) I-I, (0,1) R-R, (3,0) I-R
    2, 3, 0, 1, 3, 0,
    # day 3 (buffer): (0,1), (0,1), (2,3)
    0, 1, 0, 1, 2, 3,
]


@pytest.fixture
def scenario(graph_sink, record_sink):
    rng = ScriptedRng(SCENARIO_DRAWS)
    result = run_simulation(
        SimulationConfig(**SCENARIO_CONFIG),
        rng=rng,
        graph_sink=graph_sink,
        record_sink=record_sink,
    )
    return result, rng, graph_sink, record_sink


def test_scenario_records(scenario):
    result, rng, _, record_sink = scenario
    assert rng.exhausted
    assert record_sink.records == [
        DayRecord(0, 2, 1, 1, 0),
        DayRecord(1, 0, 2, 1, 1),
        DayRecord(2, 0, 0, 2, 2),
        DayRecord(3, 0, 0, 0, 4),
    ]
    assert result.records == record_sink.records
    assert result.index_case == 0


def test_scenario_day_zero_graph(scenario):
    _, _, graph_sink, _ = scenario
    day, snap = graph_sink.daily[0]
    assert day == 0
    assert snap.vertices == [0, 1, 2, 3]
    assert snap.edges == [(0, 1), (1, 2), (2, 3)]
    assert [snap.labels[v].color for v in snap.vertices] == ["red", "yellow", "green", "green"]
    assert [snap.labels[v].contacts for v in snap.vertices] == [1, 2, 2, 1]
    assert [d for d, _ in graph_sink.daily] == [0, 1, 2, 3]


def test_scenario_cumulative_graph(scenario):
    result, _, graph_sink, _ = scenario
    assert len(graph_sink.total) == 1
    total = graph_sink.total[0]
    assert total is result.total_graph
    weights = {frozenset(e[:2]): e[2] for e in total.edges}
    assert weights == {
        frozenset((0, 1)): 4,
        frozenset((1, 2)): 2,
        frozenset((2, 3)): 3,
        frozenset((1, 3)): 1,
        frozenset((0, 3)): 2,
    }
    assert {v: total.labels[v].contacts for v in total.vertices} == {0: 6, 1: 7, 2: 5, 3: 6}
    assert all(label.color == "blue" for label in total.labels.values())


@pytest.mark.parametrize("days_infectious", [1, 2, 4, 7])
def test_zero_transmission_runs_infectious_days_plus_buffer(days_infectious):
    config = SimulationConfig(population_size=10, transmission_rate=0.0, days_infectious=days_infectious)
    result = run_simulation(config, seed=3)
    assert result.days == days_infectious + 1
    assert all(r.infected == 1 for r in result.records[:-1])
    assert result.records[-1] == DayRecord(days_infectious, 9, 0, 0, 1)


@pytest.mark.parametrize("seed", range(8))
def test_counts_invariant_and_monotone_compartments(seed):
    config = SimulationConfig(population_size=30, contacts_per_person=4, transmission_rate=0.4)
    sim = Simulation(config, rng=np.random.default_rng(seed))
    previous = [p.compartment.value for p in sim.population.individuals]
    while sim.should_continue():
        record = sim.step()
        assert record.total == 30
        assert sum(sim.population.snapshot_counts()) == 30
        current = [p.compartment.value for p in sim.population.individuals]
        assert all(0 <= c - p <= 1 for p, c in zip(previous, current))
        previous = current
    result = sim.finish()
    last = result.records[-1]
    assert last.latent == 0 and last.infected == 0
    # Exactly one buffer day follows the last active day.
    assert result.records[-2].latent + result.records[-2].infected > 0


def test_cumulative_weights_match_drawn_pairs(monkeypatch):
    drawn = Counter()
    real_draw = contacts.draw_pair

    def spy(rng, n):
        pair = real_draw(rng, n)
        drawn[frozenset(pair)] += 1
        return pair

    monkeypatch.setattr(contacts, "draw_pair", spy)
    result = run_simulation(SimulationConfig(population_size=12, contacts_per_person=3), seed=11)
    weights = {frozenset(e[:2]): e[2] for e in result.total_graph.edges}
    assert weights == dict(drawn)


def test_same_seed_same_run():
    config = SimulationConfig(population_size=25)
    a = run_simulation(config, seed=99)
    b = run_simulation(config, seed=99)
    assert a.records == b.records
    assert a.total_graph.edges == b.total_graph.edges


def test_step_after_finish_raises():
    config = SimulationConfig(population_size=5, transmission_rate=0.0, days_infectious=1)
    sim = Simulation(config, rng=np.random.default_rng(0))
    sim.run()
    with pytest.raises(RuntimeError):
        sim.step()


def test_step_past_termination_raises_without_mutation():
    config = SimulationConfig(population_size=5, transmission_rate=0.0, days_infectious=1)
    sim = Simulation(config, rng=np.random.default_rng(0))
    while sim.should_continue():
        sim.step()
    contacts_before = sum(p.total_contacts for p in sim.population.individuals)
    days_before = sim.day
    with pytest.raises(RuntimeError):
        sim.step()
    assert sim.day == days_before
    assert sum(p.total_contacts for p in sim.population.individuals) == contacts_before
    assert len(sim.result.records) == config.days_infectious + 1


def test_scenario_weights_after_day_zero():
    sim = Simulation(SimulationConfig(**SCENARIO_CONFIG), rng=ScriptedRng(SCENARIO_DRAWS))
    record = sim.step()
    assert record == DayRecord(0, 2, 1, 1, 0)
    assert {frozenset(e): sim.graphs.weight(*e) for e in sim.graphs.total.edges} == {
        frozenset((0, 1)): 1,
        frozenset((1, 2)): 1,
        frozenset((2, 3)): 1,
    }


def test_invalid_population_fails_before_run():
    with pytest.raises(ConfigurationError):
        run_simulation(SimulationConfig(population_size=1))


class _BrokenRecordSink:
    def emit(self, record):
        raise OSError("disk full")


def test_record_sink_failure_aborts_run(graph_sink):
    with pytest.raises(SinkError) as excinfo:
        run_simulation(SimulationConfig(population_size=6), seed=0, graph_sink=graph_sink, record_sink=_BrokenRecordSink())
    assert isinstance(excinfo.value.__cause__, OSError)
    # Day 0 graph went out, then the run stopped.
    assert [d for d, _ in graph_sink.daily] == [0]
    assert graph_sink.total == []


class _BrokenTotalSink(RecordingGraphSink):
    def emit_total(self, snapshot):
        raise SinkError("renderer gone")


def test_sink_error_propagates_unchanged(record_sink):
    with pytest.raises(SinkError, match="renderer gone"):
        run_simulation(SimulationConfig(population_size=6), seed=0, graph_sink=_BrokenTotalSink(), record_sink=record_sink)
    assert record_sink.records

import logging
from typing import Iterable, List, Tuple

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from src.slir.config import SimulationConfig  # noqa: E402


class ScriptedRng:
    """Stand-in for np.random.Generator that replays fixed integer draws."""

    def __init__(self, draws: Iterable[int]) -> None:
        self.draws = list(draws)
        self.pos = 0

    def integers(self, low: int, high: int) -> int:
        if self.pos >= len(self.draws):
            raise AssertionError("scripted draws exhausted")
        value = self.draws[self.pos]
        self.pos += 1
        assert low <= value < high, f"draw {value} outside [{low}, {high})"
        return value

    @property
    def exhausted(self) -> bool:
        return self.pos == len(self.draws)


class RecordingGraphSink:
    def __init__(self) -> None:
        self.daily: List[Tuple[int, object]] = []
        self.total = []

    def emit_daily(self, day, snapshot) -> None:
        self.daily.append((day, snapshot))

    def emit_total(self, snapshot) -> None:
        self.total.append(snapshot)


class RecordingRecordSink:
    def __init__(self) -> None:
        self.records = []

    def emit(self, record) -> None:
        self.records.append(record)


@pytest.fixture
def graph_sink() -> RecordingGraphSink:
    return RecordingGraphSink()


@pytest.fixture
def record_sink() -> RecordingRecordSink:
    return RecordingRecordSink()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def default_config() -> SimulationConfig:
    return SimulationConfig()


@pytest.fixture
def restore_root_logging():
    """Undo handlers and levels set by setup_logging during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)

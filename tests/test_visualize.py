import matplotlib.pyplot as plt
import numpy as np

from src.slir.config import SimulationConfig
from src.slir.simulate import run_simulation
from src.visualization.visualize import (
    load_records_csv,
    plot_compartment_quantiles,
    plot_compartments,
    plot_contact_graph,
    save_figure,
)
from src.slir.io import save_csv


def test_plot_compartments_draws_four_lines(tmp_path):
    result = run_simulation(SimulationConfig(), seed=4)
    fig, ax = plt.subplots()
    plot_compartments(result.records, ax=ax)
    assert len(ax.lines) == 4
    path = save_figure(fig, tmp_path / "plots" / "c.png", dpi=40)
    plt.close(fig)
    assert path.exists()


def test_plot_contact_graph_total():
    result = run_simulation(SimulationConfig(population_size=6), seed=4)
    fig = plot_contact_graph(result.total_graph, title="total")
    assert fig.axes[0].get_title() == "total"
    plt.close(fig)


def test_quantile_plot_and_records_csv(tmp_path):
    fig = plot_compartment_quantiles(np.array([[1, 2, 0], [1, 3, 1]]))
    assert fig.axes[0].get_ylabel() == "infected"
    plt.close(fig)

    result = run_simulation(SimulationConfig(population_size=6), seed=1)
    save_csv(tmp_path / "records.csv", [r._asdict() for r in result.records])
    assert load_records_csv(tmp_path / "records.csv") == result.records

"""Plotting utilities for SLIR contact simulations.

This module provides reusable Matplotlib helpers to visualize:
- compartment counts over time for one run
- contact graphs (daily or cumulative) colored by compartment
- quantile bands of a compartment across ensemble runs

It can also be used as a script to rebuild the compartment plot from a saved
run folder, e.g.:
  python -m src.visualization.visualize --run-dir runs/slir_...
"""

from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
import networkx as nx

from src.slir.graphs import GraphSnapshot
from src.slir.io import ensure_dir
from src.slir.metrics import COLUMNS, records_to_array
from src.slir.population import Compartment
from src.slir.sinks import DayRecord


def save_figure(fig: plt.Figure, path: Path | str, dpi: int = 150) -> Path:
    """Save a Matplotlib figure and ensure the parent directory exists."""
    path = Path(path)
    ensure_dir(path.parent)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return path


def plot_compartments(
    records: Sequence[DayRecord],
    title: str = "SLIR compartments",
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot S/L/I/R counts per day, colored like the contact graphs."""
    ax = ax or plt.gca()
    arr = records_to_array(records)
    for col, compartment in enumerate(Compartment, start=1):
        ax.plot(
            arr[:, 0],
            arr[:, col],
            color=compartment.color,
            marker="o",
            markersize=3,
            label=compartment.name.title(),
        )
    ax.set_xlabel("day")
    ax.set_ylabel("individuals")
    ax.set_title(title)
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, alpha=0.3)
    return ax


def plot_contact_graph(
    snapshot: GraphSnapshot,
    title: str = "",
    seed: int = 0,
    figsize: Tuple[float, float] = (6, 6),
) -> plt.Figure:
    """Draw a contact graph; vertices read "id (contacts)", cumulative edges show weights."""
    graph = snapshot.to_networkx()
    fig, ax = plt.subplots(1, 1, figsize=figsize)
    if graph.number_of_nodes() == 0:
        ax.set_axis_off()
        ax.set_title(title)
        return fig

    pos = nx.spring_layout(graph, seed=seed)
    nodes = list(graph.nodes)
    colors = [snapshot.labels[v].color for v in nodes]
    labels = {v: f"{v} ({snapshot.labels[v].contacts})" for v in nodes}
    nx.draw_networkx_nodes(graph, pos, nodelist=nodes, node_color=colors, edgecolors="black", ax=ax)
    nx.draw_networkx_labels(graph, pos, labels=labels, font_size=7, ax=ax)
    nx.draw_networkx_edges(graph, pos, arrows=snapshot.directed, ax=ax)
    if not snapshot.directed:
        weights = nx.get_edge_attributes(graph, "weight")
        nx.draw_networkx_edge_labels(graph, pos, edge_labels=weights, font_size=6, ax=ax)
    ax.set_title(title)
    ax.set_axis_off()
    return fig


def plot_compartment_quantiles(
    stacked: np.ndarray,
    label: str = "infected",
    quantiles: Tuple[float, float] = (10, 90),
    color: str = "red",
    figsize: Tuple[float, float] = (7, 4),
) -> plt.Figure:
    """Median and quantile band of one compartment across runs (rows)."""
    fig, ax = plt.subplots(1, 1, figsize=figsize)
    if stacked.size == 0:
        return fig
    days = np.arange(stacked.shape[1])
    lo, hi = np.percentile(stacked, quantiles, axis=0)
    ax.fill_between(days, lo, hi, color=color, alpha=0.25, label=f"p{quantiles[0]}-p{quantiles[1]}")
    ax.plot(days, np.median(stacked, axis=0), color=color, label="median")
    ax.set_xlabel("day")
    ax.set_ylabel(label)
    ax.set_title(f"{label} across {stacked.shape[0]} runs")
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, alpha=0.3)
    return fig


def load_records_csv(path: Path) -> List[DayRecord]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return [DayRecord(*(int(row[c]) for c in COLUMNS)) for row in csv.DictReader(f)]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the compartment plot of a run.")
    parser.add_argument("--run-dir", type=str, required=True)
    parser.add_argument("--out", type=str, default=None)
    parser.add_argument("--dpi", type=int, default=150)
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    run_dir = Path(args.run_dir)
    records = load_records_csv(run_dir / "records.csv")
    fig, ax = plt.subplots(1, 1, figsize=(7, 4))
    plot_compartments(records, title=run_dir.name, ax=ax)
    out = Path(args.out) if args.out else run_dir / "compartments.png"
    save_figure(fig, out, dpi=args.dpi)
    plt.close(fig)
    print(f"Saved {out}")


if __name__ == "__main__":
    main()

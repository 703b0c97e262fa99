"""Daily and cumulative contact graphs.

The daily graph is a networkx DiGraph rebuilt every day: an edge i->j exists
if i and j met that day, with repeated contacts on the same ordered pair
collapsing to one edge. The cumulative graph is an undirected networkx Graph
kept for the whole run whose `weight` attribute counts every contact event
between the unordered pair.

Snapshots freeze vertices, edges and a per-vertex (color, count) label taken
from the population at snapshot time, which is what graph sinks consume.
"""


from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import networkx as nx

from src.slir.population import Compartment, Population


@dataclass(frozen=True)
class VertexLabel:
    compartment: Compartment
    contacts: int

    @property
    def color(self) -> str:
        return self.compartment.color


@dataclass(frozen=True)
class GraphSnapshot:
    """Frozen view of a contact graph handed to graph sinks.

    Attributes:
        vertices: Individual indices, in first-contact order.
        edges: (i, j) for daily graphs, (i, j, weight) for the cumulative one.
        labels: Vertex -> VertexLabel (compartment color and contact count).
        directed: True for the daily graph.
    """

    vertices: List[int]
    edges: List[Tuple[int, ...]]
    labels: Dict[int, VertexLabel] = field(default_factory=dict)
    directed: bool = True

    def to_networkx(self) -> nx.Graph:
        graph = nx.DiGraph() if self.directed else nx.Graph()
        for v in self.vertices:
            label = self.labels.get(v)
            if label is None:
                graph.add_node(v)
            else:
                graph.add_node(v, color=label.color, contacts=label.contacts)
        for edge in self.edges:
            if len(edge) == 3:
                graph.add_edge(edge[0], edge[1], weight=edge[2])
            else:
                graph.add_edge(edge[0], edge[1])
        return graph


class ContactGraphs:
    """Builder for the daily directed graph and the cumulative weighted graph."""

    def __init__(self) -> None:
        self.daily = nx.DiGraph()
        self.total = nx.Graph()

    def record_contact(self, i: int, j: int) -> None:
        # Vertices are inserted implicitly by add_edge.
        self.daily.add_edge(i, j)
        if self.total.has_edge(i, j):
            self.total[i][j]["weight"] += 1
        else:
            self.total.add_edge(i, j, weight=1)

    def weight(self, i: int, j: int) -> int:
        if not self.total.has_edge(i, j):
            return 0
        return self.total[i][j]["weight"]

    def reset_daily(self) -> None:
        self.daily = nx.DiGraph()

    def snapshot_daily(self, population: Population) -> GraphSnapshot:
        """Daily graph labelled with each vertex's daily contact count."""
        vertices = [int(v) for v in self.daily.nodes]
        labels = {
            v: VertexLabel(population[v].compartment, population[v].daily_contacts)
            for v in vertices
        }
        edges = [(int(u), int(v)) for u, v in self.daily.edges]
        return GraphSnapshot(vertices=vertices, edges=edges, labels=labels, directed=True)

    def snapshot_total(self, population: Population) -> GraphSnapshot:
        """Cumulative graph labelled with each vertex's total contact count."""
        vertices = [int(v) for v in self.total.nodes]
        labels = {
            v: VertexLabel(population[v].compartment, population[v].total_contacts)
            for v in vertices
        }
        edges = [(int(u), int(v), int(w)) for u, v, w in self.total.edges(data="weight")]
        return GraphSnapshot(vertices=vertices, edges=edges, labels=labels, directed=False)

"""Graph and record sinks fed by the simulation driver.

Sinks receive one daily graph snapshot and one DayRecord per simulated day,
plus the cumulative graph once at the end of the run. The file sinks here
reproduce the classic layout: Graphviz DOT files per day and for the total
graph (optionally rendered with the `dot` binary), and a space-separated
`data.txt` with one `day S L I R` line per day.
"""


from __future__ import annotations

import logging
from pathlib import Path
import shutil
import subprocess
from typing import List, NamedTuple, Optional, Protocol, Union

from src.slir.errors import SinkError
from src.slir.graphs import GraphSnapshot
from src.slir.io import ensure_dir


logger = logging.getLogger(__name__)


class DayRecord(NamedTuple):
    day: int
    susceptible: int
    latent: int
    infected: int
    recovered: int

    @property
    def total(self) -> int:
        return self.susceptible + self.latent + self.infected + self.recovered


class GraphSink(Protocol):
    def emit_daily(self, day: int, snapshot: GraphSnapshot) -> None: ...

    def emit_total(self, snapshot: GraphSnapshot) -> None: ...


class RecordSink(Protocol):
    def emit(self, record: DayRecord) -> None: ...


def format_dot(snapshot: GraphSnapshot, title: str) -> str:
    """Serialize a snapshot as Graphviz DOT text."""
    lines = [f"// {title}", ""]
    lines.append("digraph G {" if snapshot.directed else "graph G {")
    for v in snapshot.vertices:
        label = snapshot.labels[v]
        color = label.color
        lines.append(
            f'{v} [label = "{v} ({label.contacts})", color = {color}, '
            f"style = filled, fillcolor = {color}];"
        )
    for edge in snapshot.edges:
        if snapshot.directed:
            lines.append(f"{edge[0]}->{edge[1]};")
        else:
            lines.append(f"{edge[0]}--{edge[1]} [weight = {edge[2]}];")
    lines.append("}")
    return "\n".join(lines) + "\n"


class DotGraphSink:
    """Write DOT files and optionally render them to images with Graphviz."""

    def __init__(
        self,
        dot_dir: Union[Path, str],
        image_dir: Optional[Union[Path, str]] = None,
        image_format: str = "jpg",
    ) -> None:
        self.dot_dir = ensure_dir(dot_dir)
        self.image_dir = ensure_dir(image_dir) if image_dir else None
        self.image_format = image_format
        self.dot_binary = shutil.which("dot") if self.image_dir else None
        if self.image_dir and self.dot_binary is None:
            logger.warning("Graphviz 'dot' not found on PATH; skipping image rendering")

    def _write(self, stem: str, text: str) -> Path:
        path = self.dot_dir / f"{stem}.dot"
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise SinkError(f"Cannot write {path}") from exc
        if self.dot_binary:
            self._render(path, self.image_dir / f"{stem}.{self.image_format}")
        return path

    def _render(self, dot_path: Path, image_path: Path) -> None:
        cmd = [self.dot_binary, f"-T{self.image_format}", str(dot_path), "-o", str(image_path)]
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SinkError(f"Graphviz failed to render {dot_path}") from exc

    def emit_daily(self, day: int, snapshot: GraphSnapshot) -> None:
        self._write(f"contacts_day_{day}", format_dot(snapshot, f"Day {day} contacts in SLIR Model"))

    def emit_total(self, snapshot: GraphSnapshot) -> None:
        self._write("contacts_total", format_dot(snapshot, "Total contacts in SLIR Model"))


class PngGraphSink:
    """Render snapshots with networkx + matplotlib instead of Graphviz."""

    def __init__(self, image_dir: Union[Path, str], dpi: int = 150, seed: int = 0) -> None:
        self.image_dir = ensure_dir(image_dir)
        self.dpi = dpi
        self.seed = seed

    def _save(self, snapshot: GraphSnapshot, stem: str, title: str) -> None:
        # Imported lazily so headless engine use never loads matplotlib.
        import matplotlib.pyplot as plt

        from src.visualization.visualize import plot_contact_graph, save_figure

        fig = plot_contact_graph(snapshot, title=title, seed=self.seed)
        try:
            save_figure(fig, self.image_dir / f"{stem}.png", dpi=self.dpi)
        except OSError as exc:
            raise SinkError(f"Cannot save {stem}.png") from exc
        finally:
            plt.close(fig)

    def emit_daily(self, day: int, snapshot: GraphSnapshot) -> None:
        self._save(snapshot, f"contacts_day_{day}", f"Day {day} contacts")

    def emit_total(self, snapshot: GraphSnapshot) -> None:
        self._save(snapshot, "contacts_total", "Total contacts")


class CompositeGraphSink:
    """Fan one stream of snapshots out to several graph sinks."""

    def __init__(self, *sinks: GraphSink) -> None:
        self.sinks: List[GraphSink] = list(sinks)

    def emit_daily(self, day: int, snapshot: GraphSnapshot) -> None:
        for sink in self.sinks:
            sink.emit_daily(day, snapshot)

    def emit_total(self, snapshot: GraphSnapshot) -> None:
        for sink in self.sinks:
            sink.emit_total(snapshot)


class TextRecordSink:
    """Append `day S L I R` lines to a text file."""

    def __init__(self, path: Union[Path, str]) -> None:
        self.path = Path(path)
        ensure_dir(self.path.parent)

    def emit(self, record: DayRecord) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(" ".join(str(v) for v in record) + "\n")
        except OSError as exc:
            raise SinkError(f"Cannot append to {self.path}") from exc

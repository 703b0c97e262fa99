"""Single SLIR contact simulation run.

Simulates one outbreak with the given population and epidemic parameters and
writes a run folder under runs/ with config.json, data/data.txt (one
`day S L I R` line per day), records.csv, metrics.json, the per-day and total
contact graphs as DOT files, and optionally rendered images and a
compartment plot.
Typical usage:
  python scripts/simulate_run.py --population 20 --contacts 5 --render png --save-plots
"""


from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from src.slir.config import DEFAULTS, SimulationConfig, set_global_seed  # noqa: E402
from src.slir.io import ensure_dir, save_csv, save_json  # noqa: E402
from src.slir.logging_utils import setup_logging  # noqa: E402
from src.slir.metrics import summarize_records  # noqa: E402
from src.slir.simulate import run_simulation  # noqa: E402
from src.slir.sinks import (  # noqa: E402
    CompositeGraphSink,
    DotGraphSink,
    PngGraphSink,
    TextRecordSink,
)
from src.visualization.visualize import plot_compartments, save_figure  # noqa: E402


def _parse_args() -> argparse.Namespace:
    # CLI options mirror the epidemic parameters plus output controls.
    parser = argparse.ArgumentParser(description="Run one SLIR contact simulation.")
    parser.add_argument("--population", type=int, default=DEFAULTS.population_size)
    parser.add_argument("--contacts", type=float, default=DEFAULTS.contacts_per_person)
    parser.add_argument("--transmission-rate", type=float, default=DEFAULTS.transmission_rate)
    parser.add_argument("--days-latent", type=int, default=DEFAULTS.days_latent)
    parser.add_argument("--days-infectious", type=int, default=DEFAULTS.days_infectious)
    parser.add_argument("--seed", type=int, default=DEFAULTS.seed)
    parser.add_argument("--render", type=str, default=None, choices=[None, "dot", "png"])
    parser.add_argument("--image-format", type=str, default="jpg")
    parser.add_argument("--no-graphs", action="store_true")
    parser.add_argument("--save-plots", action="store_true")
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--log-file", type=str, default=None)
    parser.add_argument("--no-log-file", action="store_true")
    parser.add_argument("--no-console-log", action="store_true")
    return parser.parse_args()


def _build_graph_sink(args: argparse.Namespace, out_dir: Path):
    if args.no_graphs:
        return None
    image_dir = out_dir / "images"
    dot_sink = DotGraphSink(
        out_dir / "data" / "dot_files",
        image_dir=image_dir if args.render == "dot" else None,
        image_format=args.image_format,
    )
    if args.render == "png":
        return CompositeGraphSink(dot_sink, PngGraphSink(image_dir, seed=args.seed))
    return dot_sink


def main() -> None:
    args = _parse_args()
    # Invalid parameters fail here, before the run folder or log file exist.
    config = SimulationConfig(
        population_size=args.population,
        contacts_per_person=args.contacts,
        transmission_rate=args.transmission_rate,
        days_latent=args.days_latent,
        days_infectious=args.days_infectious,
    )
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(args.out_dir) if args.out_dir else DEFAULTS.runs_dir / f"slir_{timestamp}"
    ensure_dir(out_dir)

    log_file = None
    if not args.no_log_file:
        log_file = Path(args.log_file) if args.log_file else out_dir / "run.log"
    setup_logging(level=args.log_level, log_file=log_file, console=not args.no_console_log)
    logger = logging.getLogger(__name__)

    logger.info("SLIR run start")
    logger.info("Output dir: %s", out_dir)

    set_global_seed(args.seed)
    save_json(out_dir / "config.json", {**config.to_dict(), "seed": args.seed, "render": args.render})

    record_path = out_dir / "data" / "data.txt"
    if record_path.exists():
        # The record sink appends; start from an empty file.
        record_path.unlink()

    result = run_simulation(
        config,
        seed=args.seed,
        graph_sink=_build_graph_sink(args, out_dir),
        record_sink=TextRecordSink(record_path),
    )

    save_csv(out_dir / "records.csv", [r._asdict() for r in result.records])
    metrics = summarize_records(result.records, config.population_size)
    metrics["index_case"] = result.index_case
    save_json(out_dir / "metrics.json", metrics)
    logger.info(
        "Metrics: days=%s peak_infected=%s (day %s) attack_rate=%.3f",
        metrics["duration_days"],
        metrics["peak_infected"],
        metrics["peak_day"],
        metrics["attack_rate"],
    )

    if args.save_plots:
        fig, ax = plt.subplots(1, 1, figsize=(7, 4))
        plot_compartments(result.records, title=f"SLIR N={config.population_size}", ax=ax)
        path = save_figure(fig, out_dir / "compartments.png")
        plt.close(fig)
        logger.info("Saved plot to %s", path)

    logger.info("SLIR run done")


if __name__ == "__main__":
    main()

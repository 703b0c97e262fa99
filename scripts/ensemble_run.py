"""Ensemble of independent SLIR contact simulations.

Runs the same configuration many times with independently spawned seeds,
writes per-run outcome metrics (metrics.csv), a summary with means and
quantiles (summary.json), and optionally an infected-curve quantile plot.
Typical usage:
  python scripts/ensemble_run.py --n-runs 200 --transmission-rate 0.3 --save-plots
"""


from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path
import time

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from src.slir.config import DEFAULTS, SimulationConfig  # noqa: E402
from src.slir.ensemble import run_ensemble, stack_compartment  # noqa: E402
from src.slir.io import ensure_dir, save_csv, save_json  # noqa: E402
from src.slir.logging_utils import setup_logging  # noqa: E402
from src.slir.metrics import ensemble_summary, summarize_records  # noqa: E402
from src.visualization.visualize import plot_compartment_quantiles, save_figure  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an ensemble of SLIR simulations.")
    parser.add_argument("--population", type=int, default=DEFAULTS.population_size)
    parser.add_argument("--contacts", type=float, default=DEFAULTS.contacts_per_person)
    parser.add_argument("--transmission-rate", type=float, default=DEFAULTS.transmission_rate)
    parser.add_argument("--days-latent", type=int, default=DEFAULTS.days_latent)
    parser.add_argument("--days-infectious", type=int, default=DEFAULTS.days_infectious)
    parser.add_argument("--n-runs", type=int, default=DEFAULTS.n_runs)
    parser.add_argument("--seed", type=int, default=DEFAULTS.seed)
    parser.add_argument("--save-plots", action="store_true")
    parser.add_argument("--out-dir", type=str, default=None)
    parser.add_argument("--progress-every", type=int, default=25)
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--log-file", type=str, default=None)
    parser.add_argument("--no-log-file", action="store_true")
    parser.add_argument("--no-console-log", action="store_true")
    return parser.parse_args()


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
    out_dir = Path(args.out_dir) if args.out_dir else DEFAULTS.runs_dir / f"ensemble_{timestamp}"
    ensure_dir(out_dir)

    log_file = None
    if not args.no_log_file:
        log_file = Path(args.log_file) if args.log_file else out_dir / "run.log"
    # Per-run start/finish lines would flood the log.
    setup_logging(
        level=args.log_level,
        log_file=log_file,
        console=not args.no_console_log,
        engine_level="WARNING",
    )
    logger = logging.getLogger(__name__)

    save_json(out_dir / "config.json", {**config.to_dict(), "seed": args.seed, "n_runs": args.n_runs})
    logger.info("Ensemble start: %s runs, output dir %s", args.n_runs, out_dir)

    t0 = time.perf_counter()
    results = run_ensemble(config, args.n_runs, seed=args.seed, progress_every=args.progress_every)
    elapsed = time.perf_counter() - t0

    rows = []
    for k, result in enumerate(results):
        row = {"run": k}
        row.update(summarize_records(result.records, config.population_size))
        rows.append(row)
    save_csv(out_dir / "metrics.csv", rows)

    summary = ensemble_summary([{k: v for k, v in row.items() if k != "run"} for row in rows])
    summary["elapsed_sec"] = elapsed
    save_json(out_dir / "summary.json", summary)
    logger.info(
        "Ensemble done in %.2fs: mean attack_rate=%.3f mean duration=%.1f days",
        elapsed,
        summary["attack_rate_mean"],
        summary["duration_days_mean"],
    )

    if args.save_plots:
        fig = plot_compartment_quantiles(stack_compartment(results, "infected"))
        path = save_figure(fig, out_dir / "infected_quantiles.png")
        plt.close(fig)
        logger.info("Saved plot to %s", path)


if __name__ == "__main__":
    main()

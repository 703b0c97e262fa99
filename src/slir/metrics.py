"""Outcome metrics for SLIR runs.

Summaries computed from the daily (day, S, L, I, R) records."""


from typing import Dict, Sequence

import numpy as np

from src.slir.sinks import DayRecord


COLUMNS = ("day", "susceptible", "latent", "infected", "recovered")


def records_to_array(records: Sequence[DayRecord]) -> np.ndarray:
    """Stack records into an int array of shape (T, 5)."""
    if not records:
        return np.zeros((0, len(COLUMNS)), dtype=np.int64)
    return np.asarray([tuple(r) for r in records], dtype=np.int64)


def summarize_records(records: Sequence[DayRecord], population_size: int) -> Dict[str, float]:
    """Compute duration, peaks and attack rate for one run."""
    arr = records_to_array(records)
    if arr.shape[0] == 0:
        raise ValueError("No records to summarize")
    infected = arr[:, 3]
    peak_idx = int(np.argmax(infected))
    final = arr[-1]
    # Everyone ever infected ends up recovered, or is still L/I if the run was cut short.
    ever_infected = int(population_size - final[1])
    return {
        "duration_days": int(arr.shape[0]),
        "peak_infected": int(infected[peak_idx]),
        "peak_day": int(arr[peak_idx, 0]),
        "peak_latent": int(arr[:, 2].max()),
        "final_susceptible": int(final[1]),
        "final_recovered": int(final[4]),
        "attack_rate": ever_infected / float(population_size),
    }


def ensemble_summary(rows: Sequence[Dict[str, float]]) -> Dict[str, float]:
    """Mean and p10/p50/p90 of each metric across runs."""
    if not rows:
        return {}
    summary: Dict[str, float] = {"n_runs": len(rows)}
    for key in rows[0].keys():
        values = np.asarray([row[key] for row in rows], dtype=float)
        summary[f"{key}_mean"] = float(np.mean(values))
        for q in (10, 50, 90):
            summary[f"{key}_p{q}"] = float(np.percentile(values, q))
    return summary

"""Run I/O helpers.

Small utilities to create output folders and persist configs, records and
metrics as JSON and CSV. Used by scripts to standardize run artifacts in runs/.
"""


from pathlib import Path
import json
import csv
from typing import Dict, Iterable, List, Union


def ensure_dir(path: Union[Path, str]) -> Path:
    path = Path(path)
    # Create output folder if needed.
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(path: Union[Path, str], payload: Dict) -> None:
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        # Paths and numpy scalars are written through str().
        json.dump(payload, f, indent=2, sort_keys=True, default=str)


def save_csv(path: Union[Path, str], rows: Iterable[Dict]) -> None:
    path = Path(path)
    rows = list(rows)
    if not rows:
        # Nothing to write.
        return
    fieldnames: List[str] = []
    for row in rows:
        fieldnames.extend(k for k in row.keys() if k not in fieldnames)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def load_records_txt(path: Union[Path, str]) -> List[List[int]]:
    """Read a `day S L I R` text file back into rows of integers."""
    path = Path(path)
    rows = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                rows.append([int(v) for v in line.split()])
    return rows

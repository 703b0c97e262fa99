import importlib.util
from pathlib import Path
import sys

import pytest

from src.slir.errors import ConfigurationError


SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load_script(name: str):
    spec = importlib.util.spec_from_file_location(f"_script_{name}", SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_invalid_population_leaves_no_run_folder(tmp_path, monkeypatch, restore_root_logging):
    script = _load_script("simulate_run")
    out_dir = tmp_path / "run"
    monkeypatch.setattr(
        sys, "argv", ["simulate_run.py", "--population", "1", "--out-dir", str(out_dir), "--no-console-log"]
    )
    with pytest.raises(ConfigurationError):
        script.main()
    assert not out_dir.exists()


def test_simulate_run_writes_artifacts(tmp_path, monkeypatch, restore_root_logging):
    script = _load_script("simulate_run")
    out_dir = tmp_path / "run"
    monkeypatch.setattr(
        sys, "argv", ["simulate_run.py", "--population", "6", "--seed", "3", "--out-dir", str(out_dir), "--no-console-log"]
    )
    script.main()
    for name in ("config.json", "records.csv", "metrics.json", "run.log", "data/data.txt"):
        assert (out_dir / name).exists()
    assert (out_dir / "data" / "dot_files" / "contacts_total.dot").exists()

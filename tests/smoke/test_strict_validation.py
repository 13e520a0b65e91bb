import subprocess
import sys
from pathlib import Path
import pytest

from chitfund.scenario_runner import run_dir

NO_MEMBERS_CFG = """\
scheme:
  monthly_contribution: 5000
  first_withdrawal: 80000
loans: { loan_utilization_pct: 50 }
"""

def _write(p: Path, name: str, text: str) -> Path:
    f = p / name
    f.write_text(text, encoding="utf-8")
    return f

def test_strict_requires_total_members_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "no_members.yaml", NO_MEMBERS_CFG)
    out = tmp_path / "out"
    monkeypatch.setenv("VALIDATION_MODE", "strict")
    with pytest.raises(SystemExit):
        run_dir(cfg, out, mode="schedule", fmt="csv")

def test_relaxed_falls_back_to_defaults(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "no_members.yaml", NO_MEMBERS_CFG)
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")
    res = run_dir(cfg, tmp_path / "out", mode="schedule", fmt="csv")
    assert res.summary["total_members_served"] == 20

def test_module_entrypoint_strict_flag(tmp_path: Path):
    cfg = _write(tmp_path, "no_members.yaml", NO_MEMBERS_CFG)
    out = tmp_path / "out"
    with pytest.raises(subprocess.CalledProcessError):
        subprocess.check_call(
            [sys.executable, "-m", "chitfund", "--strict", "--config", str(cfg), "--outputs-dir", str(out)]
        )
    subprocess.check_call(
        [sys.executable, "-m", "chitfund", "--relaxed", "--config", str(cfg), "--outputs-dir", str(out)]
    )
    assert (out / "summary.json").exists()

import json
from pathlib import Path

import pandas as pd
import pytest

from chitfund import scenario_runner

SCENARIOS = Path(scenario_runner.__file__).resolve().parent / "inputs" / "scenarios"


def test_run_matrix_over_packaged_scenarios(tmp_path):
    results = scenario_runner.run_matrix(SCENARIOS, tmp_path)
    assert set(results) == {"reference_case.yaml", "onetime_commission.yaml"}

    onetime = results["onetime_commission.yaml"]
    assert onetime.summary["commission_per_month"] == 500
    assert onetime.summary["total_loan_amount"] == 0

    ref = results["reference_case.yaml"]
    months = pd.read_csv([p for p in ref.results_paths if p.name.endswith("_months.csv")][0])
    assert len(months) == ref.summary["duration"]
    assert months["actual_withdrawal_count"].sum() == ref.summary["total_members_served"]
    assert json.loads(ref.summary_path.read_text(encoding="utf-8"))["duration"] == 19


def test_directory_mode_counts_files(tmp_path):
    res = scenario_runner.run_dir(SCENARIOS, tmp_path / "out")
    assert res.summary == {"validated": True, "files": 2}
    assert res.summary_path.is_file()
    assert json.loads(res.summary_path.read_text(encoding="utf-8")) == res.summary


def test_empty_directory_is_rejected(tmp_path):
    (tmp_path / "empty").mkdir()
    with pytest.raises(ValueError, match="no scenario files"):
        scenario_runner.run_dir(tmp_path / "empty", tmp_path / "out")


def test_unknown_mode_and_format(tmp_path):
    cfg = SCENARIOS / "reference_case.yaml"
    with pytest.raises(SystemExit):
        scenario_runner.run_dir(cfg, tmp_path, mode="montecarlo")
    with pytest.raises(SystemExit):
        scenario_runner.run_dir(cfg, tmp_path, fmt="xlsx", save_tables=True)


def test_loan_utilization_override_needs_schedule_mode(tmp_path):
    cfg = SCENARIOS / "reference_case.yaml"
    with pytest.raises(SystemExit, match="schedule mode"):
        scenario_runner.run_dir(cfg, tmp_path, mode="sensitivity", loan_utilization_pct=10)
    with pytest.raises(SystemExit, match="schedule mode"):
        scenario_runner.run_dir(SCENARIOS, tmp_path, loan_utilization_pct=10)
    assert not (tmp_path / "summary.json").exists()

# chitfund/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import json
import logging

import pandas as pd

from .adapters import build_parameters, run_scheme
from .config import load_scheme_config
from .sensitivity import run_utilization_sweep
from .validate import _mode_from_env_or_flag, validate_params_dict

logger = logging.getLogger(__name__)

MODES = ("schedule", "sensitivity")
TABLES = ("months", "loans", "members")


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_paths: List[Path] = field(default_factory=list)


def _write_table(rows: List[Dict[str, Any]] | pd.DataFrame, path: Path, fmt: str) -> Path:
    df = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(rows)
    if fmt == "jsonl":
        path = path.with_suffix(".jsonl")
        if df.empty:
            path.write_text("", encoding="utf-8")
        else:
            df.to_json(path, orient="records", lines=True)
    elif fmt == "csv":
        path = path.with_suffix(".csv")
        df.to_csv(path, index=False)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")
    return path


def _validate_dir(cfg_path: Path, out: Path, mode: str) -> RunResult:
    """Validate every YAML file in a directory; raise on violations."""
    count = 0
    for f in sorted(cfg_path.glob("*.y*ml")):
        if not f.is_file():
            continue
        try:
            validate_params_dict(load_scheme_config(f), mode=mode)
        except SystemExit as e:
            raise SystemExit(f"{f}: {e}")
        count += 1
    if not count:
        raise ValueError(f"{cfg_path}: no scenario files found")
    summary = {"validated": True, "files": count}
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    return RunResult(summary=summary, summary_path=summary_path)


def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    mode: str = "schedule",
    fmt: str = "csv",
    save_tables: bool = False,
    loan_utilization_pct: Optional[float] = None,
) -> RunResult:
    """
    Run one scheme config (or validate a directory of them) and write
    summary.json into out_dir. With save_tables, also write the month, loan
    and member tables (schedule mode) or the sweep table (sensitivity mode).
    """
    if mode not in MODES:
        raise SystemExit(f"unknown mode: {mode}")
    validation_mode = _mode_from_env_or_flag(None)

    cfg_path = Path(config)
    if loan_utilization_pct is not None and (mode != "schedule" or cfg_path.is_dir()):
        # the sweep sets utilization itself; directory mode only validates
        raise SystemExit("loan_utilization_pct applies to schedule mode on a single config only")
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    if cfg_path.is_dir():
        return _validate_dir(cfg_path, out, validation_mode)

    params = load_scheme_config(cfg_path)
    logger.info("running %s for %s (%s validation)", mode, cfg_path, validation_mode)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = f"{cfg_path.stem}_results_{stamp}"
    written: List[Path] = []

    if mode == "schedule":
        result = run_scheme(params, loan_utilization_pct=loan_utilization_pct, mode=validation_mode)
        summary = {k: v for k, v in result.items() if k not in TABLES}
        if save_tables:
            for name in TABLES:
                written.append(_write_table(result[name], out / f"{base}_{name}", fmt))
    else:
        sweep = run_utilization_sweep(build_parameters(params, mode=validation_mode))
        summary = {"points": len(sweep), **sweep.attrs}
        if save_tables:
            written.append(_write_table(sweep, out / f"{base}_sensitivity", fmt))

    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    return RunResult(summary=summary, summary_path=summary_path, results_paths=written)


def run_matrix(dir_path: str | Path, out_dir: str | Path, pattern: str = "*.yaml", *, fmt: str = "csv") -> Dict[str, RunResult]:
    """Run every matching config in a directory, each into its own subfolder."""
    d = Path(dir_path)
    o = Path(out_dir)
    results = {}
    for cfg in sorted(d.glob(pattern)):
        results[cfg.name] = run_dir(cfg, o / cfg.stem, mode="schedule", fmt=fmt, save_tables=True)
    return results

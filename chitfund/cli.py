from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Only imports the thin runner; the math stays behind scenario_runner
from .scenario_runner import MODES, run_dir

DEFAULT_CONFIG = Path(__file__).resolve().parent / "inputs" / "scenarios" / "reference_case.yaml"


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="chitfund",
        description="Chit fund schedule, idle-pool lending and member return calculator",
    )
    p.add_argument(
        "--mode",
        default="schedule",
        choices=list(MODES),
        help="Execution mode (default: schedule).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a scheme YAML/JSON, or a directory of YAMLs to validate. Defaults to the packaged reference case.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for table files (default: csv).",
    )
    p.add_argument(
        "--save-tables",
        action="store_true",
        help="If set, write month/loan/member (or sweep) tables alongside summary.json.",
    )
    p.add_argument(
        "--loan-utilization",
        type=float,
        default=None,
        help="Override the config's loan utilization percentage (schedule mode on a single config; rejected otherwise).",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug).")
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (unknown keys ignored).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    try:
        ns = parse_args(argv)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else 2
    _apply_validation_mode(ns)
    _configure_logging(ns.verbose)

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve() if ns.config else DEFAULT_CONFIG

    try:
        res = run_dir(
            cfg_path,
            outputs_dir,
            mode=ns.mode,
            fmt=ns.fmt,
            save_tables=ns.save_tables,
            loan_utilization_pct=ns.loan_utilization,
        )
    except SystemExit as e:
        # validation failures carry a message; keep the shell code at 2
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    s = res.summary
    if "duration" in s:
        print(
            f"duration={s['duration']} members_served={s['total_members_served']} "
            f"loans={s['total_loan_amount']:.0f} interest={s['total_interest_earned']:.0f} "
            f"final_carry_over={s['final_carry_over']:.0f}"
        )
    print(f"summary: {res.summary_path}")
    for path in res.results_paths:
        print(f"table: {path}")
    return 0


__all__ = ["main", "parse_args"]

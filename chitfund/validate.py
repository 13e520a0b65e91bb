# chitfund/validate.py
from __future__ import annotations
import os, sys
from pathlib import Path
from enum import Enum
from typing import Any, Dict, Iterable, List

from .config import load_scheme_config, normalize_config
from .schema import SCHEMA

_CASTS = {"int": int, "float": float, "str": str}


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def coerce_value(key: str, value: Any) -> Any:
    """
    Cast a config value to its schema type. Raises SystemExit naming the key
    when the value cannot be read as that type. Ranges are not checked.
    """
    entry = SCHEMA[key]
    kind = entry["type"]
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool) or value is None:
        raise SystemExit(f"{key}: expected {kind}, got {value!r}")
    try:
        if kind == "int":
            f = float(value)
            if not f.is_integer():
                raise ValueError(value)
            out: Any = int(f)
        else:
            out = _CASTS[kind](value)
    except (TypeError, ValueError):
        raise SystemExit(f"{key}: expected {kind}, got {value!r}")
    choices = entry.get("choices")
    if choices and out not in choices:
        raise SystemExit(f"{key}: must be one of {choices}, got {out!r}")
    return out


def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> Dict[str, Any]:
    """
    Structural guardrails; returns the flat, coerced view of known keys.
      - relaxed: unknown keys ignored, missing keys fall back to defaults
      - strict : require total_members and reject unknown keys
    """
    if not isinstance(data, dict):
        raise SystemExit("config must be a mapping")
    flat = normalize_config(data)

    if mode == "strict":
        if "total_members" not in flat:
            raise SystemExit("missing required keys: ['total_members']")
        unknown = sorted(k for k in flat if k not in SCHEMA)
        if unknown:
            raise SystemExit(f"unknown keys (strict mode): {unknown}")

    return {k: coerce_value(k, v) for k, v in flat.items() if k in SCHEMA}


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="chitfund.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            if not f.is_file():
                continue
            any_seen = True
            try:
                validate_params_dict(load_scheme_config(f), mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except Exception as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())

from __future__ import annotations

from typing import Any, Dict
import io
import json
import os
from pathlib import Path

import yaml

from .schema import ALIASES, GROUPS


def _flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'scheme': {...}, 'loans': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = {k: v for k, v in cfg.items() if k not in GROUPS}
    for k in GROUPS:
        v = cfg.get(k)
        if isinstance(v, dict):
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _resolve_aliases(d: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in d.items():
        out.setdefault(ALIASES.get(k, k), v)
    return out


def normalize_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Flat, alias-resolved view of a (possibly grouped) config mapping."""
    return _resolve_aliases(_flatten_grouped(cfg or {}))


def load_scheme_config(source: str | os.PathLike | io.StringIO) -> Dict[str, Any]:
    """
    Load YAML (or JSON, by suffix) from a path or text stream and return the
    raw mapping. Parse errors propagate; a non-mapping document yields {}.
    """
    if hasattr(source, "read"):
        cfg = yaml.safe_load(str(source.read()))
    else:
        p = Path(os.fspath(source))
        if p.is_dir():
            raise SystemExit(f"{p} is a directory (expected a file)")
        text = p.read_text(encoding="utf-8")
        if p.suffix.lower() == ".json":
            cfg = json.loads(text or "{}")
        else:
            cfg = yaml.safe_load(text)
    return cfg if isinstance(cfg, dict) else {}

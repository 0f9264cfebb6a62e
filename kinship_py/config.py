"""Simple configuration loader for kinship_py.

Behavior:
- Load defaults.
- If environment variable `KINSHIP_CONFIG` is set, load that JSON file and merge.
- Environment variables override file values (variables:
  KINSHIP_DEFAULT_RELATIONSHIP, KINSHIP_TEMPLATES_DIR, KINSHIP_LOG_LEVEL).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import os
import json
from typing import Optional

PACKAGE_TEMPLATES_DIR = Path(__file__).resolve().parent / "report"


@dataclass
class Config:
    default_relationship: str = "first-cousins"
    person1_sex: str = "M"
    person2_sex: str = "F"
    templates_dir: Path = field(default_factory=lambda: PACKAGE_TEMPLATES_DIR)
    log_level: str = "INFO"


def _load_json_file(path: Path) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception:
        return None


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from (1) defaults, (2) JSON file, (3) env vars.

    :param config_path: optional path to a JSON config file. If not provided
                        will use environment variable `KINSHIP_CONFIG` if set.
    """
    cfg = Config()

    cp = config_path or os.environ.get("KINSHIP_CONFIG")
    if cp:
        data = _load_json_file(Path(cp))
        if isinstance(data, dict):
            for key in ("default_relationship", "person1_sex", "person2_sex", "log_level"):
                if data.get(key):
                    setattr(cfg, key, str(data[key]))
            if data.get("templates_dir"):
                cfg.templates_dir = Path(data["templates_dir"])

    # an explicit config_path is authoritative: env vars only apply without one
    if config_path is None:
        if os.environ.get("KINSHIP_DEFAULT_RELATIONSHIP"):
            cfg.default_relationship = os.environ["KINSHIP_DEFAULT_RELATIONSHIP"]
        if os.environ.get("KINSHIP_TEMPLATES_DIR"):
            cfg.templates_dir = Path(os.environ["KINSHIP_TEMPLATES_DIR"])
        if os.environ.get("KINSHIP_LOG_LEVEL"):
            cfg.log_level = os.environ["KINSHIP_LOG_LEVEL"]

    return cfg

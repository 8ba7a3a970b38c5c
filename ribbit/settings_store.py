from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict, fields
from pathlib import Path

from .settings import Settings


APP_DIRNAME = "ribbit"
FILENAME = "settings.json"


def _config_dir() -> Path:
    """Settings location: RIBBIT_CONFIG_DIR, or ``ribbit/.ribbit/`` next to the sources."""
    env_dir = (os.environ.get("RIBBIT_CONFIG_DIR") or "").strip()
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    # If bundled (PyInstaller, etc.), store next to the executable
    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        return exe_dir / f".{APP_DIRNAME}"

    return Path(__file__).resolve().parent / f".{APP_DIRNAME}"


def _config_path() -> Path:
    cfg_dir = _config_dir()
    cfg_dir.mkdir(parents=True, exist_ok=True)
    return cfg_dir / FILENAME


def _read_settings_file(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        # Corrupt file: fall back to defaults, the user can delete it.
        return {}
    return data if isinstance(data, dict) else {}


def load_settings() -> Settings:
    """Load settings from disk, unknown keys are ignored."""
    data = _read_settings_file(_config_path())
    known = {f.name for f in fields(Settings)}
    s = Settings()
    for k, v in data.items():
        if k in known:
            setattr(s, k, v)
    return s


def save_settings(settings: Settings) -> None:
    path = _config_path()
    tmp = path.with_suffix(".tmp")

    # Write atomically (reduce risk of partial writes)
    tmp.write_text(json.dumps(asdict(settings), indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)

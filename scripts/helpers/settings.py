from pathlib import Path
from typing import Any, Dict

import yaml

SETTINGS_KEYS = {"weapons", "items", "ammo", "output"}


class SettingsError(Exception):
    pass


def load_settings(path: Path | None) -> Dict[str, Any]:
    """
    Read the optional YAML settings file. Recognised keys:
      weapons / items / ammo - table file names inside the input directory
      output                 - default CSV path when none is given on the command line
    """
    if path is None:
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise SettingsError(f"cannot read settings file {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"malformed settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise SettingsError(
            f"settings file {path} must be a mapping, got {type(data).__name__}"
        )
    unknown = sorted(set(map(str, data)) - SETTINGS_KEYS)
    if unknown:
        raise SettingsError(f"unknown settings in {path}: {', '.join(unknown)}")
    for key, value in data.items():
        if not isinstance(value, str) or not value.strip():
            raise SettingsError(f"setting '{key}' in {path} must be a non-empty string")
    return data

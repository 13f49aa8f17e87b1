"""Persisted user settings (GUI theme & last used folders).

Stored as JSON under ``~/.config/pacextractor`` unless ``PAC_CONFIG_DIR``
points elsewhere. A missing or broken file just yields the defaults.
"""
from __future__ import annotations
import json, logging, os
from typing import Any, Dict, Optional

CONFIG_DIR_ENV = 'PAC_CONFIG_DIR'
SETTINGS_FILE = 'settings.json'

DEFAULTS: Dict[str, Any] = {
    'theme': 'dark',
    'last_firmware_dir': '',
    'last_output_dir': '',
}

logger = logging.getLogger(__name__)


def config_dir() -> str:
    return os.environ.get(CONFIG_DIR_ENV) or os.path.join(os.path.expanduser('~'), '.config', 'pacextractor')


def settings_path(directory: Optional[str] = None) -> str:
    return os.path.join(directory or config_dir(), SETTINGS_FILE)


def load_settings(directory: Optional[str] = None) -> Dict[str, Any]:
    data = dict(DEFAULTS)
    path = settings_path(directory)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except FileNotFoundError:
        return data
    except (OSError, ValueError) as e:
        logger.warning("ignoring unreadable settings %s: %s", path, e)
        return data
    if isinstance(stored, dict):
        data.update({k: v for k, v in stored.items() if k in DEFAULTS})
    return data


def save_settings(values: Dict[str, Any], directory: Optional[str] = None) -> str:
    path = settings_path(directory)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    data = dict(DEFAULTS)
    data.update({k: v for k, v in values.items() if k in DEFAULTS})
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return path

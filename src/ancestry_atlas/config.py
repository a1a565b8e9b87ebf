import os
from pathlib import Path

import yaml

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "ancestry_atlas.yml"
CONFIG_ENV_VAR = "ANCESTRY_ATLAS_CONFIG"


class AtlasConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {})
        self.logging = data.get("logging", {})
        self.geocoding = data.get("geocoding", {})
        self.tree = data.get("tree", {})
        self.debug = data.get("debug", False)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_config() -> 'AtlasConfig':
    path = config_path()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return AtlasConfig(data)

_config_cache = None

def get_config() -> 'AtlasConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache

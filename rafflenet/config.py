"""Project configuration.

Settings live in ``raffle-config.yaml`` at the project root. String values
may reference environment variables as ``${NAME}``; they are expanded after
the file named by the ``dotenv`` key has been loaded.
"""
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

CONFIG_FILE = "raffle-config.yaml"

DEFAULTS = {
    "networks": {
        "default": "development",
        "development": {"chain_id": 1337},
    },
    "wallets": {},
    "front_end": {},
}


def find_project_root(start=None):
    path = Path(start or os.getcwd()).resolve()
    for candidate in [path, *path.parents]:
        if (candidate / CONFIG_FILE).exists():
            return candidate
    return None


def _expand(value):
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    return value


def _merge(base, override):
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def read_config(project_root=None):
    root = Path(project_root) if project_root else find_project_root()
    if root is None:
        return dict(DEFAULTS)
    with open(root / CONFIG_FILE) as f:
        data = yaml.safe_load(f) or {}
    dotenv_file = data.get("dotenv")
    if dotenv_file:
        load_dotenv(root / dotenv_file)
    return _merge(DEFAULTS, _expand(data))


class Config(dict):
    def load(self, project_root=None):
        self.clear()
        self.update(read_config(project_root))
        return self

    def network_settings(self, name):
        return self["networks"][name]


config = Config().load()

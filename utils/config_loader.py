"""
config_loader.py — App Configuration & User Preferences
=========================================================
Loads the server configuration (YAML or JSON) and turns the flat
preference mapping the front-end stores into a validated Preferences
object.

    cfg   = load_app_config()                 # config/visualizer.yaml
    prefs = Preferences.from_mapping({"speed": "4", "darkMode": True})

The web app stores each user's Preferences in the Flask session under
the front-end keys (to_storage) and restores them over the configured
defaults.  Anything unknown or out of range silently falls back to its
default so a stale stored value can never stop the app from booting.
"""

import json
import os
from dataclasses import dataclass, field, asdict, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "visualizer.yaml"
CONFIG_ENV_VAR      = "VISUALIZER_CONFIG"

SORTING_KEYS     = ("bubble", "selection", "insertion", "quick", "merge")
PATHFINDING_KEYS = ("dijkstra", "astar", "bfs", "dfs")
ALGORITHM_TYPES  = ("sorting", "pathfinding")

ARRAY_SIZE_RANGE = (5, 100)
GRID_SIZE_RANGE  = (5, 50)
SPEED_RANGE      = (1, 5)

# storage key (as the front-end writes it) → Preferences attribute
_STORAGE_KEYS = {
    "algorithmType":        "algorithm_type",
    "sortingAlgorithm":     "sorting_algorithm",
    "pathfindingAlgorithm": "pathfinding_algorithm",
    "arraySize":            "array_size",
    "gridSize":             "grid_size",
    "speed":                "speed",
    "darkMode":             "dark_mode",
}


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file."""
    path_p = Path(path)
    with open(path_p, "r", encoding="utf-8") as f:
        if path_p.suffix in {".yaml", ".yml"}:
            return yaml.safe_load(f) or {}
        if path_p.suffix == ".json":
            return json.load(f)
    raise ValueError(f"Unsupported config format: {path_p.suffix or path_p.name}")


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
@dataclass
class Preferences:
    algorithm_type:        str  = "sorting"
    sorting_algorithm:     str  = "bubble"
    pathfinding_algorithm: str  = "dijkstra"
    array_size:            int  = 50
    grid_size:             int  = 15
    speed:                 int  = 3
    dark_mode:             bool = False

    @classmethod
    def from_mapping(
        cls,
        data: Optional[Mapping[str, Any]],
        defaults: Optional["Preferences"] = None,
    ) -> "Preferences":
        """Build from either storage-style or snake_case keys, over `defaults`."""
        prefs = replace(defaults) if defaults is not None else cls()
        if not data:
            return prefs

        values: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _STORAGE_KEYS.get(key, key)
            values[attr] = value

        prefs.algorithm_type        = _choice(values.get("algorithm_type"), ALGORITHM_TYPES, prefs.algorithm_type)
        prefs.sorting_algorithm     = _choice(values.get("sorting_algorithm"), SORTING_KEYS, prefs.sorting_algorithm)
        prefs.pathfinding_algorithm = _choice(values.get("pathfinding_algorithm"), PATHFINDING_KEYS, prefs.pathfinding_algorithm)
        prefs.array_size            = _bounded_int(values.get("array_size"), ARRAY_SIZE_RANGE, prefs.array_size)
        prefs.grid_size             = _bounded_int(values.get("grid_size"), GRID_SIZE_RANGE, prefs.grid_size)
        prefs.speed                 = _bounded_int(values.get("speed"), SPEED_RANGE, prefs.speed)
        prefs.dark_mode             = _flag(values.get("dark_mode"), prefs.dark_mode)
        return prefs

    @property
    def theme(self) -> str:
        return "dark" if self.dark_mode else "light"

    @property
    def selected_algorithm(self) -> str:
        if self.algorithm_type == "pathfinding":
            return self.pathfinding_algorithm
        return self.sorting_algorithm

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_storage(self) -> Dict[str, Any]:
        """Same values under the keys the front-end stores them as."""
        return {key: getattr(self, attr) for key, attr in _STORAGE_KEYS.items()}


# ---------------------------------------------------------------------------
# App config
# ---------------------------------------------------------------------------
@dataclass
class AppConfig:
    host:        str         = "127.0.0.1"
    port:        int         = 5000
    debug:       bool        = False
    log_level:   str         = "INFO"
    log_file:    Optional[str] = None
    max_sessions: int        = 100
    preferences: Preferences = field(default_factory=Preferences)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "AppConfig":
        cfg = cls()
        if not data:
            return cfg
        server = data.get("server", {}) or {}
        cfg.host      = str(server.get("host", cfg.host))
        cfg.port      = _bounded_int(server.get("port"), (1, 65535), cfg.port)
        cfg.debug     = _flag(server.get("debug"), cfg.debug)
        cfg.max_sessions = _bounded_int(server.get("max_sessions"), (1, 100_000), cfg.max_sessions)
        logging_conf  = data.get("logging", {}) or {}
        cfg.log_level = str(logging_conf.get("level", cfg.log_level)).upper()
        cfg.log_file  = logging_conf.get("file") or None
        cfg.preferences = Preferences.from_mapping(data.get("preferences"))
        return cfg


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """Return the app configuration; defaults when no file is present."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or str(DEFAULT_CONFIG_PATH)
    if not Path(path).exists():
        return AppConfig()
    return AppConfig.from_mapping(load_config(path))


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------
def _choice(value: Any, allowed, default: str) -> str:
    return value if value in allowed else default


def _bounded_int(value: Any, bounds, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    lo, hi = bounds
    return number if lo <= number <= hi else default


def _flag(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    return default

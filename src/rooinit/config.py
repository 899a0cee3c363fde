"""
rooinit Configuration

Loads configuration from a YAML file and environment variables.
Defaults point at the bundled system catalog and the per-user config
directory that holds user-definitions.json.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# Bundled system catalog (modes.json, categories.json, rules/)
BUNDLED_CATALOG_PATH = Path(__file__).parent / "catalog"

# Default configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".rooinit" / "config.yaml",
]


DEFAULT_CONFIG = {
    "definitions_path": str(BUNDLED_CATALOG_PATH),
    "user_config_path": str(Path.home() / ".config" / "roo-init"),

    # Output layout inside the target project
    "manifest_name": ".roomodes",
    "rules_dir": ".roo",

    "log_level": "INFO",
}


ENV_MAPPINGS = {
    "ROOINIT_DEFINITIONS_PATH": "definitions_path",
    "ROOINIT_USER_CONFIG_PATH": "user_config_path",
    "ROOINIT_LOG_LEVEL": "log_level",
}


class RooInitConfig:
    """Configuration for locating catalogs and laying out output."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None

        # Load from file if found
        self._load_config(config_path)

        # Override with environment variables
        self._apply_env_overrides()

    def _load_config(self, explicit_path: Optional[Path] = None) -> None:
        """Load configuration from YAML file."""
        search_paths = [Path(explicit_path)] if explicit_path else CONFIG_SEARCH_PATHS

        for config_path in search_paths:
            if config_path.exists():
                try:
                    with open(config_path, 'r', encoding='utf-8') as f:
                        user_config = yaml.safe_load(f) or {}
                    if not isinstance(user_config, dict):
                        raise ValueError(f"expected a mapping, got {type(user_config).__name__}")
                except (OSError, yaml.YAMLError, ValueError) as e:
                    logger.warning(f"Failed to load config from {config_path}: {e}")
                    continue
                self._config.update(user_config)
                self._config_path = config_path
                return

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        for env_var, config_key in ENV_MAPPINGS.items():
            if env_var in os.environ:
                self._config[config_key] = os.environ[env_var]

    @property
    def config_path(self) -> Optional[Path]:
        """Path to loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def definitions_path(self) -> Path:
        """System catalog directory."""
        return Path(self._config["definitions_path"]).expanduser()

    @property
    def user_config_path(self) -> Path:
        """Directory holding user-definitions.json and the user rules/ tree."""
        return Path(self._config["user_config_path"]).expanduser()

    @property
    def manifest_name(self) -> str:
        return self._config.get("manifest_name", ".roomodes")

    @property
    def rules_dir(self) -> str:
        return self._config.get("rules_dir", ".roo")

    @property
    def log_level(self) -> str:
        return str(self._config.get("log_level", "INFO")).upper()

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as dict."""
        return {
            "definitions_path": str(self.definitions_path),
            "user_config_path": str(self.user_config_path),
            "manifest_name": self.manifest_name,
            "rules_dir": self.rules_dir,
            "log_level": self.log_level,
            "config_file": str(self._config_path) if self._config_path else None,
        }


# Global config instance (lazy-loaded)
_config: Optional[RooInitConfig] = None


def get_config(config_path: Optional[Path] = None) -> RooInitConfig:
    """Get the global config instance, loading if needed."""
    global _config
    if _config is None or config_path is not None:
        _config = RooInitConfig(config_path)
    return _config

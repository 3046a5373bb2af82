# ABOUTME: Shared utilities for the key-log heatmap analyzer
import copy
from typing import Dict, Any, Union
from pathlib import Path
import yaml
import logging


# Layout definitions shipped with the package
BUNDLED_LAYOUTS_DIR = Path(__file__).parent / "layouts"


class ConfigManager:
    """Configuration management with validation."""

    def __init__(self, config_path: Union[str, Path] = "config.yaml"):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration and merge it over the defaults."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            logging.warning(f"Config file {self.config_path} not found, using defaults")
            return self._default_config()
        except yaml.YAMLError as e:
            logging.error(f"Error parsing config file: {e}")
            return self._default_config()

        if config is None:
            return self._default_config()
        if not isinstance(config, dict):
            logging.error(
                f"Config file {self.config_path} must contain a mapping, using defaults"
            )
            return self._default_config()
        return merge_config(self._default_config(), config)

    def _default_config(self) -> Dict[str, Any]:
        """Default configuration values."""
        return {
            "layouts": {
                "directory": str(BUNDLED_LAYOUTS_DIR),
                "names": ["qwerty"],
                "offset": [0, 300],
            },
            "heatmap": {
                "color_strategy": "lightness",
                "max_scope": "all",
                "key_radius": 20,
            },
            "bigrams": {
                "top_n": 10,
            },
            "output": {
                "reports_directory": "./reports",
                "log_level": "INFO",
                "languages": ["en", "ja"],
            },
            "recording": {
                "log_directory": "./log",
                "pause_threshold_ms": 500,
                "write_interval_seconds": 1,
            },
            "special_keys": {},
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with dot notation."""
        keys = key.split(".")
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler("keyheat.log"), logging.StreamHandler()],
        force=True,
    )

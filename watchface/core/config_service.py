"""
Configuration Service - Watch face config management
Loads YAML config with environment variable overrides
"""
import os
import yaml
from typing import Any, Dict, Optional
from pathlib import Path


PACKAGED_CONFIG = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


class ConfigService:
    """
    Centralized configuration management with environment overrides.

    Priority order:
    1. Environment variables (highest)
    2. YAML config file
    3. Default values (lowest)
    """

    _instance: Optional['ConfigService'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, *args, **kwargs):
        """Singleton pattern for global config access"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize only once, unless an explicit path is given"""
        if config_path is not None or not self._config:
            self.reload(config_path)

    def reload(self, config_path: Optional[Path] = None) -> None:
        """
        Load config from file and environment.

        Args:
            config_path: Explicit YAML file to load instead of the search paths
        """
        self._config = self._load_yaml_config(config_path)
        self._apply_env_overrides()

    def _load_yaml_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if config_path is not None:
            config_paths = [Path(config_path)]
        else:
            config_paths = [
                Path("/data/watchface.yaml"),  # Device path
                Path("config/default.yaml"),  # Development path
                PACKAGED_CONFIG,  # Shipped with the package
            ]

        for path in config_paths:
            if path.exists():
                try:
                    with open(path, 'r') as f:
                        loaded = yaml.safe_load(f) or {}
                        return self._merge(self._get_defaults(), loaded)
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load {path}: {e}")

        # Return defaults if no config file found
        return self._get_defaults()

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively overlay override onto base"""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = ConfigService._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides"""
        # Timezone
        if env_tz := os.environ.get('TIMEZONE'):
            self._config['timezone'] = env_tz

        # Display
        if env_width := os.environ.get('DISPLAY_WIDTH'):
            self._config.setdefault('display', {})
            self._config['display']['width'] = int(env_width)

        if env_height := os.environ.get('DISPLAY_HEIGHT'):
            self._config.setdefault('display', {})
            self._config['display']['height'] = int(env_height)

        # Face
        if env_background := os.environ.get('WATCHFACE_BACKGROUND'):
            self._config.setdefault('face', {})
            self._config['face']['background'] = env_background

        if env_layout := os.environ.get('WATCHFACE_LABEL_LAYOUT'):
            self._config.setdefault('face', {})
            self._config['face']['label_layout'] = env_layout

        # Logging
        if env_level := os.environ.get('LOG_LEVEL'):
            self._config.setdefault('logging', {})
            self._config['logging']['level'] = env_level

    def _get_defaults(self) -> Dict[str, Any]:
        """Return default configuration"""
        return {
            'app': {
                'version': '1.0.0',
            },
            'timezone': None,
            'display': {
                'width': 400,
                'height': 400,
                'fps': 30,
            },
            'face': {
                'background': None,
                'label_layout': 'source',
                'update_interval_ms': 1000,
            },
            'logging': {
                'level': 'INFO',
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value using dot notation
        Example: config.get('face.label_layout')
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_all(self) -> Dict[str, Any]:
        """Get entire configuration dict"""
        return self._config.copy()

    def set(self, key: str, value: Any) -> None:
        """
        Set config value using dot notation
        Example: config.set('display.width', 320)
        """
        keys = key.split('.')
        target = self._config

        for k in keys[:-1]:
            target = target.setdefault(k, {})

        target[keys[-1]] = value


# Global instance
config = ConfigService()

import os
import configparser
from pathlib import Path

from inventory_replenishment.exceptions import ConfigError

DEFAULT_SETTINGS = {
    'DATABASE': {
        'url': 'sqlite:///inventory_replenishment.db',
        'echo': 'False',
        'pool_size': '10',
        'max_overflow': '20',
        'pool_timeout': '30',
        'pool_recycle': '1800'
    },
    'LOGGING': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'directory': 'logs',
        'max_size_mb': '10',
        'backup_count': '5',
        'console_output': 'True',
        'file_output': 'False'
    },
    'FORECAST': {
        'horizon_days': '7',
        'weights': '0.1, 0.1, 0.15, 0.15, 0.2, 0.3',
        'seasonal_period': '7',
        'seasonal_alignment': 'POSITION',
        'method_name': 'moving_average',
        'confidence': '0.8',
        'random_seed': ''
    },
    'REPLENISHMENT': {
        'default_order_quantity': '10',
        'default_lead_time': '1'
    }
}


class Config:
    """Configuration manager for the Inventory Replenishment system."""

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return

        self._config_dir = Path(os.environ.get('INVENTORY_REPLENISHMENT_CONFIG_DIR', 'config'))
        self._config_path = self._config_dir / 'settings.ini'
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULT_SETTINGS)

        # Values from settings.ini override the defaults
        if self._config_path.exists():
            self._config.read(self._config_path)

        self._initialized = True

    def reload(self):
        """Reset to defaults and re-read settings.ini."""
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(DEFAULT_SETTINGS)
        if self._config_path.exists():
            self._config.read(self._config_path)

    def get(self, section, key, default=None):
        """Get configuration value."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def get_int(self, section, key, default=None):
        """Get configuration value as integer."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default

    def get_list(self, section, key, default=None):
        """Get a comma separated configuration value as a list of floats."""
        raw = self.get(section, key)
        if not raw:
            return default

        try:
            return [float(part) for part in raw.split(',') if part.strip()]
        except ValueError:
            raise ConfigError(
                f"Invalid list value for [{section}] {key}: {raw}",
                section=section,
                key=key
            )

    def set(self, section, key, value):
        """Set configuration value (in memory until reload())."""
        if not self._config.has_section(section):
            self._config.add_section(section)

        self._config.set(section, key, str(value))

    def get_db_url(self):
        """Get the SQLAlchemy database URL."""
        return os.environ.get('INVENTORY_REPLENISHMENT_DB_URL') or self.get('DATABASE', 'url')

    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True),
            'file_output': self.get_boolean('LOGGING', 'file_output', False)
        }

    @property
    def forecast_config(self):
        """Get forecasting configuration."""
        seed = self.get('FORECAST', 'random_seed', '').strip()
        try:
            random_seed = int(seed) if seed else None
        except ValueError:
            raise ConfigError(
                f"Invalid integer value for [FORECAST] random_seed: {seed}",
                section='FORECAST',
                key='random_seed'
            )

        return {
            'horizon_days': self.get_int('FORECAST', 'horizon_days', 7),
            'weights': self.get_list('FORECAST', 'weights', [0.1, 0.1, 0.15, 0.15, 0.2, 0.3]),
            'seasonal_period': self.get_int('FORECAST', 'seasonal_period', 7),
            'seasonal_alignment': self.get('FORECAST', 'seasonal_alignment', 'POSITION').upper(),
            'method_name': self.get('FORECAST', 'method_name', 'moving_average'),
            'confidence': self.get_float('FORECAST', 'confidence', 0.8),
            'random_seed': random_seed
        }

    @property
    def replenishment_config(self):
        """Get replenishment configuration."""
        return {
            'default_order_quantity': self.get_float('REPLENISHMENT', 'default_order_quantity', 10.0),
            'default_lead_time': self.get_int('REPLENISHMENT', 'default_lead_time', 1)
        }

# Global config instance
config = Config()

"""Public configuration surface: Config, init() and get_config()."""

from monadkit._config import Config, get_config, init, reset_config

__all__ = ['Config', 'get_config', 'init', 'reset_config']

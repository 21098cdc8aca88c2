from ._config import Config
from ._config import config
from .exceptions import ConfigException
from .integration import IntegrationConfig


__all__ = [
    "Config",
    "ConfigException",
    "IntegrationConfig",
    "config",
]

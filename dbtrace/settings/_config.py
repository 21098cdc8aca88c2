from copy import deepcopy
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from ..internal.logger import get_logger
from ._core import DBTraceConfig
from .integration import IntegrationConfig


log = get_logger(__name__)


class Config(object):
    """Configuration object that exposes an API to set and retrieve
    global settings for each integration. All integrations must use
    this instance to register their defaults, so that they're public
    available and can be updated by users.
    """

    def __init__(self):
        # type: () -> None
        self._integration_configs = {}  # type: Dict[str, IntegrationConfig]
        self._env = DBTraceConfig()
        self.service = self._env.SERVICE  # type: Optional[str]
        self._trace_enabled = self._env.TRACE_ENABLED  # type: bool
        self._debug_mode = self._env.TRACE_DEBUG  # type: bool

    def __getattr__(self, name):
        # type: (str) -> IntegrationConfig
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._integration_configs:
            integration_config = IntegrationConfig(self, name)
            # creating the config may import the integration, which registers it first
            self._integration_configs.setdefault(name, integration_config)
        return self._integration_configs[name]

    def _add(self, integration, settings):
        # type: (str, Dict[str, Any]) -> None
        """Internal API that registers an integration with given default
        settings.

        Settings already present on the integration take precedence, so a
        value set by the user before the integration module is imported is
        kept::

            >>> config.sqlite3['trace_fetch_methods'] = True
            >>> config._add('sqlite3', dict(trace_fetch_methods=False))
            >>> config.sqlite3['trace_fetch_methods']
            True

        :param str integration: The integration name (i.e. `sqlite3`)
        :param dict settings: A dictionary that contains integration settings;
            to preserve immutability of these values, the dictionary is copied
            since it contains integration defaults.
        """
        # DEV: Use `getattr()` to call our `__getattr__` helper
        existing = getattr(self, integration)
        settings = deepcopy(settings)
        for key, value in settings.items():
            existing._defaults[key] = value
            existing.setdefault(key, value)

    def use(self, integration, describes=None, **settings):
        """Configure an integration, optionally for the databases matching ``describes``::

            from dbtrace import config

            config.use('database', service_name='default-db')
            config.use('database', describes='mysql2://root@127.0.0.1:53306/mysql', service_name='gadget-db')
            config.use('database', describes={'adapter': 'sqlite3', 'database': ':memory:'}, service_name='widget-db')

        See :meth:`dbtrace.settings.IntegrationConfig.use`.
        """
        return getattr(self, integration).use(describes=describes, **settings)

    def reset_configuration(self, integration):
        # type: (str) -> None
        getattr(self, integration).reset_configuration()

    def __repr__(self):
        cls = self.__class__
        integrations = ", ".join(self._integration_configs.keys())
        return "{}.{}({})".format(cls.__module__, cls.__name__, integrations)


config = Config()

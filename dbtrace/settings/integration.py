from copy import deepcopy
import os
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from ..internal.logger import get_logger
from ..internal.utils.attrdict import AttrDict
from .exceptions import ConfigException


log = get_logger(__name__)

# Settings accepted by ``use()`` that describe a database configuration
DATABASE_SETTINGS = frozenset(["service_name", "service", "tracer", "tags"])


class IntegrationConfig(AttrDict):
    """
    Integration specific configuration object.

    This is what you will get when you do::

        from dbtrace import config

        # This is an `IntegrationConfig`
        config.database

        # `IntegrationConfig` supports both attribute and item accessors
        config.database['span_name'] = 'db.query'
        config.database.span_name = 'db.query'

    Each integration also owns the registry of per database configurations
    used to pick the service name and tracer of a connection::

        config.database.use(service_name='default-db')
        config.database.use(describes='gadget', service_name='gadget-db')
    """

    def __init__(self, global_config, name, *args, **kwargs):
        """
        :param global_config:
        :type global_config: Config
        :param name: the integration name
        :type name: str
        """
        # circular import
        from ..contrib.database.resolver import DatabaseConfigurationResolver

        super(IntegrationConfig, self).__init__(*args, **kwargs)

        # DEV: By-pass the `__setattr__` overrides from `AttrDict` to set real properties
        object.__setattr__(self, "global_config", global_config)
        object.__setattr__(self, "integration_name", name)
        object.__setattr__(self, "resolver", DatabaseConfigurationResolver())
        object.__setattr__(self, "_defaults", deepcopy(dict(self)))

        self._set_environment_defaults()

    def _set_environment_defaults(self):
        # type: () -> None
        name = self.integration_name.upper()
        service = os.getenv("DBTRACE_%s_SERVICE" % name, default=os.getenv("DBTRACE_%s_SERVICE_NAME" % name))
        self.setdefault("service", service)
        self.setdefault("span_name", "db.query")
        self.setdefault("configurations", None)

    def use(self, describes=None, **settings):
        """Register tracing settings for the databases of this integration.

        Without ``describes`` the settings become the default configuration,
        used by every connection that no registered description matches.
        With ``describes`` (a logical key, a connection URL or a mapping of
        connection options) they apply only to the matching connections.
        The first registered description matching a connection wins.

        :returns: the registered :class:`dbtrace.contrib.database.DatabaseConfiguration`
        :raises ConfigException: on unknown settings or malformed descriptions
        """
        from ..contrib.database.configuration import DatabaseConfiguration

        integration_settings = dict((k, v) for k, v in settings.items() if k not in DATABASE_SETTINGS)
        if describes is not None and integration_settings:
            raise ConfigException(
                "%s settings %s cannot be scoped to a database description"
                % (self.integration_name, ", ".join(sorted(integration_settings)))
            )
        for key in integration_settings:
            if key not in self:
                raise ConfigException("unknown %s setting %r" % (self.integration_name, key))

        configuration = DatabaseConfiguration(
            service_name=settings.get("service_name", settings.get("service")),
            tracer=settings.get("tracer"),
            tags=settings.get("tags"),
        )

        if describes is None:
            if "configurations" in integration_settings:
                self.resolver.set_configurations(integration_settings["configurations"])
            self.update(integration_settings)
            self.resolver.set_default(configuration)
        else:
            self.resolver.add(describes, configuration)
        return configuration

    def reset_configuration(self):
        # type: () -> None
        """Drop every registered database configuration and restore the defaults.

        Meant for test and reconfiguration boundaries only: connections keep
        the configuration they resolved when they were created.
        """
        self.resolver.reset()
        self.clear()
        self.update(deepcopy(self._defaults))
        self._set_environment_defaults()

    def resolve(self, describes):
        """Return the configuration that applies to the given connection description."""
        return self.resolver.resolve(describes)

    def __repr__(self):
        cls = self.__class__
        keys = ", ".join(self.keys())
        return "{}.{}({})".format(cls.__module__, cls.__name__, keys)

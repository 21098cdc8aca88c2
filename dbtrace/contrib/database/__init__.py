"""
The database integration traces any database handle exposing a
``raw_execute(sql, options=None)`` primitive, and attributes each database to
its own service.

Configuration
~~~~~~~~~~~~~

Connections that no description matches use the default configuration::

    from dbtrace import config

    config.use('database', service_name='default-db')

Register a configuration for some databases with ``describes``, given as a
logical key, a connection URL or a mapping of connection options. The first
registered description matching a connection applies::

    config.use('database', describes='gadget', service_name='gadget-db')
    config.use('database', describes='mysql2://root@127.0.0.1:53306/mysql', service_name='gadget-db')
    config.use('database', describes={'adapter': 'sqlite3', 'database': ':memory:'}, service_name='widget-db')

Named configurations let a key describe the database a connection opens::

    config.use('database', configurations={'gadget': 'mysql2://root@127.0.0.1:53306/mysql'})

The service name is resolved once, when the connection is wrapped.


Usage
~~~~~

::

    from dbtrace.contrib.database import trace_database

    db = trace_database(driver.connect('mysql2://root@127.0.0.1:53306/mysql'))
    db.raw_execute('SELECT COUNT(*) FROM gadgets')
"""
from .configuration import DatabaseConfiguration
from .descriptor import ConnectionDescriptor
from .descriptor import normalize
from .resolver import DatabaseConfigurationResolver
from .resolver import KeyMatcher
from .resolver import Matcher
from .resolver import OptionsMatcher
from .resolver import URLMatcher
from .resolver import build_matcher
from .database import TracedDatabase  # noqa: I100
from .database import attach_pin
from .database import execute_traced
from .database import trace_database


__all__ = [
    "ConnectionDescriptor",
    "DatabaseConfiguration",
    "DatabaseConfigurationResolver",
    "KeyMatcher",
    "Matcher",
    "OptionsMatcher",
    "TracedDatabase",
    "URLMatcher",
    "attach_pin",
    "build_matcher",
    "execute_traced",
    "normalize",
    "trace_database",
]

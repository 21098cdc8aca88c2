from collections import namedtuple
from collections.abc import Mapping
import threading
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import List  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Tuple  # noqa:F401

import attr

from ...internal.logger import get_logger
from ...settings.exceptions import ConfigException
from .configuration import DatabaseConfiguration
from .descriptor import KEY
from .descriptor import OPTIONS
from .descriptor import TOKEN
from .descriptor import URL
from .descriptor import URL_FIELDS
from .descriptor import ConnectionDescriptor  # noqa:F401
from .descriptor import normalize


log = get_logger(__name__)


def _fields_match(expected, descriptor):
    # type: (Mapping, ConnectionDescriptor) -> bool
    if descriptor.kind not in (URL, OPTIONS):
        return False
    fields = descriptor.fields
    for name, value in expected.items():
        if name not in fields or fields[name] != value:
            return False
    return True


class Matcher(object):
    """A predicate over connection descriptors, registered with a configuration."""

    __slots__ = ()

    def matches(self, descriptor, configurations=None):
        # type: (ConnectionDescriptor, Optional[Dict[str, ConnectionDescriptor]]) -> bool
        raise NotImplementedError()


@attr.s(frozen=True, slots=True)
class KeyMatcher(Matcher):
    """Matches connections described by the same logical key.

    When the key names one of the resolver's database configurations, the
    connections whose adapter, host, port and database agree with that
    configuration match as well.
    """

    key = attr.ib(type=str)

    def matches(self, descriptor, configurations=None):
        if descriptor.kind == KEY:
            return descriptor.key == self.key
        if configurations and self.key in configurations:
            named = configurations[self.key]
            expected = dict((k, v) for k, v in named.fields.items() if k in URL_FIELDS)
            return bool(expected) and _fields_match(expected, descriptor)
        return False


@attr.s(frozen=True, slots=True)
class URLMatcher(Matcher):
    """Matches connections whose adapter, host, port and database equal the ones
    given in the URL. Parts left out of the URL match anything.
    """

    fields = attr.ib(converter=lambda f: tuple(sorted(f.items())))
    token = attr.ib(default=None)

    def matches(self, descriptor, configurations=None):
        if self.token is not None:
            return descriptor.kind == TOKEN and descriptor.token == self.token
        return _fields_match(dict((k, v) for k, v in self.fields if k in URL_FIELDS), descriptor)


@attr.s(frozen=True, slots=True)
class OptionsMatcher(Matcher):
    """Matches connections having every given option, with an equal value.
    Options of the connection that are not given are ignored.
    """

    options = attr.ib(converter=lambda o: tuple(sorted(o.items(), key=lambda item: item[0])))

    def matches(self, descriptor, configurations=None):
        return _fields_match(dict(self.options), descriptor)


def build_matcher(describes):
    # type: (Any) -> Matcher
    """Return the :class:`Matcher` for a ``describes`` setting.

    :raises ConfigException: when ``describes`` can't describe a connection
    """
    if isinstance(describes, Matcher):
        return describes

    if isinstance(describes, str):
        if not describes.strip():
            raise ConfigException("an empty string does not describe a database")
        descriptor = normalize(describes)
        if descriptor.kind == KEY:
            return KeyMatcher(descriptor.key)
        if descriptor.kind == TOKEN:
            return URLMatcher({}, token=descriptor.token)
        return URLMatcher(dict(descriptor.fields))

    if isinstance(describes, Mapping):
        if not describes:
            raise ConfigException("an empty mapping does not describe a database")
        descriptor = normalize(describes)
        return OptionsMatcher(dict(descriptor.fields))

    raise ConfigException(
        "databases are described by a key, a URL or a mapping of connection options, not %r" % (describes,)
    )


_State = namedtuple("_State", ["entries", "default", "configurations"])


class DatabaseConfigurationResolver(object):
    """Ordered registry of ``(Matcher, DatabaseConfiguration)`` pairs plus a default.

    The first registered matcher that matches a connection gives its
    configuration; when none does the default applies::

        resolver = DatabaseConfigurationResolver()
        resolver.add('gadget', DatabaseConfiguration(service_name='gadget-db'))
        resolver.add({'adapter': 'sqlite3'}, DatabaseConfiguration(service_name='widget-db'))

        resolver.resolve('gadget').service_name  # 'gadget-db'

    Registrations are expected to happen before queries are traced. Writers
    are serialized by a lock; readers work on an immutable snapshot and never
    block.
    """

    def __init__(self, default=None, configurations=None):
        # type: (Optional[DatabaseConfiguration], Optional[Mapping]) -> None
        self._lock = threading.RLock()
        self._state = _State((), default or DatabaseConfiguration(), {})
        if configurations:
            self.set_configurations(configurations)

    @property
    def entries(self):
        # type: () -> Tuple[Tuple[Matcher, DatabaseConfiguration], ...]
        return self._state.entries

    @property
    def default(self):
        # type: () -> DatabaseConfiguration
        return self._state.default

    def add(self, describes, configuration):
        # type: (Any, DatabaseConfiguration) -> Matcher
        """Register ``configuration`` for the connections matching ``describes``."""
        matcher = build_matcher(describes)
        with self._lock:
            state = self._state
            if any(m == matcher for m, _ in state.entries):
                log.debug("%r is already registered, the configuration %r will never apply", matcher, configuration)
            self._state = state._replace(entries=state.entries + ((matcher, configuration),))
        return matcher

    register = add

    def set_default(self, configuration):
        # type: (DatabaseConfiguration) -> None
        with self._lock:
            self._state = self._state._replace(default=configuration)

    def set_configurations(self, configurations):
        # type: (Optional[Mapping]) -> None
        """Name database configurations, like a ``database.yml`` file does::

            resolver.set_configurations({
                'gadget': {'adapter': 'mysql2', 'host': '127.0.0.1', 'port': 53306, 'database': 'mysql'},
                'widget': 'sqlite3::memory:',
            })

        A key matcher for ``gadget`` then also matches connections opened to that database.
        """
        named = {}
        for key, description in (configurations or {}).items():
            if not isinstance(description, (str, Mapping)):
                raise ConfigException("database configuration %r must be a URL or a mapping of options" % (key,))
            named[str(key)] = normalize(description)
        with self._lock:
            self._state = self._state._replace(configurations=named)

    def reset(self):
        # type: () -> None
        """Remove every registration and restore an empty default configuration."""
        with self._lock:
            self._state = _State((), DatabaseConfiguration(), {})

    def resolve(self, describes, adapter=None):
        # type: (Any, Optional[str]) -> DatabaseConfiguration
        """Return the configuration of the first matcher matching ``describes``, else the default."""
        descriptor = normalize(describes, adapter=adapter)
        state = self._state
        for matcher, configuration in state.entries:
            if matcher.matches(descriptor, state.configurations):
                return configuration
        return state.default

    def shadowed(self):
        # type: () -> List[Tuple[Matcher, DatabaseConfiguration]]
        """Return the registrations that can never apply because an identical
        description was registered before them.
        """
        seen = []  # type: List[Matcher]
        shadowed = []
        for matcher, configuration in self._state.entries:
            if matcher in seen:
                shadowed.append((matcher, configuration))
            else:
                seen.append(matcher)
        return shadowed

    def __len__(self):
        return len(self._state.entries)

    def __repr__(self):
        return "%s(entries=%r, default=%r)" % (self.__class__.__name__, list(self.entries), self.default)

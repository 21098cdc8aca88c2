"""
Normalization of the different ways a database connection can be described:

* a logical key, e.g. ``"gadget"``, kept verbatim;
* a connection URL, e.g. ``"mysql2://root@127.0.0.1:53306/mysql"`` or
  ``"sqlite3::memory:"``;
* a mapping of connection options, e.g. ``{"adapter": "sqlite3", "database": ":memory:"}``.

:func:`normalize` never fails: input it does not understand gives an
adapter only descriptor, which only the default configuration applies to.
"""
from collections.abc import Mapping
import re
from types import MappingProxyType
from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401
from urllib.parse import parse_qsl
from urllib.parse import unquote
from urllib.parse import urlsplit

import attr

from ...ext.sql import normalize_vendor
from ...internal.logger import get_logger
from ...internal.utils.formats import coerce_port


log = get_logger(__name__)

# descriptor kinds
KEY = "key"
URL = "url"
OPTIONS = "options"
TOKEN = "token"
ADAPTER = "adapter"

# option names every integration understands; the fields compared for URLs
URL_FIELDS = ("adapter", "host", "port", "database")

_OPTION_ALIASES = {
    "scheme": "adapter",
    "hostname": "host",
    "dbname": "database",
    "db": "database",
}

_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def _freeze_fields(fields):
    return MappingProxyType(dict(fields or {}))


@attr.s(frozen=True, slots=True)
class ConnectionDescriptor(object):
    """Canonical, comparable description of the database a connection talks to."""

    kind = attr.ib(type=str)
    adapter = attr.ib(default=None)
    key = attr.ib(default=None)
    token = attr.ib(default=None)
    fields = attr.ib(factory=dict, converter=_freeze_fields, hash=False)

    @property
    def vendor(self):
        # type: () -> str
        """The normalized adapter name, used to tag spans."""
        return normalize_vendor(self.adapter)


def normalize(raw, adapter=None):
    # type: (Any, Optional[str]) -> ConnectionDescriptor
    """Return the :class:`ConnectionDescriptor` of ``raw``.

    :param raw: a key, a URL, a mapping of options or a descriptor
    :param adapter: the driver family of the connection, used when ``raw`` does not name one
    """
    try:
        return _normalize(raw, adapter)
    except Exception:
        log.debug("unable to normalize connection description %r", raw, exc_info=True)
        return ConnectionDescriptor(ADAPTER, adapter=adapter)


def _normalize(raw, adapter):
    if isinstance(raw, ConnectionDescriptor):
        if adapter and not raw.adapter:
            return attr.evolve(raw, adapter=adapter)
        return raw

    if isinstance(raw, str):
        if not raw:
            return ConnectionDescriptor(ADAPTER, adapter=adapter)
        if _URL_SCHEME_RE.match(raw):
            return parse_url(raw, adapter)
        return ConnectionDescriptor(KEY, adapter=adapter, key=raw)

    if isinstance(raw, Mapping):
        return parse_options(raw, adapter)

    return ConnectionDescriptor(ADAPTER, adapter=adapter)


def parse_url(url, adapter=None):
    # type: (str, Optional[str]) -> ConnectionDescriptor
    """Parse a connection URL. Credentials are dropped, query parameters kept as extra fields.

    A URL that can't be parsed is kept whole as an opaque token.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        log.debug("malformed connection url, keeping it as an opaque token", exc_info=True)
        return ConnectionDescriptor(TOKEN, adapter=adapter, token=url)

    if not parts.scheme:
        return ConnectionDescriptor(TOKEN, adapter=adapter, token=url)

    fields = dict(parse_qsl(parts.query))
    fields["adapter"] = parts.scheme
    if parts.hostname:
        fields["host"] = unquote(parts.hostname)
    if port is not None:
        fields["port"] = port

    path = parts.path
    # `scheme://host/db` and `sqlite:///file.db` carry the database after one slash
    has_authority = url[len(parts.scheme) + 1 :].startswith("//")
    if has_authority and path.startswith("/"):
        path = path[1:]
    if path:
        fields["database"] = unquote(path)

    return ConnectionDescriptor(URL, adapter=parts.scheme, fields=fields)


def parse_options(options, adapter=None):
    # type: (Mapping, Optional[str]) -> ConnectionDescriptor
    """Copy a mapping of connection options into a canonical options descriptor."""
    fields = {}
    for name, value in options.items():
        name = str(name)
        name = _OPTION_ALIASES.get(name, name)
        if name == "port":
            value = coerce_port(value)
        fields[name] = value

    # explicit names win over their aliases
    for name in URL_FIELDS:
        if name in options:
            value = options[name]
            fields[name] = coerce_port(value) if name == "port" else value

    if fields.get("adapter") is None and adapter:
        fields["adapter"] = adapter
    # lowercased like the scheme and host of URLs
    if fields.get("adapter") is not None:
        fields["adapter"] = str(fields["adapter"]).lower()
    if isinstance(fields.get("host"), str):
        fields["host"] = fields["host"].lower()
    return ConnectionDescriptor(OPTIONS, adapter=fields.get("adapter"), fields=fields)

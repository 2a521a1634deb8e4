"""Typed operations on top of the tracker protocol."""

import collections

from mogilefs import utils
from mogilefs.errors import (InvalidArgumentError, ProtocolError,
                             UnknownKeyError, NoneMatchError)
from mogilefs.client import protocol
from mogilefs.client.connection import ConnectionManager


DomainInfo = collections.namedtuple('DomainInfo', ['name', 'classes'])
"""A domain known to the tracker.

    Fields:

    * ``name`` name of the domain
    * ``classes`` dict mapping class name to its minimum replica count
"""


Location = collections.namedtuple('Location', ['devid', 'fid', 'path'])
"""Where to upload a file being created, as returned by
   :meth:`Tracker.begin_create`.

    Fields:

    * ``devid`` id of the storage device chosen by the tracker
    * ``fid`` id the tracker assigned to the new file
    * ``path`` URL the content must be PUT to
"""


def _field(fields, name):
    try:
        return fields[name]
    except KeyError:
        raise ProtocolError("Tracker response lacks field %r" % (name,))


def _count(fields, name):
    value = _field(fields, name)
    try:
        count = int(value)
    except ValueError:
        raise ProtocolError("Tracker response field %r is not a number: %r"
                            % (name, value))
    if count < 0:
        raise ProtocolError("Tracker response field %r is negative: %d"
                            % (name, count))
    return count


def _check_limit(name, value):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError("%s must be a positive int, got %r"
                                   % (name, value))


class Tracker(object):
    """Operations offered by a MogileFS tracker.

       Each method validates its arguments before touching the network and
       performs a single round trip. Errors reported by the tracker are
       raised as subclasses of :class:`mogilefs.client.TrackerError`; the
       only ones handled here are "unknown key" in :meth:`exists` and
       "none match" in :meth:`list_keys`.

       Nothing is retried. Not thread-safe.
    """

    def __init__(self, config, connections=None):
        self.config = config
        if connections is None:
            connections = ConnectionManager(config)
        self.connections = connections
        self.codec = protocol.TrackerCodec(connections)

    def _do_request(self, command, args=None):
        response = self.codec.send(command, self.config.domain,
                                   self.config.storage_class, args)
        response.raise_for_error()
        return response.fields

    @utils.report_timing('Tracker.get_domains')
    def get_domains(self):
        """Returns a list of :class:`DomainInfo` for all domains."""
        fields = self._do_request(protocol.GET_DOMAINS)

        domains = []
        for i in range(1, _count(fields, 'domains') + 1):
            prefix = 'domain%d' % i
            classes = {}
            for j in range(1, _count(fields, prefix + 'classes') + 1):
                class_prefix = '%sclass%d' % (prefix, j)
                name = _field(fields, class_prefix + 'name')
                classes[name] = _count(fields, class_prefix + 'mindevcount')
            domains.append(DomainInfo(_field(fields, prefix), classes))
        return domains

    def exists(self, key):
        """Returns ``True`` if the tracker knows ``key``."""
        utils.check_key(key)
        try:
            self.get_paths(key, max_paths=1, skip_verification=True)
        except UnknownKeyError:
            return False
        return True

    @utils.report_timing('Tracker.get_paths')
    def get_paths(self, key, max_paths=None, skip_verification=False):
        """Returns the list of URLs the replicas of ``key`` can be fetched
           from, in the tracker's order of preference.

           ``max_paths`` caps the number of returned paths. If
           ``skip_verification`` is set, the tracker does not check that the
           storage nodes are alive.
        """
        utils.check_key(key)
        _check_limit('max_paths', max_paths)
        args = collections.OrderedDict()
        args['key'] = key
        args['noverify'] = 1 if skip_verification else 0
        if max_paths is not None:
            args['pathcount'] = max_paths
        fields = self._do_request(protocol.GET_PATHS, args)
        return [_field(fields, 'path%d' % i)
                for i in range(1, _count(fields, 'paths') + 1)]

    @utils.report_timing('Tracker.delete')
    def delete(self, key):
        """Deletes ``key``."""
        utils.check_key(key)
        self._do_request(protocol.DELETE, {'key': key})

    @utils.report_timing('Tracker.rename')
    def rename(self, from_key, to_key):
        utils.check_key(from_key, 'source key')
        utils.check_key(to_key, 'destination key')
        args = collections.OrderedDict()
        args['from_key'] = from_key
        args['to_key'] = to_key
        self._do_request(protocol.RENAME, args)

    @utils.report_timing('Tracker.list_keys')
    def list_keys(self, prefix=None, after=None, limit=None):
        """Returns keys starting with ``prefix``, sorted.

           Listing starts after the key ``after`` and returns at most
           ``limit`` keys (the tracker applies its own cap too). Pass the
           last returned key as ``after`` to page through large domains.
           No match gives an empty list.
        """
        _check_limit('limit', limit)
        args = collections.OrderedDict()
        args['prefix'] = prefix
        args['after'] = after
        args['limit'] = limit
        try:
            fields = self._do_request(protocol.LIST_KEYS, args)
        except NoneMatchError:
            return []
        return [_field(fields, 'key_%d' % i)
                for i in range(1, _count(fields, 'key_count') + 1)]

    @utils.report_timing('Tracker.begin_create')
    def begin_create(self, key):
        """Registers a new upload of ``key`` and returns its
           :class:`Location`.

           The content must then be PUT to ``location.path`` and the upload
           completed with :meth:`finish_create`; until then the tracker
           keeps the file open and the key is not visible.
        """
        utils.check_key(key)
        fields = self._do_request(protocol.CREATE_OPEN, {'key': key})
        return Location(_field(fields, 'devid'), _field(fields, 'fid'),
                        _field(fields, 'path'))

    @utils.report_timing('Tracker.finish_create')
    def finish_create(self, key, location, size=None):
        """Completes an upload started with :meth:`begin_create`."""
        utils.check_key(key)
        if not isinstance(location, Location):
            raise InvalidArgumentError("Expected a Location, got %r"
                                       % (location,))
        args = collections.OrderedDict()
        args['key'] = key
        args['devid'] = location.devid
        args['fid'] = location.fid
        args['path'] = location.path
        if size is not None:
            args['size'] = size
        self._do_request(protocol.CREATE_CLOSE, args)

    def close(self):
        self.connections.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

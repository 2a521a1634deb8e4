"""Client configuration."""

import os

from mogilefs import utils
from mogilefs.errors import InvalidArgumentError


def _check_timeout(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError("%s expects a positive number, got %r" % (name, value))
    if not value > 0:
        raise InvalidArgumentError("%s expects a positive number, got %r" % (name, value))
    return value


class ClientConfig(object):
    """Settings shared by the tracker connection and the HTTP transfers.

       ``trackers`` is an ordered list of ``host[:port]`` addresses (a single
       string is accepted too); connections are attempted in this order.
       Timeouts are in seconds:

         ``connect_timeout``
           how long to wait for a single tracker to accept a connection;

         ``tracker_timeout``
           how long to wait for a tracker to answer a request;

         ``get_timeout``, ``put_timeout``
           deadlines for fetching from and storing to storage nodes.

       Every attribute is validated when set, so an instance is never in an
       invalid state.
    """

    DEFAULT_CONNECT_TIMEOUT = 10
    DEFAULT_TRACKER_TIMEOUT = 10
    DEFAULT_GET_TIMEOUT = 10
    DEFAULT_PUT_TIMEOUT = 4

    def __init__(self, domain, storage_class, trackers,
                 connect_timeout=DEFAULT_CONNECT_TIMEOUT,
                 tracker_timeout=DEFAULT_TRACKER_TIMEOUT,
                 get_timeout=DEFAULT_GET_TIMEOUT,
                 put_timeout=DEFAULT_PUT_TIMEOUT):
        self.domain = domain
        self.storage_class = storage_class
        self.trackers = trackers
        self.connect_timeout = connect_timeout
        self.tracker_timeout = tracker_timeout
        self.get_timeout = get_timeout
        self.put_timeout = put_timeout

    @classmethod
    def from_environ(cls, domain=None, storage_class=None, trackers=None, **kwargs):
        """Builds a config, taking values not given explicitly from
           ``MOGILEFS_DOMAIN``, ``MOGILEFS_CLASS`` and ``MOGILEFS_TRACKERS``
           (comma-separated)."""
        if domain is None:
            domain = os.environ.get('MOGILEFS_DOMAIN')
        if storage_class is None:
            storage_class = os.environ.get('MOGILEFS_CLASS')
        if trackers is None:
            trackers = [t.strip() for t in
                        os.environ.get('MOGILEFS_TRACKERS', '').split(',')
                        if t.strip()]
        return cls(domain, storage_class, trackers, **kwargs)

    @property
    def domain(self):
        return self._domain

    @domain.setter
    def domain(self, value):
        utils.check_key(value, 'domain')
        self._domain = value

    @property
    def storage_class(self):
        return self._storage_class

    @storage_class.setter
    def storage_class(self, value):
        utils.check_key(value, 'class')
        self._storage_class = value

    @property
    def trackers(self):
        return list(self._trackers)

    @trackers.setter
    def trackers(self, value):
        if isinstance(value, str):
            value = [value]
        try:
            value = tuple(value)
        except TypeError:
            raise InvalidArgumentError("Invalid tracker list: %r" % (value,))
        if not value:
            raise InvalidArgumentError("No trackers configured")
        # Parse eagerly so that a typo fails here, not on first request.
        self._addresses = [utils.parse_tracker_address(t) for t in value]
        self._trackers = value

    @property
    def tracker_addresses(self):
        """The configured trackers as ``(host, port)`` pairs."""
        return list(self._addresses)

    @property
    def connect_timeout(self):
        return self._connect_timeout

    @connect_timeout.setter
    def connect_timeout(self, value):
        self._connect_timeout = _check_timeout('connect_timeout', value)

    @property
    def tracker_timeout(self):
        return self._tracker_timeout

    @tracker_timeout.setter
    def tracker_timeout(self, value):
        self._tracker_timeout = _check_timeout('tracker_timeout', value)

    @property
    def get_timeout(self):
        return self._get_timeout

    @get_timeout.setter
    def get_timeout(self, value):
        self._get_timeout = _check_timeout('get_timeout', value)

    @property
    def put_timeout(self):
        return self._put_timeout

    @put_timeout.setter
    def put_timeout(self, value):
        self._put_timeout = _check_timeout('put_timeout', value)

    def __repr__(self):
        return ('ClientConfig(domain=%r, storage_class=%r, trackers=%r)'
                % (self.domain, self.storage_class, list(self._trackers)))

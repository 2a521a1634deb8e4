"""Connection to a MogileFS tracker."""

import logging
import selectors
import socket
import time

from mogilefs.errors import TrackerConnectionError

logger = logging.getLogger(__name__)


_RECV_SIZE = 4096


class TrackerConnection(object):
    """An open socket to a single tracker.

       Received bytes are buffered, so that a response line split over
       several TCP segments is read whole. ``timeout`` bounds the whole
       :meth:`read_line`, not each ``recv`` separately.
    """

    def __init__(self, sock, address, timeout):
        self.sock = sock
        self.address = address
        self.timeout = timeout
        self.eof = False
        self.closed = False
        self._buffer = b''

    def __repr__(self):
        return 'TrackerConnection(%s:%d)' % self.address

    def write_line(self, line):
        self.sock.settimeout(self.timeout)
        self.sock.sendall(line)

    def read_line(self):
        """Reads one ``\\n``-terminated line.

           Raises :class:`TrackerConnectionError` if the tracker closes the
           connection before the line is complete and ``socket.timeout`` if
           the line is not complete within ``timeout`` seconds.
        """
        deadline = time.monotonic() + self.timeout
        while b'\n' not in self._buffer:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise socket.timeout(
                    "Tracker %s:%d did not send a full line" % self.address)
            self.sock.settimeout(remaining)
            chunk = self.sock.recv(_RECV_SIZE)
            if not chunk:
                self.eof = True
                raise TrackerConnectionError(
                    "Tracker %s:%d closed the connection" % self.address)
            self._buffer += chunk
        line, self._buffer = self._buffer.split(b'\n', 1)
        return line + b'\n'

    def is_alive(self):
        """Returns ``False`` if the connection is known or detected to be
           unusable.

           Between requests the tracker has nothing to say, so buffered or
           readable data means either end-of-stream or stray data; both make
           the connection unusable.
        """
        if self.closed or self.eof or self._buffer:
            return False
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(self.sock, selectors.EVENT_READ)
                readable = selector.select(0)
        except (OSError, ValueError):
            logger.debug('Cannot poll %r', self, exc_info=True)
            return False
        return not readable

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.sock.close()


class ConnectionManager(object):
    """Owns the single, lazily established connection of a client.

       The manager is either ``DISCONNECTED`` or ``CONNECTED`` to exactly one
       tracker. :meth:`acquire` reuses a live connection; otherwise it walks
       the configured trackers in order and connects to the first one which
       accepts within ``connect_timeout``. Callers must :meth:`discard` the
       connection after any I/O failure, so that the next :meth:`acquire`
       starts from the top of the tracker list again.

       Not thread-safe: the protocol has no request identifiers, so a
       connection must never be used by two requests at once.
    """

    DISCONNECTED = 'disconnected'
    CONNECTED = 'connected'

    def __init__(self, config):
        self.config = config
        self._connection = None

    @property
    def state(self):
        if self._connection is None:
            return self.DISCONNECTED
        return self.CONNECTED

    @property
    def connection(self):
        return self._connection

    def acquire(self):
        """Returns a connection to a tracker, connecting if necessary."""
        if self._connection is not None:
            if self._connection.is_alive():
                return self._connection
            logger.debug('Connection %r is no longer usable, reconnecting',
                         self._connection)
            self.discard()

        failures = []
        for host, port in self.config.tracker_addresses:
            try:
                sock = socket.create_connection(
                    (host, port), timeout=self.config.connect_timeout)
            except OSError as e:
                logger.warning('Cannot connect to tracker %s:%d: %s',
                               host, port, e)
                failures.append('%s:%d (%s)' % (host, port, e))
                continue

            sock.settimeout(self.config.tracker_timeout)
            self._connection = TrackerConnection(
                sock, (host, port), self.config.tracker_timeout)
            logger.debug('Connected to tracker %s:%d', host, port)
            return self._connection

        raise TrackerConnectionError(
            "Failed to connect to any tracker: %s" % ', '.join(failures))

    def discard(self):
        """Closes the current connection, if any."""
        connection, self._connection = self._connection, None
        if connection is not None:
            try:
                connection.close()
            except OSError:
                logger.debug('Error closing %r', connection, exc_info=True)

    close = discard

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

"""Common routines for client."""

import errno
import functools
import logging
import os
import time

from mogilefs.errors import InvalidArgumentError

logger = logging.getLogger('mogilefs')


DEFAULT_TRACKER_PORT = 7001


def report_timing(name):
    def decorator(fn):
        @functools.wraps(fn)
        def wrapped(*args, **kwargs):
            t = time.time()
            logger.debug('    %s starting', name)
            ret = fn(*args, **kwargs)
            elapsed = time.time() - t
            logger.debug('    %s took %.2fs', name, elapsed)
            return ret
        return wrapped
    return decorator


def check_key(key, what='key'):
    """Raises :class:`InvalidArgumentError` unless ``key`` is a non-empty
    string."""
    if not isinstance(key, str):
        raise InvalidArgumentError("Invalid MogileFS %s: not string: %r" % (what, key))
    if not key:
        raise InvalidArgumentError("Invalid MogileFS %s: empty" % what)


def parse_tracker_address(address):
    """Splits a tracker address into ``(host, port)``.

    Accepts ``host``, ``host:port`` and the same prefixed with ``tcp://``.
    IPv6 literals must be bracketed (``[::1]:7001``). The port defaults to
    :data:`DEFAULT_TRACKER_PORT`.
    """
    if not isinstance(address, str) or not address.strip():
        raise InvalidArgumentError("Invalid tracker address: %r" % (address,))
    rest = address.strip()
    if '://' in rest:
        scheme, rest = rest.split('://', 1)
        if scheme != 'tcp':
            raise InvalidArgumentError(
                "Invalid tracker address %r: unsupported scheme %r" % (address, scheme)
            )
    rest = rest.rstrip('/')

    if rest.startswith('['):
        host, sep, port = rest[1:].partition(']')
        if not sep:
            raise InvalidArgumentError("Invalid tracker address: %r" % (address,))
        port = port[1:] if port.startswith(':') else port
    elif rest.count(':') == 1:
        host, port = rest.split(':')
    else:
        host, port = rest, ''

    if not host:
        raise InvalidArgumentError("Invalid tracker address: %r" % (address,))
    if not port:
        return host, DEFAULT_TRACKER_PORT
    try:
        port = int(port)
    except ValueError:
        raise InvalidArgumentError(
            "Invalid tracker address %r: port must be int" % (address,)
        )
    if not 0 < port < 65536:
        raise InvalidArgumentError(
            "Invalid tracker address %r: port out of range" % (address,)
        )
    return host, port


def mkdir(name):
    try:
        os.makedirs(name, 0o700)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise

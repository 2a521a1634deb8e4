"""The tracker wire protocol.

A request is a single line::

    COMMAND&key1=value1&key2=value2\\n

with keys and values form-encoded. The tracker answers with one line,
either ``OK <query string>`` or ``ERR <identifier> <encoded message>``.
"""

import collections
import logging
import socket
from urllib.parse import parse_qsl, quote_plus, unquote_plus

from mogilefs.errors import (InvalidArgumentError, ProtocolError,
                             TrackerConnectionError, RequestTimeoutError,
                             TrackerError, UnknownKeyError, EmptyFileError,
                             NoneMatchError)

logger = logging.getLogger(__name__)


# Commands understood by the tracker.
DELETE = 'DELETE'
GET_DOMAINS = 'GET_DOMAINS'
GET_PATHS = 'GET_PATHS'
RENAME = 'RENAME'
LIST_KEYS = 'LIST_KEYS'
CREATE_OPEN = 'CREATE_OPEN'
CREATE_CLOSE = 'CREATE_CLOSE'

COMMANDS = frozenset([DELETE, GET_DOMAINS, GET_PATHS, RENAME, LIST_KEYS,
                      CREATE_OPEN, CREATE_CLOSE])

SUCCESS = 'OK'
ERROR = 'ERR'

_ERROR_CLASSES = {
    'unknown_key': UnknownKeyError,
    'empty_file': EmptyFileError,
    'none_match': NoneMatchError,
}


class Success(collections.namedtuple('Success', ['fields'])):
    """An ``OK`` response; ``fields`` is the decoded query string."""

    ok = True

    def raise_for_error(self):
        pass


class Failure(collections.namedtuple('Failure', ['code', 'message'])):
    """An ``ERR`` response.

       ``code`` is the error identifier (``None`` if the tracker sent none),
       ``message`` the percent-decoded response line.
    """

    ok = False

    def raise_for_error(self):
        error_class = _ERROR_CLASSES.get(self.code, TrackerError)
        raise error_class(self.code, self.message)


def encode_request(command, args):
    """Serializes a request into a line of bytes, newline included.

       ``None`` values are sent as empty strings.
    """
    if command not in COMMANDS:
        raise InvalidArgumentError("Unknown tracker command: %r" % (command,))
    params = ''.join(
        '&%s=%s' % (quote_plus(str(key)),
                    quote_plus('' if value is None else str(value)))
        for key, value in args.items())
    return (command + params + '\n').encode('utf-8')


def decode_request(line):
    """Inverse of :func:`encode_request`.

       Returns a tuple ``(command, args)`` with ``args`` being an
       ``OrderedDict``.
    """
    if isinstance(line, bytes):
        line = line.decode('utf-8')
    command, _, params = line.rstrip('\r\n').partition('&')
    return command, collections.OrderedDict(
        parse_qsl(params, keep_blank_values=True))


def parse_response(line):
    """Parses a tracker response line into :class:`Success` or
       :class:`Failure`.

       Raises :class:`ProtocolError` if the line is not a valid response.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode('utf-8')
        except UnicodeDecodeError:
            raise ProtocolError("Tracker response is not valid UTF-8: %r"
                                % (line,))
    line = line.rstrip('\r\n')
    words = line.split(' ', 1)
    status = words[0]
    rest = words[1].strip() if len(words) > 1 else ''

    if status == SUCCESS:
        return Success(dict(parse_qsl(rest, keep_blank_values=True)))
    if status == ERROR:
        code = rest.split(' ', 1)[0] or None
        return Failure(code, unquote_plus(line).strip())
    raise ProtocolError("Malformed tracker response: %r" % (line,))


class TrackerCodec(object):
    """Performs request/response round trips over a
       :class:`mogilefs.client.connection.ConnectionManager`.

       Transport failures, timeouts and malformed responses discard the
       connection before the error is raised, so the next request reconnects.
       Well-formed ``ERR`` responses are complete exchanges and leave the
       connection open.
    """

    def __init__(self, connections):
        self.connections = connections

    def send(self, command, domain, storage_class, args=None):
        """Sends ``command`` and returns the parsed :class:`Success` or
           :class:`Failure`.

           ``domain`` and ``storage_class`` are added to ``args`` as
           ``domain`` and ``class``.
        """
        request_args = collections.OrderedDict(args or ())
        request_args['domain'] = domain
        request_args['class'] = storage_class
        line = encode_request(command, request_args)

        connection = self.connections.acquire()
        try:
            connection.write_line(line)
            return parse_response(connection.read_line())
        except socket.timeout as e:
            self.connections.discard()
            raise RequestTimeoutError(
                "Tracker %s:%d did not answer %s within %ss"
                % (connection.address + (command, connection.timeout))) from e
        except (TrackerConnectionError, ProtocolError):
            logger.warning('%s failed on %r, dropping connection',
                           command, connection)
            self.connections.discard()
            raise
        except OSError as e:
            self.connections.discard()
            raise TrackerConnectionError(
                "I/O error talking to tracker %s:%d: %s"
                % (connection.address + (e,))) from e
        except BaseException:
            # Interrupted mid-exchange: the reply may still arrive.
            self.connections.discard()
            raise

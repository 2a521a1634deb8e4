"""Moving file content to and from storage nodes over HTTP."""

import functools
import logging
import socket

import requests
import urllib3

from mogilefs import utils
from mogilefs.errors import TransferError, RequestTimeoutError

logger = logging.getLogger(__name__)


_CHUNK_SIZE = 16 * 1024


def _is_timeout(error):
    """Tells whether a requests exception was caused by a timeout.

       A read timeout hit while the body is streamed reaches the caller as
       a ``ConnectionError`` wrapping urllib3's ``ReadTimeoutError``.
    """
    if isinstance(error, requests.exceptions.Timeout):
        return True
    seen = set()
    pending = [error]
    while pending:
        e = pending.pop()
        if e is None or id(e) in seen:
            continue
        seen.add(id(e))
        if isinstance(e, (urllib3.exceptions.TimeoutError, socket.timeout)):
            return True
        pending.extend(a for a in e.args if isinstance(a, BaseException))
        pending.append(e.__cause__)
        pending.append(e.__context__)
    return False


def _verbose_http_errors(fn):
    @functools.wraps(fn)
    def wrapped(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except requests.exceptions.RequestException as e:
            if _is_timeout(e):
                raise RequestTimeoutError('HTTP request timed out: %s'
                                          % e) from e
            if e.response is None:
                raise TransferError('Error making HTTP request: %s' % e) from e

            code = e.response.status_code
            raise TransferError('HTTP/%d: %s\n%s'
                                % (code, e, e.response.text)) from e

    return wrapped


class HttpTransfer(object):
    """Stores and fetches file content on storage nodes.

       Uses ``get_timeout`` and ``put_timeout`` of the passed
       :class:`mogilefs.client.config.ClientConfig`.
    """

    def __init__(self, config):
        self.config = config

    @utils.report_timing('HttpTransfer.put')
    @_verbose_http_errors
    def put(self, url, stream, length):
        """Uploads ``length`` bytes read from ``stream`` to ``url``.

           Storage nodes answer a successful upload with ``201 Created``;
           any other status raises :class:`TransferError`.
        """
        # Storage nodes need Content-Length, so never fall back to chunked
        # transfer encoding.
        if length:
            body = _SizedReader(stream, length)
        else:
            body = b''
        response = requests.put(url, data=body,
                                timeout=self.config.put_timeout)
        try:
            if response.status_code != 201:
                raise TransferError('Storing %s failed: HTTP/%d %s'
                                    % (url, response.status_code,
                                       response.reason))
        finally:
            response.close()

    def _open(self, url):
        response = requests.get(url, stream=True,
                                timeout=self.config.get_timeout)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError:
            response.close()
            raise
        return response

    def _first_available(self, urls, consume):
        """Applies ``consume`` to the response of the first URL that can be
           fetched, trying ``urls`` in order."""
        urls = list(urls)
        if not urls:
            raise TransferError('No paths to fetch from')

        timeouts = 0
        last_error = None
        for url in urls:
            try:
                return consume(self._open(url))
            except requests.exceptions.RequestException as e:
                if _is_timeout(e):
                    timeouts += 1
                logger.warning('Error fetching %s, trying next path', url,
                               exc_info=True)
                last_error = e

        if timeouts == len(urls):
            raise RequestTimeoutError(
                'Timed out fetching from all of %s' % ', '.join(urls)
            ) from last_error
        raise TransferError(
            'Unable to fetch from any of %s: %s' % (', '.join(urls), last_error)
        ) from last_error

    @utils.report_timing('HttpTransfer.get')
    def get(self, urls):
        """Returns the content of the first of ``urls`` that can be
           fetched."""
        def consume(response):
            try:
                return response.content
            finally:
                response.close()

        return self._first_available(urls, consume)

    def get_stream(self, urls):
        """Like :meth:`get`, but returns a binary file-like object.

           The caller is responsible for closing it.
        """
        return self._first_available(urls, _FileLikeFromResponse)


class _SizedReader(object):
    """Exposes exactly ``length`` bytes of ``stream`` with a known size."""

    def __init__(self, stream, length):
        self.stream = stream
        self.remaining = length
        self.length = length

    def __len__(self):
        return self.length

    def read(self, size=-1):
        if self.remaining <= 0:
            return b''
        if size is None or size < 0 or size > self.remaining:
            size = self.remaining
        data = self.stream.read(size)
        if not data:
            raise TransferError('Stream ended %d bytes short of declared '
                                'length %d' % (self.remaining, self.length))
        self.remaining -= len(data)
        return data

    def __iter__(self):
        return iter(lambda: self.read(_CHUNK_SIZE), b'')


class _FileLikeFromResponse(object):
    def __init__(self, response):
        self.response = response
        self.iter = response.iter_content(chunk_size=_CHUNK_SIZE)
        self.data = b''

    @_verbose_http_errors
    def read(self, size=None):
        if size is None or size < 0:
            # read all remaining data
            result = self.data + b''.join(c for c in self.iter)
            self.data = b''
            return result
        else:
            while len(self.data) < size:
                try:
                    self.data += next(self.iter)
                except StopIteration:
                    break
            result, self.data = self.data[:size], self.data[size:]
            return result

    def close(self):
        self.response.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

"""The actual implementation of a MogileFS client."""

import logging
import os
import shutil
import time
from io import BytesIO

from mogilefs import utils
from mogilefs.errors import InvalidArgumentError
from mogilefs.client.config import ClientConfig
from mogilefs.client.tracker import Tracker
from mogilefs.client.transfer import HttpTransfer

logger = logging.getLogger('mogilefs')


class Client(object):
    """The main MogileFS client class.

       The client instance can be built in one of several ways. The easiest
       one is to just call the constructor without arguments. In this case
       the configuration is taken from the environment variables:

         ``MOGILEFS_DOMAIN``
           the domain all keys of this client live in;

         ``MOGILEFS_CLASS``
           the storage class new files are created with;

         ``MOGILEFS_TRACKERS``
           comma-separated list of tracker addresses (``host[:port]``, the
           port defaults to 7001), tried in order.

       Another way to create a client is to pass these values (and any
       timeouts accepted by :class:`ClientConfig`) as constructor arguments
       --- ``domain``, ``storage_class`` and ``trackers``, or a ready
       :class:`ClientConfig` as ``config``.

       If you are the power-user, you may create the client by manually
       passing ``tracker`` and ``transfer`` to the constructor.

       A client holds a single tracker connection and must not be used
       from several threads at once; create one client per thread instead.
       Close it with :meth:`close` or use it as a context manager.
    """

    def __init__(self, domain=None, storage_class=None, trackers=None,
                 config=None, tracker='auto', transfer='auto', **timeouts):
        if config is None:
            config = ClientConfig.from_environ(domain, storage_class,
                                               trackers, **timeouts)
        elif (domain, storage_class, trackers) != (None, None, None) \
                or timeouts:
            raise InvalidArgumentError("Pass either config or separate "
                                       "settings to Client, not both")
        if tracker == 'auto':
            tracker = Tracker(config)
        if transfer == 'auto':
            transfer = HttpTransfer(config)

        self.config = config
        self.tracker = tracker
        self.transfer = transfer

    def get_domains(self):
        """Returns a list of :class:`DomainInfo` describing all domains and
           their classes."""
        return self.tracker.get_domains()

    def exists(self, key):
        """Returns ``True`` if ``key`` exists, ``False`` otherwise."""
        return self.tracker.exists(key)

    def get_paths(self, key, max_paths=None, skip_verification=False):
        """Returns the URLs of the replicas of ``key``.

           See :meth:`Tracker.get_paths`.
        """
        return self.tracker.get_paths(key, max_paths=max_paths,
                                      skip_verification=skip_verification)

    def delete(self, key):
        """Deletes ``key`` along with its content."""
        self.tracker.delete(key)

    def rename(self, from_key, to_key):
        self.tracker.rename(from_key, to_key)

    def list_keys(self, prefix=None, after=None, limit=None):
        """Returns a list of keys; see :meth:`Tracker.list_keys`."""
        return self.tracker.list_keys(prefix=prefix, after=after, limit=limit)

    def get(self, key):
        """Returns the content stored under ``key`` as bytes.

           Replicas are tried in the order given by the tracker until one
           can be downloaded.
        """
        utils.check_key(key)
        t = time.time()
        logger.debug('    downloading %s', key)
        try:
            return self.transfer.get(self.tracker.get_paths(key))
        finally:
            logger.debug('    processed %s in %.2fs', key, time.time() - t)

    def get_stream(self, key):
        """Retrieves ``key`` in streaming mode.

           Works like :meth:`get`, except that returns a binary file-like
           object, which should be closed by the caller.
        """
        utils.check_key(key)
        return self.transfer.get_stream(self.tracker.get_paths(key))

    def get_file(self, key, save_to):
        """Saves the content stored under ``key`` as the file ``save_to``.

           Missing parent directories are created.
        """
        dir_path = os.path.dirname(save_to)
        if dir_path:
            utils.mkdir(dir_path)

        with self.get_stream(key) as stream:
            with open(save_to, 'wb') as f:
                shutil.copyfileobj(stream, f)

    def put_stream(self, key, stream, length):
        """Stores ``length`` bytes read from ``stream`` under ``key``.

           The tracker is asked for a location first, the content is sent
           there and finally the tracker is told the upload is complete. If
           the upload fails, the error is raised and the file is never made
           visible. An existing ``key`` is overwritten.
        """
        utils.check_key(key)
        if isinstance(length, bool) or not isinstance(length, int) \
                or length < 0:
            raise InvalidArgumentError("Invalid length: %r" % (length,))

        t = time.time()
        logger.debug('    uploading %s', key)
        try:
            location = self.tracker.begin_create(key)
            self.transfer.put(location.path, stream, length)
            self.tracker.finish_create(key, location, size=length)
        finally:
            logger.debug('    processed %s in %.2fs', key, time.time() - t)

    def put(self, key, data):
        """Stores ``data`` (bytes, or str which is UTF-8 encoded) under
           ``key``."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        self.put_stream(key, BytesIO(data), len(data))

    def put_file(self, key, filename):
        """Stores the content of the file ``filename`` under ``key``."""
        utils.check_key(key)
        with open(filename, 'rb') as f:
            self.put_stream(key, f, os.fstat(f.fileno()).st_size)

    def close(self):
        self.tracker.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

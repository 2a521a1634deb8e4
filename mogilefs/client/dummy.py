"""In-memory client implementation."""

import itertools
from io import BytesIO

from mogilefs import utils
from mogilefs.errors import (TrackerError, TransferError,
                             UnknownKeyError)
from mogilefs.client import Client
from mogilefs.client.config import ClientConfig
from mogilefs.client.tracker import DomainInfo, Location


def _unknown_key(key):
    return UnknownKeyError('unknown_key', 'ERR unknown_key %s' % key)


class DummyTracker(object):
    """A dummy tracker which keeps the key index in memory.

       Cool for testing, but beware --- do not try to store too much.
       And this class is not thread-safe, too.
    """

    def __init__(self, config, blobs):
        self.config = config
        self.blobs = blobs
        self.keys = {}
        self.open_files = {}
        self._fids = itertools.count(1)

    def get_domains(self):
        return [DomainInfo(self.config.domain, {self.config.storage_class: 1})]

    def exists(self, key):
        utils.check_key(key)
        return key in self.keys

    def get_paths(self, key, max_paths=None, skip_verification=False):
        utils.check_key(key)
        if key not in self.keys:
            raise _unknown_key(key)
        return [self.keys[key]]

    def delete(self, key):
        utils.check_key(key)
        if key not in self.keys:
            raise _unknown_key(key)
        self.blobs.pop(self.keys.pop(key), None)

    def rename(self, from_key, to_key):
        utils.check_key(from_key, 'source key')
        utils.check_key(to_key, 'destination key')
        if from_key not in self.keys:
            raise _unknown_key(from_key)
        if to_key in self.keys:
            raise TrackerError('key_exists', 'ERR key_exists %s' % to_key)
        self.keys[to_key] = self.keys.pop(from_key)

    def list_keys(self, prefix=None, after=None, limit=None):
        keys = sorted(k for k in self.keys
                      if k.startswith(prefix or '')
                      and (after is None or k > after))
        if limit is not None:
            keys = keys[:limit]
        return keys

    def begin_create(self, key):
        utils.check_key(key)
        fid = str(next(self._fids))
        location = Location('1', fid, 'dummy://dev1/%s.fid' % fid)
        self.open_files[fid] = location
        return location

    def finish_create(self, key, location, size=None):
        utils.check_key(key)
        if self.open_files.pop(location.fid, None) != location:
            raise TrackerError('none_open', 'ERR none_open')
        if location.path not in self.blobs:
            raise TrackerError('empty_file', 'ERR empty_file')
        old_path = self.keys.get(key)
        if old_path is not None:
            self.blobs.pop(old_path, None)
        self.keys[key] = location.path

    def close(self):
        pass


class DummyTransfer(object):
    """Stores blobs in a dict instead of on storage nodes."""

    def __init__(self, blobs):
        self.blobs = blobs

    def put(self, url, stream, length):
        data = stream.read(length) if length else b''
        if len(data) != length:
            raise TransferError('Stream ended %d bytes short of declared '
                                'length %d' % (length - len(data), length))
        self.blobs[url] = data

    def get(self, urls):
        for url in urls:
            if url in self.blobs:
                return self.blobs[url]
        raise TransferError('Unable to fetch from any of %s' % ', '.join(urls))

    def get_stream(self, urls):
        return BytesIO(self.get(urls))


class DummyClient(Client):
    """MogileFS client which keeps everything in memory."""

    def __init__(self, domain='dummy', storage_class='dummy'):
        config = ClientConfig(domain, storage_class, ['localhost'])
        blobs = {}
        Client.__init__(self, config=config,
                        tracker=DummyTracker(config, blobs),
                        transfer=DummyTransfer(blobs))

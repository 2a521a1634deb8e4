"""MogileFS client implementation."""

from mogilefs.errors import (MogileFSError, InvalidArgumentError,
                             TrackerConnectionError, RequestTimeoutError,
                             ProtocolError, TransferError, TrackerError,
                             UnknownKeyError, EmptyFileError, NoneMatchError)

# Reexport under shorter path.
from mogilefs.client.client import Client

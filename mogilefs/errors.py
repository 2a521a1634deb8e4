"""Exceptions raised by the MogileFS client."""


class MogileFSError(Exception):
    pass


class InvalidArgumentError(MogileFSError, ValueError):
    """A required argument (usually a key) is missing or malformed."""


class TrackerConnectionError(MogileFSError):
    """No tracker could be reached, or the connection broke mid-request."""


class RequestTimeoutError(MogileFSError):
    """A connect, tracker round trip or data transfer deadline expired."""


class ProtocolError(MogileFSError):
    """The tracker sent a line which is neither ``OK`` nor ``ERR``."""


class TransferError(MogileFSError):
    """Storing or fetching bytes on a storage node failed."""


class TrackerError(MogileFSError):
    """The tracker answered with ``ERR``.

       ``code`` is the short error identifier sent by the tracker (may be
       ``None``) and ``message`` the rest of the response line.
    """

    def __init__(self, code, message):
        super(TrackerError, self).__init__(message)
        self.code = code
        self.message = message


class UnknownKeyError(TrackerError):
    pass


class EmptyFileError(TrackerError):
    pass


class NoneMatchError(TrackerError):
    pass

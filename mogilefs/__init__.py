"""mogilefs is a client library for the MogileFS distributed file storage.

   A MogileFS installation consists of *trackers*, which keep the metadata
   (which keys exist, which domain and class they belong to and on which
   storage nodes their replicas live) and *storage nodes*, which serve the
   actual bytes over HTTP. This package talks to both, so that an
   application can store, fetch, rename, list and delete keyed blobs
   without knowing where they physically are.

   -------------------------
   Keys, domains and classes
   -------------------------

   A blob is identified by a *key*, an arbitrary non-empty string. Keys live
   in a *domain* (a namespace) and are stored according to a *class* (a
   replication policy defined in that domain). A client is always bound to
   a single domain and class.

   -----------------------
   Configuration and usage
   -----------------------

   Probably the only class you'd like to know and use is
   :class:`mogilefs.client.Client`::

     from mogilefs.client import Client

     with Client(domain='media', storage_class='images',
                 trackers=['10.0.0.1:7001', '10.0.0.2']) as client:
         client.put('logo', b'...')
         data = client.get('logo')

   Values not passed to the constructor are taken from the environment
   (``MOGILEFS_DOMAIN``, ``MOGILEFS_CLASS``, ``MOGILEFS_TRACKERS``).

   If you write tests, you may be also interested in
   :class:`mogilefs.client.dummy.DummyClient`.

   ------------------------------
   Using mogilefs from the shell
   ------------------------------

   ::

     $ mogilefs --help

   ----------------------
   API Reference
   ----------------------

   .. autoclass:: mogilefs.client.config.ClientConfig
       :members:

   .. autoclass:: mogilefs.client.connection.ConnectionManager
       :members:

   .. autoclass:: mogilefs.client.protocol.TrackerCodec
       :members:

   .. autoclass:: mogilefs.client.tracker.Tracker
       :members:

   .. autoclass:: mogilefs.client.transfer.HttpTransfer
       :members:

   .. autoclass:: mogilefs.client.dummy.DummyClient
"""

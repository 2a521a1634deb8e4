import os
import unittest
from unittest import mock

from mogilefs.client import InvalidArgumentError
from mogilefs.client.config import ClientConfig


class ClientConfigTest(unittest.TestCase):
    def setUp(self):
        self.config = ClientConfig('dom', 'cls', ['10.0.0.1', 'tracker:7002'])

    def test_defaults_should_be_set(self):
        self.assertEqual(self.config.connect_timeout, 10)
        self.assertEqual(self.config.tracker_timeout, 10)
        self.assertEqual(self.config.get_timeout, 10)
        self.assertEqual(self.config.put_timeout, 4)

    def test_tracker_addresses_should_default_to_port_7001(self):
        self.assertEqual(self.config.tracker_addresses,
                         [('10.0.0.1', 7001), ('tracker', 7002)])

    def test_single_tracker_string_should_be_accepted(self):
        config = ClientConfig('dom', 'cls', 'tcp://127.0.0.1')
        self.assertEqual(config.trackers, ['tcp://127.0.0.1'])
        self.assertEqual(config.tracker_addresses, [('127.0.0.1', 7001)])

    def test_empty_tracker_list_should_fail(self):
        with self.assertRaises(InvalidArgumentError):
            ClientConfig('dom', 'cls', [])
        with self.assertRaises(InvalidArgumentError):
            ClientConfig('dom', 'cls', None)

    def test_invalid_tracker_should_fail_eagerly(self):
        with self.assertRaises(InvalidArgumentError):
            ClientConfig('dom', 'cls', ['host:notaport'])

    def test_setting_trackers_should_replace_the_list(self):
        self.config.trackers = ['a:1']
        self.assertEqual(self.config.tracker_addresses, [('a', 1)])

    def test_empty_domain_or_class_should_fail(self):
        for domain, cls in [('', 'cls'), ('dom', ''), (None, 'cls'),
                            ('dom', None), (3, 'cls')]:
            with self.assertRaises(InvalidArgumentError):
                ClientConfig(domain, cls, ['t'])

    def test_non_positive_timeouts_should_be_rejected(self):
        for name in ['connect_timeout', 'tracker_timeout', 'get_timeout',
                     'put_timeout']:
            for value in [0, -1, -0.5, None, '5', True]:
                with self.assertRaises(InvalidArgumentError):
                    setattr(self.config, name, value)

    def test_positive_timeouts_should_be_observable(self):
        for name in ['connect_timeout', 'tracker_timeout', 'get_timeout',
                     'put_timeout']:
            for value in [0.01, 1, 30]:
                setattr(self.config, name, value)
                self.assertEqual(getattr(self.config, name), value)

    def test_rejected_value_should_keep_previous_one(self):
        self.config.put_timeout = 7
        with self.assertRaises(InvalidArgumentError):
            self.config.put_timeout = 0
        self.assertEqual(self.config.put_timeout, 7)

    def test_from_environ_should_read_variables(self):
        environ = {
            'MOGILEFS_DOMAIN': 'envdom',
            'MOGILEFS_CLASS': 'envcls',
            'MOGILEFS_TRACKERS': 'a:7001, b ,',
        }
        with mock.patch.dict(os.environ, environ):
            config = ClientConfig.from_environ(tracker_timeout=3)
        self.assertEqual(config.domain, 'envdom')
        self.assertEqual(config.storage_class, 'envcls')
        self.assertEqual(config.trackers, ['a:7001', 'b'])
        self.assertEqual(config.tracker_timeout, 3)

    def test_from_environ_should_prefer_explicit_values(self):
        with mock.patch.dict(os.environ, {'MOGILEFS_DOMAIN': 'envdom'}):
            config = ClientConfig.from_environ('dom', 'cls', ['t'])
        self.assertEqual(config.domain, 'dom')

    def test_from_environ_without_trackers_should_fail(self):
        with mock.patch.dict(os.environ, {'MOGILEFS_TRACKERS': ''}):
            with self.assertRaises(InvalidArgumentError):
                ClientConfig.from_environ('dom', 'cls')

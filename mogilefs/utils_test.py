import unittest

from mogilefs.errors import InvalidArgumentError
from mogilefs.utils import check_key, parse_tracker_address


class ParseTrackerAddressTest(unittest.TestCase):
    def test_should_parse_host_and_port(self):
        self.assertEqual(parse_tracker_address('10.0.0.1:7002'),
                         ('10.0.0.1', 7002))

    def test_should_default_port(self):
        self.assertEqual(parse_tracker_address('tracker'), ('tracker', 7001))

    def test_should_accept_tcp_scheme(self):
        self.assertEqual(parse_tracker_address('tcp://127.0.0.1'),
                         ('127.0.0.1', 7001))
        self.assertEqual(parse_tracker_address('tcp://127.0.0.1:6001/'),
                         ('127.0.0.1', 6001))

    def test_should_accept_bracketed_ipv6(self):
        self.assertEqual(parse_tracker_address('[::1]:7005'), ('::1', 7005))
        self.assertEqual(parse_tracker_address('[::1]'), ('::1', 7001))

    def test_should_reject_garbage(self):
        for address in ['', ' ', None, 'http://host', ':7001', 'host:port',
                        'host:70000', '[::1', 42]:
            with self.assertRaises(InvalidArgumentError):
                parse_tracker_address(address)


class CheckKeyTest(unittest.TestCase):
    def test_should_accept_non_empty_strings(self):
        check_key('a')
        check_key('some/key with spaces')

    def test_should_reject_empty_or_non_strings(self):
        for key in ['', None, 1, b'key']:
            with self.assertRaises(InvalidArgumentError):
                check_key(key)

    def test_invalid_argument_should_be_value_error(self):
        with self.assertRaises(ValueError):
            check_key('')

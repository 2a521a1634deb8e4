import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

from mogilefs.client import shell
from mogilefs.client.dummy import DummyClient


class ShellTest(unittest.TestCase):
    def setUp(self):
        self.client = DummyClient()
        patcher = mock.patch.object(shell, 'Client', return_value=self.client)
        self.client_class = patcher.start()
        self.addCleanup(patcher.stop)
        self.temp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.temp_dir)

    def _run(self, *argv):
        out = io.StringIO()
        with mock.patch.object(sys, 'stdout', out):
            code = shell.main(list(argv))
        return code, out.getvalue()

    def test_options_should_configure_client(self):
        self._run('-t', 'a:1, b', '-d', 'dom', '-c', 'cls', 'ls')
        self.client_class.assert_called_once_with(
            domain='dom', storage_class='cls', trackers=['a:1', 'b'])

    def test_put_get_should_transfer_files(self):
        src = os.path.join(self.temp_dir, 'src')
        dest = os.path.join(self.temp_dir, 'dest')
        with open(src, 'wb') as f:
            f.write(b'shell')
        self._run('put', src, 'key')
        self._run('get', 'key', dest)
        with open(dest, 'rb') as f:
            self.assertEqual(f.read(), b'shell')

    def test_ls_should_print_keys(self):
        self.client.put('a/1', b'')
        self.client.put('a/2', b'')
        self.client.put('b/1', b'')
        code, out = self._run('ls', 'a/')
        self.assertEqual(code, 0)
        self.assertEqual(out.split(), ['a/1', 'a/2'])

    def test_exists_should_set_exit_code(self):
        self.client.put('here', b'')
        self.assertEqual(self._run('exists', 'here'), (0, 'yes\n'))
        self.assertEqual(self._run('exists', 'gone'), (1, 'no\n'))

    def test_mv_and_rm_should_change_keys(self):
        self.client.put('old', b'x')
        self._run('mv', 'old', 'new')
        self.assertEqual(self.client.list_keys(), ['new'])
        self._run('rm', 'new')
        self.assertEqual(self.client.list_keys(), [])

    def test_domains_should_list_classes(self):
        code, out = self._run('domains')
        self.assertEqual(out, 'dummy\n    dummy mindevcount=1\n')

    def test_missing_arguments_should_exit(self):
        with mock.patch.object(sys, 'stderr', io.StringIO()):
            with self.assertRaises(SystemExit):
                self._run('rm')
            with self.assertRaises(SystemExit):
                self._run('mv', 'a', 'b', 'c')
            with self.assertRaises(SystemExit):
                self._run()

from optparse import OptionParser
import logging
import sys

from mogilefs.client import Client


_BUFFER_SIZE = 64 * 1024


def _make_command_parser(cmd, extra_usage=''):
    usage = "usage: %prog [options] command [command-specific options] " \
            + extra_usage
    description = "Help for command '%s'" % cmd
    return OptionParser(usage=usage, description=description)


def _parse_exact(parser, args, names):
    options, args = parser.parse_args(list(args))
    if len(args) < len(names):
        parser.error("Missing " + names[len(args)])
    if len(args) > len(names):
        parser.error("Too many arguments")
    return options, args


def cmd_get(client, *args):
    parser = _make_command_parser('get', "key local_filename")
    options, args = _parse_exact(parser, args, ['key', 'local filename'])
    client.get_file(args[0], args[1])


def cmd_cat(client, *args):
    parser = _make_command_parser('cat', "key")
    options, args = _parse_exact(parser, args, ['key'])
    out = sys.stdout.buffer
    with client.get_stream(args[0]) as stream:
        buf = stream.read(_BUFFER_SIZE)
        while buf:
            out.write(buf)
            buf = stream.read(_BUFFER_SIZE)
    out.flush()


def cmd_put(client, *args):
    parser = _make_command_parser('put', "local_filename key")
    options, args = _parse_exact(parser, args, ['local filename', 'key'])
    client.put_file(args[1], args[0])


def cmd_rm(client, *args):
    parser = _make_command_parser('rm', "key")
    options, args = _parse_exact(parser, args, ['key'])
    client.delete(args[0])


def cmd_mv(client, *args):
    parser = _make_command_parser('mv', "from_key to_key")
    options, args = _parse_exact(parser, args, ['source key',
                                                'destination key'])
    client.rename(args[0], args[1])


def cmd_ls(client, *args):
    parser = _make_command_parser('ls', "[prefix]")
    parser.add_option('-a', '--after', dest='after', default=None,
            help="List keys after this one")
    parser.add_option('-l', '--limit', dest='limit', type='int', default=None,
            help="Return at most this many keys")
    options, args = parser.parse_args(list(args))
    if len(args) > 1:
        parser.error("Too many arguments")
    prefix = args[0] if args else None
    for key in client.list_keys(prefix=prefix, after=options.after,
                                limit=options.limit):
        print(key)


def cmd_paths(client, *args):
    parser = _make_command_parser('paths', "key")
    parser.add_option('-n', '--noverify', dest='skip_verification',
            action='store_true', default=False,
            help="Do not let the tracker check the storage nodes")
    options, args = _parse_exact(parser, args, ['key'])
    for path in client.get_paths(args[0],
                                 skip_verification=options.skip_verification):
        print(path)


def cmd_exists(client, *args):
    parser = _make_command_parser('exists', "key")
    options, args = _parse_exact(parser, args, ['key'])
    exists = client.exists(args[0])
    print('yes' if exists else 'no')
    return 0 if exists else 1


def cmd_domains(client, *args):
    parser = _make_command_parser('domains')
    options, args = _parse_exact(parser, args, [])
    for domain in client.get_domains():
        print(domain.name)
        for name, mindevcount in sorted(domain.classes.items()):
            print('    %s mindevcount=%d' % (name, mindevcount))


def main(argv=None):
    usage = "usage: %prog [options] command [command-specific options]"
    commands = [s for s in globals() if s.startswith('cmd_')]
    commands = sorted([s[4:] for s in commands])
    epilog = """
Options specified above are filled from environment
(MOGILEFS_TRACKERS, MOGILEFS_DOMAIN, MOGILEFS_CLASS)
if not specified on the command line.

Each command has its own --help text.

Supported commands: %s.""" % ', '.join(commands)
    parser = OptionParser(usage=usage, epilog=epilog)
    parser.disable_interspersed_args()

    parser.add_option('-t', '--trackers', dest='trackers', default=None,
            help="Comma-separated list of tracker addresses")
    parser.add_option('-d', '--domain', dest='domain', default=None,
            help="MogileFS domain")
    parser.add_option('-c', '--class', dest='storage_class', default=None,
            help="Storage class for new files")
    parser.add_option('-v', '--verbose', dest='verbose', default=0,
            action='count', help="Be verbose")

    options, args = parser.parse_args(argv)
    if not args:
        parser.error("Missing command. Try --help for list of available "
                "commands.")
    cmd = globals().get('cmd_' + args[0],
            lambda *a: parser.error("Unknown command: " + args[0]))

    level = logging.WARNING
    if options.verbose:
        level = logging.DEBUG
    logging.basicConfig(
            format="%(asctime)-15s %(name)s %(levelname)s: %(message)s",
            level=level)

    trackers = None
    if options.trackers:
        trackers = [t.strip() for t in options.trackers.split(',')
                    if t.strip()]
    with Client(domain=options.domain, storage_class=options.storage_class,
                trackers=trackers) as client:
        return cmd(client, *args[1:]) or 0


if __name__ == '__main__':
    sys.exit(main())

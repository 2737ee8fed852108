import argparse
import logging
import os
import sys

from . import base
from . import data
from .errors import ObjectStoreError
from .types import OBJECT_TYPES


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    return args.func(args)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='gitodb')
    parser.add_argument('-C', '--git-dir', dest='root', default=data.GIT_DIR,
                        help=f'repository directory (default: {data.GIT_DIR})')
    parser.add_argument('-v', '--verbose', action='store_true')
    commands = parser.add_subparsers(dest='command')
    commands.required = True

    init_parser = commands.add_parser('init')
    init_parser.set_defaults(func=init)

    hash_object_parser = commands.add_parser('hash-object')
    hash_object_parser.set_defaults(func=hash_object)
    hash_object_parser.add_argument('-t', '--type', dest='type_', default='blob', choices=OBJECT_TYPES)
    hash_object_parser.add_argument('-w', '--write', action='store_true')
    hash_object_parser.add_argument('files', nargs='+')

    cat_file_parser = commands.add_parser('cat-file')
    cat_file_parser.set_defaults(func=cat_file)
    mode = cat_file_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('-t', dest='show', action='store_const', const='type')
    mode.add_argument('-s', dest='show', action='store_const', const='size')
    mode.add_argument('-e', dest='show', action='store_const', const='exists')
    mode.add_argument('-p', dest='show', action='store_const', const='pretty')
    mode.add_argument('--type', dest='expected', choices=OBJECT_TYPES)
    cat_file_parser.add_argument('objects', nargs='+')

    return parser.parse_args(argv)


def _error(message):
    print(f'error: {message}', file=sys.stderr)


def init(args):
    data.init(args.root)
    print(f'Initialized empty gitodb repository in {os.path.abspath(args.root)}')
    return 0


def hash_object(args):
    status = 0
    for path in args.files:
        try:
            with open(path, 'rb') as f:
                print(data.hash_object(args.root, f.read(), args.type_, write=args.write))
        except (OSError, ObjectStoreError) as e:
            _error(e)
            status = 1
    return status


def _cat_one(args, oid):
    if args.show == 'exists':
        return data.object_exists(args.root, oid)
    if args.show == 'type':
        print(data.read_info(args.root, oid).kind)
    elif args.show == 'size':
        print(data.read_info(args.root, oid).size)
    elif args.show == 'pretty':
        sys.stdout.flush()
        sys.stdout.buffer.write(base.pretty(data.get(args.root, oid)))
    else:
        sys.stdout.flush()
        sys.stdout.buffer.write(data.get_object(args.root, oid, expected=args.expected))
    return True


def cat_file(args):
    status = 0
    for oid in args.objects:
        try:
            if not _cat_one(args, oid):
                status = 1
        except ObjectStoreError as e:
            _error(e)
            status = 1
    sys.stdout.flush()
    return status

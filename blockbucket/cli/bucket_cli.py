"""Bucket CLI."""
import argparse
import sys
from blockbucket.core.bucket import Bucket, NOT_FOUND
from blockbucket.core.errors import BucketError
from blockbucket.utils.config import Config


def _text(data: bytes) -> str:
    return data.decode('utf-8', errors='replace')


def print_records(records):
    """Print records one per line as key: value."""
    if not records:
        print("EMPTY")
        return
    for key, value in records:
        print(f"{_text(key)}: {_text(value)}")


def handle_set(bucket, args):
    """Handle SET command."""
    if args.value is None:
        print("Error: SET requires a value", file=sys.stderr)
        return 1
    bucket.set(args.key.encode(), args.value.encode())
    print("OK")
    return 0


def handle_setmany(bucket, args):
    """Handle SETMANY command."""
    if args.value is None:
        print("Error: SETMANY requires values", file=sys.stderr)
        return 1
    keys = args.key.split(',')
    values = args.value.split(',')
    if len(keys) != len(values):
        print("Error: Number of keys and values must match", file=sys.stderr)
        return 1
    bucket.set_many([(k.encode(), v.encode()) for k, v in zip(keys, values)])
    print("OK")
    return 0


def handle_get(bucket, args):
    """Handle GET command."""
    record = bucket.get(args.key.encode())
    print("NOT_FOUND" if record == NOT_FOUND else _text(record.value))
    return 0


def handle_delete(bucket, args):
    """Handle DELETE command."""
    removed = bucket.delete(args.key.encode())
    print(f"OK ({removed} removed)")
    return 0


def handle_list(bucket, args):
    """Handle LIST command."""
    print_records(bucket.list(args.limit))
    return 0


def handle_listnext(bucket, args):
    """Handle LISTNEXT command."""
    print_records(bucket.list_next(args.limit, args.skip))
    return 0


def handle_findnext(bucket, args):
    """Handle FINDNEXT command."""
    print_records(bucket.find_next(args.key.encode(), args.limit, args.after))
    return 0


def handle_deleteto(bucket, args):
    """Handle DELETETO command."""
    removed = bucket.delete_to(args.key.encode(), args.inclusive)
    print(f"OK ({removed} removed)")
    return 0


def handle_pop(bucket, args):
    """Handle POP command."""
    print_records(bucket.list_lock_delete(args.limit))
    return 0


def handle_count(bucket, args):
    """Handle COUNT command."""
    print(bucket.count())
    return 0


HANDLERS = {
    'set': handle_set,
    'setmany': handle_setmany,
    'get': handle_get,
    'delete': handle_delete,
    'list': handle_list,
    'listnext': handle_listnext,
    'findnext': handle_findnext,
    'deleteto': handle_deleteto,
    'pop': handle_pop,
    'count': handle_count,
}

# Commands whose first positional argument is a key
KEYED_COMMANDS = {'set', 'setmany', 'get', 'delete', 'findnext', 'deleteto'}


def build_parser():
    parser = argparse.ArgumentParser(description='blockbucket file store')
    parser.add_argument('--path', default=Config.DEFAULT_PATH,
                        help=f'Bucket file (default: {Config.DEFAULT_PATH})')
    parser.add_argument('--limit', type=int, default=Config.CLI_LIST_LIMIT,
                        help=f'Max records for list/listnext/findnext/pop (default: {Config.CLI_LIST_LIMIT})')
    parser.add_argument('--skip', type=int, default=0, help='Records to skip for listnext')
    parser.add_argument('--after', action='store_true',
                        help='findnext: start right after the matching record')
    parser.add_argument('--inclusive', action='store_true',
                        help='deleteto: also delete the matching record')
    parser.add_argument('command', choices=sorted(HANDLERS), help='Command to execute')
    parser.add_argument('key', nargs='?',
                        help='Key (or comma-separated keys for setmany)')
    parser.add_argument('value', nargs='?',
                        help='Value (for SET) or comma-separated values (for SETMANY)')
    return parser


def main(argv=None):
    """Main entry point for the bucket CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in KEYED_COMMANDS and args.key is None:
        print(f"Error: {args.command.upper()} requires a key", file=sys.stderr)
        return 1

    handler = HANDLERS[args.command]
    try:
        bucket = Bucket(args.path)
        return handler(bucket, args)
    except (BucketError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

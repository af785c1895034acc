import argparse
import os
import sys

from dotenv import load_dotenv

from .common.exceptions import InitializationError
from .common.log import log, setup_log_from_config
from .common.logging_config import configure_from_file
from .config import load_configs
from .registry.service_registry import create_registry
from .storage.storage_contract import StorageContract, validate_key

VALUE_TYPES = ("text", "boolean", "integer")
TRUE_STRINGS = ("true", "1", "yes", "on")
FALSE_STRINGS = ("false", "0", "no", "off")


def parse_value(value_type, raw):
    """Convert a command line string to the requested value type."""
    if value_type == "boolean":
        lowered = raw.lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        raise ValueError(f"'{raw}' is not a boolean")
    if value_type == "integer":
        return int(raw)
    return raw


def build_parser():
    parser = argparse.ArgumentParser(
        prog="preference-store",
        description="Inspect and edit a configured preference store.",
    )
    parser.add_argument(
        "--envfile",
        metavar="<file>",
        type=str,
        help="Load environment variables from a specified .env file.",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_files",
        metavar="<config.yaml>",
        action="append",
        required=True,
        help="YAML configuration file. May be given more than once.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Print the value stored under a key.")
    get_cmd.add_argument("key")
    get_cmd.add_argument("--type", choices=VALUE_TYPES, default="text")

    set_cmd = commands.add_parser("set", help="Store a value under a key.")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")
    set_cmd.add_argument("--type", choices=VALUE_TYPES, default="text")

    remove_cmd = commands.add_parser("remove", help="Delete the entry at a key.")
    remove_cmd.add_argument("key")

    clear_cmd = commands.add_parser("clear", help="Delete every entry.")
    clear_cmd.add_argument(
        "--yes", action="store_true", help="Confirm that every entry should be deleted."
    )

    commands.add_parser("keys", help="List every stored key.")
    return parser


def run_command(args, store: StorageContract) -> int:
    """Run one parsed command against the store and return the exit code."""
    if args.command == "get":
        getter = {
            "text": store.get_text,
            "boolean": store.get_boolean,
            "integer": store.get_integer,
        }[args.type]
        value = getter(args.key)
        if value is None:
            print(f"No {args.type} value stored under '{args.key}'", file=sys.stderr)
            return 1
        print(str(value).lower() if isinstance(value, bool) else value)
        return 0

    if args.command == "set":
        saver = {
            "text": store.save_text,
            "boolean": store.save_boolean,
            "integer": store.save_integer,
        }[args.type]
        ok = saver(args.key, parse_value(args.type, args.value))
    elif args.command == "remove":
        ok = store.remove(args.key)
    elif args.command == "clear":
        if not args.yes:
            print("Refusing to clear the store without --yes", file=sys.stderr)
            return 1
        ok = store.clear_all()
    else:
        for key in sorted(store.keys()):
            print(key)
        return 0

    if not ok:
        print(f"The '{args.command}' operation failed", file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if getattr(args, "key", None) is not None:
            validate_key(args.key)
        if args.command == "set":
            parse_value(args.type, args.value)
    except ValueError as e:
        parser.error(str(e))

    if args.envfile:
        if os.path.exists(args.envfile):
            load_dotenv(dotenv_path=args.envfile, override=True)
        else:
            print(
                f"Warning: Specified --envfile '{args.envfile}' not found.",
                file=sys.stderr,
            )

    try:
        config = load_configs(args.config_files)
        if not configure_from_file():
            setup_log_from_config(config.get("log"))
        registry = create_registry(config)
    except (InitializationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return run_command(args, registry.resolve(StorageContract))
    except InitializationError as e:
        log.error("Preference store unavailable: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        registry.shutdown()


if __name__ == "__main__":
    sys.exit(main())

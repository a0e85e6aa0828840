"""
CLI for Memo.

Minimal CLI using stdlib argument handling: parse, open the store,
run exactly one operation, print the result.

Usage:
    memo add "buy milk"        # Add a memo
    memo list                  # List all memos
    memo find milk             # Keyword search
    memo delete 1              # Delete by id
    memo --help                # Show help
"""

import logging
import sys
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Options:
    """Global options given before the subcommand."""

    db_path: str | None = None
    strict: bool = False
    debug: bool = False
    # Filled from config.toml when the store is opened
    color: bool = True
    rest: list[str] = field(default_factory=list)


def print_help() -> None:
    """Print help message."""
    print("""memo - personal notes from the command line

Usage:
    memo [options] <command> [args]

Commands:
    memo add <content>            Add a memo
    memo list [--long]            List all memos
    memo delete <id>              Delete a memo
    memo find <keyword> [--long]  Find memos containing keyword
    memo stats                    Show database statistics

Options:
    --db PATH                     Use a different database file
    --strict                      Fail on unreadable records instead of skipping them
    --debug                       Verbose logging on stderr
    --help, -h                    Show this help
    --version, -v                 Show version

Examples:
    memo add "buy milk"
    memo find milk
    memo delete 1

Memos are stored in ~/.memo/memo.sqlite.""")


def print_version() -> None:
    """Print version."""
    from memo import __version__
    print(f"memo {__version__}")


def setup_logging(debug: bool = False) -> None:
    """Send log records to stderr."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
    )


def parse_options(args: list[str]) -> Options:
    """Consume leading global options. Raises ValueError on bad usage."""
    options = Options()

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--db":
            if i + 1 >= len(args):
                raise ValueError("--db requires a path")
            options.db_path = args[i + 1]
            i += 2
        elif arg.startswith("--db="):
            options.db_path = arg.split("=", 1)[1]
            i += 1
        elif arg == "--strict":
            options.strict = True
            i += 1
        elif arg == "--debug":
            options.debug = True
            i += 1
        else:
            break

    options.rest = args[i:]
    return options


def split_flags(args: list[str]) -> tuple[list[str], bool]:
    """Pull --long/-l out of a subcommand's arguments."""
    long_format = False
    positional = []
    for arg in args:
        if arg in ("--long", "-l"):
            long_format = True
        else:
            positional.append(arg)
    return positional, long_format


def open_store(options: Options):
    """
    Open the memo store.

    The default location is resolved here, never inside the store.
    """
    from memo.config import load_config, resolve_db_path
    from memo.db import MemoStore

    config = load_config()
    options.color = config["display"].get("color", True)

    db_path = resolve_db_path(config, options.db_path)
    strict = options.strict or config["store"].get("strict", False)

    logger.debug("Opening %s (strict=%s)", db_path, strict)
    return MemoStore(db_path, strict=strict)


def _print_partial(error, color: bool = True) -> None:
    """Show what could be read before reporting a strict-mode failure."""
    from memo.display import format_memos

    if error.memos:
        print(format_memos(error.memos, color=color))
    print(f"Error: {error}", file=sys.stderr)


def cmd_add(options: Options, args: list[str]) -> int:
    """Add a memo."""
    from memo.errors import MemoError

    content = " ".join(args)

    # Reject before the store is even opened
    if not content.strip():
        print("Error: empty content", file=sys.stderr)
        return 1

    try:
        store = open_store(options)
        memo_id = store.add(content)
    except MemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Added: {memo_id}")
    return 0


def cmd_list(options: Options, args: list[str]) -> int:
    """List all memos."""
    from memo.display import format_memos
    from memo.errors import CorruptRecordsError, MemoError

    _, long_format = split_flags(args)

    try:
        store = open_store(options)
        memos = store.list_all()
    except CorruptRecordsError as e:
        _print_partial(e, options.color)
        return 1
    except MemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_memos(memos, show_time=long_format, color=options.color))
    return 0


def cmd_delete(options: Options, args: list[str]) -> int:
    """Delete a memo by id."""
    from memo.errors import MemoError

    if len(args) != 1:
        print("Usage: memo delete <id>", file=sys.stderr)
        return 1

    try:
        memo_id = int(args[0])
    except ValueError:
        print(f"Error: invalid id: {args[0]}", file=sys.stderr)
        return 1

    try:
        store = open_store(options)
        deleted = store.delete(memo_id)
    except MemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Deleting a missing id is not an error
    if deleted:
        print(f"Deleted: {memo_id}")
    else:
        print(f"Not found: {memo_id}")
    return 0


def cmd_find(options: Options, args: list[str]) -> int:
    """Find memos containing a keyword."""
    from memo.display import format_memos
    from memo.errors import CorruptRecordsError, MemoError

    positional, long_format = split_flags(args)
    if not positional:
        print("Usage: memo find <keyword>", file=sys.stderr)
        return 1

    keyword = " ".join(positional)

    try:
        store = open_store(options)
        memos = store.find(keyword)
    except CorruptRecordsError as e:
        _print_partial(e, options.color)
        return 1
    except MemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_memos(
        memos,
        show_time=long_format,
        empty_message=f"No memos matching '{keyword}'.",
        color=options.color,
    ))
    return 0


def cmd_stats(options: Options) -> int:
    """Show database statistics."""
    from memo.display import format_stats
    from memo.errors import MemoError

    try:
        store = open_store(options)
        stats = store.get_stats()
    except MemoError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_stats(stats, color=options.color))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else list(argv)

    try:
        options = parse_options(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    first_arg = options.rest[0] if options.rest else None

    if first_arg in ("--help", "-h", "help"):
        print_help()
        return 0

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    setup_logging(options.debug)

    if not options.rest:
        print("No subcommand was used")
        print("Run 'memo --help' for usage.")
        return 0

    command, rest = options.rest[0], options.rest[1:]

    if command == "add":
        return cmd_add(options, rest)

    if command == "list":
        return cmd_list(options, rest)

    if command == "delete":
        return cmd_delete(options, rest)

    if command == "find":
        return cmd_find(options, rest)

    if command == "stats":
        return cmd_stats(options)

    print(f"Error: unknown command '{command}'", file=sys.stderr)
    print("Run 'memo --help' for usage.", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

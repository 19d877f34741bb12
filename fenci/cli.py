"""
Command line interface for fenci.

Usage:
    python -m fenci.cli "我们今天很好"            # segmented words
    python -m fenci.cli -i "我们今天很好"         # with dictionary info
    python -m fenci.cli -f "我们今天很好"         # full JSON
    python -m fenci.cli lookup 学生               # one dictionary entry
    python -m fenci.cli init-db --cedict cedict_ts.u8
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from fenci import __version__
from fenci.db.connection import get_db_path
from fenci.lookup import CedictStore, DictionaryUnavailableError
from fenci.models import LookupResult, SegmentationResult
from fenci.output import format_reading, format_result
from fenci.segment import tokenize
from fenci.settings import CEDICT_PATH, DEBUG, DEFAULT_DB_PATH

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    if debug or DEBUG:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def open_store(db_path: Optional[str]) -> Optional[CedictStore]:
    """Open the dictionary, reporting problems on stderr."""
    if db_path is None:
        db_path = get_db_path()

    if not db_path or not Path(db_path).exists():
        print("Error: dictionary database not found.", file=sys.stderr)
        print("Run 'fenci init-db --cedict PATH' to build it, or pass --database.", file=sys.stderr)
        return None

    try:
        return CedictStore(db_path)
    except DictionaryUnavailableError as e:
        print(f"Error opening dictionary: {e}", file=sys.stderr)
        return None


def format_tokens_text(store, tokens) -> str:
    """Format tokens with dictionary info as text output."""
    lines = [' '.join(t.text for t in tokens if not t.is_gap)]

    for token in tokens:
        if token.is_gap:
            continue

        lines.append('')
        result = store.lookup(token.text)
        if result is None:
            lines.append(f"* {token.text}")
            continue

        for reading in result.readings:
            lines.append(f"* {format_reading(reading)}")

    return '\n'.join(lines)


def init_db_command(args) -> int:
    """Build the dictionary database from a CC-CEDICT file."""
    from fenci.loading.cedict import load_cedict

    cedict_path = Path(args.cedict) if args.cedict else CEDICT_PATH
    db_path = Path(args.output) if args.output else DEFAULT_DB_PATH

    if not cedict_path.exists() and not cedict_path.with_name(cedict_path.name + '.gz').exists():
        print(f"Error: CC-CEDICT file not found: {cedict_path}", file=sys.stderr)
        print("Download it from https://www.mdbg.net/chinese/dictionary?page=cc-cedict", file=sys.stderr)
        print("Or specify path with --cedict", file=sys.stderr)
        return 1

    # Confirm overwrite
    if db_path.exists() and not args.force:
        print(f"Database already exists: {db_path}")
        response = input("Overwrite? [y/N]: ").strip().lower()
        if response != 'y':
            print("Aborted.")
            return 1

    print("Initializing database...")
    print(f"  CC-CEDICT: {cedict_path}")
    print(f"  Output:    {db_path}")

    def progress(count):
        if count % 50000 == 0:
            print(f"  {count:,} entries loaded...")

    t0 = time.perf_counter()
    try:
        total = load_cedict(cedict_path, db_path, progress_callback=progress)
    except (OSError, ValueError, SQLAlchemyError) as e:
        print(f"Error initializing database: {e}", file=sys.stderr)
        return 1

    elapsed = time.perf_counter() - t0
    print(f"Database initialized: {total:,} entries in {elapsed:.1f}s")
    print("Set FENCI_DB_PATH to use this database:")
    print(f'  export FENCI_DB_PATH="{db_path.absolute()}"')
    return 0


def main_init_db(args: list) -> int:
    """CLI entry point for init-db subcommand."""
    parser = argparse.ArgumentParser(
        description='Build the fenci database from a CC-CEDICT file',
        prog='fenci init-db',
    )
    parser.add_argument(
        '--cedict', '-c',
        type=str,
        metavar='PATH',
        help='Path to CC-CEDICT text file, plain or .gz',
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        metavar='PATH',
        help='Output database path',
    )
    parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Overwrite existing database without prompting',
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    parsed = parser.parse_args(args)
    configure_logging(parsed.debug)
    return init_db_command(parsed)


def main_lookup(args: list) -> int:
    """CLI entry point for lookup subcommand."""
    parser = argparse.ArgumentParser(
        description='Look up a word in the dictionary',
        prog='fenci lookup',
    )
    parser.add_argument('word', help='Traditional or simplified headword')
    parser.add_argument('-f', '--full', action='store_true', help='Output JSON')
    parser.add_argument('-d', '--database', type=str, default=None, metavar='PATH',
                        help='Path to SQLite database file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    parsed = parser.parse_args(args)
    configure_logging(parsed.debug)

    store = open_store(parsed.database)
    if store is None:
        return 1

    try:
        result = store.lookup(parsed.word)
        if result is None:
            print(f"No entry for {parsed.word}", file=sys.stderr)
            return 1

        if parsed.full:
            print(LookupResult.from_result(result).model_dump_json())
        else:
            print(format_result(result))
        return 0
    finally:
        store.close()


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args_list = args if args is not None else sys.argv[1:]

    if args_list and args_list[0] == 'init-db':
        return main_init_db(args_list[1:])
    if args_list and args_list[0] == 'lookup':
        return main_lookup(args_list[1:])

    parser = argparse.ArgumentParser(
        description='Command line interface for fenci (Chinese word segmentation)',
        prog='fenci',
        epilog='Subcommands:\n  fenci lookup WORD   Look up a single word\n  fenci init-db       Build the database from a CC-CEDICT file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'text',
        nargs='*',
        help='Chinese text to segment',
    )
    parser.add_argument(
        '-i', '--with-info',
        action='store_true',
        help='Print dictionary info for each word',
    )
    parser.add_argument(
        '-f', '--full',
        action='store_true',
        help='Full segmentation info as JSON',
    )
    parser.add_argument(
        '-d', '--database',
        type=str,
        default=None,
        metavar='PATH',
        help='Path to SQLite database file',
    )
    parser.add_argument(
        '-v', '--version',
        action='store_true',
        help='Show version information',
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    parsed = parser.parse_args(args_list)

    if parsed.version:
        print(f'fenci {__version__}')
        return 0

    text = ' '.join(parsed.text) if parsed.text else ''
    if not text:
        parser.print_help()
        return 1

    configure_logging(parsed.debug)

    store = open_store(parsed.database)
    if store is None:
        return 1

    try:
        tokens = tokenize(store, text)
        logger.debug(f"Segmented {len(text)} chars into {len(tokens)} tokens")

        if parsed.full:
            result = SegmentationResult.from_tokens(text, tokens, store)
            print(result.model_dump_json())
        elif parsed.with_info:
            print(format_tokens_text(store, tokens))
        else:
            print(' '.join(t.text for t in tokens if not t.is_gap))

        return 0
    finally:
        store.close()


if __name__ == '__main__':
    sys.exit(main())

"""
cli.py - gorder command line

Reorders the declarations of Go source files: main first, then exported
functions and constructors, then each type followed by its methods, then the
remaining functions. Interface members are sorted too.

USAGE:
    # Print the reordered file, leaving it untouched
    gorder main.go

    # Rewrite every matching file in place
    gorder -w 'pkg/*.go'

    # Keep a timestamped copy of each file before rewriting it
    gorder -w --backup 'pkg/*.go'

Any error stops the run with a single line on stderr. Files rewritten before
the failing one stay rewritten.
"""

from __future__ import annotations

import argparse
import glob
import logging
import os
import shutil
import stat
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Optional

from .config import Config
from .errors import GorderError, InvariantViolation, UsageError
from .reorder import reorder
from .syntax import parse, render

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gorder',
        description='Reorder the declarations of Go source files',
        epilog='Without -w the result is printed and only one file may match.',
    )
    parser.add_argument(
        'pattern',
        nargs='?',
        help='Go file, or a glob matching Go files',
    )
    parser.add_argument(
        '-w',
        dest='write',
        action='store_true',
        help='write result to (source) file instead of stdout',
    )
    parser.add_argument(
        '--backup',
        action='store_true',
        help='with -w, copy each file to <name>.bak.<timestamp> before rewriting it',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='log what is being reordered to stderr',
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='gorder: %(levelname)s: %(message)s',
        stream=sys.stderr,
    )


def expand(pattern: Optional[str], config: Config) -> List[Path]:
    """Resolve the command-line pattern to the files to process."""
    if not pattern:
        raise UsageError('missing filename')
    matches = sorted(glob.glob(pattern, include_hidden=True))
    if not matches:
        raise UsageError(f'no files match {pattern!r}')
    if len(matches) > 1 and not config.write_in_place:
        raise UsageError('multiple file matches require the -w flag')
    return [Path(match) for match in matches]


def create_backup(filepath: Path) -> Path:
    """
    Create a timestamped backup of a file.

    Args:
        filepath: File to backup

    Returns:
        Path to backup file
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = filepath.with_name(f"{filepath.name}.bak.{timestamp}")
    shutil.copy2(filepath, backup_path)
    return backup_path


def write_atomic(filepath: Path, data: bytes, mode: int) -> None:
    """Replace filepath with data, keeping permission bits ``mode``.

    The data goes to a temporary file in the same directory which is then
    renamed over the target, so readers never see a truncated file.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{filepath.name}.", dir=filepath.parent)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, filepath)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def process_file(filepath: Path, config: Config, out: Optional[BinaryIO] = None) -> bool:
    """Reorder one file; print it or rewrite it depending on config.

    Returns True when the declaration order changed.
    """
    mode = stat.S_IMODE(filepath.stat().st_mode)
    source = filepath.read_bytes()

    tree = parse(source, str(filepath))
    changed = reorder(tree) > 0
    result = render(tree)

    if not config.write_in_place:
        if out is None:
            out = sys.stdout.buffer
        out.write(result)
        out.flush()
        return changed

    if not changed:
        logger.debug("%s: already in canonical order", filepath)
        return False

    if config.backup:
        backup_path = create_backup(filepath)
        logger.debug("%s: backup %s", filepath, backup_path.name)

    write_atomic(filepath, result, mode)
    logger.info("%s: reordered", filepath)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = Config(
        write_in_place=args.write,
        backup=args.backup,
        verbose=args.verbose,
    )
    configure_logging(config.verbose)

    if config.backup and not config.write_in_place:
        logger.warning("--backup has no effect without -w")

    try:
        for filepath in expand(args.pattern, config):
            process_file(filepath, config)
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except InvariantViolation as e:
        print(f"internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL
    except (GorderError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return 0

"""Piecework CLI entry point.

Allows running via `python -m piecework` and provides the console script
defined in `pyproject.toml`. Applies a sequence of edits to a file through
a piece table buffer and writes the result out.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional, Union

from .autosave import (
    delete_swap_file,
    get_swap_path,
    read_swap_file,
    swap_file_exists,
    write_swap_file,
)
from .buffer import TextBuffer
from .constants import BufferConstants
from .cursor import paragraph_count
from .errors import PieceTableError
from .fileio import load_file, save_file
from .settings_persistence import get_persistence
from .version import get_version_string

USAGE = """\
usage: piecework --version
       piecework FILE [--insert POS TEXT]... [--delete POS LEN]... [--undo]...
                      [--encoding NAME] [--output OUT] [--recover] [--stats] [--debug]

Edits are applied in the order given. Without --output the edited document
is written to standard output. While saving, edits are kept in a swap file
next to OUT; --recover starts from the swap file left beside FILE."""

Edit = Union[tuple[str, int, str], tuple[str, int, int], tuple[str]]


@dataclass
class Options:
    filename: str
    edits: list[Edit] = field(default_factory=list)
    output: Optional[str] = None
    encoding: Optional[str] = None
    stats: bool = False
    debug: bool = False
    recover: bool = False


def _int_arg(flag: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{flag} expects an integer, got {value!r}") from None


def parse_args(args: list[str]) -> Options:
    """Parse command line arguments; raises ValueError on bad usage."""
    filename = None
    edits: list[Edit] = []
    values: dict = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ('--insert', '-i'):
            if i + 2 >= len(args):
                raise ValueError(f"{arg} expects POS TEXT")
            edits.append(('insert', _int_arg(arg, args[i + 1]), args[i + 2]))
            i += 3
        elif arg in ('--delete', '-d'):
            if i + 2 >= len(args):
                raise ValueError(f"{arg} expects POS LEN")
            edits.append(('delete', _int_arg(arg, args[i + 1]), _int_arg(arg, args[i + 2])))
            i += 3
        elif arg in ('--output', '-o', '--encoding'):
            if i + 1 >= len(args):
                raise ValueError(f"{arg} expects a value")
            values['encoding' if arg == '--encoding' else 'output'] = args[i + 1]
            i += 2
        elif arg == '--undo':
            edits.append(('undo',))
            i += 1
        elif arg == '--stats':
            values['stats'] = True
            i += 1
        elif arg == '--recover':
            values['recover'] = True
            i += 1
        elif arg == '--debug':
            values['debug'] = True
            i += 1
        elif arg.startswith('-') and arg != '-':
            raise ValueError(f"unknown option {arg}")
        elif filename is None:
            filename = arg
            i += 1
        else:
            raise ValueError(f"unexpected argument {arg!r}")
    if filename is None:
        raise ValueError("missing FILE")
    return Options(filename=filename, edits=edits, **values)


def _open_buffer(options: Options, encoding: str, settings: dict) -> TextBuffer:
    buffer_options = dict(
        coalesce=settings.get('coalesce', True),
        # None defers to the environment variable
        debug=options.debug or None,
    )
    if swap_file_exists(options.filename):
        if options.recover:
            recovered = read_swap_file(options.filename)
            if recovered is not None:
                return TextBuffer(recovered, **buffer_options)
        else:
            print(
                f"piecework: {get_swap_path(options.filename)} holds unsaved edits; "
                "rerun with --recover to start from them",
                file=sys.stderr,
            )
    elif options.recover:
        print(f"piecework: no swap file for {options.filename}", file=sys.stderr)
    return load_file(options.filename, encoding, **buffer_options)


def run(options: Options) -> int:
    if options.debug:
        logging.basicConfig(level=logging.DEBUG)
    persistence = get_persistence()
    settings = persistence.load_settings(options.filename)
    encoding = options.encoding or settings.get('encoding') or BufferConstants.DEFAULT_ENCODING

    try:
        buffer = _open_buffer(options, encoding, settings)
        for edit in options.edits:
            if edit[0] == 'insert':
                buffer.insert(edit[1], edit[2])
            elif edit[0] == 'delete':
                buffer.delete(edit[1], edit[2])
            else:
                buffer.undo()
    except PieceTableError as e:
        print(f"piecework: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"piecework: cannot read {options.filename}: {e}", file=sys.stderr)
        return 1

    if options.stats:
        print(
            f"length={len(buffer)} pieces={buffer.piece_count} "
            f"paragraphs={paragraph_count(buffer)}",
            file=sys.stderr,
        )

    if options.output is None:
        sys.stdout.write(buffer.text())
        return 0
    # Edits stay in the swap file until the save has landed
    write_swap_file(options.output, buffer)
    if not save_file(buffer, options.output, encoding):
        print(f"piecework: cannot save to {options.output}; "
              f"edits kept in {get_swap_path(options.output)}", file=sys.stderr)
        return 1
    delete_swap_file(options.output)
    if options.recover:
        delete_swap_file(options.filename)
    persistence.save_settings(options.output, {**persistence.load_settings(options.output),
                                               'encoding': encoding})
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if not args or args[0] in ("--help", "-h"):
        print(USAGE)
        return 0
    try:
        options = parse_args(args)
    except ValueError as e:
        print(f"piecework: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2
    return run(options)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

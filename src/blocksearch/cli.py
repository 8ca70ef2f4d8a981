from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from blocksearch.core.buffers import ScratchBuffer
from blocksearch.core.errors import ChunkTooSmall, UsageError
from blocksearch.core.hexnum import format_hex, parse_hex
from blocksearch.core.io import SeekFailed, open_haystack
from blocksearch.core.needle import load_needle
from blocksearch.core.search import scan
from blocksearch.version import VERSION_INFO

PROG = "blocksearch"

DESCRIPTION = """\
Read the contents of file <haystack> starting at offset <start> (defaults
to 0) in chunks of fixed size <buffer_size>, except for the last chunk which
may be smaller. <haystack> may also be a special file like a block device.

Search the chunks for a byte sequence <needle> read from standard input,
including occurrences that span chunk boundaries.

Output the byte offset into <haystack> of the first match found. If no
match is found, output an empty line instead.
"""

EPILOG = """\
<buffer_size>, <start> and the returned match offset are all hexadecimal
values without any radix prefix. All units of measurement are bytes.

The exit status does not indicate whether the byte string has been found.
It only indicates failure for invalid arguments (2) or for an I/O error or
an unexpected error (1).
"""

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        if "unrecognized arguments: -" in message:
            raise UsageError("Unknown option!")
        raise UsageError(message)


class SearchFailed(Exception):
    """A fatal I/O or resource failure, tagged with the step that failed."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def describe(self) -> str:
        """Message with the OS error appended unless it already ends a sentence."""
        if self.message.endswith((".", "!", "?")) or self.cause is None:
            return self.message
        errno = getattr(self.cause, "errno", None)
        if errno:
            detail = os.strerror(errno)
        else:
            detail = getattr(self.cause, "strerror", None) or str(self.cause)
        return f"{self.message}: {detail}" if detail else self.message


@dataclass(frozen=True)
class SearchRequest:
    chunk_size: int
    haystack: str
    start: int = 0
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> SearchRequest:
        start = parse_hex(args.start) if args.start is not None else 0
        return cls(
            chunk_size=parse_hex(args.buffer_size),
            haystack=args.haystack,
            start=start,
            verbose=args.verbose,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        usage="%(prog)s [ <options> ... [--] ] <buffer_size> <haystack> [ <start> ] < <needle>",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("buffer_size", help="chunk size in bytes (hex)")
    parser.add_argument("haystack", help="file or block device to search")
    parser.add_argument("start", nargs="?", help="offset to start searching at (hex, default 0)")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log progress to stderr"
    )
    parser.add_argument("--version", action="version", version=VERSION_INFO)
    return parser


def _configure_logging(verbose: bool, console: Console) -> None:
    pkg_logger = logging.getLogger("blocksearch")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run(request: SearchRequest, needle_stream: BinaryIO) -> int | None:
    """Load the needle, then scan the haystack. Returns the match offset or None.

    Resources are released in reverse order of acquisition on every exit path.
    """
    with ExitStack() as stack:
        try:
            needle = load_needle(needle_stream)
        except OSError as exc:
            raise SearchFailed("Read error", exc) from exc
        except MemoryError as exc:
            raise SearchFailed("Out of memory", exc) from exc
        if len(needle) > request.chunk_size:
            raise ChunkTooSmall("Buffer needs to be at least as large as <needle>!")
        try:
            scratch = stack.enter_context(ScratchBuffer(request.chunk_size))
        except (MemoryError, OverflowError) as exc:
            raise SearchFailed("Out of memory", exc) from exc
        try:
            source = stack.enter_context(open_haystack(request.haystack, request.start))
        except SeekFailed as exc:
            raise SearchFailed(exc.strerror or "Seek error", exc.__cause__ or exc) from exc
        except OSError as exc:
            raise SearchFailed("Could not open stream", exc) from exc
        try:
            return scan(source, needle, scratch, request.start)
        except OSError as exc:
            raise SearchFailed("Read error", exc) from exc


def _report(console: Console, message: str) -> None:
    console.print(Text.assemble((f"{PROG}: ", "bold red"), message))


def main(
    argv: list[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    console = Console(stderr=True, highlight=False, soft_wrap=True)
    parser = build_parser()
    try:
        request = SearchRequest.from_args(parser.parse_args(argv))
        _configure_logging(request.verbose, console)
        offset = run(request, stdin if stdin is not None else sys.stdin.buffer)
    except UsageError as exc:
        _report(console, str(exc))
        console.print(Text(parser.format_help()))
        console.print(Text(VERSION_INFO))
        return 2
    except SearchFailed as exc:
        _report(console, exc.describe())
        return 1

    out = stdout if stdout is not None else sys.stdout
    line = format_hex(offset) if offset is not None else ""
    logger.debug("result: %s", line or "no match")
    try:
        out.write(line + "\n")
        out.flush()
    except OSError as exc:
        _report(console, SearchFailed("Write error", exc).describe())
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Command-line front end: ``pywget [-d] [-o FILE] URL...``.

This is the thin I/O wrapper around ``Fetcher``: it turns flags into a
``Configuration``, picks an output sink, fetches every URL, prints a
diagnostic for each failure, and converts the outcome into an exit
status (0 when every URL succeeded, 1 otherwise).
"""

import argparse
import os
import sys
from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import replace
from typing import BinaryIO, TextIO

from pywget import __version__
from pywget.config import Configuration
from pywget.errors import HttpStatusError
from pywget.fetch import Fetcher, FetchResult
from pywget.http import format_response
from pywget.logging import Logger
from pywget.output import OutputSink, PerUrlFileSink, SingleStreamSink

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pywget",
        description="Fetch URLs over HTTP/1.1, following redirects.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output-file",
        help=(
            "write every fetched document, concatenated, to this file instead of "
            "one file per URL ('-' for standard output)"
        ),
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="count",
        default=0,
        help="print debug information; repeat for more detail",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="socket timeout in seconds (default 30)",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        help="give up on a URL after this many redirects (default: no limit)",
    )
    parser.add_argument("urls", nargs="+", metavar="URL", help="the URLs to fetch")
    return parser


def build_config(args: argparse.Namespace, environ: dict[str, str]) -> Configuration:
    """Layer command-line flags over the environment configuration."""
    config = Configuration.from_env(environ)
    overrides: dict[str, object] = {}
    if args.debug:
        overrides["verbosity"] = args.debug
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.max_redirects is not None:
        overrides["max_redirects"] = args.max_redirects
    return replace(config, **overrides)  # type: ignore[arg-type]


def response_dump(result: FetchResult) -> str | None:
    """Return the error response of a failed result, decoded for display.

    The error itself is already in the log; this is the server's side.
    """
    if not isinstance(result.error, HttpStatusError):
        return None
    raw = format_response(result.error.response)
    return raw.decode("utf-8", errors="replace")


def _open_sink(path: str | None, stack: ExitStack, stdout: BinaryIO) -> OutputSink:
    """Pick the sink for ``-o``: none = one file per URL, ``-`` = stdout."""
    if path is None:
        return PerUrlFileSink()
    if path == "-":
        return SingleStreamSink(stdout)
    return SingleStreamSink(stack.enter_context(open(path, "wb")))  # noqa: SIM115


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the client and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    err = stderr if stderr is not None else sys.stderr
    out = stdout if stdout is not None else sys.stdout.buffer

    try:
        config = build_config(args, dict(os.environ))
    except ValueError as e:
        parser.error(str(e))

    logger = Logger.for_verbosity(config.verbosity, stream=err)
    logger.info(f"Options: {vars(args)}", source="cli")

    with ExitStack() as stack:
        try:
            sink = _open_sink(args.output_file, stack, out)
        except OSError as e:
            print(f"pywget: cannot open output file: {e}", file=err)
            return EXIT_FAILURE
        fetcher = stack.enter_context(Fetcher(config, sink, logger=logger))
        results = fetcher.fetch_all(args.urls)

    failed = [result for result in results if not result.success]
    for result in failed:
        if (dump := response_dump(result)) is not None:
            print(dump, file=err)
    return EXIT_FAILURE if failed else EXIT_OK


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())

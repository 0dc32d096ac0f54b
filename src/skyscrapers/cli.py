"""Command-line interface: generate, solve and check Skyscrapers puzzles."""

import argparse
import random
import sys
from typing import TextIO

from skyscrapers import sigint
from skyscrapers.board import MAX_SIZE
from skyscrapers.check import BoardError, check, render_error
from skyscrapers.config import config
from skyscrapers.format import ERROR_COLOR, OutputFormat, paint, print_board
from skyscrapers.generate import generate_solution
from skyscrapers.header import Header, HeaderError
from skyscrapers.solver import Animation, NoSolutionError, solve

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_EMPTY = 3
"""Exit code for a board of size 0, for which there is nothing to do."""


def board_size(text: str) -> int:
    """Argument type for a board size (0..255)."""
    try:
        size = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: '{text}'") from None
    if not 0 <= size <= MAX_SIZE:
        raise argparse.ArgumentTypeError(f"size must be between 0 and {MAX_SIZE}, got {size}")
    return size


def header_arg(text: str) -> Header:
    """Argument type for a header line."""
    try:
        return Header.parse(text)
    except HeaderError as e:
        raise argparse.ArgumentTypeError(f"{e} in '{text}'") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skyscrapers", description="Generate, solve and check Skyscrapers puzzles."
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the solver configuration and progress to stderr",
    )
    formats = [fmt.value for fmt in OutputFormat]
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Generate a random puzzle")
    gen.add_argument("size", type=board_size, help="Board size (1 to 255)")
    gen.add_argument(
        "-o",
        "--output",
        action="append",
        choices=formats,
        help="What to print; may be repeated (default: both)",
    )
    gen.add_argument("--seed", type=int, help="Seed for the random number generator")

    sol = commands.add_parser("solve", help="Solve a puzzle from its header")
    sol.add_argument("header", type=header_arg, help="Header line: the 4N view counts")
    sol.add_argument(
        "-o",
        "--output",
        choices=formats,
        default=OutputFormat.BOTH.value,
        help="What to print (default: both)",
    )
    sol.add_argument(
        "-a", "--animate", action="store_true", help="Display the board while searching"
    )
    sol.add_argument(
        "--interval",
        type=float,
        help=f"Seconds between animation frames (default: {config.animate_interval})",
    )

    chk = commands.add_parser("check", help="Check a board read from stdin against a header")
    chk.add_argument("header", type=header_arg, help="Header line: the 4N view counts")

    return parser


def report_error(message: str) -> None:
    """Print an error message to stderr, with a red label on a terminal."""
    label = paint("error", ERROR_COLOR, sys.stderr.isatty())
    print(f"{label}: {message}", file=sys.stderr, flush=True)


def run_generate(args: argparse.Namespace, out: TextIO, color: bool) -> int:
    if args.size == 0:
        report_error("nothing to generate for a board of size 0")
        return EXIT_EMPTY
    rng = random.Random(args.seed)
    board = generate_solution(args.size, rng)
    if board is None:
        return EXIT_OK
    header = Header.of_board(board)
    outputs = [OutputFormat(value) for value in args.output or [OutputFormat.BOTH.value]]
    for i, output in enumerate(outputs):
        if i > 0:
            out.write("\n")
        print_board(out, board, header, output, color=color)
    return EXIT_OK


def run_solve(args: argparse.Namespace, out: TextIO, color: bool, logf: TextIO | None) -> int:
    header: Header = args.header
    if header.size == 0:
        report_error("nothing to solve for a board of size 0")
        return EXIT_EMPTY
    animation = None
    if args.animate:
        interval = config.animate_interval if args.interval is None else args.interval
        animation = Animation(out, interval, color=color)
    try:
        board = solve(header, animation=animation, logf=logf)
    except NoSolutionError:
        report_error("no solution found")
        return EXIT_FAILURE
    if board is None:
        return EXIT_OK  # Cancelled
    print_board(out, board, header, OutputFormat(args.output), color=color)
    return EXIT_OK


def run_check(args: argparse.Namespace) -> int:
    data = sys.stdin.buffer.read()
    try:
        check(args.header, data)
    except BoardError as e:
        sys.stderr.write(render_error(e, data, color=sys.stderr.isatty()))
        sys.stderr.flush()
        return EXIT_FAILURE
    return EXIT_OK


def run(argv: list[str] | None = None) -> int:
    """Run the command line.

    Args:
        argv: Arguments, without the program name.  Defaults to `sys.argv[1:]`.

    Returns:
        The process exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_USAGE if e.code else EXIT_OK

    out = sys.stdout
    color = out.isatty()
    logf = sys.stderr if args.verbose or config.verbose else None
    sigint.initialize()

    try:
        if args.command == "generate":
            return run_generate(args, out, color)
        if args.command == "solve":
            return run_solve(args, out, color, logf)
        return run_check(args)
    except OSError as e:
        report_error(f"I/O error: {e}")
        return EXIT_FAILURE

# File: parker/main.py
"""
Main application entry point for Parker

Reads a file of commands, one per line, and runs them against a single
parking lot:

    parker commands.txt
    parker commands.txt --config parker.yaml --log-level DEBUG

Exit status: 0 when every command succeeded, 1 when any command failed or
the input could not be read, 2 on an internal invariant violation.
"""

from pathlib import Path
from typing import List, Optional, Sequence, TextIO
import argparse
import logging
import sys

from .application.commands import CommandInvoker
from .config import ParkerConfig, load_config
from .domain.exceptions import ConfigError, PoolInvariantViolation
from .infrastructure.factories import build_context


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERNAL_ERROR = 2


def setup_logging(config: ParkerConfig, level: Optional[str] = None) -> logging.Logger:
    """Setup application logging configuration"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=(level or config.logging.level).upper(),
        format=config.logging.format,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("parker")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="parker",
        description="Run parking lot commands from a file",
    )
    parser.add_argument("input_file", help="file with one command per line")
    parser.add_argument("--config", "-c", default=None, help="YAML configuration file")
    parser.add_argument(
        "--log-level", default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="override the configured log level",
    )
    return parser.parse_args(argv)


def read_lines(path: Path) -> List[str]:
    """
    Read the command file
    Raises: OSError if the file is missing, a directory or empty
    """
    if not path.exists() or path.is_dir() or path.stat().st_size == 0:
        raise OSError(f"Bad input file {path}. Please re-check")

    with path.open("r", encoding="utf-8") as f:
        return f.read().splitlines()


def run(
    lines: Sequence[str],
    invoker: CommandInvoker,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None
) -> int:
    """Execute every line, printing command output; returns the exit status"""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    status = EXIT_OK
    for line in lines:
        try:
            result = invoker.execute_line(line)
        except PoolInvariantViolation as e:
            print(f"FATAL: {e}", file=stderr)
            return EXIT_INTERNAL_ERROR

        if result is None:
            continue

        for output_line in result.output:
            print(output_line, file=stdout)

        if not result.success:
            status = EXIT_FAILURE
            if not result.output:
                print(f"ERROR: {result.error_message}", file=stderr)
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger = setup_logging(config, args.log_level)

    try:
        lines = read_lines(Path(args.input_file))
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot read input file. Details = {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(f"Running {len(lines)} lines from {args.input_file}")
    invoker = CommandInvoker(build_context(config))
    return run(lines, invoker)


if __name__ == "__main__":
    sys.exit(main())

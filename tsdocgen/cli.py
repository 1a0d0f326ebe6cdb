"""CLI entrypoints for tsdocgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from .config import DocgenConfig, load_config
from .errors import DocgenError, format_error
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .parsers import ModuleParser, discover_parser

ParserFactory = Callable[[DocgenConfig], ModuleParser]


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsdocgen",
        description="Generate markdown API documentation for a TypeScript project.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Type-check examples and regenerate the documentation site.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--skip-examples",
        action="store_true",
        help="Do not type-check examples before rendering.",
    )

    check_parser = subparsers.add_parser(
        "check-examples",
        help="Only type-check the examples embedded in documentation.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_path_argument(check_parser)

    return parser


def _default_parser_factory(config: DocgenConfig) -> ModuleParser:
    return discover_parser(config.parser)


def main(
    argv: list[str] | None = None,
    *,
    parser_factory: ParserFactory = _default_parser_factory,
) -> None:
    """CLI entrypoint for tsdocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=args.log_file,
    )
    logger = get_logger("cli")

    try:
        config = load_config(Path(args.path))
        orchestrator = Orchestrator(config, parser_factory(config))
        if args.command == "generate":
            orchestrator.run(check_examples=False if args.skip_examples else None)
        elif args.command == "check-examples":
            orchestrator.check_examples()
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except DocgenError as exc:
        logger.debug("Run failed", exc_info=exc)
        parser.exit(1, f"{format_error(exc)}\n")


if __name__ == "__main__":
    main(sys.argv[1:])

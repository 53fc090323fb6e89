"""Command line application entry point for setup-delta."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser

CommandHandler = Callable[[argparse.Namespace, Mapping[str, Any]], str]


def _preliminary_parser() -> argparse.ArgumentParser:
    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument("--config", dest="config_path", type=Path, default=None)
    config_parser.add_argument("--log-level", dest="log_level", default=None)
    config_parser.add_argument("--log-output", dest="log_output", default=None)
    config_parser.add_argument(
        "--log-format", dest="log_format", choices=("json", "text"), default=None
    )
    return config_parser


def _configure_logging(config: dict[str, Any], preliminary: argparse.Namespace) -> None:
    logging_config = dict(config.get("logging", {}))
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    config["logging"] = logging_config
    try:
        setup_logging(config)
    except (ValueError, OSError) as exc:
        raise CliError(str(exc), category="usage", context=logging_config) from exc


def _emit(message: str) -> None:
    if not message:
        return
    sys.stdout.write(message)
    if not message.endswith("\n"):
        sys.stdout.write("\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the setup-delta command line interface.

    Returns the rendered output, which is also written to stdout. Failures
    are logged, their message printed and :class:`SystemExit` raised with the
    error's status code.
    """

    preliminary, remaining = _preliminary_parser().parse_known_args(args)
    try:
        try:
            config = load_cli_config(preliminary.config_path)
        except ValueError as exc:
            raise CliError(
                f"Invalid configuration file: {exc}",
                category="usage",
                context={"config": preliminary.config_path},
            ) from exc
        _configure_logging(config, preliminary)

        parser = build_parser(config)
        namespace = parser.parse_args(list(remaining), namespace=preliminary)
        namespace.config = config
        handler: CommandHandler | None = getattr(namespace, "handler", None)
        if handler is None:
            raise CliError(
                f"Unknown command '{getattr(namespace, 'command', None)}'.",
                category="usage",
                context={"command": getattr(namespace, "command", None)},
            )
        result = handler(namespace, config=config)
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        _emit(exc.payload.message)
        raise SystemExit(exc.status_code) from exc
    _emit(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()

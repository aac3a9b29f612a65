"""
Command-line interface for simpilot.

Runs instructions against the local simulators, lists the command catalog
and starts the HTTP API.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import structlog

from simpilot import __version__
from simpilot.config import SimpilotSettings, load_settings
from simpilot.orchestrator.models import CommandResult

logger = structlog.get_logger(__name__)


def main() -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    configure_logging(args.verbose if hasattr(args, "verbose") else False)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logger.error("Command failed", error=str(e))
        if hasattr(args, "verbose") and args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="simpilot",
        description="simpilot - natural-language control of iOS simulators",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"simpilot {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Execute instructions in order")
    run_parser.add_argument(
        "instructions",
        nargs="+",
        help='Instructions, e.g. "create session" "launch app com.apple.mobilesafari"',
    )
    run_parser.set_defaults(func=cmd_run)

    commands_parser = subparsers.add_parser("commands", help="List supported commands")
    commands_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the catalog as JSON",
    )
    commands_parser.set_defaults(func=cmd_commands)

    suggest_parser = subparsers.add_parser("suggest", help="Suggest completions for partial text")
    suggest_parser.add_argument("text", nargs="?", default="", help="Partial instruction")
    suggest_parser.set_defaults(func=cmd_suggest)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=None, help="Server host")
    serve_parser.add_argument("--port", type=int, default=None, help="Server port")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def configure_logging(verbose: bool) -> None:
    """Configure structured logging on stderr."""
    level = "DEBUG" if verbose else "INFO"
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if verbose else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, level), stream=sys.stderr, format="%(message)s")


def _settings(args: argparse.Namespace) -> SimpilotSettings:
    from dotenv import load_dotenv

    load_dotenv()
    return load_settings(args.config)


async def _run_instructions(instructions: list[str], settings: SimpilotSettings) -> list[CommandResult]:
    from simpilot.backend.idb import IdbBackend
    from simpilot.orchestrator.executor import Orchestrator
    from simpilot.parser.parser import InstructionParser

    results: list[CommandResult] = []
    async with Orchestrator(InstructionParser(), IdbBackend(settings), settings=settings) as orchestrator:
        for instruction in instructions:
            results.append(await orchestrator.process_instruction(instruction))
    return results


def cmd_run(args: argparse.Namespace) -> int:
    """Execute instructions in one orchestrator and print their results."""
    settings = _settings(args)
    results = asyncio.run(_run_instructions(args.instructions, settings))

    for instruction, result in zip(args.instructions, results, strict=True):
        print(json.dumps({"instruction": instruction, **result.to_dict()}, ensure_ascii=False))

    return 0 if all(result.success for result in results) else 1


def cmd_commands(args: argparse.Namespace) -> int:
    """List supported commands."""
    from simpilot.parser.parser import InstructionParser

    commands = InstructionParser().list_supported()
    if args.as_json:
        print(json.dumps([c.model_dump() for c in commands], indent=2, ensure_ascii=False))
        return 0

    for info in commands:
        params = ", ".join(info.required_parameters) or "-"
        print(f"{info.name:<24} {params:<32} {info.description}")
    return 0


def cmd_suggest(args: argparse.Namespace) -> int:
    """Print completion suggestions, one per line."""
    from simpilot.parser.parser import InstructionParser

    for suggestion in InstructionParser().suggest(args.text):
        print(suggestion)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start API server."""
    from simpilot.api.main import run_server

    settings = _settings(args)
    host = args.host or settings.api_host
    port = args.port or settings.api_port
    print(f"Starting simpilot API server on {host}:{port}", file=sys.stderr)
    run_server(host=host, port=port, settings=settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())

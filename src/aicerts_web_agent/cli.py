"""Command-line entry point for the web agent."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import NoReturn

from . import __version__
from .config import (
    DEFAULT_MODEL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REGION,
    DEFAULT_SYSTEM_PROMPT,
    REGIONS,
    CLIOptions,
    get_settings,
)
from .orchestrator import run_agent

PROG = "aicerts-web-agent"


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


class AgentArgumentParser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = AgentArgumentParser(prog=PROG, description="AI-powered browser automation agent")
    parser.add_argument("instruction", help="The instruction for the agent to execute")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"{PROG} {__version__}",
    )
    parser.add_argument(
        "-r",
        "--region",
        choices=REGIONS,
        default=DEFAULT_REGION,
        help=f"Browserbase region (default: {DEFAULT_REGION})",
    )
    parser.add_argument(
        "-b", "--bb-api-key", help="Browserbase API key (or BROWSERBASE_API_KEY env)"
    )
    parser.add_argument(
        "-p", "--bb-project-id", help="Browserbase Project ID (or BROWSERBASE_PROJECT_ID env)"
    )
    parser.add_argument(
        "-k", "--model-api-key", help="AI Model API key (or MODEL_API_KEY env)"
    )
    parser.add_argument(
        "-m", "--model", default=DEFAULT_MODEL, help=f"AI Model (default: {DEFAULT_MODEL})"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "-s",
        "--system-prompt",
        default=DEFAULT_SYSTEM_PROMPT,
        help="System prompt for the agent",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    try:
        settings = get_settings()
        configure_logging(settings.log_level)
        options = CLIOptions.from_namespace(args)
        session_run = asyncio.run(run_agent(args.instruction, options, settings=settings))
    except Exception as exc:
        message = " ".join(str(exc).splitlines()) or type(exc).__name__
        print(f"Error: {message}", file=sys.stderr)
        return 1

    logging.getLogger(__name__).info(
        "Session output written",
        extra={
            "session_id": session_run.session_id,
            "start_path": str(session_run.start_path),
            "result_path": str(session_run.result_path),
        },
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    exit_code = run(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()

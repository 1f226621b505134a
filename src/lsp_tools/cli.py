"""Console entrypoint for lsp-tools.

Validates the allowed directories at startup, then invokes a single tool,
prints the tool specs, shows configuration, or lists matches for a pattern in
human-readable form.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from lsp_tools import __version__
from lsp_tools.config import LogLevel, Settings, default_config_path, load_settings
from lsp_tools.errors import ConfigError, LspToolsError
from lsp_tools.logging import configure_logging
from lsp_tools.tools.fs import AllowedRoots, PathSandbox
from lsp_tools.tools.positions import MatchPosition, find_regex_positions_in_content, read_file_content
from lsp_tools.tools.router import ToolRouter, tool_specs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lsp-tools",
        description="Regex position lookup confined to allowed directories",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )
    parser.add_argument(
        "--allow",
        action="append",
        dest="allowed_directories",
        metavar="DIR",
        help="Allowed directory (repeatable). Overrides config and environment.",
    )
    parser.add_argument(
        "--log-level",
        choices=[e.value for e in LogLevel],
        dest="log_level",
        help="Log level override",
    )
    parser.add_argument("--log-file", dest="log_file", help="Also write logs to this file")
    parser.add_argument("--config-path", dest="config_path", help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command")

    tool_parser = subparsers.add_parser("tool", help="Invoke a single tool")
    tool_parser.add_argument("name", choices=[spec["function"]["name"] for spec in tool_specs()], help="Tool name")
    tool_parser.add_argument("--json", dest="json_payload", help="JSON payload with tool arguments")
    tool_parser.add_argument("--arg", action="append", default=[], help="key=value pairs for tool args")

    subparsers.add_parser("specs", help="Print tool specs as JSON")

    locate_parser = subparsers.add_parser("locate", help="Show regex matches in a file with their positions")
    locate_parser.add_argument("pattern", help="Regular expression (Python re syntax)")
    locate_parser.add_argument("path", help="File to search")

    config_parser = subparsers.add_parser("config", help="Config helpers")
    config_sub = config_parser.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("path", help="Print config path")
    config_sub.add_parser("print", help="Print resolved settings")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(cli_overrides=_collect_overrides(args), config_path=args.config_path)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logger = configure_logging(settings.log_level, log_file=_log_file(args))

    command = args.command
    if command is None:
        parser.print_help(sys.stderr)
        return 1
    if command == "config":
        return _run_config(settings, args)
    if command == "specs":
        print(json.dumps(tool_specs(), indent=2))
        return 0

    sandbox = _build_sandbox(settings, logger)
    if sandbox is None:
        return 1
    if command == "tool":
        return _run_tool(sandbox, args, logger)
    if command == "locate":
        return _run_locate(sandbox, args)

    parser.error(f"unknown command {command}")
    return 1


def _build_sandbox(settings: Settings, logger: logging.Logger) -> PathSandbox | None:
    if not settings.allowed_directories:
        print("error: at least one allowed directory is required (--allow DIR)", file=sys.stderr)
        return None
    try:
        roots = AllowedRoots.from_paths(settings.allowed_directories, require_existing=True)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return None
    logger.info("allowed directories: %s", ", ".join(roots.roots))
    return PathSandbox(roots)


def _run_tool(sandbox: PathSandbox, args: argparse.Namespace, logger: logging.Logger) -> int:
    router = ToolRouter(sandbox, logger=logger)

    payload: dict[str, Any] = {}
    if args.json_payload:
        payload = json.loads(args.json_payload)
    for pair in args.arg:
        if "=" not in pair:
            raise SystemExit("--arg expects key=value")
        key, value = pair.split("=", 1)
        payload[key] = value

    try:
        result = router.dispatch(args.name, **payload)
    except (LspToolsError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))
    return 0


def _run_locate(sandbox: PathSandbox, args: argparse.Namespace) -> int:
    try:
        file_path = sandbox.validate(args.path)
        content = read_file_content(file_path)
        positions = find_regex_positions_in_content(content, args.pattern)
    except LspToolsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    lines = content.split("\n")
    print(f"{len(positions)} match(es) for {args.pattern!r} in {file_path}")
    for position in positions:
        print()
        print(_describe(position, lines))
    return 0


def _describe(position: MatchPosition, lines: list[str]) -> str:
    line = lines[position.line]
    if position.end_line == position.line:
        width = position.end_column - position.column
    else:
        width = len(line) - position.column
    return "\n".join(
        [
            f"match: {position.match!r}",
            f"  {position.line}:{position.column} -> {position.end_line}:{position.end_column}",
            f"  {line}",
            "  " + " " * position.column + "^" * max(width, 1),
        ]
    )


def _run_config(settings: Settings, args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        print(args.config_path or default_config_path())
        return 0
    if args.config_cmd == "print":
        print(settings.model_dump_json(indent=2))
        return 0
    return 1


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "allowed_directories": args.allowed_directories,
        "log_level": args.log_level,
    }


def _log_file(args: argparse.Namespace) -> Path | None:
    return Path(args.log_file) if args.log_file else None


if __name__ == "__main__":
    sys.exit(main())

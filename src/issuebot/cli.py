"""issuebot CLI.

Subcommands:
  validate -> load the state machine config and report every problem found
  schema   -> emit the embedded JSON Schema for the config
  issues   -> list open issues of a repository

Environment:
  ISSUEBOT_LOG_LEVEL, ISSUEBOT_LOG_JSON=1, ISSUEBOT_QUIET=1,
  GITHUB_TOKEN, GITHUB_API_URL
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from issuebot.config import (
    DEFAULT_CONFIG_FILE,
    RuntimeSettings,
    dump_state_machine,
    load_config,
    settings_from_env,
)
from issuebot.errors import GitHubAPIError, IssueBotError, SchemaValidationError, classify_error
from issuebot.github_rest import GitHubRestClient
from issuebot.logging import configure_logging
from issuebot.schemas import get_config_schema
from issuebot.ux import print_detail, print_error, print_success

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="issuebot", description="Declarative issue lifecycle state machine"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors (env: ISSUEBOT_QUIET=1)",
    )
    p.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines (env: ISSUEBOT_LOG_JSON=1)",
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    val = sub.add_parser("validate", help="Validate the state machine configuration")
    val.add_argument("--config", default=DEFAULT_CONFIG_FILE)
    val.add_argument(
        "--json", action="store_true", help="Print the normalized document as JSON"
    )

    sch = sub.add_parser("schema", help="Emit the configuration JSON Schema")
    sch.add_argument("--output", type=Path, help="Write to file instead of stdout")

    iss = sub.add_parser("issues", help="List open issues of a repository")
    iss.add_argument("--repo", required=True, help="Target repository (owner/repo)")
    iss.add_argument("--api-url", help="GitHub API base URL (env: GITHUB_API_URL)")
    return p


def _report_error(exc: IssueBotError) -> None:
    info = classify_error(exc)
    if isinstance(exc, SchemaValidationError):
        print_error(
            f"[{info.category}] {exc.source}: {len(exc.violations)} schema violation(s)"
        )
        for violation in exc.violations:
            print_detail(str(violation))
        return
    print_error(f"[{info.category}] {info.message}")


def _cmd_validate(args: argparse.Namespace, _settings: RuntimeSettings) -> int:
    try:
        machine = load_config(args.config)
    except IssueBotError as exc:
        _report_error(exc)
        return 1
    if args.json:
        print(json.dumps(dump_state_machine(machine), indent=2))
        return 0
    transitions = sum(len(state.transitions) for state in machine.states)
    print_success(
        f"{args.config}: {len(machine.states)} state(s), {transitions} transition(s)"
    )
    return 0


def _cmd_schema(args: argparse.Namespace, _settings: RuntimeSettings) -> int:
    text = json.dumps(get_config_schema(), indent=2) + "\n"
    if args.output is None:
        print(text, end="")
        return 0
    try:
        args.output.write_text(text, encoding="utf-8")
    except OSError as exc:
        print_error(f"Failed to write schema: {exc}")
        return 2
    if not args.quiet:
        print_success(f"Wrote {args.output}")
    return 0


def _cmd_issues(args: argparse.Namespace, settings: RuntimeSettings) -> int:
    try:
        client = GitHubRestClient(
            repo=args.repo,
            token=settings.github_token,
            base_url=args.api_url or settings.github_api_url,
        )
        issues = client.list_open_issues()
    except ValueError as exc:
        print_error(str(exc))
        return 2
    except GitHubAPIError as exc:
        _report_error(exc)
        return 1
    for issue in issues:
        print(f"#{issue.number} - {issue.title} - by {issue.author}")
    return 0


_HANDLERS: dict[str, Callable[[argparse.Namespace, RuntimeSettings], int]] = {
    "validate": _cmd_validate,
    "schema": _cmd_schema,
    "issues": _cmd_issues,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = settings_from_env()
    if settings.quiet:
        args.quiet = True
    # machine-readable stdout must not interleave with INFO log lines
    if getattr(args, "json", False):
        args.quiet = True
    configure_logging(
        json_logging=args.log_json or settings.log_json,
        level="WARNING" if args.quiet else settings.log_level,
    )
    handler = _HANDLERS.get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return 1
    return handler(args, settings)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

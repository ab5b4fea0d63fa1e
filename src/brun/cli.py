from __future__ import annotations

import argparse
import logging
from functools import partial
from typing import Never, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich_argparse import RawTextRichHelpFormatter
from bash_runner import (
    BackgroundHandle,
    BashRunner,
    CommandExecutionError,
    CommandTimeoutError,
    ExecutionRequest,
    LaunchError,
    PlatformUnsupportedError,
    RequestValidationError,
    TimeoutPolicy,
)
from bash_runner.execution import detect_capabilities
from bash_runner.timeouts import resolve_timeout

_CONSOLE = Console(no_color=False)

EXIT_OK = 0
EXIT_EXECUTION_FAILED = 1
EXIT_USAGE = 2
EXIT_UNSUPPORTED = 3
EXIT_LAUNCH_FAILED = 4
EXIT_TIMEOUT = 124


class _CLIHelpFormatter(RawTextRichHelpFormatter):
    """Rich formatter with explicit high-contrast CLI styles.

    Example:
        ```python
        parser = argparse.ArgumentParser(formatter_class=_CLIHelpFormatter)
        ```
    """

    styles = {
        "argparse.args": "bold cyan",
        "argparse.groups": "bold magenta",
        "argparse.help": "white",
        "argparse.metavar": "bold yellow",
        "argparse.prog": "bold bright_blue",
        "argparse.syntax": "bold bright_white",
        "argparse.text": "bright_white",
    }


_HELP_FORMATTER = partial(
    _CLIHelpFormatter,
    max_help_position=34,
    width=120,
)


class _RichArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that renders errors via Rich.

    Example:
        ```python
        parser = _RichArgumentParser(prog="python -m brun")
        ```
    """

    def error(self, message: str) -> Never:
        """Render parse errors with Rich and exit.

        Example:
            ```python
            # parser.error("invalid usage")
            ```
        """
        _CONSOLE.print(Panel.fit(f"[bold red]Error:[/bold red] {message}", border_style="red"))
        self.print_help()
        raise SystemExit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for running shell commands.

    Example:
        ```python
        parser = build_parser()
        ```
    """
    parser = _RichArgumentParser(
        prog="python -m brun",
        description=(
            "bash-runner CLI\n"
            "Run one shell command in the foreground, on a pseudo-terminal,\n"
            "or detached in the background with output captured to files."
        ),
        epilog=(
            "Quick Examples:\n"
            "  python -m brun run \"echo 'Hello, world!'\"\n"
            "  python -m brun run \"make test\" --slow-ok\n"
            "  python -m brun run \"ls --color=auto\" --pty\n"
            "  python -m brun run \"./server.sh\" --background\n"
            "  python -m brun capabilities"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logs for spawns, kills and launches.",
    )

    sub = parser.add_subparsers(
        dest="command",
        required=True,
        parser_class=_RichArgumentParser,
    )

    run_cmd = sub.add_parser(
        "run",
        help="Run one shell command.",
        description=(
            "Run a command through bash.\n"
            "Foreground runs print the combined output; background runs print\n"
            "the pid and the paths of the stdout/stderr capture files."
        ),
        epilog=(
            "Timeout tiers:\n"
            "  default        fast tier (30s unless overridden)\n"
            "  --slow-ok      slow tier (15m unless overridden)\n"
            "  --background   background tier (24h unless overridden)"
        ),
        formatter_class=_HELP_FORMATTER,
    )
    run_cmd.add_argument("shell_command", metavar="COMMAND")
    run_cmd.add_argument(
        "--slow-ok",
        action="store_true",
        help="Use the slow timeout tier for long-running commands.",
    )
    run_cmd.add_argument(
        "--background",
        action="store_true",
        help="Launch detached and return immediately with a handle.",
    )
    run_cmd.add_argument(
        "--pty",
        action="store_true",
        help="Attach the command to a pseudo-terminal.",
    )
    run_cmd.add_argument(
        "--timeouts-file",
        help=(
            "TOML file with fast_seconds / slow_seconds / background_seconds.\n"
            "Example: --timeouts-file ./timeouts.toml"
        ),
    )
    run_cmd.add_argument(
        "--json",
        action="store_true",
        help="Print background handles as raw JSON.",
    )

    sub.add_parser(
        "capabilities",
        help="Show platform capabilities and default timeout tiers.",
        description="Show whether PTY execution is available and the default timeouts.",
        formatter_class=_HELP_FORMATTER,
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    """Route library debug logs through a Rich handler when asked.

    Example:
        ```python
        _configure_logging(verbose=True)
        ```
    """
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_capabilities() -> None:
    """Render platform capabilities and default timeouts in a rich table.

    Example:
        ```python
        _print_capabilities()
        ```
    """
    caps = detect_capabilities()
    table = Table(title="Platform Capabilities")
    table.add_column("Capability", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("pty", "yes" if caps.supports_pty else "no")
    table.add_row("process groups", "yes" if caps.supports_process_groups else "no")
    table.add_row("fast timeout", f"{resolve_timeout(background=False, slow_ok=False):g}s")
    table.add_row("slow timeout", f"{resolve_timeout(background=False, slow_ok=True):g}s")
    table.add_row("background timeout", f"{resolve_timeout(background=True, slow_ok=False):g}s")
    _CONSOLE.print(table)


def _print_outcome(outcome: str | BackgroundHandle, as_json: bool) -> None:
    """Render command output or a background handle.

    Example:
        ```python
        _print_outcome("hi\\n", as_json=False)
        ```
    """
    if isinstance(outcome, BackgroundHandle):
        if as_json:
            _CONSOLE.print_json(outcome.to_json())
        else:
            _CONSOLE.print(
                Panel.fit(Pretty(outcome.to_dict()), title="Background", border_style="cyan")
            )
        return
    _CONSOLE.out(outcome, end="", highlight=False)


def _run(args: argparse.Namespace) -> int:
    """Execute the `run` subcommand and map failures to exit codes.

    Example:
        ```python
        code = _run(build_parser().parse_args(["run", "echo hi"]))
        ```
    """
    try:
        policy = TimeoutPolicy.from_file(args.timeouts_file) if args.timeouts_file else None
        request = ExecutionRequest(
            command=args.shell_command,
            slow_ok=args.slow_ok,
            background=args.background,
            pty=args.pty,
        )
    except ValueError as exc:
        _CONSOLE.print(Panel.fit(f"[bold red]Invalid request:[/bold red] {exc}", border_style="red"))
        return EXIT_USAGE

    try:
        outcome = BashRunner(policy=policy).run(request)
    except CommandTimeoutError as exc:
        _CONSOLE.print(Panel.fit(str(exc), title="Timeout", style="bold yellow"))
        return EXIT_TIMEOUT
    except CommandExecutionError as exc:
        if exc.output:
            _CONSOLE.out(exc.output, end="", highlight=False)
        status = "did not start" if exc.returncode is None else f"exited with {exc.returncode}"
        _CONSOLE.print(Panel.fit(f"Command {status}", style="bold red"))
        return EXIT_EXECUTION_FAILED
    except PlatformUnsupportedError as exc:
        _CONSOLE.print(Panel.fit(f"{exc}\nRetry without --pty.", style="bold red"))
        return EXIT_UNSUPPORTED
    except LaunchError as exc:
        _CONSOLE.print(Panel.fit(str(exc), title="Launch failed", style="bold red"))
        return EXIT_LAUNCH_FAILED
    except RequestValidationError as exc:
        _CONSOLE.print(Panel.fit(f"[bold red]Invalid request:[/bold red] {exc}", border_style="red"))
        return EXIT_USAGE

    _print_outcome(outcome, as_json=args.json)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `brun` CLI command handler.

    Example:
        ```python
        code = main(["run", "echo hi"])
        ```
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    if args.command == "run":
        return _run(args)
    if args.command == "capabilities":
        _print_capabilities()
        return EXIT_OK

    parser.error("Unhandled command")
    return EXIT_USAGE

# src/svcwatch/cli.py
"""Command-line interface for svcwatch."""

import logging
import sys
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from . import __version__, config, paths, privileges, tasks
from .backends import TASK_HAS_NOT_RUN, Backends, TaskStatus, get_backends
from .errors import ExitCode, ServiceNotInstalledError, WatchdogError
from .logging import setup_logging
from .watchdog import run_check

app = typer.Typer(
    name="svcwatch",
    help="Restart a background service when its state file stops being updated.",
    add_completion=False,
)

console = Console(stderr=True)
out = Console()
logger = logging.getLogger("svcwatch.cli")


def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        print(f"svcwatch version: {__version__}")
        raise typer.Exit()


def _format_result(status: TaskStatus) -> str:
    if status.last_result is None:
        return "-"
    if status.last_result == TASK_HAS_NOT_RUN:
        return f"0x{TASK_HAS_NOT_RUN:X} (has not yet run)"
    if status.last_result == 0:
        return "[green]0 (success)[/green]"
    return f"[bold red]0x{status.last_result:X} (failed)[/bold red]"


def print_status(status: TaskStatus, as_json: bool = False) -> None:
    """Render the scheduled task status as a table or JSON."""
    if as_json:
        data = status.model_dump(mode="json")
        data["needs_attention"] = status.needs_attention
        print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())
        return

    if not status.registered:
        out.print(f"Task [bold cyan]{status.name}[/bold cyan] is [yellow]not registered[/yellow].")
        return

    table = Table("Task", "State", "Last run", "Last result", "Next run")
    table.add_row(
        status.name,
        status.state or "-",
        str(status.last_run_time or "-"),
        _format_result(status),
        str(status.next_run_time or "-"),
    )
    out.print(table)
    if status.needs_attention:
        out.print("⚠️ [yellow]The last run failed; check the watchdog log file.[/yellow]")


def _require_service(cfg: config.WatchdogConfig, backends: Backends) -> None:
    if not backends.services.is_installed(cfg.service_name):
        raise ServiceNotInstalledError(
            f"Service '{cfg.service_name}' is not installed on this machine."
        )


@app.command()
def main(
    threshold: int = typer.Option(
        0, "--threshold", "-t", help="Seconds since the last state update before the service counts as hung."
    ),
    register: bool = typer.Option(False, "--register", help="Create or replace the scheduled task."),
    unregister: bool = typer.Option(False, "--unregister", help="Remove the scheduled task."),
    state: bool = typer.Option(False, "--state", help="Print the scheduled task status and exit."),
    as_json: bool = typer.Option(False, "--json", help="With --state, print JSON instead of a table."),
    unattended: bool = typer.Option(
        False, "--unattended", help="Scheduled run: truncate and write the log file.", hidden=True
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the svcwatch.yaml configuration file. [default: {paths.get_default_config_path()}]",
    ),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """
    Check the supervised service's state file and restart the service if it is stale.
    """
    try:
        cfg = config.load_config(config_path)
        setup_logging(cfg, unattended)
        privileges.require_elevated()
        backends = get_backends(cfg)
        _require_service(cfg, backends)

        if register:
            task = tasks.register_task(cfg, threshold, backends.scheduler, config_path=config_path)
            console.print(
                f"✅ [bold green]Task '{task.name}' registered[/bold green] "
                f"(every {task.interval_minutes} min, threshold {threshold}s)."
            )
        elif unregister:
            tasks.unregister_task(cfg, backends.scheduler)
            console.print(f"✅ [bold green]Task '{cfg.task_name}' unregistered.[/bold green]")
        elif state:
            print_status(tasks.task_status(cfg, backends.scheduler), as_json=as_json)
        else:
            run_check(cfg, threshold, backends.services, backends.events)

    except WatchdogError as e:
        if unattended:
            logger.error(str(e))
        console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        raise typer.Exit(code=e.exit_code)
    except Exception:
        logger.exception("Watchdog run failed")
        raise


def run_cli():
    """Main entry point for the CLI application."""
    try:
        app()
    except typer.Exit:
        raise
    except WatchdogError as e:
        console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
        sys.exit(e.exit_code)
    except Exception as e:
        console.print(f"[bold red]An unexpected error occurred:[/bold red] {e}")
        sys.exit(ExitCode.FAILURE)


if __name__ == "__main__":
    run_cli()

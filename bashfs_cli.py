#!/usr/bin/env python3
"""
bashfs - command-line companion

Runs the bashfs operations from a shell and shows why they failed.
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from bashfs import AuditLogger, FileOperator, OperationLogger, ProcessOperator, load_config
from bashfs.core.config import DEFAULT_CONFIG_PATH
from bashfs.core.outcome import OperationResult


console = Console()


class Context:
    """Operators built from the loaded configuration."""

    def __init__(self, config_path: str, verbose: bool):
        self.config = load_config(config_path)
        self.audit = AuditLogger(self.config.audit_log) if self.config.audit_log else None
        logger = OperationLogger(audit=self.audit)
        self.files = FileOperator(logger=logger, encoding=self.config.encoding)
        self.processes = ProcessOperator(logger=logger)

        level = "INFO" if verbose else self.config.log_level
        logging.basicConfig(
            level=level.upper(),
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def report(result: OperationResult, quiet: bool = False) -> None:
    """Print a failed or no-op outcome and exit non-zero if unsuccessful."""
    if result.failed:
        console.print(f"[red]{result.operation} failed:[/red] {escape(result.path)}: {escape(result.message or '')}")
    elif not result.success:
        console.print(f"[yellow]{result.operation}:[/yellow] {escape(result.path)} ({result.status.value})")
    elif not quiet:
        console.print(f"[green]{result.operation}:[/green] {escape(result.path)}")
    sys.exit(0 if result.success else 1)


pass_context = click.make_pass_decorator(Context)


@click.group()
@click.version_option(version="0.1.0", prog_name="bashfs")
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True,
              help="YAML configuration file.")
@click.option("-v", "--verbose", is_flag=True, help="Log every operation.")
@click.pass_context
def cli(ctx, config_path: str, verbose: bool):
    """Bash-like filesystem commands with explicit outcomes."""
    ctx.obj = Context(config_path, verbose)


@cli.command()
@click.argument("path")
@pass_context
def mkdir(obj: Context, path: str):
    """Create a directory and its parents."""
    report(obj.files.mkdir(path))


@cli.command()
@click.argument("path")
@pass_context
def rm(obj: Context, path: str):
    """Remove a file."""
    report(obj.files.rm(path))


@cli.command()
@click.argument("path")
@pass_context
def rmdir(obj: Context, path: str):
    """Remove an empty directory."""
    report(obj.files.rmdir(path))


@cli.command("rm-r")
@click.argument("path")
@click.confirmation_option(prompt="Remove the directory and everything in it?")
@pass_context
def rm_r(obj: Context, path: str):
    """Remove a directory recursively."""
    report(obj.files.rm_r(path))


@cli.command()
@click.argument("path")
@pass_context
def exists(obj: Context, path: str):
    """Exit 0 if the path exists."""
    report(obj.files.path_exists(path), quiet=True)


@cli.command()
@click.argument("path")
@pass_context
def empty(obj: Context, path: str):
    """Exit 0 if the path is an empty directory."""
    result = obj.files.directory_is_empty(path)
    if result.success and result.data:
        console.print(f"{escape(path)} has {result.data} entries")
        sys.exit(1)
    report(result, quiet=True)


@cli.command()
@click.argument("source")
@click.argument("destination")
@pass_context
def mv(obj: Context, source: str, destination: str):
    """Move SOURCE to DESTINATION."""
    report(obj.files.mv(source, destination))


@cli.command()
@click.argument("path")
@pass_context
def touch(obj: Context, path: str):
    """Create an empty file, truncating an existing one."""
    report(obj.files.create_file(path))


@cli.command()
@click.argument("path")
@click.argument("text", required=False)
@pass_context
def write(obj: Context, path: str, text):
    """Write TEXT (or stdin) to PATH, replacing its contents."""
    data = text if text is not None else click.get_binary_stream("stdin").read()
    report(obj.files.write_file(path, data))


@cli.command()
@click.argument("path")
@click.argument("text", required=False)
@pass_context
def append(obj: Context, path: str, text):
    """Append TEXT (or stdin) to PATH."""
    data = text if text is not None else click.get_binary_stream("stdin").read()
    report(obj.files.write_file_append(path, data))


@cli.command()
@click.argument("path")
@pass_context
def cat(obj: Context, path: str):
    """Print a file."""
    result = obj.files.read_file(path)
    if not result.success:
        report(result)
    click.echo(result.data, nl=False)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("program")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@pass_context
def run(obj: Context, program: str, args):
    """Run PROGRAM with ARGS and exit with its exit code."""
    result = obj.processes.run_command(program, args)
    if not result.success:
        report(result)
    sys.exit(result.data)


@cli.command()
@click.option("--limit", default=20, show_default=True)
@pass_context
def audit(obj: Context, limit: int):
    """View the audit log."""
    if obj.audit is None:
        console.print("[dim]Audit log is disabled (set 'audit_log' in the config).[/dim]")
        return

    entries = obj.audit.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Operation")
    table.add_column("Path")
    table.add_column("Status")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "done":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        table.add_row(time_str, entry.operation, escape(entry.path), status_str)

    console.print(table)


if __name__ == "__main__":
    cli()

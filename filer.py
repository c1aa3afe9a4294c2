#!/usr/bin/env python3
"""
Filer - File Operations Manager

Main entry point for the Filer CLI application.
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from core import AuditLogger, load_config
from modules.file_manager import FileOperationsManager, FileOperationError, Mode


console = Console()


def get_manager(ctx: click.Context) -> FileOperationsManager:
    """Build the manager for this invocation from the loaded config."""
    obj = ctx.ensure_object(dict)
    if "manager" not in obj:
        config = obj["config"]
        logger = config.build_logger(console=console if obj["verbose"] else None)
        manager = config.build_manager(logger=logger)
        if obj["debug"]:
            manager.set_debug_mode(True)
        obj["manager"] = manager
    return obj["manager"]


def mode_for(permissive: bool) -> Mode:
    return Mode.PERMISSIVE if permissive else Mode.STRICT


def run(ctx: click.Context, operation, *args):
    """Run a manager operation, turning failures into a one-line error and exit code 1."""
    try:
        return operation(*args)
    except FileOperationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(1)


permissive_option = click.option(
    "--permissive", is_flag=True,
    help="Operate on whatever is at the path, file or directory."
)


@click.group()
@click.version_option(version="0.1.0", prog_name="Filer")
@click.option("--config", "config_path", default="config.yaml", show_default=True,
              help="YAML configuration file.")
@click.option("--debug", is_flag=True, help="Log every step, not just failures.")
@click.option("--verbose", "-v", is_flag=True, help="Echo audit entries to the terminal.")
@click.pass_context
def filer(ctx, config_path, debug, verbose):
    """
    Filer - File Operations Manager

    Create, copy, move, rename and delete files and directories,
    and find files by name across the application roots.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj["debug"] = debug
    ctx.obj["verbose"] = verbose


@filer.command()
@click.pass_context
def roots(ctx):
    """Show the application roots in search order."""
    manager = get_manager(ctx)

    table = Table(title="Roots")
    table.add_column("Root")
    table.add_column("Path")
    table.add_column("Exists")

    for name, path in manager.roots.in_search_order():
        exists = "✅" if manager.file_exists(path) else "❌"
        table.add_row(name, path, exists)

    console.print(table)
    console.print(f"\n🐞 Debug logging: {'on' if manager.debug_logging else 'off'}")


@filer.command()
@click.argument("path")
@click.pass_context
def mkdir(ctx, path):
    """Create a directory (its parent must exist)."""
    created = run(ctx, get_manager(ctx).create_directory, path)
    console.print(f"[green]Created:[/green] {escape(created)}")


@filer.command()
@click.argument("name")
@click.argument("parent")
@click.pass_context
def mksub(ctx, name, parent):
    """Create directory NAME inside PARENT."""
    created = run(ctx, get_manager(ctx).create_subdirectory, name, parent)
    console.print(f"[green]Created:[/green] {escape(created)}")


@filer.command("cp-dir")
@click.argument("src")
@click.argument("dst")
@permissive_option
@click.pass_context
def cp_dir(ctx, src, dst, permissive):
    """Copy directory SRC to DST."""
    result = run(ctx, get_manager(ctx).copy_directory, src, dst, mode_for(permissive))
    console.print(f"[green]Copied:[/green] {escape(src)} → {escape(result)}")


@filer.command("mv-dir")
@click.argument("src")
@click.argument("dst")
@permissive_option
@click.pass_context
def mv_dir(ctx, src, dst, permissive):
    """Move directory SRC to DST."""
    result = run(ctx, get_manager(ctx).move_directory, src, dst, mode_for(permissive))
    console.print(f"[green]Moved:[/green] {escape(src)} → {escape(result)}")


@filer.command("rename-dir")
@click.argument("path")
@click.argument("new_name")
@permissive_option
@click.pass_context
def rename_dir(ctx, path, new_name, permissive):
    """Rename directory PATH to NEW_NAME."""
    result = run(ctx, get_manager(ctx).rename_directory, path, new_name, mode_for(permissive))
    console.print(f"[green]Renamed:[/green] {escape(path)} → {escape(result)}")


@filer.command("rm-dir")
@click.argument("path")
@permissive_option
@click.pass_context
def rm_dir(ctx, path, permissive):
    """Delete directory PATH and everything below it."""
    run(ctx, get_manager(ctx).delete_directory, path, mode_for(permissive))
    console.print(f"[green]Deleted:[/green] {escape(path)}")


@filer.command()
@click.argument("src")
@click.argument("dst")
@permissive_option
@click.pass_context
def cp(ctx, src, dst, permissive):
    """Copy file SRC into directory DST (or over file DST)."""
    result = run(ctx, get_manager(ctx).copy_file, src, dst, mode_for(permissive))
    console.print(f"[green]Copied:[/green] {escape(src)} → {escape(result)}")


@filer.command()
@click.argument("src")
@click.argument("dst")
@permissive_option
@click.pass_context
def mv(ctx, src, dst, permissive):
    """Move file SRC into directory DST (or over file DST)."""
    result = run(ctx, get_manager(ctx).move_file, src, dst, mode_for(permissive))
    console.print(f"[green]Moved:[/green] {escape(src)} → {escape(result)}")


@filer.command()
@click.argument("path")
@permissive_option
@click.pass_context
def rm(ctx, path, permissive):
    """Delete file PATH."""
    run(ctx, get_manager(ctx).delete_file, path, mode_for(permissive))
    console.print(f"[green]Deleted:[/green] {escape(path)}")


@filer.command()
@click.argument("path")
@click.pass_context
def exists(ctx, path):
    """Report whether anything exists at PATH."""
    manager = get_manager(ctx)
    console.print(manager.entry_kind(path).value)
    if not manager.file_exists(path):
        ctx.exit(1)


@filer.command()
@click.argument("directory")
@click.pass_context
def count(ctx, directory):
    """Count the direct entries of DIRECTORY."""
    click.echo(get_manager(ctx).count_entries(directory))


@filer.command()
@click.argument("path")
@click.pass_context
def cat(ctx, path):
    """Write the contents of file PATH to stdout."""
    data = get_manager(ctx).read_file(path)
    if data is None:
        console.print(f"[red]Error:[/red] Could not read {escape(path)}")
        ctx.exit(1)
    click.echo(data, nl=False)


@filer.command()
@click.argument("filename")
@click.option("--in", "directory", default=None, help="Search only this directory tree.")
@click.pass_context
def find(ctx, filename, directory):
    """Find FILENAME across the roots (documents, resources, library, temporary)."""
    manager = get_manager(ctx)
    if directory:
        path = manager.find_path_in(filename, directory)
    else:
        path = manager.find_path(filename)

    if path is None:
        console.print(f"[dim]Not found:[/dim] {escape(filename)}")
        ctx.exit(1)
    click.echo(path)


@filer.command("find-cp")
@click.argument("filename")
@click.argument("dst")
@permissive_option
@click.pass_context
def find_cp(ctx, filename, dst, permissive):
    """Find FILENAME across the roots and copy it to DST."""
    result = run(ctx, get_manager(ctx).find_and_copy, filename, dst, mode_for(permissive))
    console.print(f"[green]Copied:[/green] {escape(filename)} → {escape(result)}")


@filer.command("find-mv")
@click.argument("filename")
@click.argument("dst")
@permissive_option
@click.pass_context
def find_mv(ctx, filename, dst, permissive):
    """Find FILENAME across the roots and move it to DST."""
    result = run(ctx, get_manager(ctx).find_and_move, filename, dst, mode_for(permissive))
    console.print(f"[green]Moved:[/green] {escape(filename)} → {escape(result)}")


@filer.command("find-rm")
@click.argument("filename")
@permissive_option
@click.pass_context
def find_rm(ctx, filename, permissive):
    """Find FILENAME across the roots and delete it."""
    path = run(ctx, get_manager(ctx).find_and_delete, filename, mode_for(permissive))
    console.print(f"[green]Deleted:[/green] {escape(path)}")


@filer.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--failed", is_flag=True, help="Only show failed operations.")
@click.pass_context
def audit(ctx, limit, failed):
    """View the audit log."""
    config = ctx.obj["config"]
    if not config.audit_log:
        console.print("[dim]No audit log configured (set filer.audit_log in the config).[/dim]")
        return

    logger = AuditLogger(log_path=config.audit_log)
    entries = logger.get_failed_actions(limit=limit) if failed else logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Type")
    table.add_column("Action")
    table.add_column("Status")

    for entry in entries:
        # Format timestamp
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        description = escape(entry.action_description)
        table.add_row(
            time_str,
            entry.action_type,
            description[:60] + "..." if len(description) > 60 else description,
            status_str
        )

    console.print(table)


@filer.command()
@click.pass_context
def status(ctx):
    """Show Filer's configuration."""
    config = ctx.obj["config"]
    console.print(Panel.fit(
        "[bold blue]Filer - File Operations Manager[/bold blue]\n"
        "[dim]Version 0.1.0[/dim]",
        title="📁 Status"
    ))
    console.print(f"\n⚙️  Config file: {escape(config.source or 'defaults')}")
    console.print(f"   Audit log: {escape(config.audit_log or 'in memory')}")
    console.print(f"   Debug logging: {'on' if config.debug or ctx.obj['debug'] else 'off'}")


if __name__ == "__main__":
    filer()

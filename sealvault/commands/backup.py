"""CLI commands for backups under `sealvault backup`."""

from __future__ import annotations

import logging

import typer
from rich.table import Table

from ..config.constants import DEFAULT_BACKUPS_TO_KEEP
from ..exceptions import SealvaultError
from ..utils.output import console, print_json

logger = logging.getLogger(__name__)

app = typer.Typer(help="Backup status and storage")


def _load_resources():
    from ..backup.resources import CoreResources

    try:
        return CoreResources.from_config()
    except SealvaultError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None


@app.command()
def status() -> None:
    """Show when the last backup was confirmed in storage."""
    from ..backup.metadata import last_uploaded_backup
    from ..utils.datetime_utils import rfc3339_from_unix

    resources = _load_resources()
    try:
        timestamp = last_uploaded_backup(resources)
    except SealvaultError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if timestamp is None:
        console.print("[yellow]No uploaded backup[/yellow]")
        return

    console.print(f"[green]Last uploaded backup:[/green] {rfc3339_from_unix(timestamp)}")


@app.command(name="list")
def list_backups(
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON"
    ),
) -> None:
    """List this device's backups in storage, newest first."""
    from ..backup.service import BackupService
    from ..utils.datetime_utils import rfc3339_from_unix

    backups = BackupService(_load_resources()).list_backups()

    if json_output:
        print_json(
            [
                {
                    "file_name": b.file_name,
                    "backup_version": b.info.backup_version.value,
                    "timestamp": b.info.timestamp,
                    "os": b.info.os.value,
                }
                for b in backups
            ]
        )
        return

    if not backups:
        console.print("No backups found.")
        return

    table = Table(title="Backups")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Created")
    table.add_column("OS")
    table.add_column("File")

    for b in backups:
        table.add_row(
            str(b.info.backup_version),
            rfc3339_from_unix(b.info.timestamp),
            str(b.info.os),
            b.file_name,
        )

    console.print(table)


@app.command()
def parse(
    file_name: str = typer.Argument(..., help="Backup file name to parse"),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON"
    ),
) -> None:
    """Parse a backup file name into its fields."""
    from ..backup.metadata import MetadataFromFileName

    try:
        info = MetadataFromFileName.parse(file_name)
    except SealvaultError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    fields = {
        "timestamp": info.timestamp,
        "os": info.os.value,
        "device_id": info.device_id.value,
        "backup_version": info.backup_version.value,
    }
    if json_output:
        print_json(fields)
        return

    for key, value in fields.items():
        console.print(f"{key}: [cyan]{value}[/cyan]")


@app.command()
def prune(
    keep: int = typer.Option(
        DEFAULT_BACKUPS_TO_KEEP, "--keep", "-k", min=1, help="Number of backups to keep"
    ),
) -> None:
    """Delete old backups of this device from storage."""
    from ..backup.service import BackupService

    pruned = BackupService(_load_resources()).prune_backups(keep=keep)
    console.print(f"Pruned {pruned} backup{'s' if pruned != 1 else ''}.")

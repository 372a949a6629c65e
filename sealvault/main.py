#!/usr/bin/env python3
"""
Main CLI entry point for sealvault
"""

import typer

from sealvault import __version__
from sealvault.commands.backup import app as backup_app
from sealvault.commands.ids import app as ids_app
from sealvault.utils.logging import set_verbosity


def version():
    """Show sealvault version"""
    typer.echo(f"sealvault version {__version__}")


def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
):
    """
    sealvault - deterministic ids and backup integrity for SealVault

    [bold]Examples:[/bold]

        [cyan]sealvault backup status[/cyan]
        [cyan]sealvault backup parse sealvault_backup_v1_ios_1700000000_dev123_3.zip[/cyan]
        [cyan]sealvault ids derive Dapp example.com[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    set_verbosity(verbose=verbose, quiet=quiet)


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(rich_markup_mode="rich")
    app.callback()(main)
    app.command()(version)
    app.add_typer(backup_app, name="backup")
    app.add_typer(ids_app, name="ids")
    return app


# Create the app instance
app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()

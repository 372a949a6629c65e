"""CLI commands for deterministic ids under `sealvault ids`."""

from __future__ import annotations

import typer

from ..database.deterministic_id import EntityName, derive_deterministic_id
from ..utils.output import console

app = typer.Typer(help="Deterministic entity ids")


@app.command()
def derive(
    entity: str = typer.Argument(..., help="Entity name, e.g. Dapp or ProfilePicture"),
    keys: list[str] = typer.Argument(..., help="Unique columns in order"),
) -> None:
    """Derive the deterministic id of an entity from its unique columns."""
    try:
        entity_name = EntityName(entity)
    except ValueError:
        available = ", ".join(e.value for e in EntityName)
        console.print(f"[red]Unknown entity: {entity}. Available: {available}[/red]")
        raise typer.Exit(1) from None

    print(derive_deterministic_id(entity_name, keys))

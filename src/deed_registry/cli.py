"""Typer CLI for the deed registry."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="deed-registry", help="Land deed registry with tamper-evident ledger")
console = Console()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind host (default from settings)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default from settings)"),
):
    """Start the registry API server."""
    import uvicorn
    from deed_registry.app import create_app
    from deed_registry.common.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting deed registry on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command("init-db")
def init_db():
    """Create all registry tables in the configured database."""
    from deed_registry.common.config import get_settings
    from deed_registry.common.database import DatabaseManager

    async def _run() -> None:
        db = DatabaseManager(get_settings())
        await db.init()
        await db.create_all()
        await db.close()

    asyncio.run(_run())
    console.print("[bold green]Database initialized[/bold green]")


@app.command("next-id")
def next_id(
    previous: Optional[str] = typer.Option(None, help="Deed being superseded by a transfer"),
):
    """Show the next deed number that would be allocated."""
    from deed_registry.deps import get_db, get_deed_service

    async def _run() -> str:
        db = get_db()
        await db.init()
        try:
            async with db.get_session() as session:
                return await get_deed_service().allocate_deed_number(session, previous)
        finally:
            await db.close()

    console.print(f"[bold]{asyncio.run(_run())}[/bold]")


@app.command()
def verify(
    deed_number: str = typer.Argument(..., help="Deed number to verify"),
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Verify a deed against its sealed ledger digest on a running server."""
    from deed_registry.client import RegistryClient

    with RegistryClient(server_url=url) as client:
        result = client.verify(deed_number)

    if result.is_valid:
        console.print(f"[bold green]VALID[/bold green] - {result.message}")
        console.print(f"  Sequence: {result.sequence_number}")
        console.print(f"  Digest:   {result.recorded_digest}")
    else:
        console.print(f"[bold red]{result.code}[/bold red] - {result.message}")
        if result.recorded_digest:
            console.print(f"  Recorded: {result.recorded_digest}")
            console.print(f"  Current:  {result.current_digest}")
        raise typer.Exit(1)


@app.command()
def ledger(
    limit: int = typer.Option(20, help="Number of entries to show"),
):
    """List sealed ledger entries from the configured database."""
    from deed_registry.deps import get_db, get_integrity_service

    async def _run():
        db = get_db()
        await db.init()
        try:
            async with db.get_session() as session:
                return await get_integrity_service().ledger.all_entries(session, limit=limit)
        finally:
            await db.close()

    table = Table(title="Deed ledger")
    table.add_column("Sequence", justify="right")
    table.add_column("Deed")
    table.add_column("Digest")
    table.add_column("Recorded at")
    for entry in asyncio.run(_run()):
        table.add_row(
            str(entry.sequence_number),
            entry.deed_number,
            f"{entry.digest[:8]}...{entry.digest[-8:]}",
            entry.recorded_at.isoformat(),
        )
    console.print(table)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check registry server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] - v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

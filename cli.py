"""
Café POS CLI.

Command-line interface for operator tasks: schema creation, menu seeding
and order inspection.
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="cafe-pos",
    help="Café POS order core CLI",
    add_completion=False,
)
console = Console()


def _cents(amount: int) -> str:
    return f"{amount // 100}.{amount % 100:02d}"


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create the database schema."""
    from cafe_pos import models
    from shared.config.settings import settings
    from shared.infrastructure.db import engine

    for problem in settings.validate_production_settings():
        console.print(f"[yellow]! {problem}[/yellow]")

    console.print(f"[blue]Creating schema on: {engine.url.render_as_string(hide_password=True)}[/blue]")

    try:
        models.Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Schema ready[/green]")
    except Exception as e:
        console.print(f"[red]✗ Schema creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def menu_seed():
    """Load the default café menu (existing items are kept)."""
    from cafe_pos.seed import seed_menu
    from shared.infrastructure.db import get_db_context

    try:
        with get_db_context() as db:
            inserted = seed_menu(db)
        console.print(f"[green]✓ Menu seeded ({inserted} new items)[/green]")
    except Exception as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Order Commands
# =============================================================================

@app.command()
def menu_list(
    item_type: str = typer.Option(None, "--type", "-t", help="Only items of this type"),
):
    """Show the menu with prices."""
    from cafe_pos.repositories import MenuItemFilters, MenuItemRepository
    from shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        items = MenuItemRepository(db).find_all(MenuItemFilters(type=item_type))

    table = Table(title="Menu")
    table.add_column("Item", style="cyan")
    table.add_column("Type")
    table.add_column("Price", style="green", justify="right")

    for item in items:
        table.add_row(item.name, item.type, _cents(item.price_cents))

    console.print(table)


@app.command()
def menu_show(
    name: str = typer.Argument(..., help="Exact menu item name"),
):
    """Show one menu item."""
    from cafe_pos.services.catalog import SqlMenuCatalog
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException

    try:
        with get_db_context() as db:
            item = SqlMenuCatalog(db).get_item(name)
    except AppException as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]{item.name}[/bold] ({item.type})  {_cents(item.price_cents)}")
    if item.description:
        console.print(f"  {item.description}")


@app.command()
def orders_open(
    login: str = typer.Option("operator", help="Staff login to act as"),
):
    """List unpaid orders of the current window."""
    from cafe_pos.services.domain import OrderService
    from cafe_pos.services.permissions import Actor
    from shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        orders = OrderService(db).open_orders(Actor.employee(login))

    if not orders:
        console.print("[yellow]No open orders[/yellow]")
        return

    table = Table(title="Open Orders")
    table.add_column("Order", style="cyan")
    table.add_column("Owner")
    table.add_column("Placed")
    table.add_column("Total", style="green", justify="right")

    for order in orders:
        table.add_row(
            str(order.id),
            order.owner_login,
            order.created_at.strftime("%Y-%m-%d %H:%M"),
            _cents(order.total_cents),
        )

    console.print(table)


@app.command()
def order_show(
    order_id: int = typer.Argument(..., help="Order id"),
    login: str = typer.Option("operator", help="Staff login to act as"),
):
    """Show an order with the status of each item."""
    from cafe_pos.services.domain import OrderService
    from cafe_pos.services.permissions import Actor
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException

    try:
        with get_db_context() as db:
            status = OrderService(db).get_order_status(order_id, Actor.employee(login))
    except AppException as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Order {order_id} ({status.order.state})")
    table.add_column("#", style="dim")
    table.add_column("Item", style="cyan")
    table.add_column("Comment")
    table.add_column("Status")
    table.add_column("Price", style="green", justify="right")

    for entry in status.items:
        table.add_row(
            str(entry.id),
            entry.item_name,
            entry.comment,
            entry.status,
            _cents(entry.price_cents),
        )

    table.add_row("", "[bold]Total[/bold]", "", "", f"[bold]{_cents(status.order.total_cents)}[/bold]")
    console.print(table)


@app.command()
def version():
    """Show version information."""
    from cafe_pos import __version__

    table = Table(title="Café POS Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("Order core", __version__)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


@app.callback()
def main():
    from shared.config.logging import setup_logging

    setup_logging()


if __name__ == "__main__":
    app()

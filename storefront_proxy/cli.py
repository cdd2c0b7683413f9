"""Command-line interface for the Storefront proxy."""

import asyncio
import json
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
import typer
from rich.console import Console
from rich.table import Table
from rich.json import JSON

from .config import StorefrontConfig
from .errors import StorefrontError
from .service import StorefrontService
from .validation import ProductListQuery, validate_query

app = typer.Typer(
    name="storefront-proxy",
    help="Shopify Storefront API proxy CLI"
)
console = Console()


def load_config(config_path: Optional[str], sandbox: bool = False) -> StorefrontConfig:
    """Load configuration from a JSON file, or from the environment when no file is given."""
    if config_path is None:
        config = StorefrontConfig.from_env()
    else:
        config_file = Path(config_path)
        if not config_file.exists():
            console.print(f"[red]Error: Config file not found: {config_path}[/red]")
            raise typer.Exit(1)

        with open(config_file) as f:
            config = StorefrontConfig(**json.load(f))

    if sandbox:
        config = config.model_copy(update={"sandbox": True})
    return config


def extract_handle(handle_or_url: str) -> Optional[str]:
    """Return the product handle from a product URL, or the argument itself."""
    if "://" not in handle_or_url:
        return handle_or_url or None
    parsed = urlparse(handle_or_url)
    parts = [p for p in parsed.path.split('/') if p]
    if len(parts) >= 2 and parts[-2] == "products":
        return parts[-1]
    return None


def print_json(model) -> None:
    console.print(JSON(json.dumps(model.model_dump(mode="json", by_alias=True), indent=2)))


def run_service(config: StorefrontConfig, action):
    """Run ``action(service)`` and report storefront errors in the CLI."""

    async def _run():
        async with StorefrontService(config) as service:
            return await action(service)

    try:
        return asyncio.run(_run())
    except StorefrontError as exc:
        console.print(f"[red]✗ {exc.code}:[/red] {exc.message}")
        raise typer.Exit(1)


@app.command()
def init(
    output: str = typer.Option("config.json", help="Output configuration file path")
):
    """Initialize a new configuration file with example values."""
    example_config = StorefrontConfig.model_config["json_schema_extra"]["example"]

    output_path = Path(output)
    with open(output_path, 'w') as f:
        json.dump(example_config, f, indent=2)

    console.print(f"[green]✓[/green] Configuration file created: {output}")
    console.print("\n[yellow]⚠ Please edit the file and add your Storefront API credentials![/yellow]")


@app.command()
def validate(
    config: Optional[str] = typer.Option(None, help="Configuration file path (environment if omitted)"),
):
    """Validate configuration."""
    try:
        cfg = load_config(config)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]✗ Configuration error:[/red] {str(e)}")
        raise typer.Exit(1)

    missing = [
        name for name, value in (
            ("store_domain", cfg.shopify.store_domain),
            ("access_token", cfg.shopify.access_token),
        ) if not value
    ]
    if missing and not cfg.sandbox:
        console.print(f"[red]✗ Missing Shopify settings:[/red] {', '.join(missing)}")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Configuration is valid!")
    console.print(f"\n[bold]Store:[/bold] {cfg.shopify.store_domain}")
    console.print(f"[bold]API version:[/bold] {cfg.shopify.api_version}")
    console.print(f"[bold]Environment:[/bold] {cfg.environment}")
    console.print(f"[bold]Cache TTL:[/bold] {cfg.cache.default_ttl_ms} ms")


@app.command()
def products(
    config: Optional[str] = typer.Option(None, help="Configuration file path"),
    limit: int = typer.Option(20, help="Number of products to fetch (1-100)"),
    cursor: Optional[str] = typer.Option(None, help="Pagination cursor from a previous page"),
    search: Optional[str] = typer.Option(None, help="Search query"),
    collection: Optional[str] = typer.Option(None, help="Collection handle"),
    output: Optional[str] = typer.Option(None, help="Output file for JSON (optional)"),
    sandbox: bool = typer.Option(False, help="Use canned sandbox data"),
):
    """List products as a table."""
    cfg = load_config(config, sandbox)
    params = {"limit": str(limit), "cursor": cursor, "search": search, "collection": collection}
    try:
        query = validate_query({k: v for k, v in params.items() if v is not None}, ProductListQuery)
    except StorefrontError as exc:
        console.print(f"[red]✗ {exc.code}:[/red] {exc.details}")
        raise typer.Exit(1)

    result = run_service(cfg, lambda service: service.list_products(query))

    table = Table(title="Products")
    table.add_column("Handle", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("From", justify="right", style="yellow")
    table.add_column("Available", justify="center", style="magenta")

    for item in result.items:
        price = item.price_range.min_price if item.price_range else None
        table.add_row(
            item.handle,
            item.title[:50] + "..." if len(item.title) > 50 else item.title,
            f"{price.amount} {price.currency_code}" if price else "-",
            "yes" if item.available_for_sale else "no",
        )

    console.print(table)
    if result.page_info.has_next_page:
        console.print(f"\n[blue]Next page cursor:[/blue] {result.page_info.end_cursor}")

    if output:
        with open(Path(output), 'w') as f:
            json.dump(result.model_dump(mode="json", by_alias=True), f, indent=2)
        console.print(f"\n[green]✓[/green] Saved to {output}")


@app.command()
def product(
    handle_or_url: str = typer.Argument(..., help="Product handle or storefront product URL"),
    config: Optional[str] = typer.Option(None, help="Configuration file path"),
    sandbox: bool = typer.Option(False, help="Use canned sandbox data"),
):
    """Print a product's detail JSON."""
    handle = extract_handle(handle_or_url)
    if not handle:
        console.print("[red]Error: Could not extract product handle from URL.[/red]")
        raise typer.Exit(1)

    cfg = load_config(config, sandbox)
    print_json(run_service(cfg, lambda service: service.get_product(handle)))


@app.command()
def cart(
    cart_id: str = typer.Argument(..., help="Cart ID (gid://shopify/Cart/...)"),
    config: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Print a cart's JSON."""
    cfg = load_config(config)
    print_json(run_service(cfg, lambda service: service.get_cart(cart_id)))


@app.command()
def serve(
    config: Optional[str] = typer.Option(None, help="Configuration file path"),
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    sandbox: bool = typer.Option(False, help="Use canned sandbox data"),
):
    """Start the storefront API server."""
    from .app import create_app
    import uvicorn

    cfg = load_config(config, sandbox)
    api = create_app(cfg)

    console.print(f"[green]Starting storefront API on {host}:{port}[/green]")
    console.print(f"[blue]Products endpoint: http://{host}:{port}/api/products[/blue]")
    if cfg.sandbox:
        console.print("[yellow]Sandbox mode: serving canned data[/yellow]")

    uvicorn.run(api, host=host, port=port)


if __name__ == "__main__":
    app()

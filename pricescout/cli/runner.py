# pricescout/cli/runner.py

"""Headless CLI search runner, reusing the async aggregator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from pricescout.errors import InvalidRequest
from pricescout.models.product import ProductRecord
from pricescout.services.search_aggregator import SearchAggregator

logger = logging.getLogger("pricescout.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(records: list[ProductRecord]) -> None:
    """Render a Rich table of records to stdout, cheapest first."""
    sorted_records = sorted(
        records,
        key=lambda r: (
            r.numeric_price if r.numeric_price > 0 else float("inf")
        ),
    )
    table = Table(
        title="Search Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Platform", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, r in enumerate(sorted_records, 1):
        table.add_row(
            str(idx),
            r.name[:60],
            r.price,
            f"{r.rating:.1f}",
            f"{r.reviews:,}",
            r.platform,
            r.url,
        )

    Console().print(table)


async def cli_search(
    query: str,
    platforms_csv: str | None,
    output_format: str,
) -> int:
    """Run one search and return an exit code (0=ok, 1=fail)."""
    aggregator = SearchAggregator()
    platforms = aggregator.parse_platforms(platforms_csv)
    if not platforms:
        valid = ", ".join(aggregator.platform_ids)
        _err.print("[red]No known platform selected.[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]platforms={', '.join(platforms)}[/dim]"
    )
    try:
        records = await aggregator.search(query, platforms)
    except InvalidRequest as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    finally:
        await aggregator.browser_manager.close()

    if not records:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(f"[green]✓ {len(records)} products[/green]")

    if output_format == "table":
        _print_table(records)
    else:
        json.dump(
            [r.to_dict() for r in records],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


_STATUS_CELLS: dict[str, str] = {
    "ok": "[green]OK[/green]",
    "slow": "[yellow]SLOW[/yellow]",
    "down": "[red]DOWN[/red]",
}


async def run_health_check() -> int:
    """Print a homepage reachability table; 1 if any platform is down."""
    from pricescout.services.health_checker import HealthChecker

    _err.print("[bold]Probing platform homepages...[/bold]")
    results = await HealthChecker().check_all()

    table = Table(
        title="Platform Health",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Platform", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("URL", style="dim", overflow="fold")
    table.add_column("Notes", style="dim")

    for r in results:
        table.add_row(
            r.source_id,
            _STATUS_CELLS.get(r.status, r.status),
            f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-",
            r.url,
            r.message,
        )

    Console().print(table)
    return 1 if any(r.status == "down" for r in results) else 0

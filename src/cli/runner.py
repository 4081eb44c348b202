# src/cli/runner.py

"""Headless and interactive CLI front ends over the search engine."""

import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from src.models.search import SearchResult
from src.services.search_orchestrator import SearchOrchestrator
from src.services.search_session import SearchSession
from src.sources.registry import SourceRegistry

logger = logging.getLogger("storefront_search.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_registry(source_csv: str | None) -> SourceRegistry:
    """Build the registry, restricting it to *source_csv* if given.

    Listed sources are enabled even when disabled by default; all
    others are disabled.  Raises ``SystemExit`` on unknown IDs.
    """
    registry = SourceRegistry.from_settings()
    if source_csv is None:
        return registry

    requested = [
        s.strip() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in registry]
    if unknown:
        valid = ", ".join(a.source_id for a in registry.list_all())
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    for adapter in registry.list_all():
        if adapter.source_id in requested:
            registry.enable(adapter.source_id)
        else:
            registry.disable(adapter.source_id)
    return registry


def _print_table(result: SearchResult) -> None:
    """Render a Rich table of ranked products to stdout."""
    table = Table(
        title=f"Results for '{result.query}'",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Source", style="magenta")

    for idx, p in enumerate(result.products, 1):
        table.add_row(
            str(idx),
            p.title[:50],
            f"{p.price:,.2f}",
            f"{p.rating:.1f}" if p.rating is not None else "—",
            str(p.review_count) if p.review_count is not None else "—",
            f"{p.relevance:.0f}",
            p.source,
        )

    Console().print(table)


def _report(result: SearchResult) -> None:
    """Print errors, summary and suggestions to stderr."""
    for source_id, reason in result.errors.items():
        _err.print(f"[red]Source {source_id} failed: {reason}[/red]")

    if result.is_empty:
        _err.print("[yellow]No products found.[/yellow]")
        if result.suggestions:
            _err.print(
                f"[dim]Try: {', '.join(result.suggestions)}[/dim]"
            )
        return

    partial = " [yellow](partial)[/yellow]" if result.partial else ""
    _err.print(
        f"[green]✓ {len(result.products)} of {result.total_count} products"
        f" from {', '.join(result.sources)}"
        f" in {result.elapsed_ms:.0f}ms[/green]{partial}"
    )


def list_sources() -> int:
    """Print the configured sources and their enabled state."""
    registry = SourceRegistry.from_settings()
    table = Table(title="Sources", title_style="bold cyan")
    table.add_column("ID", style="bold")
    table.add_column("Label")
    table.add_column("Enabled", justify="center")
    for adapter in registry.list_all():
        table.add_row(
            adapter.source_id,
            adapter.label,
            "[green]yes[/green]" if adapter.enabled else "[dim]no[/dim]",
        )
    Console().print(table)
    return 0


async def cli_search(
    query: str,
    source_csv: str | None = None,
    sort_by: str | None = None,
    limit: int | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    category: str | None = None,
    output_format: str = "json",
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=empty)."""
    orchestrator = SearchOrchestrator(registry=build_registry(source_csv))

    labels = ", ".join(a.label for a in orchestrator.registry.list_enabled())
    _err.print(
        f"[bold]Searching:[/bold] {query}  [dim]sources={labels}[/dim]"
    )

    result = await orchestrator.search(
        query,
        min_price=min_price,
        max_price=max_price,
        category=category,
        sort_by=sort_by,
        limit=limit,
    )
    _report(result)

    if output_format == "table":
        if not result.is_empty:
            _print_table(result)
    else:
        json.dump(
            result.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0 if not result.is_empty else 1


async def _search_and_show(
    session: SearchSession,
    term: str,
    sort_by: str | None,
    limit: int | None,
) -> None:
    result = await session.search(term, sort_by=sort_by, limit=limit)
    if result is None:
        _err.print(f"[dim]'{term}' superseded by a newer search[/dim]")
        return
    _report(result)
    if not result.is_empty:
        _print_table(result)


async def run_interactive(
    source_csv: str | None = None,
    sort_by: str | None = None,
    limit: int | None = None,
) -> int:
    """Prompt for queries until an empty line, one session throughout.

    The prompt runs in a worker thread and every query runs as its own
    task, so a new query can be entered while an older one is still
    waiting on slow sources; the older one is then never shown.
    """
    orchestrator = SearchOrchestrator(registry=build_registry(source_csv))
    session = SearchSession(orchestrator)
    _err.print("[bold]Interactive search[/bold] [dim](blank line to quit)[/dim]")

    pending: set[asyncio.Task[None]] = set()
    while True:
        term = await asyncio.to_thread(
            Prompt.ask, "[cyan]search[/cyan]", default="", console=_err
        )
        if not term.strip():
            break
        task = asyncio.create_task(
            _search_and_show(session, term, sort_by, limit)
        )
        pending.add(task)
        task.add_done_callback(pending.discard)

    if pending:
        await asyncio.gather(*pending)

    logger.info(
        "Interactive session ended after %d searches, %d superseded "
        "(cache hits=%d, misses=%d)",
        session.generation,
        session.superseded_count,
        orchestrator.cache_hits,
        orchestrator.cache_misses,
    )
    return 0

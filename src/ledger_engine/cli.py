import json
import typer
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from ledger_engine.categorization import EntryClassifier
from ledger_engine.domain.enums import EntryType, ImportSource
from ledger_engine.domain.models import LedgerEntry, RawDocumentLine
from ledger_engine.logging_setup import configure_logging
from ledger_engine.repositories.memory_ledger_repository import InMemoryLedgerRepository
from ledger_engine.services.analytics_service import AnalyticsService, format_percentage
from ledger_engine.services.ledger_service import LedgerService

app = typer.Typer(
    name="ledger-engine",
    help="Categorize, deduplicate and analyze ledger entries",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    service: Optional[LedgerService] = None
    analytics: Optional[AnalyticsService] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Ledger Engine - Import, deduplicate and analyze ledger entries.
    """
    configure_logging("DEBUG" if verbose else "WARNING", force=True)

    # Nothing is persisted: every invocation starts from an empty ledger
    repository = InMemoryLedgerRepository()
    state.service = LedgerService(repository)
    state.analytics = AnalyticsService(repository)
    state.verbose = verbose


def _read_json_list(path: Path) -> List[dict]:
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"File must contain a JSON list: {path}")
    return data


def load_ledger(path: Path) -> List[LedgerEntry]:
    """
    Restore a JSON ledger file into the current store.

    Ids, links and categories are kept as written; rows without an id get
    a fresh one and rows without a source are marked manual.
    """
    entries = []
    for item in _read_json_list(path):
        entry = LedgerEntry.from_dict(item)
        if entry.imported_from is None:
            entry.imported_from = ImportSource.MANUAL
        entries.append(entry)
    return state.service.restore_entries(entries)


def load_document_lines(path: Path) -> List[RawDocumentLine]:
    """Read raw lines (date, amount, description, account_hint) from JSON"""
    return [RawDocumentLine(**item) for item in _read_json_list(path)]


def _money(amount) -> str:
    return f"{amount:,.2f}"


@app.command(name="report")
def report(
    ledger_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of ledger entries",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the report as JSON instead of tables",
    ),
):
    """
    Print executive metrics, cashflow by account and insights.

    Entries keep the ids and categories written in the file.

    Examples:
        ledger-engine report ledger.json
        ledger-engine report ledger.json --json > report.json
    """
    try:
        entries = load_ledger(ledger_file)
        metrics = state.analytics.executive_metrics()
        accounts = state.analytics.cashflow_by_account()
        insights = state.analytics.ai_insights()

        if as_json:
            typer.echo(json.dumps({
                "entries": len(entries),
                "metrics": metrics.to_dict(),
                "accounts": [a.to_dict() for a in accounts],
                "insights": insights.to_dict(),
            }, indent=2))
            return

        console.print(f"\n[bold]Loaded {len(entries)} entries[/bold]")

        margin_color = "green" if metrics.net_profit >= 0 else "red"
        console.print(Panel(
            f"[green]💰 Revenue:[/green]         {_money(metrics.revenue):>14}\n"
            f"[red]💸 Expenses:[/red]        {_money(metrics.total_expenses):>14}\n"
            f"[yellow]🏛  Taxes:[/yellow]           {_money(metrics.taxes):>14}\n"
            f"{'─' * 34}\n"
            f"[bold {margin_color}]Net profit:[/bold {margin_color}]       {_money(metrics.net_profit):>14}\n"
            f"[bold]Contribution margin:[/bold] {metrics.contribution_margin:>10}%",
            title="[bold]Executive Metrics[/bold]",
            border_style="cyan",
            padding=(1, 2)
        ))

        if accounts:
            account_table = Table(title="Cashflow by Account", padding=(0, 2))
            account_table.add_column("Account", style="cyan", no_wrap=True)
            account_table.add_column("In", justify="right", style="green")
            account_table.add_column("Out", justify="right", style="red")
            account_table.add_column("Net", justify="right")

            for account in accounts:
                account_table.add_row(
                    account.account,
                    _money(account.total_in),
                    _money(account.total_out),
                    _money(account.net),
                )
            console.print(account_table)

        if insights.top_cost_centers:
            center_table = Table(title="Top Cost Centers", box=None, padding=(0, 2))
            center_table.add_column("Category", style="cyan", no_wrap=True)
            center_table.add_column("Amount", justify="right", style="red")
            center_table.add_column("% of Expenses", justify="right", style="dim")

            for center in insights.top_cost_centers:
                center_table.add_row(center.category, _money(center.amount), f"{format_percentage(center.percentage)}%")
            console.print(center_table)

        for opportunity in insights.opportunities:
            console.print(f"  • {opportunity}")
        for risk in insights.risks:
            console.print(f"[yellow]⚠️  {risk}[/yellow]")
        console.print(f"\n[bold]{insights.summary}[/bold]")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="import")
def import_entries(
    ledger_file: Path = typer.Argument(
        ...,
        help="JSON file with the existing ledger entries",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    lines_file: Path = typer.Argument(
        ...,
        help="JSON file with raw document lines to import",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    source: str = typer.Option(
        "credit_card",
        "--source", "-s",
        help="Import source (pdf, xlsx, ods, credit_card)",
    ),
    account: str = typer.Option(
        "main",
        "--account", "-a",
        help="Bank account for lines without an account hint",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write the resulting ledger to this JSON file",
        dir_okay=False,
    ),
):
    """
    Classify raw document lines and import them into a ledger.

    Ledger entries keep the ids, links and categories written in the file;
    imported lines get fresh ids and suggested categories.

    Examples:
        ledger-engine import ledger.json card.json
        ledger-engine import ledger.json statement.json --source pdf -a checking -o merged.json
    """
    try:
        import_source = ImportSource(source)
        load_ledger(ledger_file)

        classifier = EntryClassifier()
        candidates = classifier.to_ledger_entries(
            load_document_lines(lines_file),
            default_bank_account=account,
            source=import_source,
        )
        result = state.service.import_entries(import_source, candidates)

        preview_table = Table(title=f"Imported from {import_source.value}")
        preview_table.add_column("Date", style="cyan")
        preview_table.add_column("Description", style="white")
        preview_table.add_column("Category", style="magenta")
        preview_table.add_column("Amount", justify="right")
        preview_table.add_column("Status", justify="center")

        for entry in result.imported:
            status = "[yellow]DUP[/yellow]" if entry.linked_bank_entry_id else "[green]NEW[/green]"
            amount_color = "green" if entry.type == EntryType.REVENUE else "red"
            preview_table.add_row(
                str(entry.date),
                entry.description[:40],
                entry.category,
                f"[{amount_color}]{_money(entry.amount)}[/{amount_color}]",
                status
            )

        console.print(preview_table)
        console.print(f"[bold green]✓ Imported {len(result.persisted)} new entries[/bold green]")
        if result.duplicates_detected > 0:
            console.print(f"[yellow]🔗 Detected {result.duplicates_detected} duplicates[/yellow]")

        if output is not None:
            with open(output, "w") as f:
                json.dump([e.to_dict() for e in state.service.list_entries()], f, indent=2)
            console.print(f"[dim]→ Ledger written to {output}[/dim]")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()

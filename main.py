from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from analysis.payoff_chart import write_payoff_chart
from analysis.position_analyzer import PositionAnalysis, analyze_position
from config.settings import AnalysisConfig, settings
from data.fetcher_yahoo import YahooSpotFetcher
from data.leg_loader import load_legs
from options_pricing.legs import ValidationError
from strategies.registry import list_patterns
from utils.logger import get_logger

app = typer.Typer(help="Options Payoff Analyzer - classify multi-leg positions and chart expiry P&L")
console = Console()
logger = get_logger(__name__)


def _display_result(result: PositionAnalysis):
    legs_table = Table(title=f"Legs: {result.underlying} exp {result.expiry}")
    legs_table.add_column("Ticker", style="cyan")
    legs_table.add_column("Type")
    legs_table.add_column("Strike", justify="right")
    legs_table.add_column("Premium", justify="right")
    legs_table.add_column("Qty", justify="right")
    for leg in result.legs:
        legs_table.add_row(
            leg.ticker,
            leg.option_type.value,
            f"{leg.strike:.2f}",
            f"{leg.premium:.2f}",
            f"[green]{leg.quantity:g}[/green]" if leg.is_long else f"[red]{leg.quantity:g}[/red]",
        )
    console.print(legs_table)

    table = Table(title=f"Payoff Analysis: {result.strategy_name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Strategy", result.strategy_name)
    credit = "credit" if result.net_premium >= 0 else "debit"
    table.add_row("Net Premium", f"{abs(result.net_premium):.2f} ({credit})")
    table.add_row(
        "Break-even(s)",
        ", ".join(f"{b:.2f}" for b in result.breakevens) if result.breakevens else "none in range",
    )
    table.add_row("Max Profit (in range)", f"{result.max_profit:.2f} @ {result.max_profit_price:.2f}")
    table.add_row("Max Loss (in range)", f"{result.max_loss:.2f} @ {result.max_loss_price:.2f}")
    table.add_row("Price Range", f"{result.curve.plot_min:.2f} - {result.curve.plot_max:.2f}")
    if result.current_price is not None:
        table.add_row(
            "Payoff at Current Price",
            f"{result.payoff_at_current:.2f} @ {result.current_price:.2f}",
        )
    console.print(table)

    for note in result.warnings:
        console.print(f"[yellow]Warning: {escape(note)}[/yellow]")


@app.command()
def analyze(
    legs_file: str = typer.Argument(..., help="CSV or JSON file with one row per leg"),
    spot: float = typer.Option(None, help="Current underlying price (centers the payoff range)"),
    spot_from_yahoo: bool = typer.Option(False, help="Look up the current price on Yahoo Finance"),
    samples: int = typer.Option(None, help="Number of price samples in the payoff curve"),
    range_fraction: float = typer.Option(None, help="Minimum half-width of the price range, as a fraction"),
    chart: bool = typer.Option(False, help="Write an HTML payoff chart"),
    output: str = typer.Option(None, help="Chart output path (default: storage/reports/)"),
):
    """Classify a multi-leg option position and compute its expiry payoff."""
    path = Path(legs_file)
    if not path.exists():
        console.print(f"[red]File not found: {legs_file}[/red]")
        raise typer.Exit(1)

    try:
        loaded = load_legs(path)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    overrides = {}
    if samples is not None:
        overrides["sample_count"] = samples
    if range_fraction is not None:
        overrides["plot_range_fraction"] = range_fraction
    try:
        config = AnalysisConfig(**{**settings.analysis.model_dump(), **overrides})
    except PydanticValidationError as exc:
        console.print(f"[red]Invalid analysis settings: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    current_price = spot if spot is not None else loaded.current_price
    if current_price is None and spot_from_yahoo and loaded.records:
        symbol = loaded.records[0].get("underlying")
        if symbol:
            console.print(f"[yellow]Fetching last price for {symbol}...[/yellow]")
            try:
                current_price = YahooSpotFetcher().fetch_last_price(str(symbol))
            except Exception as exc:
                logger.warning("Spot lookup failed", extra={"extra_data": {"symbol": symbol, "error": str(exc)}})
                console.print(
                    f"[yellow]Could not fetch a price for {escape(str(symbol))}: {escape(str(exc))}. "
                    "Continuing without a current price.[/yellow]"
                )

    try:
        result = analyze_position(loaded.records, loaded.quantities, current_price, config)
    except ValidationError as exc:
        console.print("[red]Invalid leg input:[/red]")
        for issue in exc.errors:
            console.print(f"  - {escape(str(issue))}")
        raise typer.Exit(1)

    _display_result(result)

    if chart:
        out = write_payoff_chart(result, Path(output) if output else None)
        console.print(f"\n[green]Chart saved to: {out}[/green]")


@app.command()
def patterns():
    """List the recognised strategy patterns in evaluation order."""
    table = Table(title="Strategy Catalog")
    table.add_column("Legs", style="cyan", justify="right")
    table.add_column("Pattern", style="green")
    table.add_column("Description")
    for pattern in list_patterns():
        table.add_row(str(pattern.leg_count), pattern.name, pattern.describe())
    console.print(table)


if __name__ == "__main__":
    app()

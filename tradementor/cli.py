"""Trade Mentor CLI application using Typer and Rich."""

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from tradementor import __version__
from tradementor.config import Settings, get_settings
from tradementor.core.enums import SchemaKind
from tradementor.core.exceptions import TradeMentorError

# Initialize CLI app and console
app = typer.Typer(
    name="tradementor",
    help="LLM trading journal - structured option-strategy recommendations",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

# Sub-applications
trades_app = typer.Typer(help="Trade journal commands")
app.add_typer(trades_app, name="trades")

KIND_NAMES = {
    "market": SchemaKind.MARKET_VERDICT,
    "routine": SchemaKind.ROUTINE_CHECK,
    "sentiment": SchemaKind.QUICK_SENTIMENT,
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]Trade Mentor[/bold cyan] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Trade Mentor - LLM-backed option strategy journal."""
    from tradementor.logger import init_logger

    init_logger(get_settings().log_level)


def _parse_kind(kind: str) -> SchemaKind:
    try:
        return KIND_NAMES[kind.lower()]
    except KeyError:
        console.print(
            f"[red]Error:[/red] Unknown kind '{kind}'. "
            f"Use one of: {', '.join(KIND_NAMES)}"
        )
        raise typer.Exit(1)


def _require_api_key(settings: Settings) -> None:
    if not settings.is_configured:
        console.print(
            "[red]Error:[/red] ANTHROPIC_API_KEY not configured. "
            "Please set it in your .env file or environment."
        )
        raise typer.Exit(1)


def _journal(instrument: Optional[str]):
    from tradementor.journal import JournalStore, TradeJournal

    return TradeJournal(JournalStore(instrument=instrument))


def _mentor(settings: Settings):
    from tradementor.llm.client import ClaudeClient
    from tradementor.mentor import TradingMentor

    return TradingMentor(ClaudeClient(settings))


@app.command()
def recover(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Raw model response file"),
    kind: str = typer.Option("market", "--kind", "-k", help="market, routine, or sentiment"),
    strict: bool = typer.Option(False, "--strict", help="Single parse, defaults on failure"),
    as_json: bool = typer.Option(False, "--json", help="Print the recovered value as JSON"),
) -> None:
    """
    Run the recovery pipeline on a saved model response.

    Examples:
        tradementor recover response.txt
        tradementor recover check.txt --kind routine --json
    """
    from tradementor.output import JSONExporter, ResultFormatter
    from tradementor.recovery import RecoveryPipeline

    schema_kind = _parse_kind(kind)
    raw = file.read_text(encoding="utf-8")

    pipeline = RecoveryPipeline()
    result = (
        pipeline.recover_strict(raw, schema_kind)
        if strict
        else pipeline.recover(raw, schema_kind)
    )

    if as_json:
        console.print(Syntax(JSONExporter().to_string(result), "json"))
        return

    formatter = ResultFormatter(console)
    formatter.display_recovery(result)
    if schema_kind == SchemaKind.MARKET_VERDICT:
        formatter.display_verdict(result.value)
    elif schema_kind == SchemaKind.ROUTINE_CHECK:
        formatter.display_routine(result.value)
    else:
        formatter.display_sentiment(result.value)


@app.command()
def schema(
    kind: str = typer.Argument("market", help="market, routine, or sentiment"),
) -> None:
    """Print the JSON schema the model is asked to follow."""
    from tradementor.llm.schemas import (
        MARKET_VERDICT_SCHEMA,
        QUICK_SENTIMENT_SCHEMA,
        ROUTINE_CHECK_SCHEMA,
    )

    schemas = {
        SchemaKind.MARKET_VERDICT: MARKET_VERDICT_SCHEMA,
        SchemaKind.ROUTINE_CHECK: ROUTINE_CHECK_SCHEMA,
        SchemaKind.QUICK_SENTIMENT: QUICK_SENTIMENT_SCHEMA,
    }
    console.print(Syntax(json.dumps(schemas[_parse_kind(kind)], indent=2), "json"))


@app.command()
def analyze(
    snapshot_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Market snapshot JSON file"
    ),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i", help="Journal instrument"),
    accept: bool = typer.Option(False, "--accept", help="Open a trade from the verdict"),
    entry_spot: Optional[float] = typer.Option(
        None, "--entry-spot", help="Entry spot (defaults to snapshot close)"
    ),
    export: Optional[Path] = typer.Option(None, "--export", "-e", help="Write result JSON here"),
) -> None:
    """
    Analyze a market snapshot and recommend a defined-risk strategy.

    Examples:
        tradementor analyze snapshot.json
        tradementor analyze snapshot.json --accept --entry-spot 24350
    """
    from tradementor.core.models import MarketSnapshot
    from tradementor.output import JSONExporter, ResultFormatter

    settings = get_settings()
    _require_api_key(settings)

    try:
        snapshot = MarketSnapshot.model_validate_json(snapshot_file.read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[red]Invalid snapshot:[/red] {e}")
        raise typer.Exit(1)

    journal = _journal(instrument)
    mentor = _mentor(settings)

    with console.status("Asking the mentor..."):
        try:
            result = asyncio.run(mentor.analyze_market(snapshot))
        except TradeMentorError as e:
            console.print(f"\n[red]Error during analysis:[/red] {e}")
            raise typer.Exit(1)

    formatter = ResultFormatter(console)
    formatter.display_recovery(result)
    formatter.display_verdict(result.value)
    journal.save_last_analysis(result.value)

    if export:
        JSONExporter().export(result, export)
        console.print(f"\n[green]Result exported to {export}[/green]")

    if accept:
        trade = journal.accept_trade(
            result.value,
            entry_spot=entry_spot if entry_spot is not None else snapshot.spot.close,
            entry_date=snapshot.date,
        )
        console.print(f"\n[green]Trade {trade.id} opened.[/green]")


@app.command()
def routine(
    trade_id: str = typer.Argument(..., help="Active trade ID"),
    spot: float = typer.Option(..., "--spot", "-s", help="Current spot price"),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
    check_date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default today)"),
    premium: Optional[float] = typer.Option(None, "--premium", help="Current strategy premium"),
    dte: Optional[int] = typer.Option(None, "--dte", help="Days to expiry"),
    open_: Optional[float] = typer.Option(None, "--open"),
    high: Optional[float] = typer.Option(None, "--high"),
    low: Optional[float] = typer.Option(None, "--low"),
    close: Optional[float] = typer.Option(None, "--close"),
) -> None:
    """
    Run the 3:15 PM end-of-day check on an open trade.

    Examples:
        tradementor routine 3f9c2a1b7d4e --spot 24410 --dte 2
    """
    from tradementor.core.models import PositionCheck, SpotOHLC
    from tradementor.output import ResultFormatter

    settings = get_settings()
    _require_api_key(settings)

    ohlc = None
    if None not in (open_, high, low, close):
        ohlc = SpotOHLC(open=open_, high=high, low=low, close=close)

    check = PositionCheck(
        current_spot=spot,
        current_date=date.fromisoformat(check_date) if check_date else date.today(),
        current_premium=premium,
        days_to_expiry=dte,
        today_ohlc=ohlc,
    )

    journal = _journal(instrument)
    mentor = _mentor(settings)

    try:
        trade = journal.get_trade(trade_id)
        with console.status("Reviewing position..."):
            result = asyncio.run(mentor.run_routine_check(trade, check))
        journal.record_routine_check(trade_id, result.value, current_spot=spot)
    except TradeMentorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    formatter = ResultFormatter(console)
    formatter.display_recovery(result)
    formatter.display_routine(result.value)


@app.command()
def sentiment(
    spot: float = typer.Option(..., "--spot", help="Spot price"),
    pcr: float = typer.Option(..., "--pcr", help="Put-call ratio"),
    rsi: float = typer.Option(..., "--rsi", help="RSI(14)"),
) -> None:
    """Quick one-line market sentiment."""
    from tradementor.output import ResultFormatter

    settings = get_settings()
    _require_api_key(settings)

    try:
        result = asyncio.run(_mentor(settings).quick_sentiment(spot, pcr, rsi))
    except TradeMentorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    ResultFormatter(console).display_sentiment(result)


# Trades


@trades_app.command("list")
def trades_list(
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """List active trades."""
    from tradementor.output import ResultFormatter

    ResultFormatter(console).display_trades(_journal(instrument).active_trades())


@trades_app.command("history")
def trades_history(
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of trades to show"),
) -> None:
    """List closed trades, newest first."""
    from tradementor.output import ResultFormatter

    history = _journal(instrument).trade_history()[:limit]
    ResultFormatter(console).display_trades(history, title="Trade History")


@trades_app.command("stats")
def trades_stats(
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """Win rate and P&L over closed trades."""
    from tradementor.output import ResultFormatter

    ResultFormatter(console).display_stats(_journal(instrument).portfolio_stats())


@trades_app.command("accept")
def trades_accept(
    entry_spot: float = typer.Option(..., "--entry-spot", help="Entry spot price"),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """Open a trade from the last saved analysis."""
    journal = _journal(instrument)
    verdict = journal.last_analysis()
    if verdict is None:
        console.print("[yellow]No saved analysis. Run 'tradementor analyze' first.[/yellow]")
        raise typer.Exit(1)

    trade = journal.accept_trade(verdict, entry_spot=entry_spot)
    console.print(f"[green]Trade {trade.id} opened ({trade.strategy.name}).[/green]")


@trades_app.command("close")
def trades_close(
    trade_id: str = typer.Argument(..., help="Active trade ID"),
    exit_spot: float = typer.Option(..., "--exit-spot", help="Spot at exit"),
    pnl: float = typer.Option(..., "--pnl", help="Realized P&L"),
    reason: str = typer.Option("Manual exit", "--reason", "-r"),
    exit_premium: Optional[float] = typer.Option(None, "--exit-premium"),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """Close a trade and move it to history."""
    from tradementor.journal import CloseRequest

    try:
        closed = _journal(instrument).close_trade(
            trade_id,
            CloseRequest(
                reason=reason,
                exit_spot=exit_spot,
                exit_premium=exit_premium,
                realized_pnl=pnl,
            ),
        )
    except TradeMentorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    color = "green" if closed.realized_pnl >= 0 else "red"
    console.print(
        Panel(
            f"Trade {closed.id} closed: [{color}]{closed.result.value}[/{color}] "
            f"({closed.realized_pnl:+,.2f})",
            border_style=color,
        )
    )


@trades_app.command("export")
def trades_export(
    output_file: Path = typer.Argument(..., help="Destination JSON file"),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """Export the journal partition to JSON."""
    output_file.write_text(_journal(instrument).export_data(), encoding="utf-8")
    console.print(f"[green]Journal exported to {output_file}[/green]")


@trades_app.command("import")
def trades_import(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    instrument: Optional[str] = typer.Option(None, "--instrument", "-i"),
) -> None:
    """Import a journal partition exported earlier."""
    if not _journal(instrument).import_data(input_file.read_text(encoding="utf-8")):
        console.print("[red]Error:[/red] Import file is not a valid journal export.")
        raise typer.Exit(1)
    console.print("[green]Journal imported.[/green]")


if __name__ == "__main__":
    app()

"""Rich console formatters for recommendations and the trade journal."""

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.columns import Columns

from tradementor.core.enums import (
    ConfidenceLevel,
    Recommendation,
    RecoveryConfidence,
    RiskLevel,
    TradeResult,
    Verdict,
)
from tradementor.core.models import MarketVerdict, QuickSentiment, RoutineCheck
from tradementor.journal.models import PortfolioStats, Trade
from tradementor.recovery.pipeline import RecoveryResult


class ResultFormatter:
    """Formats mentor results for Rich console output."""

    VERDICT_COLORS = {
        Verdict.BULLISH: "green",
        Verdict.BEARISH: "red",
        Verdict.NEUTRAL: "yellow",
    }

    CONFIDENCE_COLORS = {
        ConfidenceLevel.HIGH: "green",
        ConfidenceLevel.MEDIUM: "yellow",
        ConfidenceLevel.LOW: "red",
    }

    RECOMMENDATION_COLORS = {
        Recommendation.HOLD: "green",
        Recommendation.ADJUST: "yellow",
        Recommendation.EXIT: "red",
    }

    RISK_COLORS = {
        RiskLevel.LOW: "green",
        RiskLevel.MEDIUM: "yellow",
        RiskLevel.HIGH: "red",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def display_recovery(self, result: RecoveryResult) -> None:
        """Show which stage recovered a response and what was defaulted."""
        color = "green" if result.confidence == RecoveryConfidence.EXACT else "yellow"
        body = (
            f"Stage: [bold]{result.stage.value}[/bold]\n"
            f"Confidence: [{color}]{result.confidence.value}[/{color}]"
        )
        if result.defaulted:
            defaulted = "\n".join(f"  - {path}" for path in result.defaulted)
            body += f"\n\n[bold]Defaulted fields:[/bold]\n{defaulted}"

        self.console.print(Panel(body, title="Response Recovery", border_style=color))

    def display_verdict(self, verdict: MarketVerdict) -> None:
        """Display a market verdict with strategy and alert levels."""
        self.console.print()
        color = self.VERDICT_COLORS.get(verdict.verdict, "white")
        conf_color = self.CONFIDENCE_COLORS.get(verdict.confidence, "white")
        analysis = verdict.analysis

        self.console.print(
            Panel(
                f"Verdict: [bold {color}]{verdict.verdict.value}[/bold {color}]\n"
                f"Confidence: [{conf_color}]{verdict.confidence.value}[/{conf_color}]\n\n"
                f"[bold]Trend:[/bold] {analysis.trend}\n"
                f"[bold]Momentum:[/bold] {analysis.momentum}\n"
                f"[bold]PCR:[/bold] {analysis.pcr:.2f} ({analysis.pcr_interpretation})\n"
                f"[bold]Max Pain:[/bold] {analysis.max_pain:,.0f}\n"
                f"[bold]Support / Resistance:[/bold] "
                f"{analysis.key_levels.support:,.0f} / {analysis.key_levels.resistance:,.0f}\n\n"
                f"{verdict.summary}",
                title="Market Verdict",
                border_style=color,
            )
        )
        self._display_strategy(verdict)
        self._display_alerts(verdict)

    def _display_strategy(self, verdict: MarketVerdict) -> None:
        strategy = verdict.strategy
        table = Table(title=f"{strategy.name} ({strategy.type.value})")
        table.add_column("Action", justify="center")
        table.add_column("Strike", justify="right")
        table.add_column("Type", justify="center")
        table.add_column("Premium", justify="right")

        for leg in strategy.legs:
            action_color = "green" if leg.action.value == "BUY" else "red"
            table.add_row(
                f"[{action_color}]{leg.action.value}[/{action_color}]",
                f"{leg.strike:,.0f}",
                leg.type.value,
                f"{leg.premium:.2f}",
            )
        if not strategy.legs:
            table.add_row("-", "-", "-", "-")

        self.console.print(table)

        breakeven = " / ".join(f"{p:,.0f}" for p in strategy.breakeven_points)
        self.console.print(
            f"Net premium: {strategy.net_premium:.2f} | "
            f"Max profit: {strategy.max_profit:,.2f} | "
            f"Max loss: {strategy.max_loss:,.2f} | "
            f"R:R {strategy.risk_reward} | Breakeven: {breakeven}"
        )
        self.console.print(f"[dim]{strategy.rationale}[/dim]")

    def _display_alerts(self, verdict: MarketVerdict) -> None:
        alerts = verdict.alerts
        self.console.print(
            Columns(
                [
                    Panel(
                        f"{alerts.warning.level:,.0f}\n{alerts.warning.description}",
                        title="[yellow]Warning[/yellow]",
                        expand=True,
                    ),
                    Panel(
                        f"{alerts.abort.level:,.0f}\n{alerts.abort.description}",
                        title="[red]Abort[/red]",
                        expand=True,
                    ),
                    Panel(
                        f"{alerts.profit_booking.level:,.0f}\n{alerts.profit_booking.description}",
                        title="[green]Profit Booking[/green]",
                        expand=True,
                    ),
                ]
            )
        )

    def display_routine(self, check: RoutineCheck) -> None:
        """Display an end-of-day routine check."""
        self.console.print()
        color = self.RECOMMENDATION_COLORS.get(check.recommendation, "white")
        risk_color = self.RISK_COLORS.get(check.overnight_risk, "white")
        status = check.current_status
        action = check.action

        lines = [
            f"Recommendation: [bold {color}]{check.recommendation.value}[/bold {color}]",
            f"Confidence: {check.confidence.value}",
            f"Overnight risk: [{risk_color}]{check.overnight_risk.value}[/{risk_color}]",
            "",
            f"P&L: {status.pnl_percent:+.2f}% | To stop: {status.distance_to_stop:,.0f} | "
            f"To target: {status.distance_to_target:,.0f} | Thesis: {status.thesis_status}",
            "",
            f"[bold]Day close:[/bold] {check.analysis.day_close}",
            f"[bold]Technical view:[/bold] {check.analysis.technical_view}",
            f"[bold]Risk:[/bold] {check.analysis.risk_assessment}",
            "",
            f"[bold]Action:[/bold] {action.instruction}",
            f"[dim]{action.rationale}[/dim]",
        ]
        if action.new_stop_loss is not None:
            lines.append(f"New stop-loss: {action.new_stop_loss:,.0f}")
        if action.new_target is not None:
            lines.append(f"New target: {action.new_target:,.0f}")
        lines.extend(["", check.summary])

        self.console.print(Panel("\n".join(lines), title="3:15 PM Routine Check", border_style=color))

    def display_sentiment(self, sentiment: QuickSentiment) -> None:
        """Display a one-line sentiment."""
        color = self.VERDICT_COLORS.get(sentiment.sentiment, "white")
        self.console.print(
            f"[bold {color}]{sentiment.sentiment.value}[/bold {color}] - {sentiment.summary}"
        )

    def display_trades(self, trades: list[Trade], title: str = "Active Trades") -> None:
        """Table of trades."""
        if not trades:
            self.console.print(f"[yellow]No {title.lower()}.[/yellow]")
            return

        table = Table(title=title)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Entry", justify="center")
        table.add_column("Strategy")
        table.add_column("Verdict", justify="center")
        table.add_column("Entry Spot", justify="right")
        table.add_column("Stop", justify="right")
        table.add_column("Target", justify="right")
        table.add_column("P&L", justify="right")

        for trade in trades:
            color = self.VERDICT_COLORS.get(trade.verdict, "white")
            if trade.realized_pnl is None:
                pnl = "-"
            else:
                pnl_color = "green" if trade.result == TradeResult.PROFIT else "red"
                pnl = f"[{pnl_color}]{trade.realized_pnl:+,.2f}[/{pnl_color}]"
            table.add_row(
                trade.id,
                trade.entry_date.isoformat(),
                trade.strategy.name,
                f"[{color}]{trade.verdict.value}[/{color}]",
                f"{trade.entry_spot:,.2f}",
                f"{trade.stop_loss:,.0f}",
                f"{trade.target:,.0f}",
                pnl,
            )

        self.console.print(table)

    def display_stats(self, stats: PortfolioStats) -> None:
        """Portfolio summary panel."""
        pnl_color = "green" if stats.total_pnl >= 0 else "red"
        self.console.print(
            Panel(
                f"Closed trades: {stats.total_trades} "
                f"({stats.wins} wins / {stats.losses} losses)\n"
                f"Win rate: {stats.win_rate:.1f}%\n"
                f"Total P&L: [{pnl_color}]{stats.total_pnl:+,.2f}[/{pnl_color}]\n"
                f"Active trades: {stats.active_trades}",
                title="Portfolio",
                border_style="blue",
            )
        )

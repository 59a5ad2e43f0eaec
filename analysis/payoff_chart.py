from __future__ import annotations

from datetime import datetime
from pathlib import Path

import plotly.graph_objects as go

from analysis.position_analyzer import PositionAnalysis
from config.settings import settings


def build_payoff_figure(analysis: PositionAnalysis) -> go.Figure:
    """Expiry payoff line with strikes, break-evens and the current price marked."""
    curve = analysis.curve
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=curve.prices,
            y=curve.payoffs,
            name="Payoff at expiry",
            line=dict(color="blue"),
        )
    )
    fig.add_hline(y=0, line=dict(color="gray", width=1))

    for strike in sorted(set(analysis.legs.strikes)):
        fig.add_vline(x=strike, line=dict(color="lightgray", dash="dash"))

    if analysis.breakevens:
        fig.add_trace(
            go.Scatter(
                x=list(analysis.breakevens),
                y=[0.0] * len(analysis.breakevens),
                mode="markers+text",
                text=[f"{b:.2f}" for b in analysis.breakevens],
                textposition="top center",
                name="Break-even",
                marker=dict(color="orange", size=9),
            )
        )

    if analysis.current_price is not None:
        fig.add_trace(
            go.Scatter(
                x=[analysis.current_price],
                y=[analysis.payoff_at_current],
                mode="markers",
                name="Current price",
                marker=dict(color="green" if analysis.payoff_at_current >= 0 else "red", size=11),
            )
        )

    fig.update_layout(
        title=f"{analysis.strategy_name}: {analysis.underlying} {analysis.expiry}",
        xaxis_title="Underlying price at expiry",
        yaxis_title="Profit / loss",
        height=600,
    )
    return fig


def write_payoff_chart(analysis: PositionAnalysis, output_path: Path | None = None) -> Path:
    if output_path is None:
        filename = f"payoff_{analysis.underlying}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.html"
        output_path = settings.reports_dir / filename.replace(" ", "_")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_payoff_figure(analysis)
    fig.write_html(str(output_path), include_plotlyjs="cdn")
    return output_path

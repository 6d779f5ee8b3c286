"""Plotly interactive rendering backend for seminar-charts.

Each ``plotly_*()`` function takes a prepared data dict (from
:mod:`~seminar_charts._chart_data`) and returns a
:class:`plotly.graph_objects.Figure` with zoom, pan and hover, ready for
``fig.write_html()`` into a slide.

Install via ``pip install seminar-charts[interactive]``.
"""

from __future__ import annotations

from typing import Any

from seminar_charts.exceptions import ConfigurationError


def _import_plotly() -> Any:
    """Lazy-import plotly with a friendly error message."""
    try:
        import plotly.graph_objects as go
        return go
    except ImportError:
        raise ConfigurationError(
            "Plotly is required for interactive visualizations. "
            "Install it with:  pip install seminar-charts[interactive]"
        ) from None


# ---------------------------------------------------------------------------
# Shared layout helpers
# ---------------------------------------------------------------------------

_SLIDE_LAYOUT = dict(
    template="plotly_white",
    font=dict(family="Inter, sans-serif", size=13),
    margin=dict(l=80, r=80, t=60, b=60),
)

_BID_NEW = "#2e86c1"
_BID_OLD = "#85c1e9"
_ASK_NEW = "#c0392b"
_ASK_OLD = "#f1948a"


def _base_figure(go: Any, title: str = "", **kwargs: Any) -> Any:
    """Create a Plotly figure with the slide theme."""
    layout = {**_SLIDE_LAYOUT, "title": dict(text=title, x=0.5)}
    layout.update(kwargs)
    return go.Figure(layout=layout)


def _add_mid_price(fig: Any, data: dict) -> None:
    if data["mid_price"] is not None:
        fig.add_hline(
            y=data["mid_price"],
            line=dict(color="#555", dash="dash", width=1),
            annotation_text=f"Mid {data['mid_price_text']}",
        )


# ---------------------------------------------------------------------------
# Rendering functions
# ---------------------------------------------------------------------------


def plotly_book_depth(data: dict) -> Any:
    """Render a depth ladder: bids extend left, asks right."""
    go = _import_plotly()
    bids, asks = data["bids"], data["asks"]
    fig = _base_figure(
        go,
        title=f"Order Book {data['time_text']} (mid {data['mid_price_text']})",
        barmode="overlay",
    )
    fig.add_trace(go.Bar(
        x=-bids["volume"], y=bids["price"], orientation="h",
        marker_color=_BID_NEW, name="Bids",
        customdata=bids["volume"],
        hovertemplate="Bid %{y:.2f}<br>Volume: %{customdata}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=asks["volume"], y=asks["price"], orientation="h",
        marker_color=_ASK_NEW, name="Asks",
        hovertemplate="Ask %{y:.2f}<br>Volume: %{x}<extra></extra>",
    ))
    _add_mid_price(fig, data)
    fig.update_xaxes(title_text="Volume", range=[-data["volume_max"], data["volume_max"]])
    fig.update_yaxes(title_text="Price", range=data["price_domain"])
    return fig


def plotly_split_book(data: dict) -> Any:
    """Render a split-book ladder with old and new volume stacked."""
    go = _import_plotly()
    bids, asks = data["bids"], data["asks"]
    fig = _base_figure(
        go,
        title=f"Old vs New Orders {data['time_text']} (mid {data['mid_price_text']})",
        barmode="relative",
    )
    for frame, column, colour, label, sign in (
        (bids, "old_volume", _BID_OLD, "Old Bid", -1),
        (bids, "new_volume", _BID_NEW, "New Bid", -1),
        (asks, "old_volume", _ASK_OLD, "Old Ask", 1),
        (asks, "new_volume", _ASK_NEW, "New Ask", 1),
    ):
        fig.add_trace(go.Bar(
            x=sign * frame[column], y=frame["price"], orientation="h",
            marker_color=colour, name=label,
            customdata=frame[column],
            hovertemplate=f"{label}: %{{y:.2f}}<br>Volume: %{{customdata}}<extra></extra>",
        ))
    _add_mid_price(fig, data)
    fig.update_xaxes(title_text="Volume", range=[-data["volume_max"], data["volume_max"]])
    fig.update_yaxes(title_text="Price", range=data["price_domain"])
    return fig


def plotly_digit_heatmap(data: dict) -> Any:
    """Render the digit x position frequency heatmap."""
    go = _import_plotly()
    matrix = data["matrix"]
    fig = _base_figure(go, title="Timestamp Digit Frequency")
    fig.add_trace(go.Heatmap(
        z=matrix.to_numpy(), x=list(matrix.columns), y=list(matrix.index),
        colorscale="Blues", zmin=0, zmax=data["max_count"],
        colorbar=dict(title="Count"),
        hovertemplate="Position %{x}<br>Digit %{y}<br>Count: %{z}<extra></extra>",
    ))
    fig.update_xaxes(title_text="Digit position", dtick=1)
    fig.update_yaxes(title_text="Digit", dtick=1, autorange="reversed")
    return fig


def plotly_price_time_heatmap(data: dict) -> Any:
    """Render the sparse price x time quantity heatmap."""
    go = _import_plotly()
    cells = data["cells"]
    fig = _base_figure(go, title="Price-Time Heatmap (Quantity Weighted)")
    fig.add_trace(go.Heatmap(
        x=cells["time_label"], y=cells["price_label"], z=cells["total_quantity"],
        customdata=cells[["count", "mean_price"]].to_numpy(),
        colorscale="Viridis", zmin=0, zmax=data["max_quantity"],
        colorbar=dict(title="Quantity"),
        hovertemplate=(
            "Time: %{x}<br>Price Range: %{y}<br>Total Quantity: %{z}<br>"
            "Trades: %{customdata[0]}<br>Avg Price: %{customdata[1]:.2f}<extra></extra>"
        ),
    ))
    labelled = data["labelled_cells"]
    fig.add_trace(go.Scatter(
        x=labelled["time_label"], y=labelled["price_label"],
        text=labelled["total_quantity"].astype(str),
        mode="text", showlegend=False, hoverinfo="skip",
    ))
    fig.update_xaxes(
        title_text="Time",
        categoryorder="array",
        categoryarray=data["time_columns"]["label"].tolist(),
        tickangle=-45 if data["rotate_time_labels"] else 0,
    )
    fig.update_yaxes(
        title_text="Price",
        categoryorder="array",
        categoryarray=data["price_rows"]["label"].tolist()[::-1],
    )
    return fig


def plotly_ticks(data: dict) -> Any:
    """Render a trade-price line."""
    go = _import_plotly()
    ticks = data["ticks"]
    fig = _base_figure(go, title="Tick Chart")
    fig.add_trace(go.Scatter(
        x=ticks["timestamp"], y=ticks["price"],
        mode="lines", line=dict(width=1.5, color="#2e86c1"), name="Price",
        hovertemplate="Time: %{x|%H:%M:%S}<br>Price: %{y:.2f}<extra></extra>",
    ))
    fig.update_xaxes(title_text="Time", tickformat="%H:%M:%S")
    fig.update_yaxes(title_text="Price", range=list(data["y_domain"]))
    return fig


def plotly_ohlc(data: dict) -> Any:
    """Render daily OHLC bars."""
    go = _import_plotly()
    bars = data["bars"]
    fig = _base_figure(go, title="Daily OHLC", xaxis_rangeslider_visible=False)
    fig.add_trace(go.Ohlc(
        x=bars["date"], open=bars["open"], high=bars["high"],
        low=bars["low"], close=bars["close"], name="OHLC",
    ))
    fig.update_xaxes(
        type="category", tickvals=data["tick_dates"], tickangle=-45,
    )
    fig.update_yaxes(title_text="Price", range=list(data["y_domain"]))
    return fig


def plotly_results(data: dict) -> Any:
    """Render the pLOB results lines."""
    go = _import_plotly()
    fig = _base_figure(go, title="pLOB Results")
    for series in data["series"]:
        values = series["values"]
        fig.add_trace(go.Scatter(
            x=values["time"], y=values["value"],
            mode="lines+markers", line=dict(shape="spline", color=series["colour"]),
            name=series["name"],
        ))
    fig.update_xaxes(title_text="pLOB based on age (minutes)")
    fig.update_yaxes(title_text="Value (%)")
    return fig

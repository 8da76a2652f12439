"""Chart builders (Altair) for tracked time."""

from __future__ import annotations

from datetime import date

import altair as alt
import pandas as pd


def minutes_per_day_chart(daily: pd.DataFrame, start: date, end: date):
    """Bar chart of minutes logged per day, zero-filled across ``[start, end]``."""
    all_dates = pd.DataFrame({"date": pd.date_range(start, end, freq="D")})
    if daily is None or daily.empty:
        chart_df = all_dates.assign(minutes=0)
    else:
        agg = daily.rename(columns={"day": "date"}).copy()
        agg["date"] = pd.to_datetime(agg["date"])
        chart_df = all_dates.merge(agg[["date", "minutes"]], on="date", how="left")
        chart_df["minutes"] = chart_df["minutes"].fillna(0).astype(int)
    chart_df["hours"] = (chart_df["minutes"] / 60).round(2)

    bars = (
        alt.Chart(chart_df)
        .mark_bar(color="#1f77b4")
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("minutes:Q", title="Minutes Logged"),
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("minutes:Q", title="Minutes"),
                alt.Tooltip("hours:Q", title="Hours"),
            ],
        )
    )

    shading = alt.Chart(pd.DataFrame()).mark_rect()
    weekend = chart_df[chart_df["date"].dt.weekday.isin([5, 6])][["date"]].copy()
    if not weekend.empty:
        weekend = weekend.assign(date_end=weekend["date"] + pd.Timedelta(days=1))
        shading = alt.Chart(weekend).mark_rect(color="#f2f2f2").encode(x="date:T", x2="date_end:T")

    return (shading + bars).properties(height=260), chart_df


def status_donut(distribution: dict[str, int]):
    if not distribution or sum(distribution.values()) == 0:
        return None
    df = pd.DataFrame({"status": list(distribution.keys()), "count": list(distribution.values())})
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=50)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("status:N", title="Status"),
            tooltip=[alt.Tooltip("status:N", title="Status"), alt.Tooltip("count:Q", title="Tasks")],
        )
        .properties(height=220)
    )

from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

from survey_core.config import QUADRANT_MIDPOINT

alt.data_transformers.disable_max_rows()

STATUS_COLORS = {"good": "#43A047", "warning": "#FBC02D", "risk": "#E53935"}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def org_donut(groups: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(groups)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("total:Q"),
            color=alt.Color("name:N", title="Organization"),
            tooltip=["name", "total", "completed", alt.Tooltip("response_rate:Q", format="d")],
        )
        .properties(height=260)
    )


def response_rate_bar(groups: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(groups)
        .mark_bar()
        .encode(
            y=alt.Y("name:N", sort=None, title=None),
            x=alt.X("response_rate:Q", title="Response Rate (%)", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color(
                "status:N",
                scale=alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values())),
                legend=None,
            ),
            tooltip=["name", "completed", "total", alt.Tooltip("response_rate:Q", format="d")],
        )
        .properties(height=max(120, 28 * len(groups)))
    )


def category_bar(scores: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(scores)
        .mark_bar()
        .encode(
            x=alt.X("score:Q", title="Score", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("category:N", sort="-x", title=None),
            tooltip=["category", alt.Tooltip("score:Q", format=".1f"), "count"],
        )
        .properties(height=max(120, 28 * len(scores)))
    )


def importance_scatter(points: pd.DataFrame) -> alt.LayerChart:
    """Satisfaction (x) vs importance (y) with midpoint rules splitting the quadrants."""
    base = alt.Chart(points).encode(
        x=alt.X("x:Q", title="Satisfaction", scale=alt.Scale(domain=[0, 100])),
        y=alt.Y("y:Q", title="Importance", scale=alt.Scale(domain=[0, 100])),
    )
    dots = base.mark_circle(size=120).encode(
        color=alt.Color("color:N", scale=None),
        tooltip=["label", alt.Tooltip("x:Q", format=".1f"), alt.Tooltip("y:Q", format=".1f"), "quadrant"],
    )
    labels = base.mark_text(dy=-12).encode(text="label:N")
    mid = pd.DataFrame({"v": [QUADRANT_MIDPOINT]})
    vrule = alt.Chart(mid).mark_rule(strokeDash=[4, 4]).encode(x="v:Q")
    hrule = alt.Chart(mid).mark_rule(strokeDash=[4, 4]).encode(y="v:Q")
    return alt.layer(dots, labels, vrule, hrule).properties(height=360)


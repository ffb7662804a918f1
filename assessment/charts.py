from __future__ import annotations

from typing import Any, Dict, Optional

import altair as alt

from assessment.records import DOMAIN_TITLES, Domain
from assessment.views import ChartSeries

alt.data_transformers.disable_max_rows()

# Field trial scores run 1 (best) to 6.
FIELD_TRIAL_SCALE = alt.Scale(domain=[0, 6], reverse=True)


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def build_chart(series: ChartSeries) -> Optional[alt.Chart]:
    """Grouped bar chart for a numeric series; None when nothing should be drawn."""
    if series.is_empty or not series.is_numeric:
        return None
    long_df = series.to_long_frame()
    y_scale = FIELD_TRIAL_SCALE if series.domain is Domain.FIELD_TRIAL else alt.Scale(zero=True)
    sort_order = list(series.keys)
    chart = (
        alt.Chart(long_df, title=DOMAIN_TITLES[series.domain])
        .mark_bar()
        .encode(
            x=alt.X("key:N", title=None, sort=sort_order, axis=alt.Axis(labelAngle=-30)),
            y=alt.Y("value:Q", title="Bewertung", scale=y_scale),
            color=alt.Color("series:N", title=None),
            xOffset=alt.XOffset("series:N"),
            tooltip=[
                alt.Tooltip("label:N", title="Kategorie"),
                alt.Tooltip("series:N", title="Reihe"),
                alt.Tooltip("value:Q", title="Wert"),
            ],
        )
    )
    return chart


def chart_spec(series: ChartSeries) -> Optional[Dict[str, Any]]:
    chart = build_chart(series)
    return to_vega_spec(chart) if chart is not None else None

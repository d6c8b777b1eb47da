# Dashboard chart rendering
from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from ..models import ChartConfig, DataRecord

COLORS = ['#0ea5e9', '#84cc16', '#f97316', '#8b5cf6', '#ec4899', '#facc15']
CHART_HEIGHT = 300


def build_chart_figure(config: ChartConfig, records: Sequence[DataRecord]) -> Optional[go.Figure]:
    """Plotly figure for a chart config, or None when there is nothing drawable."""
    if not records or not config.valueKeys:
        return None

    df = pd.DataFrame.from_records(list(records))
    needed = [config.dataKey] + list(config.valueKeys)
    if any(col not in df.columns for col in needed):
        return None

    x = config.dataKey
    y = list(config.valueKeys)
    common = dict(title=config.title, color_discrete_sequence=COLORS, height=CHART_HEIGHT)

    if config.chartType == "bar":
        fig = px.bar(df, x=x, y=y, barmode="group", **common)
    elif config.chartType == "line":
        fig = px.line(df, x=x, y=y, **common)
    elif config.chartType == "area":
        fig = px.area(df, x=x, y=y, **common)
    elif config.chartType == "scatter":
        fig = px.scatter(df, x=x, y=y[0], **common)
    elif config.chartType == "pie":
        pie_df = pd.DataFrame({
            "name": df[x].astype(str),
            "value": pd.to_numeric(df[y[0]], errors="coerce"),
        }).dropna()
        fig = px.pie(pie_df, names="name", values="value", **common)
    else:
        return None

    fig.update_layout(legend_title_text="", margin=dict(l=10, r=10, t=50, b=10))
    return fig


def render_chart(config: ChartConfig, records: Sequence[DataRecord]) -> None:
    with st.container(border=True):
        fig = build_chart_figure(config, records)
        if fig is None:
            if not records:
                st.info("No data to chart.")
            else:
                st.warning(f"Cannot draw '{config.title}' ({config.chartType}) with the current data.")
        else:
            st.plotly_chart(fig, use_container_width=True)
        if config.description:
            st.caption(config.description)

from datetime import datetime
from typing import List

import altair as alt
import pandas as pd

from .growth import GROWTH_STAGES, growth_progress
from .models import FarmerCrop

ACCENT = "#16a34a"
STAGE_COLORS = ["#86efac", "#4ade80", "#22c55e", "#16a34a"]


def progress_frame(crops: List[FarmerCrop], now: datetime) -> pd.DataFrame:
    rows = []
    for c in crops:
        p = growth_progress(c, now)
        rows.append({
            "crop": c.crop_name or c.crop_id,
            "days": p.days_grown,
            "growth_days": p.growth_days,
            "progress": round(p.percent, 1),
            "stage": p.stage,
        })
    return pd.DataFrame(rows, columns=["crop", "days", "growth_days", "progress", "stage"])


def style_chart(chart):
    text, bg, grid = "#111", "#ffffff", ACCENT + "33"
    return (
        chart
        .configure_view(strokeOpacity=0, fill=bg)
        .configure(background=bg)
        .configure_axis(labelColor=text, titleColor=text, grid=True, gridColor=grid)
        .configure_legend(labelColor=text, titleColor=text)
    )


def progress_chart(df: pd.DataFrame):
    """Horizontal bars from planting (0%) to harvest ready (100%), colored by stage."""
    stages = [label for _, label in GROWTH_STAGES]
    bars = alt.Chart(df).mark_bar(cornerRadiusEnd=6).encode(
        x=alt.X("progress:Q", title="Growth progress (%)", scale=alt.Scale(domain=[0, 100])),
        y=alt.Y("crop:N", title=None, sort=None),
        color=alt.Color("stage:N", title="Stage",
                        scale=alt.Scale(domain=stages, range=STAGE_COLORS)),
        tooltip=["crop", "days", "growth_days", "progress", "stage"],
    )
    labels = alt.Chart(df).mark_text(align="left", dx=4, color="#111").encode(
        x="progress:Q", y=alt.Y("crop:N", sort=None), text=alt.Text("progress:Q", format=".0f"),
    )
    return style_chart((bars + labels).properties(height=max(80, 48 * len(df))))

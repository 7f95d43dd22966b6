import json
from datetime import datetime
from html import escape
from typing import List, Optional

import streamlit as st
import streamlit.components.v1 as st_components

from .charts import progress_chart, progress_frame
from .growth import GROWTH_STAGES, growth_progress
from .models import Alert, Farmer, FarmerCrop, WeatherData
from .presenters import alert_style, alert_title, format_date, relative_time
from .view_state import Session

SESSION_COOKIE = "agroalert_refresh"
SESSION_COOKIE_MAX_AGE = 30 * 24 * 3600

CARD_CSS = """
<style>
.card { border-radius: 10px; padding: 12px 14px; margin-bottom: 10px; border: 1px solid #e5e7eb; background: #fff; }
.card .title { font-size: 0.85rem; color: #4b5563; }
.card .big { font-size: 1.6rem; font-weight: 700; color: #111; }
.card .sub { font-size: 0.8rem; color: #6b7280; }
.card.green { background: #f0fdf4; border-color: #bbf7d0; }
.card.amber { background: #fffbeb; border-color: #fde68a; }
.card.blue  { background: #eff6ff; border-color: #bfdbfe; }
.card.teal  { background: #f0fdfa; border-color: #99f6e4; }
.card.gray  { background: #f9fafb; border-color: #e5e7eb; }
.card.red   { background: #fef2f2; border-color: #fecaca; }
.farmer-link { display: block; text-decoration: none !important; color: inherit !important; }
.farmer-link:hover .card { border-color: #4ade80; box-shadow: 0 4px 12px #16a34a22; }
</style>
"""


def inject_css():
    st.markdown(CARD_CSS, unsafe_allow_html=True)


def card(title: str, value: str, sub: str = "", color: str = "gray", emoji: str = ""):
    html = f"""
    <div class="card {color}">
      <div class="title">{emoji and f'<span class="emoji">{emoji}</span> '}{escape(title)}</div>
      <div class="big">{escape(value)}</div>
      {f'<div class="sub">{escape(sub)}</div>' if sub else ''}
    </div>
    """
    st.markdown(html, unsafe_allow_html=True)


def load_error(what: str, detail: str = ""):
    st.error(f"⚠️ Could not load {what}. Please try again later." + (f"\n\n`{detail}`" if detail else ""))


def farmer_link_card(farmer: Farmer):
    # a real link reloads the page, so the farmer id arrives as a fresh query string
    html = f"""
    <a class="farmer-link" href="?farmer={escape(farmer.id, quote=True)}" target="_self">
      <div class="card green">
        <div class="big">👤 {escape(farmer.name)}</div>
        <div class="sub">📍 {escape(farmer.location_name)}</div>
        <div class="sub">📞 {escape(farmer.phone)}</div>
        <div class="sub"><em>Click to view dashboard</em></div>
      </div>
    </a>
    """
    st.markdown(html, unsafe_allow_html=True)


def weather_panel(weather: WeatherData):
    st.markdown("### ☁️ Current Weather")
    st.caption("NASA POWER data")
    c1, c2, c3 = st.columns(3)
    c1.metric("🌡️ Temperature", f"{weather.temperature:g}°C")
    c2.metric("💧 Humidity", f"{weather.humidity:g}%")
    c3.metric("🌧️ Rainfall", f"{weather.rainfall:g}mm")
    if weather.forecast:
        st.info(weather.forecast)


def alert_card(alert: Alert, now: datetime, relative: bool = True):
    icon, color = alert_style(alert.alert_type)
    when = relative_time(alert.sent_at, now) if relative else format_date(alert.sent_at)
    unread = "" if alert.is_read else " • <strong>New</strong>"
    html = f"""
    <div class="card {color}">
      <div class="title">{icon} <strong>{escape(alert_title(alert.alert_type))}</strong>{unread}</div>
      <div>{escape(alert.message)}</div>
      <div class="sub">🕒 {escape(when)}</div>
    </div>
    """
    st.markdown(html, unsafe_allow_html=True)


def crop_progress_card(farmer_crop: FarmerCrop, now: datetime):
    p = growth_progress(farmer_crop, now)
    with st.container(border=True):
        top_l, top_r = st.columns([3, 1])
        top_l.markdown(f"**{farmer_crop.crop_name or 'Unknown crop'}**")
        top_l.caption(f"📅 Planted: {format_date(farmer_crop.planting_date)}")
        top_r.markdown(f"`{farmer_crop.status or '-'}`")
        st.progress(p.percent / 100.0, text=f"Growth Progress: {round(p.percent)}% • {p.stage}")
        b_l, b_r = st.columns(2)
        b_l.caption(f"Area: **{farmer_crop.area_hectares:g} ha**")
        if p.days_until_planting:
            b_r.caption(f"Planting in **{p.days_until_planting}** days")
        else:
            b_r.caption(f"Days: **{p.days_grown} / {p.growth_days or '-'}**")


def progress_timeline(crops: List[FarmerCrop], now: datetime):
    if not crops:
        st.caption("No crops planted yet")
        return
    st.altair_chart(progress_chart(progress_frame(crops, now)), use_container_width=True)
    with st.expander("Growth Stages Legend"):
        lower = 0
        for upper, label in GROWTH_STAGES:
            st.write(f"{lower:.0f}-{upper:.0f}% : {label}")
            lower = upper


# ------------------------------
# Officer session cookie
# ------------------------------

def stored_refresh_token() -> Optional[str]:
    """Refresh token the browser sent when this page session connected."""
    return st.context.cookies.get(SESSION_COOKIE) or None


def sync_session_cookie(session: Optional[Session]):
    """Keep the browser cookie in step with the officer session (cleared on sign-out)."""
    token = session.refresh_token if session else ""
    if st.session_state.get("_session_cookie", stored_refresh_token() or "") == token:
        return
    st.session_state._session_cookie = token
    max_age = SESSION_COOKIE_MAX_AGE if token else 0
    cookie = f"{SESSION_COOKIE}={token}; path=/; max-age={max_age}; SameSite=Strict"
    st_components.html(f"<script>window.parent.document.cookie = {json.dumps(cookie)};</script>",
                       height=0)

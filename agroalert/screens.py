import logging
from datetime import datetime

import streamlit as st

from . import components
from .auth import AuthClient
from .errors import AuthError
from .loaders import (ERROR, load_farmer_dashboard, load_farmer_details, load_farmer_directory,
                      load_portal_overview)
from .presenters import (filter_farmers, format_coordinates, total_area, unique_locations,
                         unread_count)
from .store import DataStore
from .view_state import ViewStateSelector

log = logging.getLogger(__name__)


# ------------------------------
# Landing page
# ------------------------------

def landing(store: DataStore, selector: ViewStateSelector):
    title_col, login_col = st.columns([5, 1])
    with title_col:
        st.title("🌱 Agroalert")
        st.caption("Smart Farming System")
    with login_col:
        if st.button("🔐 Officer Login", use_container_width=True):
            selector.request_officer_login()
            st.rerun()

    st.subheader("Welcome Farmers!")
    st.write("Access your personalized dashboard through the SMS link sent to your phone. "
             "Get real-time weather updates, crop progress tracking, and farming alerts.")

    st.markdown("### 👤 Registered Farmers")
    with st.spinner("Loading..."):
        farmers = load_farmer_directory(store)
    if farmers.status == ERROR:
        components.load_error("the farmer directory", farmers.error or "")
    elif farmers.is_empty:
        st.info("No farmers registered yet")
    else:
        cols = st.columns(3)
        for i, farmer in enumerate(farmers.data):
            with cols[i % 3]:
                components.farmer_link_card(farmer)

    a, b, c = st.columns(3)
    with a:
        components.card("Real-Time Weather", "☁️",
                        sub="NASA POWER satellite data provides accurate weather for your location",
                        color="blue")
    with b:
        components.card("Crop Tracking", "🌾",
                        sub="Monitor your crops' growth from planting to harvest", color="green")
    with c:
        components.card("SMS Alerts", "📱",
                        sub="Timely notifications about planting, weather warnings and harvest readiness",
                        color="amber")
    st.caption("Agricultural Extension Services - Supporting Farmers Across Kenya")


# ------------------------------
# Farmer dashboard
# ------------------------------

def farmer_dashboard(store: DataStore, farmer_id: str, now: datetime, alert_limit: int):
    with st.spinner("Loading your farm data..."):
        data = load_farmer_dashboard(store, farmer_id, alert_limit=alert_limit)

    if data.farmer.status == ERROR:
        components.load_error("your farm data", data.farmer.error or "")
        return
    farmer = data.farmer.data
    if farmer is None:
        st.error("Farmer not found")
        return

    crops = data.crops.data
    alerts = data.alerts.data

    head_l, head_r = st.columns([4, 1])
    with head_l:
        st.title(f"Welcome back, {farmer.name}!")
        st.caption(f"📍 {farmer.location_name}")
    with head_r:
        components.card("New Alerts", str(unread_count(alerts)), color="green", emoji="🔔")

    if data.weather.status == ERROR:
        components.load_error("weather", data.weather.error or "")
    elif data.weather.data is not None:
        components.weather_panel(data.weather.data)

    c1, c2, c3 = st.columns(3)
    with c1:
        components.card("Total Crops", str(len(crops)), color="green", emoji="🌱")
    with c2:
        components.card("Total Area", f"{total_area(crops):.1f} ha", color="teal", emoji="📍")
    with c3:
        components.card("Season Status", "Active", color="blue", emoji="📈")

    left, right = st.columns(2)
    with left:
        st.markdown("### 🌱 Your Crops")
        if data.crops.status == ERROR:
            components.load_error("your crops", data.crops.error or "")
        elif data.crops.is_empty:
            st.caption("No crops planted yet")
        for fc in crops:
            components.crop_progress_card(fc, now)
    with right:
        st.markdown("### Crop Growth Timeline")
        components.progress_timeline(crops, now)

    st.markdown("### 🔔 Recent Alerts & Updates")
    if data.alerts.status == ERROR:
        components.load_error("your alerts", data.alerts.error or "")
    elif data.alerts.is_empty:
        st.caption("No alerts yet")
    for alert in alerts:
        components.alert_card(alert, now)


# ------------------------------
# Officer login
# ------------------------------

def officer_login(auth: AuthClient, selector: ViewStateSelector):
    st.title("🔐 Extension Officer Login")
    with st.form("officer_login"):
        email = st.text_input("Email", key="officer_email")
        password = st.text_input("Password", type="password", key="officer_password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            # the SIGNED_IN event moves the selector on
            auth.sign_in_with_password(email, password)
        except AuthError as e:
            log.info("Officer sign-in rejected for %s: %s", email, e)
            st.error(str(e))
        else:
            st.rerun()

    if st.button("← Back to farmers"):
        selector.cancel_login()
        st.rerun()


# ------------------------------
# Officer portal
# ------------------------------

def officer_portal(store: DataStore, auth: AuthClient, selector: ViewStateSelector, now: datetime):
    store = store.for_session(selector.session)

    head_l, head_r = st.columns([5, 1])
    with head_l:
        st.title("Extension Officer Portal")
        st.caption("Farmer Management & Monitoring System")
        officer = selector.session.officer if selector.session else None
        if officer is not None:
            st.caption(f"Signed in as {officer.name}" + (f" • {officer.region}" if officer.region else ""))
    with head_r:
        if st.button("🚪 Logout", use_container_width=True):
            auth.sign_out()
            selector.logout()
            st.session_state.pop("selected_farmer_id", None)
            st.rerun()

    with st.spinner("Loading..."):
        portal = load_portal_overview(store)
    farmers = portal.farmers.data

    selected_id = st.session_state.get("selected_farmer_id")
    selected = next((f for f in farmers if f.id == selected_id), None)
    details = load_farmer_details(store, selected.id) if selected else None

    s1, s2, s3, s4 = st.columns(4)
    s1.metric("👥 Total Farmers", len(farmers))
    s2.metric("📍 Locations", unique_locations(farmers))
    s3.metric("🔔 Active Alerts", len(details.alerts.data) if details else 0)
    s4.metric("📈 Season Status", "Active")

    left, right = st.columns([1, 2])
    with left:
        st.markdown("### 👥 Farmers Directory")
        if portal.farmers.status == ERROR:
            components.load_error("farmers", portal.farmers.error or "")
        term = st.text_input("Search farmers...", key="farmer_search")
        for f in filter_farmers(farmers, term):
            label = f"{'✅ ' if selected and f.id == selected.id else ''}{f.name} • {f.location_name}"
            if st.button(label, key=f"pick_{f.id}", help=f.phone, use_container_width=True):
                st.session_state.selected_farmer_id = f.id
                st.rerun()

        st.markdown("### ☁️ Weather Overview")
        if portal.weather.status == ERROR:
            components.load_error("weather", portal.weather.error or "")
        for w in portal.weather.data:
            components.card(w.location_name, f"{w.temperature:g}°C",
                            sub=f"Humidity: {w.humidity:g}% • Rainfall: {w.rainfall:g}mm", color="blue")

    with right:
        if selected is None:
            with st.container(border=True):
                st.markdown("### Select a Farmer")
                st.caption("Choose a farmer from the directory to view their details, crops, and alerts")
            return

        with st.container(border=True):
            info_l, info_r = st.columns([3, 1])
            info_l.markdown(f"## {selected.name}")
            info_l.caption(f"📍 {selected.location_name} • 📞 {selected.phone}")
            info_r.caption("Coordinates")
            info_r.code(format_coordinates(selected), language=None)

            st.markdown("#### 🌱 Crops Planted")
            if details.crops.status == ERROR:
                components.load_error("crops", details.crops.error or "")
            elif details.crops.is_empty:
                st.caption("No crops planted yet")
            cols = st.columns(2)
            for i, fc in enumerate(details.crops.data):
                with cols[i % 2]:
                    components.crop_progress_card(fc, now)

        st.markdown("#### 🔔 Alert History")
        if details.alerts.status == ERROR:
            components.load_error("alerts", details.alerts.error or "")
        elif details.alerts.is_empty:
            st.caption("No alerts sent yet")
        for alert in details.alerts.data:
            components.alert_card(alert, now, relative=False)

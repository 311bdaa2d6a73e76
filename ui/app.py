"""Streamlit UI for the residency tracker.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import base64  # noqa: E402
from datetime import date  # noqa: E402

import httpx  # noqa: E402
import streamlit as st  # noqa: E402

from backend.app.config import get_settings  # noqa: E402
from backend.app.llm.client import build_greeting  # noqa: E402
from backend.app.models.residency import ResidencyStatus  # noqa: E402
from ui.helpers import (  # noqa: E402
    add_trips,
    build_departure_view,
    build_status_view,
    build_trip_rows,
    delete_trip,
    extract_trips,
    fetch_departure_check,
    fetch_status,
    fetch_trips,
    send_chat,
)

settings = get_settings()
BACKEND_URL = settings.ui_backend_url

# Page config
st.set_page_config(
    page_title="Residency Day Tracker",
    page_icon="🛂",
    layout="wide",
)

# Initialize session state
if "rows" not in st.session_state:
    st.session_state.rows = [{"departure": "", "arrival": ""}]
if "form_error" not in st.session_state:
    st.session_state.form_error = None
if "chat" not in st.session_state:
    st.session_state.chat = []

st.title(f"🛂 Days in {settings.residence_country}")
st.markdown(
    f"*Track days present against the {settings.residency_threshold_days}-day rule "
    "over a rolling 365-day window*"
)
st.divider()

col_left, col_right = st.columns([1, 1.2])

# =============================================================================
# LEFT COLUMN - TRIP ENTRY + LIST
# =============================================================================
with col_left:
    st.subheader("✈️ Add trips")

    uploaded = st.file_uploader("Read trips from a screenshot", type=["png", "jpg", "jpeg", "webp"])
    if uploaded is not None and st.button("🔍 Analyze screenshot"):
        try:
            image_b64 = base64.b64encode(uploaded.getvalue()).decode("ascii")
            found = extract_trips(BACKEND_URL, image_b64, uploaded.type or "image/png")
            if found:
                filled = [r for r in st.session_state.rows if r["departure"] or r["arrival"]]
                st.session_state.rows = filled + found
                st.session_state.form_error = None
            else:
                st.session_state.form_error = "No trips were found on the screenshot."
        except httpx.HTTPError:
            st.session_state.form_error = (
                "Something went wrong while analyzing the image. Please try again."
            )
        st.rerun()

    with st.form("trip_form"):
        for index, row in enumerate(st.session_state.rows):
            col_dep, col_arr = st.columns(2)
            with col_dep:
                row["departure"] = st.text_input(
                    f"Departure #{index + 1}", value=row["departure"], placeholder="YYYY-MM-DD"
                )
            with col_arr:
                row["arrival"] = st.text_input(
                    f"Arrival #{index + 1}", value=row["arrival"], placeholder="YYYY-MM-DD"
                )

        col_add, col_submit = st.columns(2)
        with col_add:
            add_row = st.form_submit_button("➕ Add a row")
        with col_submit:
            submitted = st.form_submit_button("💾 Save trips", type="primary")

        if add_row:
            st.session_state.rows.append({"departure": "", "arrival": ""})
            st.rerun()

        if submitted:
            added, error = add_trips(BACKEND_URL, st.session_state.rows)
            if error:
                st.session_state.form_error = error
            else:
                st.session_state.form_error = None
                st.session_state.rows = [{"departure": "", "arrival": ""}]
            st.rerun()

    if st.session_state.form_error:
        st.error(f"❌ {st.session_state.form_error}")

    st.subheader("🧳 Your trips")
    trip_rows = build_trip_rows(fetch_trips(BACKEND_URL))
    if not trip_rows:
        st.info("Your trips will be listed here.")
    for trip_row in trip_rows:
        col_label, col_delete = st.columns([4, 1])
        with col_label:
            st.markdown(f"**{trip_row['label']}**")
            st.caption(f"{trip_row['days_away']} days away")
        with col_delete:
            if st.button("🗑️", key=f"delete-{trip_row['id']}"):
                delete_trip(BACKEND_URL, trip_row["id"])
                st.rerun()

# =============================================================================
# RIGHT COLUMN - STATUS, DEPARTURE CHECK, ASSISTANT
# =============================================================================
with col_right:
    calculation_date = st.date_input("Calculate as of", value=date.today()).isoformat()

    status = fetch_status(BACKEND_URL, calculation_date)
    view = build_status_view(status, calculation_date, settings.residency_threshold_days)

    st.subheader(view["title"])
    col_in, col_needed = st.columns(2)
    col_in.metric(f"Days in {settings.residence_country}", view["days_in"])
    col_needed.metric("Days still needed", view["days_needed"])
    st.caption(
        f"Days spent in {settings.residence_country} during the 365-day period ending on the "
        f"selected date. At least {settings.residency_threshold_days} days are required."
    )

    st.divider()
    st.subheader("🗓️ If I want to leave on...")
    departure_raw = st.text_input("Planned departure", placeholder="YYYY-MM-DD")
    departure_view = (
        build_departure_view(
            fetch_departure_check(BACKEND_URL, departure_raw), settings.residency_threshold_days
        )
        if departure_raw
        else None
    )
    if departure_view is not None:
        if departure_view["is_safe"]:
            st.success(f"✅ {departure_view['message']}")
        else:
            st.error(f"⚠️ {departure_view['message']}")
            if departure_view["detail"]:
                st.caption(departure_view["detail"])

    st.divider()
    st.subheader("🤖 AI assistant")

    greeting = build_greeting(
        ResidencyStatus(days_in=view["days_in"], days_needed=view["days_needed"]),
        date.fromisoformat(calculation_date),
        settings.residence_country,
    )
    with st.chat_message("assistant"):
        st.markdown(greeting)
    for turn in st.session_state.chat:
        with st.chat_message(turn["role"]):
            st.markdown(turn["text"])

    question = st.chat_input("Ask anything...")
    if question:
        try:
            reply = send_chat(BACKEND_URL, question, st.session_state.chat, calculation_date)
            st.session_state.chat.append({"role": "user", "text": question})
            st.session_state.chat.append({"role": "assistant", "text": reply["text"]})
        except httpx.HTTPError:
            st.session_state.chat.append({"role": "user", "text": question})
            st.session_state.chat.append(
                {
                    "role": "assistant",
                    "text": "Sorry, something went wrong while processing your request.",
                }
            )
        st.rerun()

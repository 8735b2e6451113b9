"""Streamlit front-end for the POD tracker.

Run with ``streamlit run podtracker/ui/app.py`` (API base URL from POD_API_BASE_URL).
"""

from __future__ import annotations

import streamlit as st

from podtracker.client import PatientApiClient
from podtracker.ui.screens import (
    SCREEN_ADD,
    SCREEN_LIST,
    add_patient_screen,
    current_screen,
    patient_list_screen,
)
from podtracker.ui.settings import get_ui_settings


@st.cache_resource
def get_client(base_url: str, timeout_seconds: float) -> PatientApiClient:
    # One pooled HTTP client per Streamlit server process.
    return PatientApiClient(base_url=base_url, timeout_seconds=timeout_seconds)


def main() -> None:
    settings = get_ui_settings()
    st.set_page_config(page_title="POD Tracker", layout="centered")

    title, toggle = st.columns([3, 1], vertical_alignment="center")
    title.title("POD Tracker")
    screen = current_screen()
    if toggle.button("← View Patients" if screen == SCREEN_ADD else "+ Add Patient"):
        st.session_state["screen"] = SCREEN_LIST if screen == SCREEN_ADD else SCREEN_ADD
        st.rerun()

    client = get_client(settings.api_base_url, settings.api_timeout_seconds)
    if screen == SCREEN_ADD:
        add_patient_screen(client)
    else:
        patient_list_screen(client, poll_interval_seconds=settings.poll_interval_seconds)


main()

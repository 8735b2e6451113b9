from __future__ import annotations

from datetime import date

import streamlit as st

from podtracker.client import PatientRecord
from podtracker.ui.formatting import format_ot_date, pod_label
from podtracker.ui.theme import COLORS, pod_badge_color


def required_label(label: str) -> str:
    return f"{label} *"


def date_input(
    label: str, *, key: str, required: bool = False, value: date | None = None
) -> date | None:
    """Calendar date picker; defaults to today, never returns a time component."""
    picked = st.date_input(
        required_label(label) if required else label,
        value=value or date.today(),
        key=key,
        format="YYYY-MM-DD",
    )
    # st.date_input returns a tuple only in range mode, which is never used here.
    return picked if isinstance(picked, date) else None


def patient_card(patient: PatientRecord) -> bool:
    """Render one patient; returns True when its Delete button was pressed."""
    with st.container(border=True):
        info, badge, action = st.columns([6, 2, 2], vertical_alignment="center")
        with info:
            st.markdown(f"**{patient.name}**")
            st.caption(f"MRN: {patient.mrn}")
            if patient.surgery_type:
                st.caption(patient.surgery_type)
            st.caption(f"OT Date: {format_ot_date(patient.ot_date)}")
        with badge:
            st.markdown(
                f"<div style='background:{pod_badge_color(patient.pod)};color:#fff;"
                f"padding:10px 16px;border-radius:8px;text-align:center;font-weight:600'>"
                f"{pod_label(patient.pod)}</div>",
                unsafe_allow_html=True,
            )
        with action:
            return st.button("Delete", key=f"delete-{patient.id}", type="secondary")


def empty_state(message: str) -> None:
    st.markdown(
        f"<div style='color:{COLORS['muted']};text-align:center;padding:40px'>{message}</div>",
        unsafe_allow_html=True,
    )

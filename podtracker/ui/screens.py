from __future__ import annotations

import logging

import streamlit as st

from podtracker.client import PatientApiClient, PatientApiError
from podtracker.ui.components import date_input, empty_state, patient_card, required_label
from podtracker.ui.formatting import missing_form_fields, patient_count_label

logger = logging.getLogger("podtracker.ui")

SCREEN_LIST = "list"
SCREEN_ADD = "add"

_FORM_KEYS = (
    "form-name",
    "form-mrn",
    "form-surgery-type",
    "form-ot-date",
    "form-surgeon",
    "form-unit",
)


def _go_to(screen: str) -> None:
    st.session_state["screen"] = screen


def current_screen() -> str:
    return st.session_state.get("screen", SCREEN_LIST)


def _clear_pending_delete() -> None:
    st.session_state.pop("pending_delete", None)


def _clear_delete_error() -> None:
    st.session_state.pop("delete_error", None)


# Dismissing a dialog with its close button clears the state that reopens it.
@st.dialog("Delete patient?", on_dismiss=_clear_pending_delete)
def _confirm_delete_dialog(client: PatientApiClient, patient_id: str, patient_name: str) -> None:
    st.write(f"Are you sure you want to delete **{patient_name}**?")
    confirm, cancel = st.columns(2)
    if confirm.button("Delete", key="confirm-delete", type="primary", width="stretch"):
        try:
            client.delete_patient(patient_id)
        except PatientApiError as exc:
            logger.warning("Patient delete failed", extra={"patient_id": patient_id})
            st.session_state["delete_error"] = exc.message or "Failed to delete patient"
        st.session_state.pop("pending_delete", None)
        st.rerun()
    if cancel.button("Cancel", key="cancel-delete", width="stretch"):
        st.session_state.pop("pending_delete", None)
        st.rerun()


@st.dialog("Delete failed", on_dismiss=_clear_delete_error)
def _delete_error_dialog(message: str) -> None:
    st.error(message)
    if st.button("OK", key="dismiss-delete-error", width="stretch"):
        st.session_state.pop("delete_error", None)
        st.rerun()


def patient_list_screen(client: PatientApiClient, *, poll_interval_seconds: int) -> None:
    if "delete_error" in st.session_state:
        _delete_error_dialog(st.session_state["delete_error"])
    elif "pending_delete" in st.session_state:
        patient_id, patient_name = st.session_state["pending_delete"]
        _confirm_delete_dialog(client, patient_id, patient_name)

    # Only this fragment re-runs on the timer; overlapping refreshes are not ordered.
    @st.fragment(run_every=poll_interval_seconds)
    def _patient_list() -> None:
        try:
            patients = client.list_patients()
        except PatientApiError as exc:
            logger.warning("Patient list failed to load", extra={"status_code": exc.status_code})
            st.error(f"Failed to load patients. {exc.message}")
            st.button("Retry", key="retry-load")
            return

        if not patients:
            empty_state('No patients yet. Click "+ Add Patient" to get started.')
            return

        st.caption(patient_count_label(len(patients)))
        for patient in patients:
            if patient_card(patient):
                st.session_state["pending_delete"] = (patient.id, patient.name)
                st.rerun()

    _patient_list()


def add_patient_screen(client: PatientApiClient) -> None:
    st.subheader("Add New Patient")
    with st.form("add-patient", clear_on_submit=False, border=True):
        name = st.text_input(required_label("Name"), key="form-name")
        mrn = st.text_input(required_label("MRN"), key="form-mrn")
        surgery_type = st.text_input("Surgery Type", key="form-surgery-type")
        ot_date = date_input("OT Date", key="form-ot-date", required=True)
        surgeon = st.text_input("Surgeon", key="form-surgeon")
        unit = st.text_input("Unit", key="form-unit")
        submitted = st.form_submit_button("Save Patient", type="primary")

    if st.button("Cancel"):
        _go_to(SCREEN_LIST)
        st.rerun()

    if not submitted:
        return

    missing = missing_form_fields(name=name, mrn=mrn, ot_date=ot_date)
    if missing:
        st.error(f"Required: {', '.join(missing)}")
        return

    try:
        with st.spinner("Saving…"):
            client.create_patient(
                name=name,
                mrn=mrn,
                ot_date=ot_date,
                surgery_type=surgery_type,
                surgeon=surgeon,
                unit=unit,
            )
    except PatientApiError as exc:
        st.error(exc.message or "Failed to save patient. Please try again.")
        return

    for key in _FORM_KEYS:
        st.session_state.pop(key, None)
    _go_to(SCREEN_LIST)
    st.rerun()

"""
Therapist Portal Interface.

GOVERNANCE:
- Every accept/reject is confirmed before it is sent
- NO_SHOW sessions carry no clinical documentation
- Booked slots are read-only
"""

from datetime import date, timedelta

import streamlit as st

from api.models import AttendanceStatus, BulkAddRequest, RecurrenceType
from api.models.session import FOCUS_AREAS, EngagementLevel, ProgressLevel, RiskLevel
from config import get_settings
from portal import PortalError, SparksClient, get_theme, session_bus
from portal.availability import AvailabilityEditor, slot_end
from portal.events import SessionSaved
from portal.reports import sessions_to_csv
from portal.requests import ModalState, PatientRequestBoard
from portal.sessions import SessionDocumentation, confirm_move, save_documentation

settings = get_settings()
theme = get_theme()

st.set_page_config(
    page_title="Therapist Portal - SPARKS",
    page_icon="🩺",
    layout="wide",
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def init_session_state():
    """Initialize session state variables."""
    if "client" not in st.session_state:
        st.session_state.client = SparksClient(
            base_url=settings.api_base_url,
            user_id=settings.demo_therapist_id,
        )
    if "request_board" not in st.session_state:
        board = PatientRequestBoard(st.session_state.client)
        try:
            board.load()
        except PortalError as e:
            st.session_state.error_message = e.message
        st.session_state.request_board = board
    if "availability" not in st.session_state:
        st.session_state.availability = AvailabilityEditor(st.session_state.client)
    if "last_saved" not in st.session_state:
        st.session_state.last_saved = None
        session_bus(st.session_state).subscribe(SessionSaved, remember_saved)
    if "error_message" not in st.session_state:
        st.session_state.error_message = None


def remember_saved(event: SessionSaved):
    st.session_state.last_saved = event


def render_requests():
    """Pending patient requests with a confirmation step."""
    board: PatientRequestBoard = st.session_state.request_board
    modal = board.modal

    if modal.is_open:
        request = modal.request
        st.subheader(f"{modal.action.title()} request from {request.first_name} {request.last_name}?")
        if modal.state == ModalState.SUCCESS:
            st.success(modal.result)
        else:
            if modal.state == ModalState.ERROR:
                st.error(modal.error)
            modal.message = st.text_area("Message to the parent (optional)", value=modal.message)
            col1, col2 = st.columns(2)
            with col1:
                if st.button("Confirm", type="primary", disabled=modal.state == ModalState.IN_FLIGHT):
                    board.confirm()
                    st.rerun()
            with col2:
                if st.button("Cancel"):
                    modal.close()
                    st.rerun()
        st.markdown("---")

    if not board.requests:
        st.info("No pending patient requests.")
        return

    for request in board.requests:
        with st.container():
            col1, col2, col3 = st.columns([3, 1, 1])
            with col1:
                st.markdown(f"**{request.first_name} {request.last_name}** ({request.age} years, {request.gender})")
                st.caption(f"Requested {request.requested_at:%d %b %Y} | {request.preferred_session_type}")
                st.write(request.message)
            with col2:
                if st.button("Accept", key=f"accept_{request.id}", type="primary"):
                    modal.open(request, "accept")
                    st.rerun()
            with col3:
                if st.button("Reject", key=f"reject_{request.id}"):
                    modal.open(request, "reject")
                    st.rerun()
            st.markdown("---")


def render_session_form(session):
    """Documentation form for one session."""
    client: SparksClient = st.session_state.client
    form = SessionDocumentation.from_session(session)

    attendance = list(AttendanceStatus)
    form.attendance_status = st.selectbox(
        "Attendance",
        attendance,
        index=attendance.index(form.attendance_status),
        format_func=lambda a: a.value.replace("_", " ").title(),
        key=f"attendance_{session.id}",
    )
    if form.is_no_show:
        st.info("Clinical documentation is not recorded for a no-show.")
    else:
        form.overall_progress = st.selectbox(
            "Overall progress", [None, *ProgressLevel], key=f"progress_{session.id}",
            format_func=lambda v: v.value.title() if v else "-",
        )
        form.patient_engagement = st.selectbox(
            "Engagement", [None, *EngagementLevel], key=f"engagement_{session.id}",
            format_func=lambda v: v.value.title() if v else "-",
        )
        form.risk_assessment = st.selectbox(
            "Risk", [None, *RiskLevel], key=f"risk_{session.id}",
            format_func=lambda v: v.value.title() if v else "-",
        )
        form.focus_areas = st.multiselect(
            "Focus areas", FOCUS_AREAS, default=form.focus_areas, key=f"focus_{session.id}"
        )
        form.session_notes = st.text_area("Session notes", value=form.session_notes, key=f"notes_{session.id}")
        form.next_session_goals = st.text_area(
            "Next session goals", value=form.next_session_goals, key=f"goals_{session.id}"
        )

    confirmed = st.checkbox("I confirm the status change", key=f"confirm_{session.id}")
    bus = session_bus(st.session_state)
    col1, col2, col3 = st.columns(3)
    try:
        with col1:
            if st.button("Save", key=f"save_{session.id}"):
                save_documentation(client, session.id, form, bus=bus)
                st.rerun()
        with col2:
            can_complete = confirmed and form.can_complete
            if st.button("Mark Completed", key=f"complete_{session.id}", disabled=not can_complete):
                confirm_move(client, session.id, "COMPLETED", confirmed, form, bus=bus)
                st.rerun()
        with col3:
            if st.button("Mark No-Show", key=f"noshow_{session.id}", disabled=not confirmed):
                confirm_move(client, session.id, "NO_SHOW", confirmed, bus=bus)
                st.rerun()
    except PortalError as e:
        st.error(e.message)


def render_sessions():
    """Sessions and their documentation."""
    client: SparksClient = st.session_state.client
    saved = st.session_state.last_saved
    if saved is not None:
        st.success(f"Session saved ({saved.status.replace('_', ' ').title()})")
        st.session_state.last_saved = None

    try:
        sessions = client.list_therapist_sessions()
    except PortalError as e:
        st.error(e.message)
        return

    for session in sessions:
        title = f"{session.patient_name} - {session.scheduled_at:%d %b %Y %H:%M} ({session.status.value})"
        with st.expander(title):
            st.markdown(theme.badge(session.status.value, session.status.value), unsafe_allow_html=True)
            render_session_form(session)


def render_availability():
    """Week calendar plus single and bulk slot creation."""
    editor: AvailabilityEditor = st.session_state.availability
    client: SparksClient = st.session_state.client

    col1, col2, col3 = st.columns([1, 3, 1])
    with col1:
        if st.button("Previous Week"):
            editor.shift(-1)
    with col3:
        if st.button("Next Week"):
            editor.shift(1)
    with col2:
        st.subheader(f"Week of {editor.start:%d %b %Y}")

    try:
        week = editor.load()
    except PortalError as e:
        st.error(e.message)
        return

    for column, (day, slots) in zip(st.columns(7), week.items()):
        with column:
            st.markdown(f"**{day:%a %d}**")
            for slot in slots:
                label = f"{slot.start_time}-{slot_end(slot.start_time)}"
                if slot.is_booked:
                    st.markdown(theme.badge(f"{label} booked", "SCHEDULED"), unsafe_allow_html=True)
                    continue
                st.caption(f"{label} {'(free)' if slot.is_free else ''}")
                try:
                    if st.button("Toggle free", key=f"free_{slot.id}"):
                        editor.toggle_free(slot.id)
                        st.rerun()
                    if st.button("Delete", key=f"delete_{slot.id}"):
                        editor.delete(slot.id)
                        st.rerun()
                except PortalError as e:
                    st.error(e.message)

    st.markdown("---")
    st.subheader("Add availability")
    with st.form("single_slot"):
        slot_date = st.date_input("Date", value=date.today() + timedelta(days=1))
        start_time = st.text_input("Start time (HH:MM)", value="09:00")
        is_free = st.checkbox("Free session")
        if st.form_submit_button("Add Slot"):
            try:
                client.add_slot(slot_date, start_time, is_free)
                st.success("Availability slot created")
            except PortalError as e:
                st.error(e.message)

    with st.form("bulk_slots"):
        start_date = st.date_input("From", value=date.today())
        end_date = st.date_input("To", value=date.today() + timedelta(days=28))
        col1, col2 = st.columns(2)
        with col1:
            bulk_start = st.text_input("Day starts at", value="09:00")
        with col2:
            bulk_end = st.text_input("Day ends at", value="12:00")
        recurrence = st.selectbox("Repeat", list(RecurrenceType), format_func=lambda r: r.value)
        days = st.multiselect("Days (custom)", range(7), format_func=lambda d: DAY_NAMES[d])
        bulk_free = st.checkbox("Free sessions")
        if st.form_submit_button("Create Slots"):
            try:
                request = BulkAddRequest(
                    start_date=start_date,
                    end_date=end_date,
                    start_time=bulk_start,
                    end_time=bulk_end,
                    recurrence_type=recurrence,
                    selected_days=days,
                    is_free=bulk_free,
                )
                result = editor.bulk_add(request)
                st.success(f"{result.slots_created} slots created")
            except ValueError as e:
                st.error(str(e))
            except PortalError as e:
                st.error(e.message)
                for conflict in getattr(e, "payload", {}).get("conflicts", []):
                    st.caption(conflict)


def render_reports():
    """Summary, charts and CSV export."""
    client: SparksClient = st.session_state.client
    filter_type = st.selectbox("Period", ["all", "weekly", "monthly", "custom"], format_func=str.title)
    start_date = end_date = None
    if filter_type == "custom":
        col1, col2 = st.columns(2)
        with col1:
            start_date = st.date_input("Start date", value=date.today() - timedelta(days=30))
        with col2:
            end_date = st.date_input("End date", value=date.today())

    try:
        report = client.get_report(filter_type, start_date, end_date)
    except PortalError as e:
        st.error(e.message)
        return

    summary = report.summary
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Sessions", summary.total_sessions)
    with col2:
        st.metric("Completed", summary.completed_sessions)
    with col3:
        st.metric("Income (LKR)", summary.total_income)
    with col4:
        st.metric("No-Show Rate", f"{summary.no_show_rate}%")

    st.bar_chart(
        [m.to_wire() for m in report.charts.monthly_income_data],
        x="month",
        y="income",
        color=theme.primary,
    )
    st.dataframe([s.to_wire() for s in report.sessions], use_container_width=True)
    st.download_button(
        "Export CSV",
        sessions_to_csv(report),
        file_name=f"therapist-report-{date.today().isoformat()}.csv",
        mime="text/csv",
    )


def render_profile():
    """Profile details and completion state."""
    client: SparksClient = st.session_state.client
    try:
        profile = client.get_profile()
    except PortalError as e:
        st.error(e.message)
        return

    missing = profile.missing_fields()
    if missing:
        st.warning("Complete your profile: " + ", ".join(f.replace("_", " ") for f in missing))

    with st.form("profile_form"):
        phone = st.text_input("Phone", value=profile.phone)
        specialization = st.text_input("Specialization", value=profile.specialization)
        license_number = st.text_input("License number", value=profile.license_number)
        bio = st.text_area("Bio", value=profile.bio)
        image_url = st.text_input("Profile image URL", value=profile.image_url or "")
        if st.form_submit_button("Save Profile", type="primary"):
            try:
                client.update_profile(
                    phone=phone,
                    specialization=specialization,
                    licenseNumber=license_number,
                    bio=bio,
                )
                if image_url:
                    client.update_profile_image(image_url)
                client.mark_profile_complete()
                st.success("Profile updated")
            except PortalError as e:
                st.error(e.message)


def main():
    """Main application entry point."""
    init_session_state()

    if st.session_state.error_message:
        st.error(st.session_state.error_message)
        st.session_state.error_message = None

    st.title("Therapist Portal")
    tabs = st.tabs(["Patient Requests", "Sessions", "Availability", "Reports", "Profile"])
    with tabs[0]:
        render_requests()
    with tabs[1]:
        render_sessions()
    with tabs[2]:
        render_availability()
    with tabs[3]:
        render_reports()
    with tabs[4]:
        render_profile()


if __name__ == "__main__":
    main()

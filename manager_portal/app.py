"""
Manager Review Interface.

GOVERNANCE:
- NO auto-approval
- Rejection REQUIRES a reason
- Manager ID recorded with every decision
"""

import streamlit as st

from api.models import ApplicationStatus
from config import get_settings
from portal import PortalError, SparksClient, get_theme
from portal.applications import ApplicationReviewBoard, can_submit_rejection

settings = get_settings()
theme = get_theme()

st.set_page_config(
    page_title="Manager Review - SPARKS",
    page_icon="📋",
    layout="wide",
)

STATUS_LABELS = {
    "all": "All",
    ApplicationStatus.PENDING.value: "Pending",
    ApplicationStatus.UNDER_REVIEW.value: "Under Review",
    ApplicationStatus.APPROVED.value: "Approved",
    ApplicationStatus.REJECTED.value: "Rejected",
}


def init_session_state():
    """Initialize session state variables."""
    if "board" not in st.session_state:
        client = SparksClient(base_url=settings.api_base_url, user_id=settings.demo_manager_id)
        st.session_state.board = ApplicationReviewBoard(client)
        fetch_applications()
    if "selected_application" not in st.session_state:
        st.session_state.selected_application = None
    if "error_message" not in st.session_state:
        st.session_state.error_message = None
    if "success_message" not in st.session_state:
        st.session_state.success_message = None


def fetch_applications() -> bool:
    """Fetch every application."""
    try:
        st.session_state.board.load()
        return True
    except PortalError as e:
        st.session_state.error_message = f"Failed to fetch applications: {e.message}"
        return False


def render_dashboard():
    """Counts, filters and the application list."""
    board: ApplicationReviewBoard = st.session_state.board
    st.title("Therapist Applications")

    counts = board.counts()
    columns = st.columns(len(counts))
    for column, (status, count) in zip(columns, counts.items()):
        with column:
            st.metric(STATUS_LABELS[status], count)

    st.markdown("---")
    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        board.search = st.text_input("Search by name, email or license", value=board.search)
    with col2:
        board.status = st.selectbox(
            "Status",
            list(STATUS_LABELS),
            format_func=STATUS_LABELS.get,
            index=list(STATUS_LABELS).index(board.status),
        )
    with col3:
        if st.button("Refresh", use_container_width=True):
            fetch_applications()

    applications = board.visible()
    if not applications:
        st.info("No applications match your filters.")
        return

    for application in applications:
        with st.container():
            col1, col2, col3, col4 = st.columns([3, 3, 2, 1])
            with col1:
                st.write(f"**{application.name}**")
                st.caption(application.email)
            with col2:
                st.write(f"{application.primary_specialty} | License {application.license_number}")
            with col3:
                st.markdown(
                    theme.badge(STATUS_LABELS[application.status.value], application.status.value),
                    unsafe_allow_html=True,
                )
            with col4:
                if st.button("Review", key=f"review_{application.id}"):
                    st.session_state.selected_application = application.id
                    st.rerun()
            st.markdown("---")


def render_review():
    """Details and decision controls for one application."""
    board: ApplicationReviewBoard = st.session_state.board
    application = next(
        (a for a in board.applications if a.id == st.session_state.selected_application),
        None,
    )
    if application is None:
        st.session_state.selected_application = None
        st.rerun()

    col1, col2 = st.columns([3, 1])
    with col1:
        st.title(application.name)
    with col2:
        if st.button("Back to List"):
            st.session_state.selected_application = None
            st.rerun()

    st.markdown(
        theme.badge(STATUS_LABELS[application.status.value], application.status.value),
        unsafe_allow_html=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Personal")
        st.write(f"**Email:** {application.email}")
        st.write(f"**Phone:** {application.phone or 'N/A'}")
        address = application.address
        st.write(f"**Address:** {address.house_number} {address.street_name}, {address.city}")
    with col2:
        st.subheader("Professional")
        st.write(f"**License:** {application.license_number}")
        st.write(f"**Specialty:** {application.primary_specialty}")
        st.write(f"**Experience:** {application.years_of_experience} years")
        st.write(f"**Education:** {application.highest_education} ({application.institution})")

    if application.adhd_experience:
        st.subheader("ADHD Experience")
        st.write(application.adhd_experience)

    documents = application.documents
    for label, files in (
        ("Professional License", documents.professional_license),
        ("Educational Certificates", documents.educational_certificates),
        ("Additional Certifications", documents.additional_certifications),
    ):
        for document in files:
            st.markdown(f"- {label}: [{document.original_name}]({document.url})")

    if application.reference:
        ref = application.reference
        st.caption(f"Reference: {ref.first_name} {ref.last_name}, {ref.professional_title} ({ref.email})")

    if application.status in (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED):
        st.info(f"Reviewed by {application.reviewed_by} on {application.reviewed_at:%d %b %Y}")
        if application.rejection_reason:
            st.write(f"**Rejection reason:** {application.rejection_reason}")
        return

    st.markdown("---")
    try:
        if application.status == ApplicationStatus.PENDING:
            if st.button("Start Review"):
                board.start_review(application.id)
                st.rerun()

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Approve", type="primary", use_container_width=True):
                board.approve(application.id)
                st.session_state.success_message = f"{application.name} approved"
                st.rerun()
        with col2:
            reason = st.text_area("Rejection reason (required)", key=f"reason_{application.id}")
            if st.button(
                "Reject",
                use_container_width=True,
                disabled=not can_submit_rejection(reason),
            ):
                board.reject(application.id, reason)
                st.session_state.success_message = f"{application.name} rejected"
                st.rerun()
    except PortalError as e:
        st.error(e.message)


def main():
    """Main application entry point."""
    init_session_state()

    if st.session_state.error_message:
        st.error(st.session_state.error_message)
        st.session_state.error_message = None
    if st.session_state.success_message:
        st.success(st.session_state.success_message)
        st.session_state.success_message = None

    if st.session_state.selected_application:
        render_review()
    else:
        render_dashboard()


if __name__ == "__main__":
    main()

"""
Parent Portal Interface.

GOVERNANCE:
- Parents see only their own children
- Task completion is recorded by the parent, review is by the therapist
"""

import streamlit as st

from api.models import Sender, TaskStatus
from config import get_settings
from portal import PortalError, SparksClient, get_theme, session_bus
from portal.contact import ContactForm, submit_safely
from portal.events import OpenTasksModal
from portal.messages import Inbox
from portal.tasks import (
    TaskBoard,
    TaskStatusFilter,
    TaskType,
    completed_count,
    is_overdue,
    load_session_tasks,
    overdue_count,
    pending_count,
)

settings = get_settings()
theme = get_theme()

st.set_page_config(
    page_title="Parent Portal - SPARKS",
    page_icon="🏠",
    layout="wide",
)


def init_session_state():
    """Initialize session state variables."""
    if "client" not in st.session_state:
        st.session_state.client = SparksClient(
            base_url=settings.api_base_url,
            user_id=settings.demo_parent_id,
        )
    if "children" not in st.session_state:
        st.session_state.children = []
    if "task_board" not in st.session_state:
        st.session_state.task_board = None
    if "inbox" not in st.session_state:
        st.session_state.inbox = Inbox(st.session_state.client)
    if "contact_form" not in st.session_state:
        st.session_state.contact_form = ContactForm(st.session_state.client)
    if "tasks_session_id" not in st.session_state:
        st.session_state.tasks_session_id = None
        session_bus(st.session_state).subscribe(OpenTasksModal, open_session_tasks)
    if "error_message" not in st.session_state:
        st.session_state.error_message = None


def open_session_tasks(event: OpenTasksModal):
    st.session_state.tasks_session_id = event.session_id


def fetch_children() -> bool:
    """Load the parent's children."""
    try:
        st.session_state.children = st.session_state.client.list_children()
        return True
    except PortalError as e:
        st.session_state.error_message = e.message
        return False


def render_tasks():
    """Task list with type and status filters."""
    children = st.session_state.children
    if not children:
        st.info("No children registered yet.")
        return

    child = st.selectbox("Child", children, format_func=lambda c: c.full_name)
    board = st.session_state.task_board
    if board is None or board.child_id != child.id:
        board = TaskBoard(st.session_state.client, child.id)
        try:
            board.load()
        except PortalError as e:
            st.session_state.error_message = e.message
        st.session_state.task_board = board

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Completed", completed_count(board.tasks))
    with col2:
        st.metric("Pending", pending_count(board.tasks))
    with col3:
        st.metric("Overdue", overdue_count(board.tasks))

    col1, col2 = st.columns(2)
    with col1:
        task_type = st.selectbox("Type", list(TaskType), format_func=lambda t: t.value.title())
    with col2:
        status = st.selectbox("Status", list(TaskStatusFilter), format_func=lambda s: s.value.title())

    st.markdown("---")
    tasks = board.visible(task_type, status)
    if not tasks:
        st.info("No tasks match the selected filters.")

    for task in tasks:
        label = "OVERDUE" if is_overdue(task) else task.status.value
        with st.container():
            col1, col2 = st.columns([4, 1])
            with col1:
                st.markdown(
                    f"**{task.title}** {theme.badge(label.replace('_', ' ').title(), label)}",
                    unsafe_allow_html=True,
                )
                st.caption(f"Due {task.due_date:%d %b %Y %H:%M} | Priority {task.priority}")
                if task.description:
                    st.write(task.description)
                if task.completion_notes:
                    st.caption(f"Notes: {task.completion_notes}")
            with col2:
                try:
                    if task.status == TaskStatus.COMPLETED:
                        if st.button("Unmark", key=f"unmark_{task.id}"):
                            board.unmark(task.id)
                            st.rerun()
                    else:
                        notes = st.text_input("Notes", key=f"notes_{task.id}")
                        if st.button("Complete", key=f"complete_{task.id}", type="primary"):
                            board.complete(task.id, notes or None)
                            st.rerun()
                except PortalError as e:
                    st.error(e.message)
            st.markdown("---")


def render_sessions():
    """Sessions with notes and assigned tasks."""
    client: SparksClient = st.session_state.client
    try:
        sessions = client.list_sessions()
    except PortalError as e:
        st.error(e.message)
        return

    if not sessions:
        st.info("No sessions yet.")
        return

    for session in sessions:
        with st.expander(f"{session.scheduled_at:%d %b %Y %H:%M} - {session.type} ({session.status.value})"):
            st.markdown(theme.badge(session.status.value, session.status.value), unsafe_allow_html=True)
            if session.session_notes:
                st.write(session.session_notes)
            if session.focus_areas:
                st.caption("Focus areas: " + ", ".join(session.focus_areas))
            if st.button("View Tasks", key=f"tasks_{session.id}"):
                session_bus(st.session_state).publish(OpenTasksModal(session.id))

            if st.session_state.tasks_session_id == session.id:
                tasks, error = load_session_tasks(client, session.id)
                if error:
                    st.error(error)
                    continue
                if not tasks:
                    st.caption("No tasks were assigned in this session.")
                for task in tasks:
                    st.write(f"- {task.title} ({task.status.value})")


def render_messages():
    """Conversations with therapists."""
    inbox: Inbox = st.session_state.inbox
    try:
        inbox.load()
    except PortalError as e:
        st.error(e.message)
        return

    st.caption(f"{inbox.unread_total} unread")
    if not inbox.conversations:
        st.info("No conversations yet.")
        return

    col1, col2 = st.columns([1, 2])
    with col1:
        for conversation in inbox.conversations:
            label = f"{conversation.therapist_name} ({conversation.unread_count})"
            if st.button(label, key=f"conv_{conversation.id}", use_container_width=True):
                inbox.select(conversation.id)
                st.rerun()
    with col2:
        conversation = inbox.selected
        if conversation is None:
            return
        st.subheader(f"{conversation.therapist_name} - {conversation.child_name}")
        for message in conversation.messages:
            with st.chat_message("user" if message.sender == Sender.PARENT else "assistant"):
                st.write(message.text)
                st.caption(f"{message.timestamp:%d %b %H:%M}")
        text = st.chat_input("Type a message")
        if text:
            try:
                inbox.send(text)
            except PortalError as e:
                st.error(e.message)
            st.rerun()


def render_contact():
    """Contact the SPARKS team."""
    form: ContactForm = st.session_state.contact_form
    with st.form("contact_form"):
        form.name = st.text_input("Name *", value=form.name)
        form.email = st.text_input("Email *", value=form.email)
        form.phone = st.text_input("Phone", value=form.phone)
        form.subject = st.text_input("Subject *", value=form.subject)
        form.category = st.selectbox("Category *", form.categories)
        form.message = st.text_area("Message *", value=form.message)
        if st.form_submit_button("Send Message", type="primary"):
            ok, text = submit_safely(form)
            (st.success if ok else st.error)(text)


def main():
    """Main application entry point."""
    init_session_state()

    if st.session_state.error_message:
        st.error(st.session_state.error_message)
        st.session_state.error_message = None

    st.title("Parent Portal")
    if not st.session_state.children:
        fetch_children()

    tasks_tab, sessions_tab, messages_tab, contact_tab = st.tabs(
        ["Tasks", "Sessions", "Messages", "Contact Us"]
    )
    with tasks_tab:
        render_tasks()
    with sessions_tab:
        render_sessions()
    with messages_tab:
        render_messages()
    with contact_tab:
        render_contact()


if __name__ == "__main__":
    main()

"""
Demo records for the in-memory store.

GOVERNANCE:
- Fictional people only
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from api.models import (
    ApplicationStatus,
    AvailabilitySlot,
    ChatMessage,
    Child,
    Conversation,
    PatientRequest,
    Role,
    Sender,
    SessionStatus,
    Task,
    TaskStatus,
    TherapistApplication,
    TherapistProfile,
    TherapySession,
    User,
)
from api.models.application import (
    ApplicationDocuments,
    Address,
    DocumentRef,
    ReferenceContact,
)
from security import hash_password

DEMO_PASSWORD = "Sparks@2024"


def _users() -> list[User]:
    password_hash = hash_password(DEMO_PASSWORD)
    return [
        User(id="parent-demo", email="parent@sparks.lk", name="Nimali Perera",
             role=Role.PARENT, password_hash=password_hash),
        User(id="parent-2", email="chamari@sparks.lk", name="Chamari Silva",
             role=Role.PARENT, password_hash=password_hash),
        User(id="therapist-demo", email="therapist@sparks.lk", name="Dr. Nadeesha Fernando",
             role=Role.THERAPIST, password_hash=password_hash),
        User(id="therapist-2", email="ruwan@sparks.lk", name="Dr. Ruwan Wickramasinghe",
             role=Role.THERAPIST, password_hash=password_hash),
        User(id="manager-demo", email="manager@sparks.lk", name="Kasun Jayasuriya",
             role=Role.MANAGER, password_hash=password_hash),
    ]


def _children() -> list[Child]:
    return [
        Child(id="child-1", parent_id="parent-demo", first_name="Sahan", last_name="Perera",
              date_of_birth=date(2016, 4, 12), gender="Male", therapist_id="therapist-demo"),
        Child(id="child-2", parent_id="parent-demo", first_name="Amaya", last_name="Perera",
              date_of_birth=date(2018, 9, 3), gender="Female", phone="+94 77 123 4567"),
        Child(id="child-3", parent_id="parent-2", first_name="Kavindu", last_name="Silva",
              date_of_birth=date(2015, 1, 20), gender="Male", phone="+94 71 555 0101"),
    ]


def _task(
    task_id: str,
    title: str,
    due: datetime,
    now: datetime,
    status: TaskStatus = TaskStatus.PENDING,
    priority: int = 1,
    pattern: Optional[str] = None,
    session_id: Optional[str] = None,
) -> Task:
    return Task(
        id=task_id,
        patient_id="child-1",
        session_id=session_id,
        title=title,
        description=f"{title} at home",
        instructions="Follow the steps discussed in session.",
        status=status,
        priority=priority,
        due_date=due,
        created_at=now - timedelta(days=7),
        updated_at=now - timedelta(days=1),
        completed_at=now - timedelta(days=1) if status == TaskStatus.COMPLETED else None,
        is_recurring=pattern is not None,
        recurring_pattern=pattern,
    )


def _tasks(now: datetime) -> list[Task]:
    return [
        _task("task-1", "Morning routine checklist", now + timedelta(hours=6), now,
              priority=2, pattern="daily"),
        _task("task-2", "Homework in 15-minute blocks", now + timedelta(days=2), now,
              status=TaskStatus.IN_PROGRESS, priority=3, session_id="session-1"),
        _task("task-3", "Weekly feelings journal", now + timedelta(days=5), now,
              pattern="weekly"),
        _task("task-4", "Practice waiting turns game", now - timedelta(days=1), now,
              priority=2, session_id="session-1"),
        _task("task-5", "Bedtime wind-down", now - timedelta(days=2), now,
              status=TaskStatus.COMPLETED, pattern="daily"),
    ]


def _sessions(now: datetime) -> list[TherapySession]:
    return [
        TherapySession(id="session-1", patient_id="child-1", patient_name="Sahan Perera",
                       therapist_id="therapist-demo", scheduled_at=now - timedelta(days=3),
                       type="Individual", status=SessionStatus.COMPLETED,
                       booked_rate=4500.0, is_paid=True),
        TherapySession(id="session-2", patient_id="child-1", patient_name="Sahan Perera",
                       therapist_id="therapist-demo", scheduled_at=now - timedelta(days=1),
                       type="Individual", status=SessionStatus.SCHEDULED,
                       booked_rate=4500.0, is_paid=True),
        TherapySession(id="session-3", patient_id="child-1", patient_name="Sahan Perera",
                       therapist_id="therapist-demo", scheduled_at=now + timedelta(days=4),
                       type="Parent Coaching", status=SessionStatus.SCHEDULED),
    ]


def _slots(today: date) -> list[AvailabilitySlot]:
    monday = today - timedelta(days=today.weekday()) + timedelta(days=7)
    return [
        AvailabilitySlot(id="slot-1", therapist_id="therapist-demo", date=monday,
                         start_time="09:00"),
        AvailabilitySlot(id="slot-2", therapist_id="therapist-demo", date=monday,
                         start_time="10:00", is_free=True),
        AvailabilitySlot(id="slot-3", therapist_id="therapist-demo",
                         date=monday + timedelta(days=2), start_time="14:00", is_booked=True),
    ]


def _requests(now: datetime) -> list[PatientRequest]:
    return [
        PatientRequest(id="request-1", patient_id="child-2", therapist_id="therapist-demo",
                       first_name="Amaya", last_name="Perera", date_of_birth=date(2018, 9, 3),
                       gender="Female", phone="+94 77 123 4567", email="parent@sparks.lk",
                       requested_at=now - timedelta(days=2),
                       message="Amaya struggles to stay focused at school."),
        PatientRequest(id="request-2", patient_id="child-3", therapist_id="therapist-demo",
                       first_name="Kavindu", last_name="Silva", date_of_birth=date(2015, 1, 20),
                       gender="Male", phone="+94 71 555 0101", email="chamari@sparks.lk",
                       requested_at=now - timedelta(hours=5)),
    ]


def _applications(now: datetime) -> list[TherapistApplication]:
    return [
        TherapistApplication(
            id="application-1", therapist_id="applicant-1", name="Dr. Sarah Johnson",
            email="sarah.johnson@example.com", phone="+94 77 987 6543",
            address=Address(house_number="12", street_name="Flower Road", city="Colombo"),
            gender="Female", license_number="SLMC-48213", primary_specialty="Child Psychology",
            years_of_experience="8", highest_education="PhD Clinical Psychology",
            institution="University of Colombo",
            adhd_experience="Six years running ADHD parent training groups.",
            documents=ApplicationDocuments(professional_license=[
                DocumentRef(id="doc-1", name="license.pdf", original_name="SLMC License.pdf",
                            url="/uploads/applications/doc-1"),
            ]),
            reference=ReferenceContact(first_name="Priya", last_name="Raman",
                                       professional_title="Consultant Psychiatrist",
                                       phone_number="+94 11 269 1111",
                                       email="priya.raman@example.com"),
            submitted_at=now - timedelta(days=4),
        ),
        TherapistApplication(
            id="application-2", therapist_id="applicant-2", name="Dr. Michael Chen",
            email="michael.chen@example.com", license_number="SLMC-51877",
            primary_specialty="Occupational Therapy", years_of_experience="5",
            status=ApplicationStatus.UNDER_REVIEW, submitted_at=now - timedelta(days=9),
        ),
    ]


def _conversations(now: datetime) -> list[Conversation]:
    return [
        Conversation(
            id="conversation-1", parent_id="parent-demo", therapist_id="therapist-demo",
            therapist_name="Dr. Nadeesha Fernando", child_name="Sahan Perera",
            messages=[
                ChatMessage(id="m1", text="How did the morning routine go this week?",
                            sender=Sender.THERAPIST, timestamp=now - timedelta(days=1),
                            is_read=True),
                ChatMessage(id="m2", text="Much better, he finished it four days out of five.",
                            sender=Sender.PARENT, timestamp=now - timedelta(hours=20),
                            is_read=True),
                ChatMessage(id="m3", text="Great progress! Let's add the homework timer next.",
                            sender=Sender.THERAPIST, timestamp=now - timedelta(hours=2)),
            ],
        ),
    ]


def seed_demo_data(storage, now: Optional[datetime] = None) -> None:
    """Fill an empty store with the demo parent, therapist and manager data."""
    now = now or datetime.now(timezone.utc)
    for user in _users():
        storage.users.create(user)
    for child in _children():
        storage.children.create(child)
    for task in _tasks(now):
        storage.tasks.create(task)
    for session in _sessions(now):
        storage.sessions.create(session)
    for slot in _slots(now.date()):
        storage.slots.create(slot)
    for request in _requests(now):
        storage.patient_requests.create(request)
    for application in _applications(now):
        storage.applications.create(application)
    for conversation in _conversations(now):
        storage.conversations.create(conversation)

    storage.profiles.create(TherapistProfile(
        id="therapist-demo", name="Dr. Nadeesha Fernando", email="therapist@sparks.lk",
        phone="+94 77 222 3344", bio="Child psychologist focusing on ADHD and executive function.",
        specialization="ADHD", license_number="SLMC-30211", years_of_experience=11,
        session_rate=4500.0, languages=["English", "Sinhala"],
        image_url="/images/therapists/therapist-demo.png", is_complete=True,
    ))
    storage.profiles.create(TherapistProfile(
        id="therapist-2", name="Dr. Ruwan Wickramasinghe", email="ruwan@sparks.lk",
    ))

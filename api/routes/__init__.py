"""API routes."""

from api.routes.applications import router as applications_router
from api.routes.availability import router as availability_router
from api.routes.contact import router as contact_router
from api.routes.forgot_password import router as forgot_password_router
from api.routes.messages import router as messages_router
from api.routes.parent import router as parent_router
from api.routes.patient_requests import router as patient_requests_router
from api.routes.profile import router as profile_router
from api.routes.reports import router as reports_router
from api.routes.therapist_sessions import router as therapist_sessions_router

__all__ = [
    "forgot_password_router",
    "parent_router",
    "messages_router",
    "patient_requests_router",
    "profile_router",
    "reports_router",
    "therapist_sessions_router",
    "availability_router",
    "applications_router",
    "contact_router",
]

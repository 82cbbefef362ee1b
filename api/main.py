"""
FastAPI application for the SPARKS care portal.

GOVERNANCE:
- Clinical documentation by the assigned therapist only
- Password recovery never reveals whether an email is registered
- No payment processing
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import install_error_handlers
from api.routes import (
    applications_router,
    availability_router,
    contact_router,
    forgot_password_router,
    messages_router,
    parent_router,
    patient_requests_router,
    profile_router,
    reports_router,
    therapist_sessions_router,
)
from config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="SPARKS Care Portal API",
    description="ADHD care portal for parents, therapists and managers",
    version="1.0.0",
)

# CORS middleware for Streamlit UIs
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Include routers
app.include_router(forgot_password_router)
app.include_router(parent_router)
app.include_router(messages_router)
app.include_router(patient_requests_router)
app.include_router(profile_router)
app.include_router(reports_router)
app.include_router(therapist_sessions_router)
app.include_router(availability_router)
app.include_router(applications_router)
app.include_router(contact_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "sparks_portal"}


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "service": "SPARKS Care Portal API",
        "version": "1.0.0",
        "endpoints": {
            "forgot_password": "/api/mobile/forgot-password",
            "parent": "/api/parent",
            "therapist": "/api/therapist",
            "manager": "/api/manager/applications",
            "contact": "/api/contact",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )

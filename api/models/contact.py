"""Contact form models."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from api.models.base import CamelModel

CONTACT_CATEGORIES = [
    "General Inquiry",
    "ADHD Assessment Booking",
    "Therapy Appointment",
    "Technical Support",
    "Billing & Payment",
    "Partnership Inquiry",
    "Media & Press",
    "Feedback & Suggestions",
]


class ContactFormData(CamelModel):
    """A message sent from the public contact page."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str = ""
    subject: str = Field(..., min_length=1, max_length=200)
    category: str
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("name", "subject", "message")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in CONTACT_CATEGORIES:
            raise ValueError("Please select a valid category")
        return v


class ContactMessage(ContactFormData):
    """A stored contact submission."""

    id: str
    received_at: datetime

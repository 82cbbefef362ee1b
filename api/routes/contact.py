"""Public contact form."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from api.models import ContactFormData, ContactMessage, MessageResponse
from storage import get_storage, new_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", response_model=MessageResponse, status_code=201)
def submit_contact(form: ContactFormData):
    """Store a contact message for the support team."""
    message = ContactMessage(
        id=new_id(),
        received_at=datetime.now(timezone.utc),
        **form.model_dump(),
    )
    get_storage().contact_messages.create(message)
    logger.info("Contact message %s received (%s)", message.id, message.category)
    return MessageResponse(
        message="Thank you for contacting us. We will get back to you soon."
    )

"""Public contact form."""

from typing import Optional

from pydantic import ValidationError

from api.models import ContactFormData
from api.models.contact import CONTACT_CATEGORIES
from portal.client import FormValidationError, PortalError, SparksClient


class ContactForm:
    """Contact form state; resets after a successful submission."""

    categories = CONTACT_CATEGORIES

    def __init__(self, client: SparksClient):
        self.client = client
        self.reset()

    def reset(self) -> None:
        self.name = ""
        self.email = ""
        self.phone = ""
        self.subject = ""
        self.category = ""
        self.message = ""

    @property
    def can_submit(self) -> bool:
        return all(
            value.strip()
            for value in (self.name, self.email, self.subject, self.category, self.message)
        )

    def submit(self) -> str:
        """Send the form; returns the confirmation text."""
        if not self.can_submit:
            raise FormValidationError("Please fill in all required fields")
        try:
            data = ContactFormData(
                name=self.name,
                email=self.email.strip(),
                phone=self.phone.strip(),
                subject=self.subject,
                category=self.category,
                message=self.message,
            )
        except ValidationError as exc:
            raise FormValidationError(exc.errors()[0]["msg"].removeprefix("Value error, ")) from exc

        result = self.client.submit_contact(data)
        self.reset()
        return result


def submit_safely(form: ContactForm) -> tuple[bool, Optional[str]]:
    """Submit and return (ok, text) for display."""
    try:
        return True, form.submit()
    except PortalError as exc:
        return False, exc.message

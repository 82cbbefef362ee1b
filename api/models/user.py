"""
User and child models.

PRIVACY:
- Password hashes are excluded from every serialized form
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from api.models.base import CamelModel


class Role(str, Enum):
    """Portal roles."""

    PARENT = "PARENT"
    THERAPIST = "THERAPIST"
    MANAGER = "MANAGER"


class User(CamelModel):
    """An account that can sign in to the portal."""

    id: str
    email: str
    name: str
    role: Role
    password_hash: str = Field(default="", exclude=True)


class Child(CamelModel):
    """A patient registered by a parent."""

    id: str
    parent_id: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: str
    phone: Optional[str] = None
    therapist_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ChildListResponse(CamelModel):
    """Children of the acting parent."""

    children: list[Child]

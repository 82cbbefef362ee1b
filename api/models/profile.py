"""Therapist profile models."""

from typing import Optional

from pydantic import Field

from api.models.base import CamelModel

# Fields a profile needs before it is listed to parents
REQUIRED_PROFILE_FIELDS = (
    "phone",
    "bio",
    "specialization",
    "license_number",
    "image_url",
)


class TherapistProfile(CamelModel):
    """Public-facing therapist profile."""

    id: str  # Same as the therapist's user id
    name: str
    email: str
    phone: str = ""
    bio: str = ""
    specialization: str = ""
    license_number: str = ""
    years_of_experience: int = 0
    session_rate: float = 0.0  # LKR
    languages: list[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    is_complete: bool = False

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_PROFILE_FIELDS if not getattr(self, name)]


class ProfileUpdate(CamelModel):
    """Partial profile update."""

    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=2000)
    specialization: Optional[str] = None
    license_number: Optional[str] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0, le=70)
    session_rate: Optional[float] = Field(default=None, ge=0)
    languages: Optional[list[str]] = None


class ProfileImageRequest(CamelModel):
    image_url: str = Field(..., min_length=1)


class ProfileResponse(CamelModel):
    profile: TherapistProfile
    message: Optional[str] = None


class ProfileCompletion(CamelModel):
    is_complete: bool
    missing_fields: list[str]

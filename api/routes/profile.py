"""Therapist profile routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import require_therapist
from api.models import TherapistProfile, User
from api.models.profile import (
    ProfileCompletion,
    ProfileImageRequest,
    ProfileResponse,
    ProfileUpdate,
)
from storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/therapist/profile", tags=["profile"])


def _profile_of(therapist: User) -> TherapistProfile:
    profile = get_storage().profiles.get(therapist.id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Therapist profile not found")
    return profile


@router.get("", response_model=ProfileResponse)
def get_profile(therapist: User = Depends(require_therapist)):
    return ProfileResponse(profile=_profile_of(therapist))


@router.post("", response_model=ProfileResponse)
def update_profile(update: ProfileUpdate, therapist: User = Depends(require_therapist)):
    """Apply the fields present in the request."""
    profile = _profile_of(therapist)
    changes = update.model_dump(exclude_unset=True)
    profile = profile.model_copy(update=changes)
    if profile.missing_fields():
        profile.is_complete = False
    get_storage().profiles.update(profile)
    logger.info("Profile %s updated: %s", profile.id, sorted(changes))
    return ProfileResponse(profile=profile, message="Profile updated successfully")


@router.post("/image", response_model=ProfileResponse)
def update_image(request: ProfileImageRequest, therapist: User = Depends(require_therapist)):
    """Point the profile at an uploaded image."""
    profile = _profile_of(therapist)
    profile.image_url = request.image_url
    get_storage().profiles.update(profile)
    return ProfileResponse(profile=profile, message="Profile image updated successfully")


@router.get("/complete", response_model=ProfileCompletion)
def get_completion(therapist: User = Depends(require_therapist)):
    """Whether the profile can be listed to parents."""
    profile = _profile_of(therapist)
    missing = profile.missing_fields()
    return ProfileCompletion(is_complete=profile.is_complete and not missing, missing_fields=missing)


@router.post("/complete", response_model=ProfileCompletion)
def mark_complete(therapist: User = Depends(require_therapist)):
    """Mark the profile complete once every required field is filled."""
    profile = _profile_of(therapist)
    missing = profile.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400,
            detail={"error": "Profile is missing required fields", "missingFields": missing},
        )
    profile.is_complete = True
    get_storage().profiles.update(profile)
    return ProfileCompletion(is_complete=True, missing_fields=[])

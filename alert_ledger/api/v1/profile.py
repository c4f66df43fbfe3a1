"""GET/PUT /v1/profile - display name used to spot the user in alerts"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from alert_ledger.api.v1.schemas import ProfileRequest, ProfileResponse
from alert_ledger.api.dependencies import get_profile_repository
from alert_ledger.infrastructure.database.session import get_db
from alert_ledger.infrastructure.database.repositories import ProfileRepository

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(profiles: ProfileRepository = Depends(get_profile_repository)):
    profile = profiles.get_profile()
    return ProfileResponse(display_name=profile.display_name if profile else None)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request_body: ProfileRequest,
    db: Session = Depends(get_db),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Save the display name. A blank name turns off name-based detection."""
    profile = profiles.save_profile(request_body.display_name)
    db.commit()
    return ProfileResponse(display_name=profile.display_name or None)

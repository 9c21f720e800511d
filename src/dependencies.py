# src/dependencies.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from src.admin.application.services.doctor_service import DoctorService
from src.admin.application.services.facility_service import FacilityService
from src.admin.application.services.patient_service import PatientService
from src.admin.application.services.user_admin_service import UserAdminService
from src.admin.infrastructure.repositories.doctor_repository import DoctorRepository
from src.admin.infrastructure.repositories.facility_repository import FacilityRepository
from src.admin.infrastructure.repositories.patient_repository import PatientRepository
from src.admin.infrastructure.repositories.user_repository import UserRepository
from src.blog.application.services.blog_service import BlogService
from src.blog.application.services.engagement_service import EngagementService
from src.blog.application.services.media_service import MediaService
from src.blog.domain.media import MediaStorage
from src.blog.infrastructure.repositories.blog_repository import BlogRepository
from src.blog.infrastructure.repositories.engagement_repository import EngagementRepository
from src.catalog.application.services.millet_service import MilletService
from src.catalog.infrastructure.repositories.millet_repository import MilletRepository
from src.config import Settings
from src.referral.application.services.contact_service import ContactService
from src.referral.application.services.referral_service import ReferralService
from src.referral.infrastructure.repositories.contact_repository import ContactRepository
from src.referral.infrastructure.repositories.referral_repository import ReferralRepository
from src.shared.database import Database
from src.shared.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from src.shared.logging import log_security_event
from src.shared.security import TokenClaims
from src.subscription.application.services.plan_service import PlanService
from src.subscription.infrastructure.repositories.plan_repository import PlanRepository


# --- JWT parsing helper (used by JwtContextMiddleware in main.py) ---
def extract_bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if not auth.lower().startswith("bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


# --- App-scoped resources ---
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_media_storage(request: Request) -> MediaStorage:
    return request.app.state.media_storage


# --- Current caller ---
def get_current_claims(request: Request) -> TokenClaims:
    """
    Claims parsed by JwtContextMiddleware. No bearer token is a 401; a token that
    failed verification is rejected with the error recorded by the middleware.
    """
    error = getattr(request.state, "token_error", None)
    if error is not None:
        raise error
    claims = getattr(request.state, "user_claims", None)
    if claims is None:
        raise UnauthorizedError()
    return claims


def get_optional_claims(request: Request) -> Optional[TokenClaims]:
    """Claims when a valid token was sent; anonymous callers and bad tokens get None."""
    if getattr(request.state, "token_error", None) is not None:
        return None
    return getattr(request.state, "user_claims", None)


def require_admin(
    claims: TokenClaims = Depends(get_current_claims),
    settings: Settings = Depends(get_app_settings),
) -> TokenClaims:
    if claims.role != settings.ADMIN_ROLE:
        log_security_event("admin_required", user_id=claims.sub, details={"role": claims.role})
        raise ForbiddenError()
    return claims


def _user_id(claims: TokenClaims) -> int:
    try:
        return int(claims.sub)
    except ValueError:
        raise ValidationError("Token subject is not a user id", details={"sub": claims.sub})


def get_current_user_id(claims: TokenClaims = Depends(get_current_claims)) -> int:
    return _user_id(claims)


def get_optional_user_id(claims: Optional[TokenClaims] = Depends(get_optional_claims)) -> Optional[int]:
    if claims is None:
        return None
    try:
        return int(claims.sub)
    except ValueError:
        return None


# --- Service constructors ---
def get_user_admin_service(db: Database = Depends(get_db)) -> UserAdminService:
    return UserAdminService(UserRepository(db))


def get_doctor_service(db: Database = Depends(get_db)) -> DoctorService:
    return DoctorService(DoctorRepository(db))


def get_patient_service(db: Database = Depends(get_db)) -> PatientService:
    return PatientService(PatientRepository(db))


def get_facility_service(db: Database = Depends(get_db)) -> FacilityService:
    return FacilityService(FacilityRepository(db))


def get_referral_service(db: Database = Depends(get_db)) -> ReferralService:
    return ReferralService(ReferralRepository(db))


def get_contact_service(db: Database = Depends(get_db)) -> ContactService:
    return ContactService(ContactRepository(db))


def get_millet_service(db: Database = Depends(get_db)) -> MilletService:
    return MilletService(MilletRepository(db))


def get_plan_service(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> PlanService:
    return PlanService(PlanRepository(db), settings)


def get_media_service(
    storage: MediaStorage = Depends(get_media_storage),
    settings: Settings = Depends(get_app_settings),
) -> MediaService:
    return MediaService(storage, settings)


def get_blog_service(
    db: Database = Depends(get_db),
    media: MediaService = Depends(get_media_service),
) -> BlogService:
    return BlogService(BlogRepository(db), media)


def get_engagement_service(db: Database = Depends(get_db)) -> EngagementService:
    return EngagementService(EngagementRepository(db))

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.dependencies import get_contact_service, get_current_user_id, get_referral_service
from src.referral.application.services.contact_service import ContactService
from src.referral.application.services.referral_service import ReferralService

router = APIRouter(prefix="/api/admin", tags=["admin:referrals"])


@router.get("/channel-partners")
async def list_channel_partners(svc: ReferralService = Depends(get_referral_service)):
    return await svc.list_channel_partners()


# path keeps the historical spelling used by the admin dashboard
@router.get("/refrals-details")
async def list_referrals_by_referrer(svc: ReferralService = Depends(get_referral_service)):
    return await svc.referrals_by_referrer()


@router.get("/logged-referals")
async def list_my_referrals(
    user_id: int = Depends(get_current_user_id),
    svc: ReferralService = Depends(get_referral_service),
):
    return await svc.referrals_for_user(user_id)


@router.get("/user-contacts")
async def list_users_with_contacts(svc: ContactService = Depends(get_contact_service)):
    return await svc.users_with_contacts()


@router.get("/user-contacts/{user_id}")
async def get_user_contacts(user_id: int, svc: ContactService = Depends(get_contact_service)):
    return await svc.user_with_contacts(user_id)


@router.get("/user/contact-count")
async def count_contacts(svc: ContactService = Depends(get_contact_service)):
    return await svc.total_contacts()

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.admin.api.schemas import ClinicResponse, ReviewResponse
from src.admin.application.services.facility_service import FacilityService
from src.dependencies import get_facility_service

router = APIRouter(prefix="/api/admin", tags=["admin:facilities"])


@router.get("/clinics/{clinic_id}", response_model=ClinicResponse)
async def get_clinic(clinic_id: int, svc: FacilityService = Depends(get_facility_service)):
    return await svc.get_clinic(clinic_id)


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    days: Optional[int] = Query(default=None, description="Only reviews from the past N days"),
    svc: FacilityService = Depends(get_facility_service),
):
    return await svc.list_public_reviews(days)

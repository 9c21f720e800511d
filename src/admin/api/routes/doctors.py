from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.admin.api.schemas import HospitalResponse, VerifiedDoctorResponse
from src.admin.application.services.doctor_service import DoctorService
from src.admin.application.services.facility_service import FacilityService
from src.dependencies import get_doctor_service, get_facility_service

router = APIRouter(prefix="/api/admin/doctors", tags=["admin:doctors"])


@router.get("/verified", response_model=list[VerifiedDoctorResponse])
async def list_verified_doctors(
    name: Optional[str] = Query(default=None, description="Partial match on the doctor's full name"),
    email: Optional[str] = Query(default=None),
    specialization_name: Optional[str] = Query(default=None),
    svc: DoctorService = Depends(get_doctor_service),
):
    return await svc.list_verified(name=name, email=email, specialization_name=specialization_name)


@router.get("/verified-details")
async def list_verified_doctor_details(svc: DoctorService = Depends(get_doctor_service)):
    """Verified doctors with address, qualifications, schedules, slots, appointments and documents."""
    return await svc.list_verified_profiles()


@router.get("/verified-details/{doctor_id}")
async def get_verified_doctor_details(doctor_id: int, svc: DoctorService = Depends(get_doctor_service)):
    return await svc.get_verified_profile(doctor_id)


@router.get("/workplaces")
async def list_doctor_workplaces(svc: DoctorService = Depends(get_doctor_service)):
    """Doctors with their clinics and hospital departments, each carrying its schedules."""
    return await svc.list_workplaces()


@router.get("/hospitals", response_model=list[HospitalResponse])
async def list_hospitals(svc: FacilityService = Depends(get_facility_service)):
    return await svc.list_hospitals()

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.admin.api.schemas import PatientResponse
from src.admin.application.services.patient_service import PatientService
from src.dependencies import get_patient_service

router = APIRouter(prefix="/api/admin/patients", tags=["admin:patients"])


@router.get("", response_model=list[PatientResponse])
async def list_patients(
    full_name: Optional[str] = Query(default=None, description="Partial match"),
    email: Optional[str] = Query(default=None, description="Partial match"),
    gender: Optional[str] = Query(default=None, description="Exact match"),
    svc: PatientService = Depends(get_patient_service),
):
    return await svc.list_patients(full_name=full_name, email=email, gender=gender)

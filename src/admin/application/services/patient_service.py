from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.admin.domain import patient as patients
from src.admin.infrastructure.repositories.patient_repository import PatientRepository
from src.shared.aggregation import group_rows, shape


class PatientService:
    def __init__(self, repository: PatientRepository) -> None:
        self.repository = repository

    async def list_patients(
        self,
        *,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        rows = await self.repository.list_profile_rows(full_name=full_name, email=email, gender=gender)
        grouped = group_rows(rows, key="patient_id", build=patients.new_patient)
        grouped = await self.repository.attach_health_records(
            grouped,
            documents=patients.add_document,
            conditions=patients.add_condition,
            allergies=patients.add_allergy,
        )
        return shape(grouped)

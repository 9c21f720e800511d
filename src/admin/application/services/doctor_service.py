"""
Doctor Service
Verified-doctor listings and the nested workplace / profile aggregations
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.admin.domain import doctor as doctors
from src.admin.infrastructure.repositories.doctor_repository import DoctorRepository
from src.shared.aggregation import as_optional_bool, group_rows, shape, to_wire
from src.shared.exceptions import NotFoundError
from src.shared.logging import get_logger, time_block

logger = get_logger(__name__)


def _profile_payload(profile: doctors.VerifiedDoctorProfile) -> Dict[str, Any]:
    payload = to_wire(profile)
    payload["qualifications"] = profile.qualification_text()
    return payload


class DoctorService:
    def __init__(self, repository: DoctorRepository) -> None:
        self.repository = repository

    async def list_verified(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        specialization_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        rows = await self.repository.list_verified(
            name=name, email=email, specialization_name=specialization_name
        )
        return [{**row, "is_verified": as_optional_bool(row.get("is_verified"))} for row in rows]

    async def list_workplaces(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Doctors that practise somewhere, each with deduplicated practices, clinics and
        hospital departments (schedules nested under the place), qualifications and documents.
        """
        with time_block("aggregation.doctor_workplaces", logger=logger):
            rows = await self.repository.list_workplace_rows()
            grouped = group_rows(
                rows,
                key="doctor_id",
                build=doctors.new_doctor_workplaces,
                fold=doctors.fold_practice_row,
            )
            grouped = await self.repository.attach_workplace_details(
                grouped,
                qualifications=doctors.fold_qualification_row,
                documents=doctors.fold_document_row,
            )
        logger.info("doctor_workplaces_aggregated", rows=len(rows), doctors=len(grouped))
        return {"data": shape(grouped)}

    async def list_verified_profiles(self) -> List[Dict[str, Any]]:
        profiles = await self._profiles()
        return [_profile_payload(profile) for profile in profiles.values()]

    async def get_verified_profile(self, doctor_id: int) -> Dict[str, Any]:
        profiles = await self._profiles(doctor_id)
        if doctor_id not in profiles:
            raise NotFoundError("Verified doctor not found", code="doctor_not_found")
        return _profile_payload(profiles[doctor_id])

    async def _profiles(self, doctor_id: Optional[int] = None):
        rows = await self.repository.list_verified_profile_rows(doctor_id)
        grouped = group_rows(rows, key="doctor_id", build=doctors.new_verified_profile)
        return await self.repository.attach_profile_details(
            grouped,
            qualifications=doctors.add_profile_qualification,
            schedules=doctors.add_profile_schedule,
            slots=doctors.add_profile_slot,
            appointments=doctors.add_profile_appointment,
            documents=doctors.add_profile_document,
        )

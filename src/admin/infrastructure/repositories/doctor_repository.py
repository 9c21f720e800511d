# src/admin/infrastructure/repositories/doctor_repository.py
from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, TypeVar

from src.shared.aggregation import ChildQuery, stitch
from src.shared.database import Database

P = TypeVar("P")
Fold = Callable[[P, Mapping[str, Any]], P]

_WORKPLACE_ROWS = """
    SELECT
        d.id AS doctor_id,
        u.full_name,
        d.specialization_id,
        s.name AS specialization_name,

        dp.id AS doctor_practice_id,
        dp.practice_type,
        dp.is_primary,
        dp.consultation_fee,
        dp.notes,

        c.id AS clinic_id,
        c.name AS clinic_name,
        c.address_line AS clinic_address,
        c.postal_code AS clinic_postal_code,
        c.city_id AS clinic_city_id,

        hd.id AS hospital_department_id,
        hd.floor AS department_floor,
        hd.description AS department_description,
        h.id AS hospital_id,
        h.name AS hospital_name,
        h.hospital_type,
        h.address_line AS hospital_address,
        h.postal_code AS hospital_postal_code,
        h.city_id AS hospital_city_id,

        ds.id AS schedule_id,
        ds.day_of_week,
        ds.start_time,
        ds.end_time,
        ds.consultation_mode,
        ds.is_active
    FROM doctors d
    JOIN users u ON d.user_id = u.id
    LEFT JOIN specializations s ON d.specialization_id = s.id
    LEFT JOIN doctor_practices dp ON dp.doctor_id = d.id
    LEFT JOIN clinics c ON dp.clinic_id = c.id
    LEFT JOIN hospital_departments hd ON dp.hospital_department_id = hd.id
    LEFT JOIN hospitals h ON hd.hospital_id = h.id
    LEFT JOIN doctor_schedules ds ON ds.doctor_practice_id = dp.id
    WHERE dp.clinic_id IS NOT NULL OR dp.hospital_department_id IS NOT NULL
    ORDER BY d.id, dp.id, ds.id
"""

_QUALIFICATIONS_BY_DOCTOR = """
    SELECT doctor_id, degree_name, institution, completion_year
    FROM doctor_qualifications
    WHERE doctor_id IN :ids
    ORDER BY doctor_id, id
"""

_DOCUMENTS_BY_DOCTOR = """
    SELECT doctor_id, document_type, document_url, status, reviewed_by, remarks
    FROM doctor_verification_docs
    WHERE doctor_id IN :ids
    ORDER BY doctor_id, id
"""

_VERIFIED_LIST = """
    SELECT d.*, u.full_name AS doctor_name, u.email, s.name AS specialization_name
    FROM doctors d
    INNER JOIN users u ON d.user_id = u.id
    LEFT JOIN specializations s ON d.specialization_id = s.id
    WHERE d.is_verified = 1
"""

_VERIFIED_PROFILES = """
    SELECT
        d.id AS doctor_id,
        u.full_name AS name,
        u.email,
        u.phone,
        d.bio,
        d.experience_years,
        d.languages_spoken,
        d.average_rating,
        d.total_reviews,
        d.is_verified,
        d.profile_url,
        d.profile_img_public_id,
        a.street AS address,
        a.postal_code,
        c.name AS city,
        s.name AS state,
        cn.name AS country
    FROM doctors d
    JOIN users u ON d.user_id = u.id
    LEFT JOIN addresses a ON a.id = d.address_id
    LEFT JOIN states s ON a.state_id = s.id
    LEFT JOIN countries cn ON a.country_id = cn.id
    LEFT JOIN cities c ON a.city_id = c.id
    WHERE d.is_verified = 1
"""

_PROFILE_QUALIFICATIONS = """
    SELECT DISTINCT doctor_id, degree_name, institution, completion_year
    FROM doctor_qualifications
    WHERE doctor_id IN :ids
    ORDER BY doctor_id, completion_year, degree_name
"""

_PROFILE_SCHEDULES = """
    SELECT dp.doctor_id, ds.day_of_week, ds.start_time, ds.end_time, ds.consultation_mode, ds.is_active
    FROM doctor_schedules ds
    JOIN doctor_practices dp ON ds.doctor_practice_id = dp.id
    WHERE dp.doctor_id IN :ids
    ORDER BY ds.id
"""

_PROFILE_SLOTS = """
    SELECT dp.doctor_id, sl.slot_start_time, sl.slot_end_time, sl.consultation_mode,
           sl.slot_date, sl.created_from_schedule_id
    FROM availability_slots sl
    JOIN doctor_practices dp ON sl.doctor_practice_id = dp.id
    WHERE dp.doctor_id IN :ids
    ORDER BY sl.id
"""

_PROFILE_APPOINTMENTS = """
    SELECT
        a.doctor_id,
        a.id,
        a.slot_id,
        a.patient_profile_id,
        a.status,
        a.consultation_type,
        a.patient_symptoms,
        a.channel_name,
        u.full_name AS patient_name
    FROM appointments a
    LEFT JOIN patient_profiles pp ON a.patient_profile_id = pp.id
    LEFT JOIN users u ON pp.user_id = u.id
    WHERE a.doctor_id IN :ids
    ORDER BY a.id
"""

# one document per (doctor, public_id): the earliest row wins
_PROFILE_DOCUMENTS = """
    SELECT d1.id, d1.doctor_id, d1.document_type, d1.document_url, d1.public_id,
           d1.status, d1.reviewed_by, d1.remarks, d1.created_at
    FROM doctor_verification_docs d1
    INNER JOIN (
        SELECT MIN(id) AS min_id
        FROM doctor_verification_docs
        WHERE doctor_id IN :ids
        GROUP BY doctor_id, public_id
    ) d2 ON d1.id = d2.min_id
    ORDER BY d1.id
"""


class DoctorRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    # -------- Workplaces -----------------------------------------------------

    async def list_workplace_rows(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_WORKPLACE_ROWS)

    async def attach_workplace_details(
        self,
        doctors: Dict[Hashable, P],
        *,
        qualifications: Fold,
        documents: Fold,
    ) -> Dict[Hashable, P]:
        return await stitch(
            self._db,
            doctors,
            [
                ChildQuery("qualifications", _QUALIFICATIONS_BY_DOCTOR, "doctor_id", qualifications),
                ChildQuery("documents", _DOCUMENTS_BY_DOCTOR, "doctor_id", documents),
            ],
        )

    # -------- Verified doctors -----------------------------------------------

    async def list_verified(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        specialization_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        sql = _VERIFIED_LIST
        params: Dict[str, Any] = {}
        if name:
            sql += " AND LOWER(u.full_name) LIKE LOWER(:name)"
            params["name"] = f"%{name}%"
        if email:
            sql += " AND LOWER(u.email) LIKE LOWER(:email)"
            params["email"] = f"%{email}%"
        if specialization_name:
            sql += " AND LOWER(s.name) LIKE LOWER(:specialization_name)"
            params["specialization_name"] = f"%{specialization_name}%"
        sql += " ORDER BY d.id"
        return await self._db.fetch_all(sql, params)

    async def list_verified_profile_rows(self, doctor_id: Optional[int] = None) -> List[Dict[str, Any]]:
        if doctor_id is None:
            return await self._db.fetch_all(_VERIFIED_PROFILES + " ORDER BY d.id")
        return await self._db.fetch_all(_VERIFIED_PROFILES + " AND d.id = :doctor_id", {"doctor_id": doctor_id})

    async def attach_profile_details(
        self,
        profiles: Dict[Hashable, P],
        *,
        qualifications: Fold,
        schedules: Fold,
        slots: Fold,
        appointments: Fold,
        documents: Fold,
    ) -> Dict[Hashable, P]:
        return await stitch(
            self._db,
            profiles,
            [
                ChildQuery("qualifications", _PROFILE_QUALIFICATIONS, "doctor_id", qualifications),
                ChildQuery("schedules", _PROFILE_SCHEDULES, "doctor_id", schedules),
                ChildQuery("availability_slots", _PROFILE_SLOTS, "doctor_id", slots),
                ChildQuery("appointments", _PROFILE_APPOINTMENTS, "doctor_id", appointments),
                ChildQuery("documents", _PROFILE_DOCUMENTS, "doctor_id", documents),
            ],
        )

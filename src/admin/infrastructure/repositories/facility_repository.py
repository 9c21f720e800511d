# src/admin/infrastructure/repositories/facility_repository.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, bindparam, text

from src.shared.database import Database

_HOSPITALS = """
    SELECT
        h.id,
        h.name,
        h.hospital_type,
        h.ownership,
        h.address_line,
        h.postal_code,
        c.name AS city,
        h.contact_number,
        h.website_url,
        h.bed_count,
        h.emergency_available
    FROM hospitals h
    LEFT JOIN cities c ON h.city_id = c.id
    ORDER BY h.id
"""

_CLINIC = """
    SELECT cl.id, cl.name, cl.address_line, cl.postal_code, c.name AS city
    FROM clinics cl
    LEFT JOIN cities c ON cl.city_id = c.id
    WHERE cl.id = :clinic_id
"""

_PUBLIC_REVIEWS = """
    SELECT
        r.rating,
        r.review_text,
        du.full_name AS doctor_name,
        pu.full_name AS patient_name
    FROM reviews r
    JOIN doctors d ON r.doctor_id = d.id
    JOIN users du ON d.user_id = du.id
    JOIN patient_profiles p ON r.patient_profile_id = p.id
    JOIN users pu ON p.user_id = pu.id
    WHERE r.is_public = 1
"""


class FacilityRepository:
    """Hospitals, clinics and the public review feed shown on the admin dashboard."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_hospitals(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_HOSPITALS)

    async def get_clinic(self, clinic_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(_CLINIC, {"clinic_id": clinic_id})

    async def list_public_reviews(self, *, since: Optional[datetime] = None) -> List[Dict[str, Any]]:
        if since is None:
            return await self._db.fetch_all(_PUBLIC_REVIEWS + " ORDER BY r.created_at DESC, r.id DESC")
        statement = text(
            _PUBLIC_REVIEWS + " AND r.created_at >= :since ORDER BY r.created_at DESC, r.id DESC"
        ).bindparams(bindparam("since", type_=DateTime()))
        return await self._db.fetch_all(statement, {"since": since})

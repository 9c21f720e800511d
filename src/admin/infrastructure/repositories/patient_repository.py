# src/admin/infrastructure/repositories/patient_repository.py
from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, TypeVar

from src.shared.aggregation import ChildQuery, stitch
from src.shared.database import Database

P = TypeVar("P")
Fold = Callable[[P, Mapping[str, Any]], P]

_PATIENTS = """
    SELECT
        p.id AS patient_id,
        u.full_name,
        u.email,
        u.phone,
        p.relationship,
        p.date_of_birth,
        p.gender,
        p.blood_group,
        p.profile_image_url,
        p.created_at
    FROM patient_profiles p
    JOIN users u ON u.id = p.user_id
"""

_DOCUMENTS = """
    SELECT patient_profile_id, document_name, document_type, document_url
    FROM patient_documents
    WHERE patient_profile_id IN :ids
    ORDER BY id
"""

_CONDITIONS = """
    SELECT patient_profile_id, condition_name, diagnosed_on, condition_status, notes
    FROM patient_conditions
    WHERE patient_profile_id IN :ids
    ORDER BY id
"""

_ALLERGIES = """
    SELECT patient_profile_id, allergen, severity, reaction_notes
    FROM patient_allergies
    WHERE patient_profile_id IN :ids
    ORDER BY id
"""


class PatientRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_profile_rows(
        self,
        *,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        clauses: List[str] = []
        params: Dict[str, Any] = {}
        if full_name:
            clauses.append("LOWER(u.full_name) LIKE LOWER(:full_name)")
            params["full_name"] = f"%{full_name}%"
        if email:
            clauses.append("LOWER(u.email) LIKE LOWER(:email)")
            params["email"] = f"%{email}%"
        if gender:
            clauses.append("p.gender = :gender")
            params["gender"] = gender

        sql = _PATIENTS
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        # newest first; id breaks ties between rows created in the same second
        sql += " ORDER BY p.created_at DESC, p.id DESC"
        return await self._db.fetch_all(sql, params)

    async def attach_health_records(
        self,
        patients: Dict[Hashable, P],
        *,
        documents: Fold,
        conditions: Fold,
        allergies: Fold,
    ) -> Dict[Hashable, P]:
        return await stitch(
            self._db,
            patients,
            [
                ChildQuery("patient_documents", _DOCUMENTS, "patient_profile_id", documents),
                ChildQuery("patient_conditions", _CONDITIONS, "patient_profile_id", conditions),
                ChildQuery("patient_allergies", _ALLERGIES, "patient_profile_id", allergies),
            ],
        )

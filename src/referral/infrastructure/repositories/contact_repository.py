# src/referral/infrastructure/repositories/contact_repository.py
from __future__ import annotations

from typing import Any, Dict, List

from src.shared.database import Database


class ContactRepository:
    """Phone-book contacts users shared when inviting others."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_user_contact_rows(self, user_id: int) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            """
            SELECT
                u.id AS user_id,
                u.full_name AS user_name,
                u.email,
                u.phone,
                uc.id AS contact_id,
                uc.contact_name,
                uc.contact_number,
                uc.created_at AS contact_created_at
            FROM users u
            LEFT JOIN user_contacts uc ON u.id = uc.user_id
            WHERE u.id = :user_id
            ORDER BY uc.id
            """,
            {"user_id": user_id},
        )

    async def list_users_with_contacts(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            """
            SELECT DISTINCT u.id AS user_id, u.full_name AS user_name, u.email, u.phone
            FROM users u
            INNER JOIN user_contacts uc ON u.id = uc.user_id
            ORDER BY u.id ASC
            """
        )

    async def count_contacts(self) -> int:
        return int(await self._db.fetch_value("SELECT COUNT(*) AS total FROM user_contacts") or 0)

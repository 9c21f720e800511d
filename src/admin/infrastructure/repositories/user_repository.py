# src/admin/infrastructure/repositories/user_repository.py
from __future__ import annotations

from typing import Any, Dict, Optional

from src.shared.database import Database


class UserRepository:
    """Account status reads/writes for the admin user endpoints. No commits beyond the statement itself."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_status(self, user_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(
            "SELECT id, is_active FROM users WHERE id = :user_id",
            {"user_id": user_id},
        )

    async def set_active(self, user_id: int, *, active: bool) -> int:
        # guarded on the opposite state so a concurrent toggle updates nothing
        return await self._db.execute(
            "UPDATE users SET is_active = :target WHERE id = :user_id AND is_active = :current",
            {"user_id": user_id, "target": int(active), "current": int(not active)},
        )


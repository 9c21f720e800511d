from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from src.admin.infrastructure.repositories.facility_repository import FacilityRepository
from src.shared.aggregation import as_bool
from src.shared.exceptions import NotFoundError


class FacilityService:
    def __init__(self, repository: FacilityRepository) -> None:
        self.repository = repository

    async def list_hospitals(self) -> List[Dict[str, Any]]:
        rows = await self.repository.list_hospitals()
        return [{**row, "emergency_available": as_bool(row["emergency_available"])} for row in rows]

    async def get_clinic(self, clinic_id: int) -> Dict[str, Any]:
        clinic = await self.repository.get_clinic(clinic_id)
        if clinic is None:
            raise NotFoundError("Clinic not found", code="clinic_not_found")
        return clinic

    async def list_public_reviews(self, days: Optional[int] = None) -> List[Dict[str, Any]]:
        """Public reviews, newest first; `days` narrows to the trailing window when positive."""
        since = None
        if days is not None and days > 0:
            # stored timestamps are naive UTC
            since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=days)
        return await self.repository.list_public_reviews(since=since)

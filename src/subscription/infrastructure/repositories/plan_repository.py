# src/subscription/infrastructure/repositories/plan_repository.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from src.shared.database import Database


class PlanRepository:
    """Subscription plans, their benefits, and the role lookup gating changes to both."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_user_role_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one("SELECT id, role_id FROM users WHERE id = :user_id", {"user_id": user_id})

    # -------- Plans ----------------------------------------------------------

    async def get_plan(self, plan_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one("SELECT * FROM subscription_plans WHERE id = :plan_id", {"plan_id": plan_id})

    async def update_plan(self, plan_id: int, values: Mapping[str, Any]) -> int:
        return await self._db.execute(
            """
            UPDATE subscription_plans
            SET name = :name, description = :description, price = :price, currency = :currency,
                duration_days = :duration_days, is_active = :is_active
            WHERE id = :plan_id
            """,
            {**values, "plan_id": plan_id},
        )

    async def delete_plan(self, plan_id: int) -> int:
        # benefits hang off the plan; no FK cascade is assumed
        async with self._db.transaction() as tx:
            await tx.execute("DELETE FROM plan_benefits WHERE plan_id = :plan_id", {"plan_id": plan_id})
            return await tx.execute("DELETE FROM subscription_plans WHERE id = :plan_id", {"plan_id": plan_id})

    # -------- Benefits -------------------------------------------------------

    async def get_benefit(self, benefit_id: int) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one("SELECT * FROM plan_benefits WHERE id = :benefit_id", {"benefit_id": benefit_id})

    async def update_benefit(self, benefit_id: int, values: Mapping[str, Any]) -> int:
        return await self._db.execute(
            """
            UPDATE plan_benefits
            SET plan_id = :plan_id, benefit_description = :benefit_description,
                benefit_type = :benefit_type, quantity = :quantity, notes = :notes
            WHERE id = :benefit_id
            """,
            {**values, "benefit_id": benefit_id},
        )

    async def delete_benefit(self, benefit_id: int) -> int:
        return await self._db.execute("DELETE FROM plan_benefits WHERE id = :benefit_id", {"benefit_id": benefit_id})

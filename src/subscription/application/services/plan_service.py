"""
Plan Service
Partial updates and deletion of subscription plans and plan benefits
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from src.config import Settings
from src.shared.exceptions import ForbiddenError, NotFoundError, ValidationError
from src.shared.logging import get_logger, log_security_event
from src.shared.partial_update import changed_fields, merge, to_storage
from src.subscription.domain.plan import BENEFIT_FIELDS, PLAN_FIELDS
from src.subscription.infrastructure.repositories.plan_repository import PlanRepository

logger = get_logger(__name__)


class PlanService:
    def __init__(self, repository: PlanRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def _require_plan_admin(self, acting_user_id: int, action: str) -> None:
        """
        The token role is not trusted here; the acting user's current role_id is read
        from the database on every call.
        """
        user = await self.repository.get_user_role_id(acting_user_id)
        if user is None:
            raise NotFoundError("User not found", code="user_not_found")
        if user["role_id"] != self.settings.PLAN_ADMIN_ROLE_ID:
            log_security_event("plan_admin_denied", user_id=str(acting_user_id), details={"action": action})
            raise ForbiddenError(f"Only admins can {action}")

    # -------- Plans ----------------------------------------------------------

    async def update_plan(self, *, acting_user_id: int, plan_id: int, changes: Mapping[str, Any]) -> Dict[str, Any]:
        await self._require_plan_admin(acting_user_id, "update subscription plans")
        current = await self.repository.get_plan(plan_id)
        if current is None:
            raise NotFoundError("Subscription plan not found", code="plan_not_found")

        merged = merge(current, changes, PLAN_FIELDS)
        changed = changed_fields(current, merged, PLAN_FIELDS)
        if not changed:
            raise ValidationError("No changes detected in subscription plan", code="no_changes")

        await self.repository.update_plan(plan_id, to_storage(merged))
        logger.info("subscription_plan_updated", plan_id=plan_id, fields=list(changed))
        return {
            "message": "Subscription plan updated successfully",
            "plan": await self.repository.get_plan(plan_id),
        }

    async def delete_plan(self, *, acting_user_id: int, plan_id: int) -> Dict[str, str]:
        await self._require_plan_admin(acting_user_id, "delete subscription plans")
        if await self.repository.get_plan(plan_id) is None:
            raise NotFoundError("Subscription plan not found", code="plan_not_found")
        await self.repository.delete_plan(plan_id)
        logger.info("subscription_plan_deleted", plan_id=plan_id)
        return {"message": "Subscription plan deleted successfully"}

    # -------- Benefits -------------------------------------------------------

    async def update_benefit(self, *, acting_user_id: int, benefit_id: int, changes: Mapping[str, Any]) -> Dict[str, Any]:
        await self._require_plan_admin(acting_user_id, "update plan benefits")
        current = await self.repository.get_benefit(benefit_id)
        if current is None:
            raise NotFoundError("Plan benefit not found", code="benefit_not_found")

        merged = merge(current, changes, BENEFIT_FIELDS)
        changed = changed_fields(current, merged, BENEFIT_FIELDS)
        if not changed:
            raise ValidationError("No changes detected in plan benefit", code="no_changes")

        await self.repository.update_benefit(benefit_id, to_storage(merged))
        logger.info("plan_benefit_updated", benefit_id=benefit_id, fields=list(changed))
        return {
            "message": "Plan benefit updated successfully",
            "benefit": {"id": benefit_id, **merged},
        }

    async def delete_benefit(self, *, acting_user_id: int, benefit_id: int) -> Dict[str, str]:
        await self._require_plan_admin(acting_user_id, "delete plan benefits")
        if await self.repository.get_benefit(benefit_id) is None:
            raise NotFoundError("Plan benefit not found", code="benefit_not_found")
        await self.repository.delete_benefit(benefit_id)
        logger.info("plan_benefit_deleted", benefit_id=benefit_id)
        return {"message": "Plan benefit deleted successfully"}

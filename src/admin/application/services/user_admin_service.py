"""
User Admin Service
Activation and deactivation of user accounts by an administrator
"""
from __future__ import annotations

from typing import Dict

from src.admin.infrastructure.repositories.user_repository import UserRepository
from src.shared.aggregation import as_bool
from src.shared.exceptions import NotFoundError, ValidationError
from src.shared.logging import get_logger, log_security_event

logger = get_logger(__name__)


class UserAdminService:
    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def deactivate(self, *, acting_user_id: str, user_id: int) -> Dict[str, str]:
        """
        Flip is_active to 0 for `user_id`.

        Raises:
            ValidationError: the admin targets their own account, or the account is already inactive
            NotFoundError: no such user
        """
        await self._change_state(acting_user_id=acting_user_id, user_id=user_id, active=False)
        return {"message": "User account deactivated successfully"}

    async def activate(self, *, acting_user_id: str, user_id: int) -> Dict[str, str]:
        """Mirror of deactivate()."""
        await self._change_state(acting_user_id=acting_user_id, user_id=user_id, active=True)
        return {"message": "User account activated successfully"}

    async def _change_state(self, *, acting_user_id: str, user_id: int, active: bool) -> None:
        verb = "activate" if active else "deactivate"
        if str(acting_user_id) == str(user_id):
            raise ValidationError(f"Admin cannot {verb} their own account via this endpoint.")

        current = await self.users.get_status(user_id)
        if current is None:
            raise NotFoundError("User not found", code="user_not_found")
        if as_bool(current["is_active"]) == active:
            raise ValidationError("User is already active" if active else "User is already deactivated")

        updated = await self.users.set_active(user_id, active=active)
        if updated == 0:
            # state changed between the read and the guarded update
            raise NotFoundError(
                "User already active" if active else "User not found or already inactive",
                code="user_not_found",
            )

        log_security_event(f"user_{verb}d", user_id=str(acting_user_id), details={"target_user_id": user_id})

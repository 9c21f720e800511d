from __future__ import annotations

from typing import Any, Dict

from src.referral.domain.referral import add_contact, new_user_contacts
from src.referral.infrastructure.repositories.contact_repository import ContactRepository
from src.shared.aggregation import group_rows, to_wire
from src.shared.exceptions import NotFoundError


class ContactService:
    def __init__(self, repository: ContactRepository) -> None:
        self.repository = repository

    async def user_with_contacts(self, user_id: int) -> Dict[str, Any]:
        rows = await self.repository.list_user_contact_rows(user_id)
        grouped = group_rows(rows, key="user_id", build=new_user_contacts, fold=add_contact)
        if user_id not in grouped:
            raise NotFoundError("User not found", code="user_not_found")
        return {"success": True, "data": to_wire(grouped[user_id])}

    async def users_with_contacts(self) -> Dict[str, Any]:
        rows = await self.repository.list_users_with_contacts()
        return {"success": True, "count": len(rows), "data": rows}

    async def total_contacts(self) -> Dict[str, int]:
        return {"totalContacts": await self.repository.count_contacts()}

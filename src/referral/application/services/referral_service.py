"""
Referral Service
Channel partners, referrals grouped by referrer, and a user's own referrals
"""
from __future__ import annotations

from typing import Any, Dict

from src.referral.domain.referral import add_referee, new_referrer_group
from src.referral.infrastructure.repositories.referral_repository import ReferralRepository
from src.shared.aggregation import as_bool, group_rows, shape


class ReferralService:
    def __init__(self, repository: ReferralRepository) -> None:
        self.repository = repository

    async def list_channel_partners(self) -> Dict[str, Any]:
        rows = await self.repository.list_channel_partners()
        return {"success": True, "data": rows}

    async def referrals_by_referrer(self) -> Dict[str, Any]:
        """
        One entry per referrer (ordered by their newest referral), each listing its
        referees; `count` is the number of referrers, not referrals.
        """
        rows = await self.repository.list_referral_rows()
        grouped = group_rows(rows, key="referrer_id", build=new_referrer_group, fold=add_referee)
        return {"success": True, "count": len(grouped), "data": shape(grouped)}

    async def referrals_for_user(self, user_id: int) -> Dict[str, Any]:
        rows = await self.repository.list_for_user(user_id)
        referrals = [{**row, "reward_granted": as_bool(row["reward_granted"])} for row in rows]
        return {"success": True, "count": len(referrals), "referrals": referrals}

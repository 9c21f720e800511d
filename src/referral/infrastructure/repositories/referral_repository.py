# src/referral/infrastructure/repositories/referral_repository.py
from __future__ import annotations

from typing import Any, Dict, List

from src.shared.database import Database

_CHANNEL_PARTNERS = """
    SELECT cpp.*, u.full_name, u.email, u.phone
    FROM channel_partner_profiles cpp
    JOIN users u ON cpp.user_id = u.id
    ORDER BY cpp.id
"""

_REFERRALS_WITH_PARTIES = """
    SELECT
        r.id AS referral_id,
        r.referral_code,
        r.status,
        r.created_at,

        u1.id AS referrer_id,
        u1.full_name AS referrer_name,
        u1.email AS referrer_email,
        u1.phone AS referrer_phone,

        cpp.total_referrals,
        cpp.total_commission_earned,
        cpp.commission_percentage,
        cpp.status AS partner_status,

        u2.id AS referee_id,
        u2.full_name AS referee_name,
        u2.email AS referee_email,
        u2.phone AS referee_phone
    FROM referrals r
    JOIN users u1 ON r.referrer_id = u1.id
    JOIN users u2 ON r.referee_id = u2.id
    LEFT JOIN channel_partner_profiles cpp ON cpp.user_id = u1.id
    ORDER BY r.created_at DESC, r.id DESC
"""

_REFERRALS_FOR_USER = """
    SELECT
        r.id,
        r.referrer_id,
        referrer.full_name AS referrer_name,
        referrer.email AS referrer_email,
        r.referee_id,
        referee.full_name AS referee_name,
        referee.email AS referee_email,
        r.referral_code,
        r.status,
        r.reward_granted,
        r.created_at,
        r.accepted_at,
        r.completed_at
    FROM referrals r
    LEFT JOIN users referrer ON r.referrer_id = referrer.id
    LEFT JOIN users referee ON r.referee_id = referee.id
    WHERE r.referrer_id = :user_id OR r.referee_id = :user_id
    ORDER BY r.created_at DESC, r.id DESC
"""


class ReferralRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_channel_partners(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_CHANNEL_PARTNERS)

    async def list_referral_rows(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_REFERRALS_WITH_PARTIES)

    async def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(_REFERRALS_FOR_USER, {"user_id": user_id})

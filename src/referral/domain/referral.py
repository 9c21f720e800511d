from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from src.shared.aggregation import append_unique, by_fields

Row = Mapping[str, Any]

_referral_key = by_fields("referral_id")
_contact_key = by_fields("contact_id")


@dataclass(frozen=True, slots=True)
class Referee:
    referral_id: int
    status: Optional[str]
    created_at: Any
    referee_id: int
    referee_name: Optional[str]
    referee_email: Optional[str]
    referee_phone: Optional[str]


@dataclass(frozen=True, slots=True)
class ReferrerGroup:
    """All referrals made by one user, with that user's channel-partner totals."""
    referrer_id: int
    referrer_name: Optional[str]
    referrer_email: Optional[str]
    referrer_phone: Optional[str]
    commission_percentage: Any
    partner_status: Optional[str]
    total_referrals: Any
    total_commission_earned: Any
    # code of the newest referral made by this user
    referral_code: Optional[str]
    referrals_count: int = 0
    referrals: Tuple[Referee, ...] = ()


def new_referrer_group(row: Row) -> ReferrerGroup:
    return ReferrerGroup(
        referrer_id=row["referrer_id"],
        referrer_name=row["referrer_name"],
        referrer_email=row["referrer_email"],
        referrer_phone=row["referrer_phone"],
        commission_percentage=row["commission_percentage"],
        partner_status=row["partner_status"],
        total_referrals=row["total_referrals"] or 0,
        total_commission_earned=row["total_commission_earned"] or 0,
        referral_code=row["referral_code"],
    )


def add_referee(group: ReferrerGroup, row: Row) -> ReferrerGroup:
    referee = Referee(
        referral_id=row["referral_id"],
        status=row["status"],
        created_at=row["created_at"],
        referee_id=row["referee_id"],
        referee_name=row["referee_name"],
        referee_email=row["referee_email"],
        referee_phone=row["referee_phone"],
    )
    referrals = append_unique(group.referrals, referee, _referral_key)
    return replace(group, referrals=referrals, referrals_count=len(referrals))


@dataclass(frozen=True, slots=True)
class Contact:
    contact_id: int
    contact_name: Optional[str]
    contact_number: Optional[str]
    created_at: Any


@dataclass(frozen=True, slots=True)
class UserContacts:
    user_id: int
    user_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    contacts: Tuple[Contact, ...] = ()


def new_user_contacts(row: Row) -> UserContacts:
    return UserContacts(
        user_id=row["user_id"],
        user_name=row["user_name"],
        email=row["email"],
        phone=row["phone"],
    )


def add_contact(user: UserContacts, row: Row) -> UserContacts:
    # LEFT JOIN: a user without contacts still yields one row with a null contact_id
    if row["contact_id"] is None:
        return user
    contact = Contact(
        contact_id=row["contact_id"],
        contact_name=row["contact_name"],
        contact_number=row["contact_number"],
        created_at=row["contact_created_at"],
    )
    return replace(user, contacts=append_unique(user.contacts, contact, _contact_key))

"""Columns a subscription plan or plan benefit update may touch, in UPDATE order."""
from __future__ import annotations

from typing import Tuple

PLAN_FIELDS: Tuple[str, ...] = ("name", "description", "price", "currency", "duration_days", "is_active")
BENEFIT_FIELDS: Tuple[str, ...] = ("plan_id", "benefit_description", "benefit_type", "quantity", "notes")

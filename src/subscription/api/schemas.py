from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class PlanUpdate(BaseModel):
    """Every field is optional; null or empty values keep the stored value."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[Decimal, str]] = None
    currency: Optional[str] = None
    duration_days: Optional[Union[int, str]] = None
    is_active: Optional[Union[bool, int, str]] = None


class BenefitUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plan_id: Optional[Union[int, str]] = None
    benefit_description: Optional[str] = None
    benefit_type: Optional[str] = None
    quantity: Optional[Union[int, str]] = None
    notes: Optional[str] = None


class PlanUpdateResponse(BaseModel):
    message: str
    plan: Dict[str, Any]


class BenefitUpdateResponse(BaseModel):
    message: str
    benefit: Dict[str, Any]

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.admin.api.schemas import MessageResponse
from src.dependencies import get_current_user_id, get_plan_service
from src.subscription.api.schemas import (
    BenefitUpdate,
    BenefitUpdateResponse,
    PlanUpdate,
    PlanUpdateResponse,
)
from src.subscription.application.services.plan_service import PlanService

router = APIRouter(prefix="/api", tags=["subscription"])


@router.put("/subscription-plans/{plan_id}", response_model=PlanUpdateResponse)
async def update_plan(
    plan_id: int,
    body: PlanUpdate,
    user_id: int = Depends(get_current_user_id),
    svc: PlanService = Depends(get_plan_service),
):
    return await svc.update_plan(
        acting_user_id=user_id,
        plan_id=plan_id,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/subscription-plans/{plan_id}", response_model=MessageResponse)
async def delete_plan(
    plan_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: PlanService = Depends(get_plan_service),
):
    return await svc.delete_plan(acting_user_id=user_id, plan_id=plan_id)


@router.put("/subscription-plans-benefits/{benefit_id}", response_model=BenefitUpdateResponse)
async def update_benefit(
    benefit_id: int,
    body: BenefitUpdate,
    user_id: int = Depends(get_current_user_id),
    svc: PlanService = Depends(get_plan_service),
):
    return await svc.update_benefit(
        acting_user_id=user_id,
        benefit_id=benefit_id,
        changes=body.model_dump(exclude_unset=True),
    )


@router.delete("/subscription-plans-benefits/{benefit_id}", response_model=MessageResponse)
async def delete_benefit(
    benefit_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: PlanService = Depends(get_plan_service),
):
    return await svc.delete_benefit(acting_user_id=user_id, benefit_id=benefit_id)

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from hostpricing.db import get_session
from hostpricing.models import HostingPlan
from hostpricing.schemas.bulk_pricing import HostingPlanOut
from hostpricing.services.pricing.exceptions import PlanNotFoundError

router = APIRouter()


@router.get("", response_model=list[HostingPlanOut])
def list_hosting_plans(
    search: str | None = Query(default=None),
    active_only: bool = Query(default=False, alias="activeOnly"),
    session: Session = Depends(get_session),
):
    stmt = select(HostingPlan).order_by(HostingPlan.selling_price, HostingPlan.id)
    if search:
        stmt = stmt.where(HostingPlan.plan_name.ilike(f"%{search}%"))
    if active_only:
        stmt = stmt.where(HostingPlan.is_active.is_(True))
    return session.scalars(stmt).all()


@router.get("/{plan_id}", response_model=HostingPlanOut)
def get_hosting_plan(plan_id: int, session: Session = Depends(get_session)):
    plan = session.get(HostingPlan, plan_id)
    if not plan:
        raise PlanNotFoundError(plan_id)
    return plan

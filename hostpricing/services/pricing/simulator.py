from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostpricing.models import HostingPlan
from hostpricing.services.pricing.tiers import resolve_discount
from hostpricing.settings import settings

logger = logging.getLogger(__name__)

UNKNOWN_PLAN_SKIP = "skip"
UNKNOWN_PLAN_DEFAULT = "default"
ZERO_STORAGE_ERROR = "ZERO_STORAGE"


def plan_type_of(plan_name: str | None) -> str:
    return (plan_name or "").strip().lower()


def normalize_multipliers(plan_multipliers: Mapping[str, Any]) -> dict[str, float]:
    return {plan_type_of(name): float(value) for name, value in (plan_multipliers or {}).items()}


def resolve_multiplier(plan_type: str, plan_multipliers: Mapping[str, float], policy: str | None = None) -> float | None:
    """
    플랜 유형의 배수를 반환합니다.
    배수가 없을 때 skip 정책이면 None, default 정책이면 1.0.
    """
    policy = policy or settings.bulk_pricing_unknown_plan_policy
    if plan_type in plan_multipliers:
        return plan_multipliers[plan_type]
    if policy == UNKNOWN_PLAN_DEFAULT:
        return 1.0
    return None


def compute_plan_pricing(
    storage_gb: float,
    base_price_per_gb: float,
    cost_per_gb: float,
    multiplier: float,
    discount: float,
) -> dict[str, Any]:
    """
    단일 플랜의 가격/수익 계산.

    storage_gb가 0이면 profit_per_gb는 None, error는 ZERO_STORAGE.
    """
    price_per_gb = base_price_per_gb * multiplier
    discounted_price_per_gb = price_per_gb * (1 - discount / 100)
    new_total_price = discounted_price_per_gb * storage_gb

    total_cost = cost_per_gb * storage_gb
    profit = new_total_price - total_cost
    profit_per_gb = profit / storage_gb if storage_gb else None
    profit_margin = (profit / total_cost) * 100 if total_cost > 0 else 0.0

    return {
        "discount_percentage": discount,
        "price_per_gb": discounted_price_per_gb,
        "new_total_price": new_total_price,
        "total_cost": total_cost,
        "profit": profit,
        "profit_per_gb": profit_per_gb,
        "profit_margin": profit_margin,
        "error": None if storage_gb else ZERO_STORAGE_ERROR,
    }


@dataclass
class SimulationResult:
    simulation: dict[str, list[dict]] = field(default_factory=dict)
    skipped_plans: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"simulation": self.simulation, "skipped_plans": self.skipped_plans}


def simulate_plans(
    plans: Iterable[Any],
    base_price_per_gb: float,
    cost_per_gb: float,
    plan_multipliers: Mapping[str, Any],
    tier_discounts: Iterable[Any],
    unknown_plan_policy: str | None = None,
    tier_lookup: str | None = None,
) -> SimulationResult:
    """
    플랜 목록에 대해 가격/수익 시뮬레이션 표를 만듭니다. 플랜 유형(소문자 plan_name)별로 묶입니다.
    """
    multipliers = normalize_multipliers(plan_multipliers)
    tiers = list(tier_discounts or [])
    base_price_per_gb = float(base_price_per_gb)
    cost_per_gb = float(cost_per_gb)

    result = SimulationResult()
    for plan in plans:
        plan_type = plan_type_of(plan.plan_name)
        multiplier = resolve_multiplier(plan_type, multipliers, unknown_plan_policy)
        if multiplier is None:
            result.skipped_plans.append(
                {"plan_id": plan.id, "plan_name": plan.plan_name, "reason": "NO_MULTIPLIER"}
            )
            continue

        storage_gb = float(plan.storage_gb or 0)
        discount = resolve_discount(storage_gb, tiers, tier_lookup)
        pricing = compute_plan_pricing(storage_gb, base_price_per_gb, cost_per_gb, multiplier, discount)
        current_price = float(plan.selling_price or 0)

        if pricing["error"]:
            logger.warning(f"[PricingSimulator] Plan {plan.id} ({plan.plan_name}) has zero storage")

        result.simulation.setdefault(plan_type, []).append(
            {
                "plan_id": plan.id,
                "plan_name": plan.plan_name,
                "storage_gb": storage_gb,
                "cpu_cores": getattr(plan, "cpu_cores", None),
                "ram_gb": getattr(plan, "ram_gb", None),
                "current_price": current_price,
                "plan_multiplier": multiplier,
                "price_difference": pricing["new_total_price"] - current_price,
                **pricing,
            }
        )

    if result.skipped_plans:
        logger.info(f"[PricingSimulator] Skipped {len(result.skipped_plans)} plans without multiplier")
    return result


class PricingSimulator:
    """
    DB의 호스팅 플랜 전체를 대상으로 시뮬레이션을 실행합니다. DB를 변경하지 않습니다.
    """
    def __init__(self, session: Session):
        self.session = session

    def load_plans(self) -> list[HostingPlan]:
        return list(self.session.scalars(select(HostingPlan).order_by(HostingPlan.id)).all())

    def run(
        self,
        base_price_per_gb: float,
        cost_per_gb: float,
        plan_multipliers: Mapping[str, Any],
        tier_discounts: Iterable[Any],
    ) -> SimulationResult:
        plans = self.load_plans()
        logger.debug(f"[PricingSimulator] Simulating {len(plans)} plans")
        return simulate_plans(plans, base_price_per_gb, cost_per_gb, plan_multipliers, tier_discounts)

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostpricing.models import HostingPlan, PricingTier
from hostpricing.services.pricing.exceptions import BulkPricingApplyError, BulkPricingError, PlanNotFoundError
from hostpricing.services.pricing.simulator import (
    compute_plan_pricing,
    normalize_multipliers,
    plan_type_of,
    resolve_multiplier,
)
from hostpricing.services.pricing.tiers import resolve_discount, tier_values

logger = logging.getLogger(__name__)


class BulkPricingApplier:
    """
    시뮬레이션한 가격 체계를 실제 플랜에 반영합니다.

    티어 테이블 교체와 플랜 가격 갱신은 하나의 트랜잭션으로 처리되며,
    중간에 실패하면 전부 롤백됩니다.
    """
    def __init__(self, session: Session):
        self.session = session

    def apply(
        self,
        base_price_per_gb: float,
        cost_per_gb: float,
        plan_multipliers: Mapping[str, Any],
        tier_discounts: Iterable[Any],
        plan_ids: Iterable[int],
    ) -> dict:
        """
        Args:
            base_price_per_gb: GB당 기본 판매가
            cost_per_gb: GB당 원가
            plan_multipliers: 플랜 유형(소문자) → 배수
            tier_discounts: 입력 순서대로 sort_order가 부여되는 티어 목록
            plan_ids: 가격을 갱신할 플랜 ID 목록
        """
        tiers = [tier_values(tier) for tier in tier_discounts]
        multipliers = normalize_multipliers(plan_multipliers)
        plan_ids = list(plan_ids)

        try:
            self._replace_tiers(tiers)
            updated, skipped = self._update_plans(
                float(base_price_per_gb), float(cost_per_gb), multipliers, tiers, plan_ids
            )
            self.session.commit()
        except BulkPricingError:
            self.session.rollback()
            logger.warning("[BulkPricingApplier] Apply aborted, transaction rolled back")
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("[BulkPricingApplier] Failed to persist bulk pricing")
            raise BulkPricingApplyError(plan_ids=plan_ids) from e

        logger.info(
            f"[BulkPricingApplier] Applied bulk pricing: {len(tiers)} tiers, "
            f"{len(updated)} plans updated, {len(skipped)} skipped"
        )
        return {
            "success": True,
            "message": "벌크 프라이싱이 적용되었습니다.",
            "updated_plan_ids": updated,
            "skipped_plan_ids": skipped,
            "tier_count": len(tiers),
        }

    def _replace_tiers(self, tiers: list[tuple[float, float]]) -> None:
        self.session.execute(delete(PricingTier))
        for index, (storage_gb, discount) in enumerate(tiers):
            self.session.add(
                PricingTier(
                    storage_gb=int(storage_gb),
                    discount_percentage=discount,
                    sort_order=index + 1,
                    is_active=True,
                )
            )
        self.session.flush()

    def _update_plans(
        self,
        base_price_per_gb: float,
        cost_per_gb: float,
        multipliers: dict[str, float],
        tiers: list[tuple[float, float]],
        plan_ids: list[int],
    ) -> tuple[list[int], list[int]]:
        tier_rows = [{"storage_gb": s, "discount_percentage": d} for s, d in tiers]
        updated: list[int] = []
        skipped: list[int] = []

        for plan_id in plan_ids:
            plan = self.session.get(HostingPlan, plan_id)
            if plan is None:
                raise PlanNotFoundError(plan_id)

            multiplier = resolve_multiplier(plan_type_of(plan.plan_name), multipliers)
            if multiplier is None:
                logger.info(f"[BulkPricingApplier] Plan {plan_id} ({plan.plan_name}) has no multiplier, skipped")
                skipped.append(plan_id)
                continue

            storage_gb = float(plan.storage_gb or 0)
            discount = resolve_discount(storage_gb, tier_rows)
            pricing = compute_plan_pricing(storage_gb, base_price_per_gb, cost_per_gb, multiplier, discount)
            if pricing["error"]:
                logger.warning(
                    f"[BulkPricingApplier] Plan {plan_id} ({plan.plan_name}) not priced: {pricing['error']}, skipped"
                )
                skipped.append(plan_id)
                continue

            plan.selling_price = pricing["new_total_price"]
            plan.base_price_per_gb = base_price_per_gb
            plan.plan_multiplier = multiplier
            plan.cost_per_gb = cost_per_gb
            plan.use_bulk_pricing = True
            updated.append(plan_id)

        self.session.flush()
        return updated, skipped

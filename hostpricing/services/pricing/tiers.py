from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostpricing.models import PricingTier
from hostpricing.settings import settings

logger = logging.getLogger(__name__)

TIER_LOOKUP_THRESHOLD = "threshold"
TIER_LOOKUP_EXACT = "exact"


def tier_values(tier: Any) -> tuple[float, float]:
    """dict / 스키마 / PricingTier 행에서 (storage_gb, discount_percentage)를 꺼냅니다."""
    if isinstance(tier, dict):
        return float(tier["storage_gb"]), float(tier["discount_percentage"])
    return float(tier.storage_gb), float(tier.discount_percentage)


def resolve_tier_discount(storage_gb: float, tiers: Iterable[Any]) -> float:
    """
    storage_gb 이하인 임계값 중 가장 큰 티어의 할인율을 반환합니다.
    해당 티어가 없으면 0. 임계값이 중복되면 나중에 나온 티어가 우선합니다.
    """
    best_threshold = None
    discount = 0.0
    for tier in tiers:
        threshold, tier_discount = tier_values(tier)
        if threshold > storage_gb:
            continue
        if best_threshold is None or threshold >= best_threshold:
            best_threshold = threshold
            discount = tier_discount
    return discount


def resolve_exact_tier_discount(storage_gb: float, tiers: Iterable[Any]) -> float:
    """storage_gb와 임계값이 정확히 일치하는 첫 티어의 할인율, 없으면 0."""
    for tier in tiers:
        threshold, tier_discount = tier_values(tier)
        if threshold == storage_gb:
            return tier_discount
    return 0.0


def resolve_discount(storage_gb: float, tiers: Iterable[Any], lookup: str | None = None) -> float:
    lookup = lookup or settings.bulk_pricing_tier_lookup
    if lookup == TIER_LOOKUP_EXACT:
        return resolve_exact_tier_discount(storage_gb, tiers)
    return resolve_tier_discount(storage_gb, tiers)


def default_tiers() -> list[dict]:
    return [
        {
            "storage_gb": int(tier["storage_gb"]),
            "discount_percentage": float(tier["discount_percentage"]),
            "sort_order": index + 1,
        }
        for index, tier in enumerate(settings.bulk_pricing_default_tier_discounts)
    ]


def list_active_tiers(session: Session) -> list[PricingTier]:
    stmt = (
        select(PricingTier)
        .where(PricingTier.is_active.is_(True))
        .order_by(PricingTier.sort_order)
    )
    return list(session.scalars(stmt).all())


def seed_default_tiers(session: Session) -> int:
    """티어 테이블이 비어 있으면 기본 티어를 생성합니다. 생성한 건수를 반환."""
    count = session.scalar(select(func.count()).select_from(PricingTier)) or 0
    if count:
        return 0

    tiers = default_tiers()
    for tier in tiers:
        session.add(PricingTier(is_active=True, **tier))
    session.flush()
    logger.info(f"[PricingTier] Seeded {len(tiers)} default tiers")
    return len(tiers)

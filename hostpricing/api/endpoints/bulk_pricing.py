"""
벌크 프라이싱 API 엔드포인트

GB당 기본가/원가/플랜 배수/용량 티어로 플랜 가격을 시뮬레이션하고 적용하며,
재사용 가능한 설정 프리셋을 관리합니다.
"""
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from hostpricing.db import get_session
from hostpricing.models import HostingPlan
from hostpricing.schemas.bulk_pricing import (
    ApplyIn,
    ApplyOut,
    BulkPricingConfigIn,
    BulkPricingConfigOut,
    BulkPricingPageOut,
    ConfigValuesOut,
    SimulateIn,
    SimulationOut,
)
from hostpricing.services.pricing.applier import BulkPricingApplier
from hostpricing.services.pricing.config_store import BulkPricingConfigStore
from hostpricing.services.pricing.simulator import PricingSimulator
from hostpricing.services.pricing.tiers import list_active_tiers, seed_default_tiers

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=BulkPricingPageOut)
def get_bulk_pricing_page(session: Session = Depends(get_session)) -> dict:
    """
    관리 화면 초기 데이터: 활성 티어, 플랜, 저장된 설정, 기본 설정과 그 시뮬레이션 결과.
    티어가 하나도 없으면 기본 티어를 생성합니다.
    """
    seed_default_tiers(session)

    store = BulkPricingConfigStore(session)
    default_config = store.get_default_config()
    simulation = PricingSimulator(session).run(**default_config)

    return {
        "pricing_tiers": list_active_tiers(session),
        "hosting_plans": session.scalars(select(HostingPlan).order_by(HostingPlan.id)).all(),
        "saved_configs": store.list_configs(),
        "default_config": default_config,
        "simulation_results": simulation.to_dict(),
    }


@router.post("/simulate", response_model=SimulationOut)
def simulate_bulk_pricing(payload: SimulateIn, session: Session = Depends(get_session)) -> dict:
    """
    입력한 가격 체계로 전체 플랜의 가격/수익을 계산합니다. DB는 변경하지 않습니다.
    """
    result = PricingSimulator(session).run(
        payload.base_price_per_gb,
        payload.cost_per_gb,
        payload.plan_multipliers,
        payload.tier_discounts,
    )
    return result.to_dict()


@router.post("/apply", response_model=ApplyOut)
def apply_bulk_pricing(payload: ApplyIn, session: Session = Depends(get_session)) -> dict:
    """
    티어 테이블을 교체하고 선택한 플랜의 판매가를 갱신합니다. 전부 적용되거나 전부 취소됩니다.
    """
    logger.info(f"[BulkPricing] Apply requested for plans {payload.plan_ids}")
    return BulkPricingApplier(session).apply(
        payload.base_price_per_gb,
        payload.cost_per_gb,
        payload.plan_multipliers,
        payload.tier_discounts,
        payload.plan_ids,
    )


@router.get("/configs", response_model=list[BulkPricingConfigOut])
def list_configs(active_only: bool = True, session: Session = Depends(get_session)):
    return BulkPricingConfigStore(session).list_configs(active_only=active_only)


@router.post("/configs", response_model=BulkPricingConfigOut, status_code=201)
def save_config(payload: BulkPricingConfigIn, session: Session = Depends(get_session)):
    return BulkPricingConfigStore(session).save_config(payload)


@router.get("/configs/by-name/{name}", response_model=ConfigValuesOut)
def load_config_by_name(name: str, session: Session = Depends(get_session)) -> dict:
    return BulkPricingConfigStore(session).get_config_by_name(name).to_simulation_input()


@router.get("/configs/{config_id}", response_model=ConfigValuesOut)
def load_config(config_id: int, session: Session = Depends(get_session)) -> dict:
    """
    시뮬레이터에 채울 설정 값(기본가, 원가, 배수, 티어)을 반환합니다.
    """
    return BulkPricingConfigStore(session).load_config(config_id)


@router.put("/configs/{config_id}", response_model=BulkPricingConfigOut)
def update_config(config_id: int, payload: BulkPricingConfigIn, session: Session = Depends(get_session)):
    return BulkPricingConfigStore(session).update_config(config_id, payload)


@router.post("/configs/{config_id}/default", response_model=BulkPricingConfigOut)
def set_default_config(config_id: int, session: Session = Depends(get_session)):
    return BulkPricingConfigStore(session).set_default(config_id)


@router.delete("/configs/{config_id}", status_code=204)
def delete_config(config_id: int, session: Session = Depends(get_session)) -> Response:
    BulkPricingConfigStore(session).delete_config(config_id)
    return Response(status_code=204)

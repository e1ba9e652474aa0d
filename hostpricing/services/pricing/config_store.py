import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostpricing.models import BulkPricingConfig
from hostpricing.schemas.bulk_pricing import BulkPricingConfigIn
from hostpricing.services.pricing.exceptions import BusinessRuleError, ConfigNotFoundError, DuplicateConfigNameError
from hostpricing.settings import settings

logger = logging.getLogger(__name__)


def builtin_default_config() -> dict:
    """DB에 기본 설정이 없을 때 사용하는 값."""
    return {
        "base_price_per_gb": settings.bulk_pricing_default_base_price_per_gb,
        "cost_per_gb": settings.bulk_pricing_default_cost_per_gb,
        "plan_multipliers": dict(settings.bulk_pricing_default_plan_multipliers),
        "tier_discounts": [dict(tier) for tier in settings.bulk_pricing_default_tier_discounts],
    }


class BulkPricingConfigStore:
    """
    이름이 있는 벌크 프라이싱 프리셋 저장소.

    - 이름은 유일
    - is_default=True인 설정은 최대 1개 (새 기본값 지정 시 같은 트랜잭션에서 기존 기본값 해제)
    - 기본 설정은 삭제 불가
    """
    def __init__(self, session: Session):
        self.session = session

    def list_configs(self, active_only: bool = True) -> list[BulkPricingConfig]:
        stmt = select(BulkPricingConfig).order_by(BulkPricingConfig.name)
        if active_only:
            stmt = stmt.where(BulkPricingConfig.is_active.is_(True))
        return list(self.session.scalars(stmt).all())

    def get_config(self, config_id: int) -> BulkPricingConfig:
        config = self.session.get(BulkPricingConfig, config_id)
        if not config:
            raise ConfigNotFoundError(config_id=config_id)
        return config

    def get_config_by_name(self, name: str) -> BulkPricingConfig:
        config = self.session.scalars(
            select(BulkPricingConfig).where(BulkPricingConfig.name == name.strip())
        ).one_or_none()
        if not config:
            raise ConfigNotFoundError(name=name)
        return config

    def load_config(self, config_id: int) -> dict:
        return self.get_config(config_id).to_simulation_input()

    def get_default_config(self) -> dict:
        config = self.session.scalars(
            select(BulkPricingConfig).where(BulkPricingConfig.is_default.is_(True)).order_by(BulkPricingConfig.id)
        ).first()
        if config:
            return config.to_simulation_input()
        return builtin_default_config()

    def save_config(self, payload: BulkPricingConfigIn) -> BulkPricingConfig:
        self._check_business_rules(payload)
        self._ensure_unique_name(payload.name)

        config = BulkPricingConfig(is_active=True)
        self._assign(config, payload)
        return self._persist(config, payload)

    def update_config(self, config_id: int, payload: BulkPricingConfigIn) -> BulkPricingConfig:
        config = self.get_config(config_id)
        self._check_business_rules(payload)
        self._ensure_unique_name(payload.name, exclude_id=config.id)

        self._assign(config, payload)
        return self._persist(config, payload)

    def set_default(self, config_id: int) -> BulkPricingConfig:
        config = self.get_config(config_id)
        self._clear_default(exclude_id=config.id)
        config.is_default = True
        self.session.flush()
        self.session.refresh(config)
        self.session.commit()
        logger.info(f"[BulkPricingConfigStore] Config {config.id} ({config.name}) set as default")
        return config

    def delete_config(self, config_id: int) -> None:
        config = self.get_config(config_id)
        if config.is_default:
            raise BusinessRuleError(
                "기본 설정은 삭제할 수 없습니다!",
                rule="default_config_not_deletable",
                config_id=config_id,
            )
        self.session.delete(config)
        self.session.commit()
        logger.info(f"[BulkPricingConfigStore] Config {config_id} deleted")

    def _check_business_rules(self, payload: BulkPricingConfigIn) -> None:
        if payload.base_price_per_gb <= payload.cost_per_gb:
            raise BusinessRuleError(
                "GB당 기본가는 GB당 원가보다 커야 합니다.",
                rule="base_price_exceeds_cost",
                field="base_price_per_gb",
            )

    def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        stmt = select(BulkPricingConfig.id).where(BulkPricingConfig.name == name)
        if exclude_id is not None:
            stmt = stmt.where(BulkPricingConfig.id != exclude_id)
        if self.session.scalars(stmt).first() is not None:
            raise DuplicateConfigNameError(name)

    def _assign(self, config: BulkPricingConfig, payload: BulkPricingConfigIn) -> None:
        tiers = sorted(payload.tier_discounts, key=lambda tier: tier.storage_gb)
        config.name = payload.name
        config.description = payload.description
        config.base_price_per_gb = payload.base_price_per_gb
        config.cost_per_gb = payload.cost_per_gb
        config.plan_multipliers = dict(payload.plan_multipliers)
        config.tier_discounts = [tier.model_dump() for tier in tiers]
        config.is_default = payload.is_default

    def _persist(self, config: BulkPricingConfig, payload: BulkPricingConfigIn) -> BulkPricingConfig:
        try:
            if payload.is_default:
                self._clear_default(exclude_id=config.id)
            self.session.add(config)
            self.session.flush()
            self.session.refresh(config)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.error(f"[BulkPricingConfigStore] Failed to save config '{payload.name}': {e}")
            raise DuplicateConfigNameError(payload.name) from e

        logger.info(f"[BulkPricingConfigStore] Saved config {config.id} ({config.name}), default={config.is_default}")
        return config

    def _clear_default(self, exclude_id: int | None = None) -> None:
        stmt = update(BulkPricingConfig).where(BulkPricingConfig.is_default.is_(True))
        if exclude_id is not None:
            stmt = stmt.where(BulkPricingConfig.id != exclude_id)
        self.session.execute(stmt.values(is_default=False))

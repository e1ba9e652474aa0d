"""
BulkPricingConfigStore 테스트 (메모리 SQLite).
"""

import pytest
from sqlalchemy import func, select

from hostpricing.models import BulkPricingConfig
from hostpricing.schemas.bulk_pricing import BulkPricingConfigIn
from hostpricing.services.pricing.config_store import BulkPricingConfigStore, builtin_default_config
from hostpricing.services.pricing.exceptions import (
    BusinessRuleError,
    ConfigNotFoundError,
    DuplicateConfigNameError,
)


def _payload(name: str = "Standard", **overrides) -> BulkPricingConfigIn:
    data = {
        "name": name,
        "description": None,
        "base_price_per_gb": 150000,
        "cost_per_gb": 112500,
        "plan_multipliers": {"basic": 1.0, "lite": 0.77, "premium": 1.3},
        "tier_discounts": [
            {"storage_gb": 1, "discount_percentage": 0.0},
            {"storage_gb": 5, "discount_percentage": 7.0},
            {"storage_gb": 10, "discount_percentage": 12.0},
        ],
    }
    data.update(overrides)
    return BulkPricingConfigIn(**data)


def _default_count(session) -> int:
    return session.scalar(
        select(func.count()).select_from(BulkPricingConfig).where(BulkPricingConfig.is_default.is_(True))
    )


class TestSaveAndLoad:

    def test_round_trip(self, test_session):
        store = BulkPricingConfigStore(test_session)
        payload = _payload()
        config = store.save_config(payload)

        loaded = store.load_config(config.id)
        assert loaded["base_price_per_gb"] == payload.base_price_per_gb
        assert loaded["cost_per_gb"] == payload.cost_per_gb
        assert loaded["plan_multipliers"] == payload.plan_multipliers
        assert loaded["tier_discounts"] == [tier.model_dump() for tier in payload.tier_discounts]

    def test_saved_config_is_active(self, test_session):
        config = BulkPricingConfigStore(test_session).save_config(_payload())
        assert config.is_active is True
        assert config.is_default is False

    def test_tiers_sorted_by_storage(self, test_session):
        payload = _payload(
            tier_discounts=[
                {"storage_gb": 10, "discount_percentage": 12.0},
                {"storage_gb": 1, "discount_percentage": 0.0},
                {"storage_gb": 5, "discount_percentage": 7.0},
            ]
        )
        config = BulkPricingConfigStore(test_session).save_config(payload)
        assert [t["storage_gb"] for t in config.tier_discounts] == [1, 5, 10]

    def test_duplicate_name_rejected(self, test_session):
        store = BulkPricingConfigStore(test_session)
        store.save_config(_payload("Standard"))

        with pytest.raises(DuplicateConfigNameError):
            store.save_config(_payload("Standard"))

        assert test_session.scalar(select(func.count()).select_from(BulkPricingConfig)) == 1

    def test_base_price_must_exceed_cost(self, test_session):
        store = BulkPricingConfigStore(test_session)

        with pytest.raises(BusinessRuleError) as excinfo:
            store.save_config(_payload(base_price_per_gb=100000, cost_per_gb=100000))

        assert excinfo.value.field == "base_price_per_gb"
        assert test_session.scalar(select(func.count()).select_from(BulkPricingConfig)) == 0

    def test_load_by_name(self, test_session):
        store = BulkPricingConfigStore(test_session)
        config = store.save_config(_payload("Promo"))
        assert store.get_config_by_name("Promo").id == config.id

    def test_missing_config(self, test_session):
        store = BulkPricingConfigStore(test_session)
        with pytest.raises(ConfigNotFoundError):
            store.load_config(999)
        with pytest.raises(ConfigNotFoundError):
            store.get_config_by_name("missing")


class TestDefaultConfig:

    def test_new_default_clears_previous(self, test_session):
        store = BulkPricingConfigStore(test_session)
        first = store.save_config(_payload("First", is_default=True))
        second = store.save_config(_payload("Second", is_default=True))

        test_session.refresh(first)
        assert first.is_default is False
        assert second.is_default is True
        assert _default_count(test_session) == 1

    def test_set_default(self, test_session):
        store = BulkPricingConfigStore(test_session)
        first = store.save_config(_payload("First", is_default=True))
        second = store.save_config(_payload("Second"))

        store.set_default(second.id)

        test_session.refresh(first)
        assert first.is_default is False
        assert second.is_default is True
        assert _default_count(test_session) == 1

    def test_default_config_values(self, test_session):
        store = BulkPricingConfigStore(test_session)
        store.save_config(_payload("Default", base_price_per_gb=200000, is_default=True))

        assert store.get_default_config()["base_price_per_gb"] == 200000

    def test_builtin_default_when_none(self, test_session):
        store = BulkPricingConfigStore(test_session)
        assert store.get_default_config() == builtin_default_config()
        assert builtin_default_config()["plan_multipliers"] == {"basic": 1.0, "lite": 0.77, "premium": 1.3}


class TestUpdateAndDelete:

    def test_update_config(self, test_session):
        store = BulkPricingConfigStore(test_session)
        config = store.save_config(_payload("Standard"))

        updated = store.update_config(config.id, _payload("Standard", base_price_per_gb=160000))
        assert updated.base_price_per_gb == 160000
        assert store.load_config(config.id)["base_price_per_gb"] == 160000

    def test_update_rejects_taken_name(self, test_session):
        store = BulkPricingConfigStore(test_session)
        store.save_config(_payload("A"))
        b = store.save_config(_payload("B"))

        with pytest.raises(DuplicateConfigNameError):
            store.update_config(b.id, _payload("A"))

    def test_delete_config(self, test_session):
        store = BulkPricingConfigStore(test_session)
        config = store.save_config(_payload())

        store.delete_config(config.id)
        assert test_session.get(BulkPricingConfig, config.id) is None

    def test_delete_default_rejected(self, test_session):
        store = BulkPricingConfigStore(test_session)
        config = store.save_config(_payload(is_default=True))

        with pytest.raises(BusinessRuleError):
            store.delete_config(config.id)

        assert test_session.get(BulkPricingConfig, config.id) is not None

    def test_list_configs_ordered_by_name(self, test_session):
        store = BulkPricingConfigStore(test_session)
        store.save_config(_payload("Zeta"))
        store.save_config(_payload("Alpha"))

        assert [c.name for c in store.list_configs()] == ["Alpha", "Zeta"]

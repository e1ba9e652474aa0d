"""
Unit tests for request validation.
"""

import pytest
from pydantic import ValidationError

from hostpricing.schemas.bulk_pricing import ApplyIn, BulkPricingConfigIn, SimulateIn


def _config_payload(**overrides) -> dict:
    payload = {
        "name": "Standard 2025",
        "description": "기본 요금표",
        "base_price_per_gb": 150000,
        "cost_per_gb": 112500,
        "plan_multipliers": {"basic": 1.0, "lite": 0.77},
        "tier_discounts": [
            {"storage_gb": 5, "discount_percentage": 7},
            {"storage_gb": 1, "discount_percentage": 0},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.unit
class TestSimulateIn:

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            SimulateIn(base_price_per_gb=-1, cost_per_gb=0, plan_multipliers={}, tier_discounts=[])
        assert "base_price_per_gb" in str(excinfo.value)

    def test_discount_out_of_range_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            SimulateIn(
                base_price_per_gb=100,
                cost_per_gb=50,
                plan_multipliers={"basic": 1.0},
                tier_discounts=[{"storage_gb": 1, "discount_percentage": 101}],
            )
        assert "discount_percentage" in str(excinfo.value)

    def test_multiplier_keys_lowercased(self):
        payload = SimulateIn(base_price_per_gb=100, cost_per_gb=50, plan_multipliers={"Basic": 1.0}, tier_discounts=[])
        assert payload.plan_multipliers == {"basic": 1.0}

    def test_case_colliding_multiplier_keys_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            SimulateIn(
                base_price_per_gb=100,
                cost_per_gb=50,
                plan_multipliers={"Basic": 1.0, "basic": 2.0},
                tier_discounts=[],
            )
        assert "중복된 플랜 유형입니다" in str(excinfo.value)

    def test_non_positive_multiplier_rejected(self):
        with pytest.raises(ValidationError):
            SimulateIn(base_price_per_gb=100, cost_per_gb=50, plan_multipliers={"basic": 0}, tier_discounts=[])


@pytest.mark.unit
class TestApplyIn:

    def test_plan_ids_required(self):
        with pytest.raises(ValidationError) as excinfo:
            ApplyIn(base_price_per_gb=100, cost_per_gb=50, plan_multipliers={"basic": 1.0}, tier_discounts=[], plan_ids=[])
        assert "plan_ids" in str(excinfo.value)

    def test_duplicate_thresholds_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            ApplyIn(
                base_price_per_gb=100,
                cost_per_gb=50,
                plan_multipliers={"basic": 1.0},
                tier_discounts=[
                    {"storage_gb": 5, "discount_percentage": 7},
                    {"storage_gb": 5, "discount_percentage": 9},
                ],
                plan_ids=[1],
            )
        assert "중복된 티어 용량입니다" in str(excinfo.value)


@pytest.mark.unit
class TestBulkPricingConfigIn:

    def test_valid_payload(self):
        payload = BulkPricingConfigIn(**_config_payload(name="  Standard  "))
        assert payload.name == "Standard"
        assert payload.is_default is False

    def test_multiplier_bounds(self):
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(plan_multipliers={"basic": 0.05}))
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(plan_multipliers={"basic": 11}))

    def test_multiplier_keys_stored_lowercase(self):
        payload = BulkPricingConfigIn(**_config_payload(plan_multipliers={" Premium ": 1.3}))
        assert payload.plan_multipliers == {"premium": 1.3}

        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(plan_multipliers={"LITE": 0.77, "lite": 0.8}))

    def test_empty_collections_rejected(self):
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(plan_multipliers={}))
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(tier_discounts=[]))

    def test_tier_storage_must_be_positive(self):
        with pytest.raises(ValidationError) as excinfo:
            BulkPricingConfigIn(**_config_payload(tier_discounts=[{"storage_gb": 0, "discount_percentage": 0}]))
        assert "티어 용량은 1GB 이상" in str(excinfo.value)

    def test_minimum_prices(self):
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(base_price_per_gb=0))
        with pytest.raises(ValidationError):
            BulkPricingConfigIn(**_config_payload(cost_per_gb=0))

"""
벌크 프라이싱 요청/응답 스키마.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TierDiscount(BaseModel):
    storage_gb: int = Field(ge=0)
    discount_percentage: float = Field(ge=0, le=100)


def _normalize_multipliers(v: dict[str, float], minimum: float = 0.0, maximum: float | None = None) -> dict[str, float]:
    normalized = {}
    for name, multiplier in v.items():
        plan_type = name.strip().lower()
        if not plan_type:
            raise ValueError("플랜 유형 이름이 비어 있습니다")
        if plan_type in normalized:
            raise ValueError(f"중복된 플랜 유형입니다: {name}")
        if multiplier <= 0 or multiplier < minimum:
            raise ValueError(f"플랜 배수가 너무 작습니다: {name}")
        if maximum is not None and multiplier > maximum:
            raise ValueError(f"플랜 배수가 너무 큽니다: {name}")
        normalized[plan_type] = multiplier
    return normalized


def _reject_duplicate_thresholds(v: list[TierDiscount]) -> list[TierDiscount]:
    seen = set()
    for tier in v:
        if tier.storage_gb in seen:
            raise ValueError(f"중복된 티어 용량입니다: {tier.storage_gb}GB")
        seen.add(tier.storage_gb)
    return v


class PricingInput(BaseModel):
    base_price_per_gb: float = Field(ge=0)
    cost_per_gb: float = Field(ge=0)
    plan_multipliers: dict[str, float]
    tier_discounts: list[TierDiscount]

    @field_validator("plan_multipliers")
    @classmethod
    def validate_multipliers(cls, v: dict[str, float]) -> dict[str, float]:
        return _normalize_multipliers(v)


class SimulateIn(PricingInput):
    pass


class ApplyIn(PricingInput):
    plan_ids: list[int] = Field(min_length=1)

    @field_validator("tier_discounts")
    @classmethod
    def validate_unique_thresholds(cls, v: list[TierDiscount]) -> list[TierDiscount]:
        return _reject_duplicate_thresholds(v)


class BulkPricingConfigIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    base_price_per_gb: float = Field(ge=1, le=999999999)
    cost_per_gb: float = Field(ge=1, le=999999999)
    plan_multipliers: dict[str, float] = Field(min_length=1)
    tier_discounts: list[TierDiscount] = Field(min_length=1)
    is_default: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("설정 이름은 필수입니다")
        return v

    @field_validator("plan_multipliers")
    @classmethod
    def validate_multipliers(cls, v: dict[str, float]) -> dict[str, float]:
        return _normalize_multipliers(v, minimum=0.1, maximum=10)

    @field_validator("tier_discounts")
    @classmethod
    def validate_tiers(cls, v: list[TierDiscount]) -> list[TierDiscount]:
        for tier in v:
            if not 1 <= tier.storage_gb <= 999999:
                raise ValueError("티어 용량은 1GB 이상 999999GB 이하여야 합니다")
        return _reject_duplicate_thresholds(v)


class BulkPricingConfigOut(BaseModel):
    id: int
    name: str
    description: str | None
    base_price_per_gb: float
    cost_per_gb: float
    plan_multipliers: dict[str, float]
    tier_discounts: list[TierDiscount]
    is_active: bool
    is_default: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ConfigValuesOut(BaseModel):
    """시뮬레이터 초기값으로 쓰이는 설정 값."""
    base_price_per_gb: float
    cost_per_gb: float
    plan_multipliers: dict[str, float]
    tier_discounts: list[TierDiscount]


class PricingTierOut(BaseModel):
    id: int
    storage_gb: int
    discount_percentage: float
    sort_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class HostingPlanOut(BaseModel):
    id: int
    plan_name: str
    storage_gb: float
    cpu_cores: int | None = None
    ram_gb: float | None = None
    selling_price: float
    base_price_per_gb: float | None = None
    plan_multiplier: float
    cost_per_gb: float | None = None
    use_bulk_pricing: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class SimulationRowOut(BaseModel):
    plan_id: int
    plan_name: str
    storage_gb: float
    cpu_cores: int | None = None
    ram_gb: float | None = None
    current_price: float
    plan_multiplier: float
    discount_percentage: float
    price_per_gb: float
    new_total_price: float
    price_difference: float
    total_cost: float
    profit: float
    profit_per_gb: float | None
    profit_margin: float
    error: str | None = None


class SkippedPlanOut(BaseModel):
    plan_id: int
    plan_name: str
    reason: str


class SimulationOut(BaseModel):
    simulation: dict[str, list[SimulationRowOut]]
    skipped_plans: list[SkippedPlanOut] = []


class ApplyOut(BaseModel):
    success: bool
    message: str
    updated_plan_ids: list[int]
    skipped_plan_ids: list[int]
    tier_count: int


class BulkPricingPageOut(BaseModel):
    pricing_tiers: list[PricingTierOut]
    hosting_plans: list[HostingPlanOut]
    saved_configs: list[BulkPricingConfigOut]
    default_config: ConfigValuesOut
    simulation_results: SimulationOut

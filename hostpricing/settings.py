from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./hostpricing.db"
    db_auto_create_tables: bool = False
    db_echo: bool = False

    log_level: str = "INFO"

    # 기본 설정(default config)이 DB에 없을 때 시뮬레이터에 주입되는 값
    bulk_pricing_default_base_price_per_gb: float = 150000
    bulk_pricing_default_cost_per_gb: float = 112500
    bulk_pricing_default_plan_multipliers: dict[str, float] = {
        "basic": 1.0,
        "lite": 0.77,
        "premium": 1.3,
    }
    bulk_pricing_default_tier_discounts: list[dict[str, float]] = [
        {"storage_gb": 1, "discount_percentage": 0.00},
        {"storage_gb": 3, "discount_percentage": 3.00},
        {"storage_gb": 5, "discount_percentage": 7.00},
        {"storage_gb": 10, "discount_percentage": 12.00},
        {"storage_gb": 20, "discount_percentage": 20.00},
        {"storage_gb": 50, "discount_percentage": 30.00},
        {"storage_gb": 100, "discount_percentage": 40.00},
        {"storage_gb": 200, "discount_percentage": 45.00},
    ]

    # skip: 배수가 없는 플랜 유형은 결과에서 제외, default: 배수 1.0 적용
    bulk_pricing_unknown_plan_policy: str = "skip"
    # threshold: storage_gb 이하 중 가장 큰 티어, exact: storage_gb 일치 티어만
    bulk_pricing_tier_lookup: str = "threshold"

    @field_validator("database_url")
    @classmethod
    def validate_db_url(cls, v: str) -> str:
        if not v.startswith(("sqlite", "postgresql")):
            raise ValueError("DB URL은 'sqlite' 또는 'postgresql'로 시작해야 합니다.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level은 DEBUG, INFO, WARNING, ERROR, CRITICAL 중 하나여야 합니다.")
        return level

    @field_validator("bulk_pricing_default_base_price_per_gb", "bulk_pricing_default_cost_per_gb")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("GB당 가격은 0 이상이어야 합니다.")
        return v

    @field_validator("bulk_pricing_default_plan_multipliers")
    @classmethod
    def validate_multipliers(cls, v: dict[str, float]) -> dict[str, float]:
        normalized = {}
        for name, multiplier in v.items():
            if multiplier <= 0:
                raise ValueError(f"플랜 배수는 0보다 커야 합니다: {name}")
            plan_type = name.strip().lower()
            if plan_type in normalized:
                raise ValueError(f"중복된 플랜 유형입니다: {name}")
            normalized[plan_type] = multiplier
        return normalized

    @field_validator("bulk_pricing_default_tier_discounts")
    @classmethod
    def validate_tier_discounts(cls, v: list[dict[str, float]]) -> list[dict[str, float]]:
        seen = set()
        for tier in v:
            if "storage_gb" not in tier or "discount_percentage" not in tier:
                raise ValueError("티어에는 storage_gb와 discount_percentage가 필요합니다.")
            if tier["storage_gb"] < 0:
                raise ValueError(f"티어 용량은 0 이상이어야 합니다: {tier['storage_gb']}")
            if not 0 <= tier["discount_percentage"] <= 100:
                raise ValueError(f"할인율은 0~100 사이여야 합니다: {tier['discount_percentage']}")
            if tier["storage_gb"] in seen:
                raise ValueError(f"중복된 티어 용량입니다: {tier['storage_gb']}GB")
            seen.add(tier["storage_gb"])
        return v

    @field_validator("bulk_pricing_unknown_plan_policy")
    @classmethod
    def validate_unknown_plan_policy(cls, v: str) -> str:
        if v not in ("skip", "default"):
            raise ValueError("unknown_plan_policy는 'skip' 또는 'default'여야 합니다.")
        return v

    @field_validator("bulk_pricing_tier_lookup")
    @classmethod
    def validate_tier_lookup(cls, v: str) -> str:
        if v not in ("threshold", "exact"):
            raise ValueError("tier_lookup은 'threshold' 또는 'exact'여야 합니다.")
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=False)


settings = Settings()

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class HostingPlan(Base):
    """
    판매 중인 호스팅 플랜. 벌크 프라이싱 적용 시 판매가 관련 컬럼이 갱신됩니다.
    """
    __tablename__ = "hosting_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_name: Mapped[str] = mapped_column(Text, nullable=False)
    storage_gb: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    cpu_cores: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ram_gb: Mapped[float | None] = mapped_column(Float, nullable=True)
    selling_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # 벌크 프라이싱 적용 결과
    base_price_per_gb: Mapped[float | None] = mapped_column(Float, nullable=True)
    plan_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    cost_per_gb: Mapped[float | None] = mapped_column(Float, nullable=True)
    use_bulk_pricing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<HostingPlan(id={self.id}, name={self.plan_name}, storage_gb={self.storage_gb})>"


class PricingTier(Base):
    """
    저장 용량 구간별 할인율. storage_gb 이상 용량의 플랜에 discount_percentage가 적용됩니다.
    """
    __tablename__ = "pricing_tiers"
    __table_args__ = (UniqueConstraint("storage_gb", name="uq_pricing_tiers_storage_gb"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage_gb: Mapped[int] = mapped_column(Integer, nullable=False)
    discount_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<PricingTier(storage_gb={self.storage_gb}, discount={self.discount_percentage})>"


class BulkPricingConfig(Base):
    """
    재사용 가능한 벌크 프라이싱 프리셋. is_default=True인 설정은 최대 1개입니다.
    """
    __tablename__ = "bulk_pricing_configs"
    __table_args__ = (UniqueConstraint("name", name="uq_bulk_pricing_configs_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price_per_gb: Mapped[float] = mapped_column(Float, nullable=False)
    cost_per_gb: Mapped[float] = mapped_column(Float, nullable=False)
    plan_multipliers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    tier_discounts: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_simulation_input(self) -> dict:
        return {
            "base_price_per_gb": self.base_price_per_gb,
            "cost_per_gb": self.cost_per_gb,
            "plan_multipliers": dict(self.plan_multipliers or {}),
            "tier_discounts": list(self.tier_discounts or []),
        }

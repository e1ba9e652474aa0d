"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from hostpricing.db import get_session
from hostpricing.main import app
from hostpricing.models import Base, HostingPlan


# 테스트용 메모리 SQLite 엔진 (TestClient 스레드와 연결 공유)
TEST_DATABASE_URL = "sqlite:///:memory:"

test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False  # 테스트 로그 줄이기
)

TestSessionLocal = sessionmaker(
    bind=test_engine,
    autoflush=False,
    expire_on_commit=False,
)


@pytest.fixture(scope="function")
def test_session() -> Session:
    """
    테스트용 데이터베이스 세션 fixture.
    각 테스트마다 테이블을 새로 만들고 끝나면 삭제.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
        session.commit()  # 테스트 성공 시 commit
    except Exception:
        session.rollback()  # 실패 시 rollback
        raise
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def db_session(test_session: Session):
    """
    test_session alias.
    """
    yield test_session


@pytest.fixture(scope="function")
def hosting_plans(test_session: Session) -> list[HostingPlan]:
    """basic/lite/premium 플랜과 배수가 없는 플랜 하나."""
    plans = [
        HostingPlan(plan_name="Basic", storage_gb=1, cpu_cores=1, ram_gb=1, selling_price=150000),
        HostingPlan(plan_name="Basic", storage_gb=5, cpu_cores=1, ram_gb=2, selling_price=700000),
        HostingPlan(plan_name="Basic", storage_gb=7, cpu_cores=2, ram_gb=2, selling_price=1000000),
        HostingPlan(plan_name="Lite", storage_gb=3, cpu_cores=1, ram_gb=1, selling_price=330000),
        HostingPlan(plan_name="Premium", storage_gb=10, cpu_cores=4, ram_gb=8, selling_price=1800000),
        HostingPlan(plan_name="Enterprise", storage_gb=100, cpu_cores=8, ram_gb=16, selling_price=9000000),
    ]
    test_session.add_all(plans)
    test_session.commit()
    return plans


@pytest.fixture(scope="function")
def client(test_session: Session):
    """get_session을 테스트 세션으로 대체한 TestClient."""
    def _override_get_session():
        yield test_session

    app.dependency_overrides[get_session] = _override_get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_session, None)


# 테스트 마커 정의
def pytest_configure(config):
    """Pytest 마커 등록."""
    config.addinivalue_line("markers", "unit: 단위 테스트 (DB 불필요)")
    config.addinivalue_line("markers", "integration: 통합 테스트 (DB 필요)")

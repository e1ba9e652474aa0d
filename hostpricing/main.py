import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from hostpricing.api.endpoints import bulk_pricing, hosting_plans
from hostpricing.db import engine, get_session
from hostpricing.logging_config import configure_logging
from hostpricing.models import Base
from hostpricing.services.pricing.exceptions import BulkPricingError
from hostpricing.settings import settings

logger = logging.getLogger(__name__)

app = FastAPI(title="hostpricing", version="0.1.0")

app.include_router(bulk_pricing.router, prefix="/api/bulk-pricing", tags=["Bulk Pricing"])
app.include_router(hosting_plans.router, prefix="/api/hosting-plans", tags=["Hosting Plans"])


@app.exception_handler(BulkPricingError)
async def handle_bulk_pricing_error(request: Request, exc: BulkPricingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error_code} {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.error_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.on_event("startup")
def on_startup() -> None:
    configure_logging()

    # 개발/테스트용. 운영에서는 Alembic 마이그레이션을 사용합니다.
    if settings.db_auto_create_tables:
        Base.metadata.create_all(bind=engine)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/db/ping")
def db_ping(session: Session = Depends(get_session)) -> dict:
    value = session.execute(text("SELECT 1")).scalar_one()
    return {"ok": value == 1}

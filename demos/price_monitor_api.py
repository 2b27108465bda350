"""
FastAPI application exposing the autonomous price-adjustment engine.

    POST /adjust   - run one adjustment cycle (cron secret header required)
    GET  /prices   - live prices, random walk applied on every read
    GET  /history  - adjustment batches from the last 24h

Run with: uvicorn demos.price_monitor_api:app --reload
"""

import os
import random

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agents.demand import DemandEstimator
from agents.price_adjustment import AdjustmentScheduler
from agents.price_monitor import PriceMonitor
from agents.store import PriceStateStore
from config.config import PriceMonitorConfig, load_price_monitor_config
from connectors.service_catalog import ServiceCatalog
from models.api import AdjustRequest, AdjustResponse, ErrorResponse
from utils.logger import get_logger
from utils.monitoring import AdjustmentMonitor
from utils.security import verify_cron_secret

logger = get_logger("price-monitor-api")

NO_STORE = {"Cache-Control": "no-store"}


def _json(content: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=NO_STORE)


def _error(status_code: int, message: str) -> JSONResponse:
    return _json(ErrorResponse(error=message).model_dump(), status_code)


def create_app(
    config: PriceMonitorConfig | None = None,
    catalog: ServiceCatalog | None = None,
    sampler: random.Random | None = None,
) -> FastAPI:
    """
    Build the app and its single set of engine components. Everything lives
    on ``app.state`` for the lifetime of the process.
    """
    config = config or load_price_monitor_config()
    catalog = catalog or ServiceCatalog.default()
    sampler = sampler or random.Random()

    store = PriceStateStore(catalog, config, sampler=sampler)
    estimator = DemandEstimator(catalog, config, sampler=sampler)
    monitor = AdjustmentMonitor()
    scheduler = AdjustmentScheduler(store, estimator, config, monitor=monitor)
    price_monitor = PriceMonitor(store, config)

    app = FastAPI(
        title="Autonomous Price Monitor",
        description="Demand-driven price adjustment for the service catalog",
        version="1.0.0",
    )
    app.state.config = config
    app.state.catalog = catalog
    app.state.store = store
    app.state.scheduler = scheduler
    app.state.price_monitor = price_monitor
    app.state.monitor = monitor

    # --- API Endpoints ---

    @app.post("/adjust")
    async def adjust_prices(request: Request):
        """Run one adjustment cycle. Called by the scheduler with {"trigger": "cron"}."""
        if not verify_cron_secret(request.headers.get(config.secret_header), config):
            logger.warning("Rejected adjustment trigger: missing or invalid cron secret")
            return _error(401, f"Unauthorised, valid {config.secret_header} required")

        try:
            payload = await request.json()
        except ValueError:
            return _error(400, "Invalid JSON body")

        try:
            AdjustRequest.model_validate(payload)
        except ValidationError:
            return _error(400, 'Invalid trigger, expected {"trigger": "cron"}')

        record = await run_in_threadpool(scheduler.run_cycle)
        response = AdjustResponse.from_record(record, scheduler.next_adjustment(record.adjusted_at))
        return _json(response.to_json())

    @app.get("/prices")
    def get_prices():
        """Current live prices for all services."""
        try:
            response = price_monitor.get_live_prices()
        except Exception as e:
            logger.error(f"GET /prices failed: {e}", exc_info=True)
            return _error(500, "Failed to fetch price data")
        return _json(response.to_json())

    @app.get("/history")
    def get_history(limit: str | None = None):
        """Adjustment batches from the last 24h, newest first. ?limit=N caps the count at N (max 50)."""
        try:
            response = price_monitor.get_history(limit=limit)
        except Exception as e:
            logger.error(f"GET /history failed: {e}", exc_info=True)
            return _error(500, "Failed to fetch adjustment history")
        return _json(response.to_json())

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("PRICE_MONITOR_HOST", "0.0.0.0")
    port = int(os.getenv("PRICE_MONITOR_PORT", "8005"))
    logger.info("Starting Price Monitor API...")
    uvicorn.run(app, host=host, port=port)

"""
Data models for the price-monitor HTTP API.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models.enums import AdjustmentTrigger, PriceStatus
from models.pricing import AdjustmentRecord, PriceChange


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# Request models
class AdjustRequest(BaseModel):
    """Body accepted by POST /adjust: exactly the cron trigger marker."""

    trigger: AdjustmentTrigger


# Response models
class PriceChangeModel(ApiModel):
    service_id: str
    display_name: str
    old_price: float
    new_price: float
    demand: float

    @classmethod
    def from_change(cls, change: PriceChange) -> "PriceChangeModel":
        return cls(
            service_id=change.service_id,
            display_name=change.display_name,
            old_price=change.old_price,
            new_price=change.new_price,
            demand=change.demand,
        )


class AdjustmentRecordModel(ApiModel):
    id: int
    adjusted_at: datetime
    changes: list[PriceChangeModel]
    services_adjusted: int

    @classmethod
    def from_record(cls, record: AdjustmentRecord) -> "AdjustmentRecordModel":
        return cls(
            id=record.id,
            adjusted_at=record.adjusted_at,
            changes=[PriceChangeModel.from_change(c) for c in record.changes],
            services_adjusted=record.services_adjusted,
        )


class AdjustResponse(ApiModel):
    ok: bool = True
    adjusted: bool
    adjusted_at: datetime
    services_adjusted: int
    next_adjustment: datetime
    changes: list[PriceChangeModel]

    @classmethod
    def from_record(cls, record: AdjustmentRecord, next_adjustment: datetime) -> "AdjustResponse":
        return cls(
            adjusted=record.services_adjusted > 0,
            adjusted_at=record.adjusted_at,
            services_adjusted=record.services_adjusted,
            next_adjustment=next_adjustment,
            changes=[PriceChangeModel.from_change(c) for c in record.changes],
        )


class ServicePriceSnapshot(ApiModel):
    """Live view of one service as returned by GET /prices"""

    service_id: str
    display_name: str
    current_price: float
    base_cost: float
    floor_price: float
    target_price: float
    margin: float  # percent over cost
    last_adjusted: datetime
    next_adjustment: datetime
    last_demand_score: float
    price_status: PriceStatus


class PricesResponse(ApiModel):
    ok: bool = True
    fetched_at: datetime
    count: int
    services: list[ServicePriceSnapshot]


class HistoryResponse(ApiModel):
    ok: bool = True
    fetched_at: datetime
    count: int
    total_services_changed: int
    history: list[AdjustmentRecordModel]


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str

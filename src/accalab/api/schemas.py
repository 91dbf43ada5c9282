"""Pydantic schemas for the AccaLab API."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from accalab.accumulators.types import Selection, TeamRecord
from accalab.config import get_settings

settings = get_settings()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SelectionIn(BaseModel):
    selection_id: str
    event_id: str
    sport: str
    home_team: str
    away_team: str
    outcome: str
    american_price: int = Field(description="Signed American price, never 0")
    source: str = "unknown"
    observed_at: datetime = Field(default_factory=_utcnow)

    def to_selection(self) -> Selection:
        return Selection(**self.model_dump())


class TeamRecordIn(BaseModel):
    team: str
    sport: str
    win_rate: float = Field(ge=0.0, le=100.0)
    recent_form: str = ""
    head_to_head: dict[str, float] = Field(default_factory=dict)
    last_updated: datetime | None = None

    def to_record(self) -> TeamRecord:
        return TeamRecord(**self.model_dump())


class BuildRequest(BaseModel):
    selections: list[SelectionIn]
    team_records: list[TeamRecordIn] = Field(default_factory=list)
    min_selections: int = Field(default=settings.min_selections, ge=2)
    max_selections: int = Field(default=settings.max_selections, ge=2, le=10)
    probability_threshold: float = Field(default=settings.probability_threshold, ge=0.0, le=1.0)
    price_low: int = settings.price_low
    price_high: int = settings.price_high


class CustomAccumulatorRequest(BaseModel):
    selection_ids: list[str]
    selections: list[SelectionIn]
    team_records: list[TeamRecordIn] = Field(default_factory=list)


class BreakdownRequest(BaseModel):
    selection_id: str
    selections: list[SelectionIn]
    team_records: list[TeamRecordIn] = Field(default_factory=list)
    probability_threshold: float = Field(default=settings.probability_threshold, ge=0.0, le=1.0)


class SelectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    selection_id: str
    event_id: str
    sport: str
    home_team: str
    away_team: str
    outcome: str
    american_price: int
    decimal_price: float
    source: str
    observed_at: datetime


class AccumulatorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    selections: list[SelectionOut]
    combined_american: int
    combined_decimal: float
    total_probability: float
    created_at: datetime


class AccumulatorListResponse(BaseModel):
    data: list[AccumulatorResponse]
    count: int


class BreakdownOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    odds_probability: float
    historical_adjustment: float
    final_probability: float
    meets_threshold: bool
    form_factor: float | None = None


class BreakdownResponse(BaseModel):
    selection: SelectionOut
    breakdown: BreakdownOut


class OddsResponse(BaseModel):
    sport: str
    data: list[SelectionOut]
    count: int

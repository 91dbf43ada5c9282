"""FastAPI backend for AccaLab.

Stateless: every request carries the selections and team records it needs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Annotated, Any

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from accalab import __version__
from accalab.accumulators.builder import AccumulatorBuilder
from accalab.accumulators.probability import ProbabilityModel
from accalab.accumulators.types import Accumulator
from accalab.api.schemas import (
    AccumulatorListResponse,
    AccumulatorResponse,
    BreakdownOut,
    BreakdownRequest,
    BreakdownResponse,
    BuildRequest,
    CustomAccumulatorRequest,
    OddsResponse,
    SelectionOut,
    TeamRecordIn,
)
from accalab.config import get_settings
from accalab.data.odds_api_client import OddsApiClient, get_rate_limiter

logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(
    title="AccaLab API",
    version=__version__,
    description="Ranks accumulator combinations by estimated joint probability.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


def get_odds_client() -> Iterator[OddsApiClient]:
    client = OddsApiClient(rate_limiter=get_rate_limiter())
    try:
        yield client
    finally:
        client.close()


OddsClientDep = Annotated[OddsApiClient, Depends(get_odds_client)]
SportQuery = Annotated[str | None, Query()]


def _builder(team_records: list[TeamRecordIn]) -> AccumulatorBuilder:
    return AccumulatorBuilder(ProbabilityModel(record.to_record() for record in team_records))


def _accumulator_to_response(acc: Accumulator) -> AccumulatorResponse:
    return AccumulatorResponse.model_validate(acc)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, Any]:
    return {"name": "accalab", "version": __version__}


@app.get("/odds", response_model=OddsResponse)
def odds(client: OddsClientDep, sport: SportQuery = None) -> OddsResponse:
    sport = sport or settings.default_sport
    try:
        selections = client.fetch_odds(sport)
    except (httpx.HTTPError, RuntimeError, ValueError) as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch odds: {exc}") from exc
    data = [SelectionOut.model_validate(selection) for selection in selections]
    return OddsResponse(sport=sport, data=data, count=len(data))


@app.get("/odds/sports")
def sports(client: OddsClientDep) -> dict[str, list[str]]:
    try:
        return {"data": client.get_available_sports()}
    except (httpx.HTTPError, RuntimeError, ValueError) as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch sports: {exc}") from exc


@app.post("/accumulators", response_model=AccumulatorListResponse)
def build_accumulators(payload: BuildRequest) -> AccumulatorListResponse:
    builder = _builder(payload.team_records)
    try:
        accumulators = builder.build(
            [selection.to_selection() for selection in payload.selections],
            min_size=payload.min_selections,
            max_size=payload.max_selections,
            probability_threshold=payload.probability_threshold,
            price_low=payload.price_low,
            price_high=payload.price_high,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    data = [_accumulator_to_response(acc) for acc in accumulators]
    return AccumulatorListResponse(data=data, count=len(data))


@app.post("/accumulators/calculate", response_model=AccumulatorResponse)
def calculate_accumulator(payload: CustomAccumulatorRequest) -> AccumulatorResponse:
    builder = _builder(payload.team_records)
    try:
        selections = [selection.to_selection() for selection in payload.selections]
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    accumulator = builder.build_custom(payload.selection_ids, selections)
    if accumulator is None:
        raise HTTPException(status_code=400, detail="Invalid accumulator combination")
    return _accumulator_to_response(accumulator)


@app.post("/stats/probability", response_model=BreakdownResponse)
def probability_breakdown(payload: BreakdownRequest) -> BreakdownResponse:
    model = ProbabilityModel(record.to_record() for record in payload.team_records)
    try:
        selections = [selection.to_selection() for selection in payload.selections]
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    selection = next((s for s in selections if s.selection_id == payload.selection_id), None)
    if selection is None:
        raise HTTPException(status_code=404, detail="Odds selection not found")
    breakdown = model.probability_breakdown(selection, payload.probability_threshold)
    return BreakdownResponse(
        selection=SelectionOut.model_validate(selection),
        breakdown=BreakdownOut.model_validate(breakdown),
    )

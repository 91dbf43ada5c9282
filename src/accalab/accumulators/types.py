"""Dataclasses for selections, team records and accumulators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from accalab.odds.conversion import american_to_decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Selection:
    """One priced outcome of one event.

    ``decimal_price`` is derived from ``american_price`` on construction and is
    not accepted as an argument.
    """

    selection_id: str
    event_id: str
    sport: str
    home_team: str
    away_team: str
    outcome: str
    american_price: int
    source: str = "unknown"
    observed_at: datetime = field(default_factory=_utcnow)
    decimal_price: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "decimal_price", american_to_decimal(self.american_price))


@dataclass(frozen=True)
class TeamRecord:
    team: str
    sport: str
    win_rate: float
    recent_form: str = ""
    head_to_head: dict[str, float] = field(default_factory=dict)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class Accumulator:
    selections: tuple[Selection, ...]
    combined_american: int
    combined_decimal: float
    total_probability: float
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    @property
    def size(self) -> int:
        return len(self.selections)


@dataclass(frozen=True)
class ProbabilityBreakdown:
    """Diagnostic view of how a selection's probability was blended."""

    odds_probability: float
    historical_adjustment: float
    final_probability: float
    meets_threshold: bool
    form_factor: float | None = None

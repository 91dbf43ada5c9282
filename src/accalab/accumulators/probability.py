"""Selection probability estimates blended from market price and team form."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from accalab.accumulators.types import ProbabilityBreakdown, Selection, TeamRecord
from accalab.config import get_settings
from accalab.odds.conversion import implied_probability

logger = logging.getLogger(__name__)
settings = get_settings()

MARKET_WEIGHT = 0.7
HISTORICAL_WEIGHT = 0.3
NO_DATA_DISCOUNT = 0.95

TeamSnapshot = Mapping[str, TeamRecord]


def form_factor(recent_form: str) -> float:
    """Map a form string such as ``"WWLWW"`` onto a 0.9-1.1 multiplier."""

    if not recent_form:
        return 1.0
    win_rate = recent_form.count("W") / len(recent_form)
    return 0.9 + win_rate * 0.2


def meets_threshold(probability: float, threshold: float = settings.probability_threshold) -> bool:
    return probability >= threshold


class ProbabilityModel:
    """Estimate success probabilities against a snapshot of team records.

    The snapshot is replaced wholesale by :meth:`load_historical_stats`; readers
    either use the current snapshot or pass one explicitly via ``records`` so a
    whole scoring pass sees a consistent view.
    """

    def __init__(self, records: Iterable[TeamRecord] | None = None) -> None:
        self._records: TeamSnapshot = MappingProxyType({})
        if records is not None:
            self.load_historical_stats(records)

    @property
    def snapshot(self) -> TeamSnapshot:
        return self._records

    def load_historical_stats(self, records: Iterable[TeamRecord]) -> None:
        fresh: dict[str, TeamRecord] = {}
        for record in records:
            fresh[record.team] = record
        self._records = MappingProxyType(fresh)
        logger.debug("Loaded historical stats for %d teams", len(fresh))

    def find_record(
        self,
        selection: Selection,
        records: TeamSnapshot | None = None,
    ) -> TeamRecord | None:
        # home team is checked before away team
        records = self._records if records is None else records
        return records.get(selection.home_team) or records.get(selection.away_team)

    def estimate_success_probability(
        self,
        selection: Selection,
        records: TeamSnapshot | None = None,
    ) -> float:
        odds_probability = implied_probability(selection.decimal_price)
        record = self.find_record(selection, records)
        if record is not None:
            return odds_probability * MARKET_WEIGHT + (record.win_rate / 100) * HISTORICAL_WEIGHT
        return odds_probability * NO_DATA_DISCOUNT

    def filter_by_probability(
        self,
        selections: Iterable[Selection],
        threshold: float = settings.probability_threshold,
        records: TeamSnapshot | None = None,
    ) -> list[Selection]:
        records = self._records if records is None else records
        return [
            selection
            for selection in selections
            if meets_threshold(self.estimate_success_probability(selection, records), threshold)
        ]

    def combined_probability(
        self,
        selections: Iterable[Selection],
        records: TeamSnapshot | None = None,
    ) -> float:
        records = self._records if records is None else records
        prob = 1.0
        for selection in selections:
            prob *= self.estimate_success_probability(selection, records)
        return prob

    def probability_breakdown(
        self,
        selection: Selection,
        threshold: float = settings.probability_threshold,
        records: TeamSnapshot | None = None,
    ) -> ProbabilityBreakdown:
        """Expose the blended components for display and audit.

        Without a team record the historical component falls back to the odds
        probability itself, not to the discounted estimate used for scoring.
        """

        records = self._records if records is None else records
        odds_probability = implied_probability(selection.decimal_price)
        record = self.find_record(selection, records)
        final_probability = self.estimate_success_probability(selection, records)
        return ProbabilityBreakdown(
            odds_probability=odds_probability,
            historical_adjustment=record.win_rate / 100 if record else odds_probability,
            final_probability=final_probability,
            meets_threshold=meets_threshold(final_probability, threshold),
            form_factor=form_factor(record.recent_form) if record else None,
        )

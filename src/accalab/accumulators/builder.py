"""Accumulator construction logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from accalab.accumulators.combinations import enumerate_size_range
from accalab.accumulators.probability import ProbabilityModel, TeamSnapshot
from accalab.accumulators.types import Accumulator, Selection
from accalab.config import get_settings
from accalab.odds.conversion import compose_prices, in_range

logger = logging.getLogger(__name__)
settings = get_settings()


def has_distinct_events(selections: Sequence[Selection]) -> bool:
    event_ids = [selection.event_id for selection in selections]
    return len(event_ids) == len(set(event_ids))


def linear_decimal(combined_american: int) -> float:
    # Applied to the already rounded American price, so it can differ from
    # the exact decimal product (and is not valid for negative prices).
    return combined_american / 100 + 1


class AccumulatorBuilder:
    """Build ranked accumulators from a pool of selections."""

    def __init__(self, model: ProbabilityModel | None = None) -> None:
        self.model = model or ProbabilityModel()

    def _accumulator(
        self,
        combination: Sequence[Selection],
        combined_american: int,
        records: TeamSnapshot,
    ) -> Accumulator:
        return Accumulator(
            selections=tuple(combination),
            combined_american=combined_american,
            combined_decimal=linear_decimal(combined_american),
            total_probability=self.model.combined_probability(combination, records),
        )

    def build(
        self,
        pool: Iterable[Selection],
        min_size: int = settings.min_selections,
        max_size: int = settings.max_selections,
        probability_threshold: float = settings.probability_threshold,
        price_low: int = settings.price_low,
        price_high: int = settings.price_high,
    ) -> list[Accumulator]:
        """Generate every qualifying accumulator, most probable first."""

        if min_size < 1 or max_size < 1:
            raise ValueError(
                f"Accumulator size bounds must be positive, got min={min_size} max={max_size}."
            )
        records = self.model.snapshot
        pool = list(pool)
        filtered = self.model.filter_by_probability(pool, probability_threshold, records)
        logger.debug(
            "%d of %d selections meet probability threshold %.2f",
            len(filtered),
            len(pool),
            probability_threshold,
        )
        if len(filtered) < min_size:
            logger.info(
                "Not enough qualifying selections for accumulators (need %d, have %d)",
                min_size,
                len(filtered),
            )
            return []

        accumulators: list[Accumulator] = []
        examined = 0
        for combination in enumerate_size_range(filtered, min_size, min(max_size, len(filtered))):
            examined += 1
            if not has_distinct_events(combination):
                continue
            combined_american = compose_prices(selection.american_price for selection in combination)
            if not in_range(combined_american, price_low, price_high):
                continue
            accumulators.append(self._accumulator(combination, combined_american, records))
        accumulators.sort(key=lambda acc: acc.total_probability, reverse=True)
        logger.info(
            "Built %d accumulators from %d combinations (sizes %d-%d)",
            len(accumulators),
            examined,
            min_size,
            max_size,
        )
        return accumulators

    def build_custom(
        self,
        selection_ids: Iterable[str],
        all_selections: Iterable[Selection],
    ) -> Accumulator | None:
        """Price and score exactly the requested legs.

        Unknown ids are skipped. The threshold and price-range filters do not
        apply; ``None`` means fewer than two legs resolved or two legs share an
        event.
        """

        by_id: dict[str, Selection] = {}
        for selection in all_selections:
            by_id.setdefault(str(selection.selection_id), selection)
        resolved = [by_id[str(sid)] for sid in selection_ids if str(sid) in by_id]

        if len(resolved) < 2:
            logger.info("Custom accumulator rejected: %d legs resolved", len(resolved))
            return None
        if not has_distinct_events(resolved):
            logger.info("Custom accumulator rejected: legs share an event")
            return None
        combined_american = compose_prices(selection.american_price for selection in resolved)
        return self._accumulator(resolved, combined_american, self.model.snapshot)

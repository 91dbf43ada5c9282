"""Accumulator builder tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from accalab.accumulators.builder import AccumulatorBuilder, has_distinct_events
from accalab.accumulators.probability import ProbabilityModel
from accalab.accumulators.types import Selection, TeamRecord

OBSERVED_AT = datetime(2024, 3, 9, 15, 0, tzinfo=timezone.utc)


def _leg(idx: int, american_price: int, event_id: str | None = None) -> Selection:
    event_id = event_id or f"e{idx}"
    return Selection(
        selection_id=str(idx),
        event_id=event_id,
        sport="Soccer",
        home_team=f"Team {event_id}",
        away_team=f"Rival {event_id}",
        outcome="home_win",
        american_price=american_price,
        source="MockBook",
        observed_at=OBSERVED_AT,
    )


def _strong_form_model() -> ProbabilityModel:
    return ProbabilityModel(
        TeamRecord(team=f"Team e{i}", sport="Soccer", win_rate=100) for i in range(1, 6)
    )


def _pool() -> list[Selection]:
    return [
        _leg(1, -300),
        _leg(2, -300),
        _leg(3, -350),
        _leg(4, -280),
        _leg(5, -320, event_id="e1"),
        _leg(6, 150),
    ]


def test_two_leg_example_prices_to_600() -> None:
    builder = AccumulatorBuilder()
    pool = [_leg(1, 150), _leg(2, 180)]
    accumulators = builder.build(pool, 2, 2, probability_threshold=0.3)
    assert len(accumulators) == 1
    acc = accumulators[0]
    assert acc.combined_american == 600
    assert acc.combined_decimal == pytest.approx(7.0)
    assert acc.total_probability == pytest.approx(0.38 * 0.95 / 2.8)


def test_default_threshold_rejects_long_prices() -> None:
    pool = [_leg(1, 150), _leg(2, 180)]
    assert AccumulatorBuilder().build(pool, 2, 2, probability_threshold=0.8) == []


def test_build_invariants() -> None:
    model = _strong_form_model()
    builder = AccumulatorBuilder(model)
    accumulators = builder.build(_pool(), 2, 4, probability_threshold=0.8)

    assert accumulators
    for acc in accumulators:
        assert has_distinct_events(acc.selections)
        assert 100 <= acc.combined_american <= 1000
        assert 2 <= acc.size <= 4
        for leg in acc.selections:
            assert model.estimate_success_probability(leg) >= 0.8
            assert leg.selection_id != "6"
    probs = [acc.total_probability for acc in accumulators]
    assert probs == sorted(probs, reverse=True)
    # two heavy favourites never reach +100
    assert all(acc.size >= 3 for acc in accumulators)


def test_combined_decimal_uses_rounded_american_price() -> None:
    builder = AccumulatorBuilder(_strong_form_model())
    accumulators = builder.build(_pool(), 3, 3)
    by_ids = {tuple(leg.selection_id for leg in acc.selections): acc for acc in accumulators}
    acc = by_ids[("1", "2", "3")]
    # exact product is 2.2857; the American price rounds to +129
    assert acc.combined_american == 129
    assert acc.combined_decimal == pytest.approx(2.29)


def test_build_is_idempotent() -> None:
    builder = AccumulatorBuilder(_strong_form_model())
    pool = _pool()
    first = builder.build(pool, 2, 4)
    assert first == builder.build(pool, 2, 4)
    assert first == builder.build(_pool(), 2, 4)


def test_price_window_filters() -> None:
    builder = AccumulatorBuilder(_strong_form_model())
    narrow = builder.build(_pool(), 3, 4, price_low=125, price_high=135)
    assert narrow
    assert all(125 <= acc.combined_american <= 135 for acc in narrow)
    assert builder.build(_pool(), 3, 4, price_low=5000, price_high=6000) == []


def test_small_pool_and_empty_range() -> None:
    builder = AccumulatorBuilder(_strong_form_model())
    assert builder.build(_pool(), 6, 8) == []
    assert builder.build(_pool(), 4, 3) == []
    assert builder.build([], 2, 4) == []


@pytest.mark.parametrize("bounds", [(0, 3), (-1, 4), (2, 0)])
def test_invalid_size_bounds_raise(bounds: tuple[int, int]) -> None:
    with pytest.raises(ValueError):
        AccumulatorBuilder().build(_pool(), *bounds)


def test_build_custom_skips_filters() -> None:
    builder = AccumulatorBuilder(_strong_form_model())
    acc = builder.build_custom(["1", "2"], _pool())
    assert acc is not None
    assert acc.combined_american == -129
    assert acc.combined_decimal == pytest.approx(-0.29)
    assert acc.total_probability == pytest.approx(0.825 * 0.825)


def test_build_custom_drops_unknown_ids() -> None:
    acc = AccumulatorBuilder().build_custom(["1", "999", "6"], _pool())
    assert acc is not None
    assert [leg.selection_id for leg in acc.selections] == ["1", "6"]


def test_build_custom_rejects_invalid_sets() -> None:
    builder = AccumulatorBuilder()
    assert builder.build_custom(["1", "5"], _pool()) is None
    assert builder.build_custom(["1", "999"], _pool()) is None
    assert builder.build_custom([], _pool()) is None

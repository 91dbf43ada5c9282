"""Turn market-data payloads into selections, plus development fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from accalab.accumulators.types import Selection, TeamRecord
from accalab.data.schemas import GameSchema

H2H_OUTCOMES = ("home_win", "away_win", "draw")


def parse_odds_response(payload: Iterable[dict[str, Any]], start_id: int = 1) -> list[Selection]:
    """Expand every site's head-to-head prices into one selection per outcome.

    Sites quoting fewer than two prices are skipped; a third price is the draw.
    """

    selections: list[Selection] = []
    next_id = start_id
    for raw_game in payload:
        game = GameSchema.model_validate(raw_game)
        home, away = game.home_and_away()
        for site in game.sites:
            prices = site.odds.h2h
            if len(prices) < 2:
                continue
            observed_at = datetime.fromtimestamp(site.last_update, tz=timezone.utc)
            for outcome, price in zip(H2H_OUTCOMES, prices):
                selections.append(
                    Selection(
                        selection_id=str(next_id),
                        event_id=game.event_id,
                        sport=game.sport_nice,
                        home_team=home,
                        away_team=away,
                        outcome=outcome,
                        american_price=price,
                        source=site.site_nice,
                        observed_at=observed_at,
                    )
                )
                next_id += 1
    return selections


def mock_selections() -> list[Selection]:
    """Small two-event slate for development without an API key."""

    rows = [
        ("mock_1", "Soccer", "Manchester United", "Liverpool", "home_win", 150),
        ("mock_1", "Soccer", "Manchester United", "Liverpool", "away_win", 180),
        ("mock_2", "Basketball", "Lakers", "Warriors", "home_win", 120),
        ("mock_2", "Basketball", "Lakers", "Warriors", "away_win", 110),
    ]
    return [
        Selection(
            selection_id=str(idx),
            event_id=event_id,
            sport=sport,
            home_team=home,
            away_team=away,
            outcome=outcome,
            american_price=price,
            source="Mock Bookmaker",
        )
        for idx, (event_id, sport, home, away, outcome, price) in enumerate(rows, start=1)
    ]


def mock_team_records() -> list[TeamRecord]:
    rows = [
        ("Manchester United", "Soccer", 65, "WWLWW"),
        ("Liverpool", "Soccer", 70, "WLWWW"),
        ("Lakers", "Basketball", 60, "WWLWL"),
        ("Warriors", "Basketball", 75, "WWWWL"),
    ]
    now = datetime.now(timezone.utc)
    return [
        TeamRecord(team=team, sport=sport, win_rate=win_rate, recent_form=form, last_updated=now)
        for team, sport, win_rate, form in rows
    ]

"""Pydantic schemas for The Odds API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SiteOddsSchema(BaseModel):
    h2h: list[int] = Field(default_factory=list)


class SiteSchema(BaseModel):
    site_key: str
    site_nice: str
    last_update: int
    odds: SiteOddsSchema = Field(default_factory=SiteOddsSchema)


class GameSchema(BaseModel):
    sport_key: str
    sport_nice: str
    teams: list[str]
    commence_time: int
    home_team: str | None = None
    sites: list[SiteSchema] = Field(default_factory=list)

    @property
    def event_id(self) -> str:
        return f"{self.sport_key}_{self.commence_time}"

    def home_and_away(self) -> tuple[str, str]:
        home = self.home_team or self.teams[0]
        away = next((team for team in self.teams if team != home), self.teams[1])
        return home, away

"""Pydantic models for API request payloads."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from poker_tracker.domain.sessions import PlayerSessionEntry


class PlayerCreate(BaseModel):
    """New player payload."""

    name: str


class SeatPayload(BaseModel):
    """A participant's buy-in and optional cash-out."""

    player_id: str
    buy_in: int
    cash_out: int | None = None

    def to_entry(self) -> PlayerSessionEntry:
        return PlayerSessionEntry(
            player_id=self.player_id, buy_in=self.buy_in, cash_out=self.cash_out
        )


class SessionCreate(BaseModel):
    """New session payload."""

    date: datetime
    location: str
    players: list[SeatPayload]


class SessionUpdate(BaseModel):
    """Partial session update; players replace the full participant set."""

    date: datetime | None = None
    location: str | None = None
    players: list[SeatPayload] | None = None


class CashOutRequest(BaseModel):
    """Cash-out payload; the amount is parsed by the session service."""

    player_id: str
    amount: Any

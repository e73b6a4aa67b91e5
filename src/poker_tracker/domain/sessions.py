"""Domain models for poker sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PlayerSessionEntry:
    """A participant's seat in a session."""

    player_id: str
    buy_in: int
    cash_out: int | None = None

    @property
    def profit(self) -> int | None:
        """Net result for the session, or None while still playing."""
        if self.cash_out is None:
            return None
        return self.cash_out - self.buy_in


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted session with its participants."""

    id: str
    date: datetime
    location: str
    players: list[PlayerSessionEntry]
    is_active: bool
    created_at: datetime

    @property
    def total_buy_in(self) -> int:
        return sum(entry.buy_in for entry in self.players)

    @property
    def total_cash_out(self) -> int:
        return sum(entry.cash_out or 0 for entry in self.players)

    def find_entry(self, player_id: str) -> PlayerSessionEntry | None:
        """Return the participant entry for a player, if seated."""
        for entry in self.players:
            if entry.player_id == player_id:
                return entry
        return None


@dataclass(frozen=True)
class PlayerSessionRow:
    """Flat player-session row as stored."""

    player_id: str
    session_id: str
    buy_in: int
    cash_out: int | None


def derive_is_active(players: list[PlayerSessionEntry]) -> bool:
    """Return True while any participant has not cashed out."""
    return any(entry.cash_out is None for entry in players)

"""Domain models for statistics and leaderboards."""

from dataclasses import dataclass
from datetime import datetime

from poker_tracker.domain.players import PlayerRecord


@dataclass(frozen=True)
class PlayerTotals:
    """Aggregated lifetime totals for a player."""

    player_id: str
    total_buy_in: int
    total_cash_out: int
    sessions_played: int


@dataclass(frozen=True)
class StatsDrift:
    """Stored player totals that disagree with the player-session rows."""

    player_id: str
    stored: PlayerTotals
    expected: PlayerTotals


@dataclass(frozen=True)
class PlayerSessionResult:
    """One session from a player's point of view."""

    session_id: str
    date: datetime
    location: str
    is_active: bool
    buy_in: int
    cash_out: int | None
    profit: int | None


@dataclass(frozen=True)
class PlayerReport:
    """Detailed statistics for a single player."""

    player: PlayerRecord
    sessions: list[PlayerSessionResult]
    total_profit: int
    win_rate: float
    average_buy_in: float
    biggest_win: int
    biggest_loss: int


@dataclass(frozen=True)
class Leaderboard:
    """Players ranked by net profit."""

    rankings: list[PlayerRecord]
    winners: list[PlayerRecord]
    losers: list[PlayerRecord]


@dataclass(frozen=True)
class OverallStats:
    """Table-wide summary across all sessions."""

    total_players: int
    total_sessions: int
    completed_sessions: int
    active_sessions: int
    total_money_played: int
    top_winner: PlayerRecord | None
    top_loser: PlayerRecord | None

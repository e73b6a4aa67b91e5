"""Read-only leaderboard and reporting views."""

from dataclasses import dataclass

from poker_tracker.domain.errors import NotFoundError
from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.sessions import PlayerSessionRow, SessionRecord
from poker_tracker.domain.stats import (
    Leaderboard,
    OverallStats,
    PlayerReport,
    PlayerSessionResult,
)
from poker_tracker.services.players import PlayerRepository
from poker_tracker.services.sessions import SessionRepository

MIN_PLAYERS_FOR_LOSER = 2


@dataclass
class LeaderboardService:
    """Builds leaderboard views from a fresh store snapshot on every call."""

    player_repository: PlayerRepository
    session_repository: SessionRepository

    def get_leaderboard(self) -> Leaderboard:
        """Return all players ranked, plus the winners and losers."""
        return build_leaderboard(self.player_repository.list_players())

    def get_player_report(self, player_id: str) -> PlayerReport:
        """Return detailed stats for one player."""
        player = self.player_repository.get_player(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} not found")
        return build_player_report(player, self.session_repository.list_sessions())

    def get_overall_stats(self) -> OverallStats:
        """Return table-wide totals and the top winner and loser."""
        return build_overall_stats(
            self.player_repository.list_players(),
            self.session_repository.list_sessions(),
            self.session_repository.list_player_sessions(),
        )


def build_leaderboard(players: list[PlayerRecord]) -> Leaderboard:
    rankings = sorted(players, key=lambda player: player.profit, reverse=True)
    winners = [player for player in rankings if player.profit > 0]
    losers = sorted(
        (player for player in players if player.profit < 0),
        key=lambda player: player.profit,
    )
    return Leaderboard(rankings=rankings, winners=winners, losers=losers)


def build_player_report(
    player: PlayerRecord, sessions: list[SessionRecord]
) -> PlayerReport:
    """Summarize a player's history.

    Win rate only counts completed seats; sessions the player is still
    playing are left out of the denominator.
    """
    results = []
    for session in sessions:
        entry = session.find_entry(player.id)
        if entry is None:
            continue
        results.append(
            PlayerSessionResult(
                session_id=session.id,
                date=session.date,
                location=session.location,
                is_active=session.is_active,
                buy_in=entry.buy_in,
                cash_out=entry.cash_out,
                profit=entry.profit,
            )
        )
    results.sort(key=lambda result: result.date, reverse=True)

    profits = [result.profit for result in results if result.profit is not None]
    win_rate = (
        sum(1 for profit in profits if profit > 0) / len(profits) if profits else 0.0
    )
    average_buy_in = (
        player.total_buy_in / player.sessions_played
        if player.sessions_played > 0
        else 0.0
    )
    return PlayerReport(
        player=player,
        sessions=results,
        total_profit=player.profit,
        win_rate=win_rate,
        average_buy_in=average_buy_in,
        biggest_win=max([0, *profits]),
        biggest_loss=min([0, *profits]),
    )


def build_overall_stats(
    players: list[PlayerRecord],
    sessions: list[SessionRecord],
    rows: list[PlayerSessionRow],
) -> OverallStats:
    ranked = sorted(players, key=lambda player: player.profit, reverse=True)
    completed = sum(1 for session in sessions if not session.is_active)
    return OverallStats(
        total_players=len(players),
        total_sessions=len(sessions),
        completed_sessions=completed,
        active_sessions=len(sessions) - completed,
        total_money_played=sum(row.buy_in for row in rows),
        top_winner=ranked[0] if ranked else None,
        top_loser=ranked[-1] if len(ranked) >= MIN_PLAYERS_FOR_LOSER else None,
    )

"""JSON serialization for domain objects."""

from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.sessions import SessionRecord
from poker_tracker.domain.stats import (
    Leaderboard,
    OverallStats,
    PlayerReport,
    PlayerTotals,
    StatsDrift,
)


def serialize_player(player: PlayerRecord) -> dict[str, object]:
    return {
        "id": player.id,
        "name": player.name,
        "total_buy_in": player.total_buy_in,
        "total_cash_out": player.total_cash_out,
        "sessions_played": player.sessions_played,
        "profit": player.profit,
        "created_at": player.created_at.isoformat(),
    }


def serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "id": session.id,
        "date": session.date.isoformat(),
        "location": session.location,
        "is_active": session.is_active,
        "created_at": session.created_at.isoformat(),
        "total_buy_in": session.total_buy_in,
        "total_cash_out": session.total_cash_out,
        "players": [
            {
                "player_id": entry.player_id,
                "buy_in": entry.buy_in,
                "cash_out": entry.cash_out,
                "profit": entry.profit,
            }
            for entry in session.players
        ],
    }


def serialize_leaderboard(leaderboard: Leaderboard) -> dict[str, object]:
    return {
        "rankings": [serialize_player(player) for player in leaderboard.rankings],
        "winners": [serialize_player(player) for player in leaderboard.winners],
        "losers": [serialize_player(player) for player in leaderboard.losers],
    }


def serialize_player_report(report: PlayerReport) -> dict[str, object]:
    return {
        "player": serialize_player(report.player),
        "sessions": [
            {
                "session_id": result.session_id,
                "date": result.date.isoformat(),
                "location": result.location,
                "is_active": result.is_active,
                "buy_in": result.buy_in,
                "cash_out": result.cash_out,
                "profit": result.profit,
            }
            for result in report.sessions
        ],
        "stats": {
            "total_profit": report.total_profit,
            "win_rate": report.win_rate,
            "average_buy_in": report.average_buy_in,
            "biggest_win": report.biggest_win,
            "biggest_loss": report.biggest_loss,
        },
    }


def serialize_overall_stats(stats: OverallStats) -> dict[str, object]:
    return {
        "total_players": stats.total_players,
        "total_sessions": stats.total_sessions,
        "completed_sessions": stats.completed_sessions,
        "active_sessions": stats.active_sessions,
        "total_money_played": stats.total_money_played,
        "top_winner": _serialize_ranked(stats.top_winner),
        "top_loser": _serialize_ranked(stats.top_loser),
    }


def serialize_totals(totals: PlayerTotals) -> dict[str, object]:
    return {
        "player_id": totals.player_id,
        "total_buy_in": totals.total_buy_in,
        "total_cash_out": totals.total_cash_out,
        "sessions_played": totals.sessions_played,
    }


def serialize_drift(drift: StatsDrift) -> dict[str, object]:
    return {
        "player_id": drift.player_id,
        "stored": serialize_totals(drift.stored),
        "expected": serialize_totals(drift.expected),
    }


def _serialize_ranked(player: PlayerRecord | None) -> dict[str, object] | None:
    if player is None:
        return None
    return {"id": player.id, "name": player.name, "profit": player.profit}

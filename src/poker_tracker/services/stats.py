"""Player totals aggregation over player-session rows."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.sessions import PlayerSessionRow
from poker_tracker.domain.stats import PlayerTotals, StatsDrift

_logger = logging.getLogger(__name__)


class PlayerSessionSource(Protocol):
    """Read access to the full set of player-session rows."""

    def list_player_sessions(self) -> list[PlayerSessionRow]:
        """Return every player-session row."""


class PlayerTotalsRepository(Protocol):
    """Persistence interface for stored player totals."""

    def list_players(self) -> list[PlayerRecord]:
        """Return all players."""

    def update_totals(self, totals: PlayerTotals) -> None:
        """Overwrite a player's stored totals."""


@dataclass
class StatsService:
    """Keeps stored player totals in sync with the player-session rows.

    Totals are rebuilt from scratch on every call instead of being patched,
    so a failed or partial write is repaired by the next recompute.
    """

    player_repository: PlayerTotalsRepository
    session_repository: PlayerSessionSource

    def recompute(self) -> list[PlayerTotals]:
        """Re-derive every player's totals and persist the ones that changed."""
        aggregated = aggregate_player_totals(
            self.session_repository.list_player_sessions()
        )
        players = self.player_repository.list_players()
        results = []
        updated = 0
        for player in players:
            totals = aggregated.get(player.id) or _empty_totals(player.id)
            if stored_totals(player) != totals:
                self.player_repository.update_totals(totals)
                updated += 1
            results.append(totals)

        orphaned = aggregated.keys() - {player.id for player in players}
        if orphaned:
            _logger.info(
                "Skipping totals for deleted players: count=%s", len(orphaned)
            )
        _logger.info(
            "Recomputed player stats: players=%s updated=%s", len(players), updated
        )
        return results

    def find_drift(self) -> list[StatsDrift]:
        """Return players whose stored totals disagree with their rows."""
        aggregated = aggregate_player_totals(
            self.session_repository.list_player_sessions()
        )
        drift = []
        for player in self.player_repository.list_players():
            stored = stored_totals(player)
            expected = aggregated.get(player.id) or _empty_totals(player.id)
            if stored != expected:
                drift.append(
                    StatsDrift(player_id=player.id, stored=stored, expected=expected)
                )
        return drift


def aggregate_player_totals(
    rows: Iterable[PlayerSessionRow],
) -> dict[str, PlayerTotals]:
    """Fold player-session rows into per-player totals.

    Open seats (no cash-out yet) count toward buy-ins and sessions played but
    contribute nothing to cash-outs.
    """
    buy_ins: dict[str, int] = defaultdict(int)
    cash_outs: dict[str, int] = defaultdict(int)
    sessions: dict[str, set[str]] = defaultdict(set)
    for row in rows:
        buy_ins[row.player_id] += row.buy_in
        if row.cash_out is not None:
            cash_outs[row.player_id] += row.cash_out
        sessions[row.player_id].add(row.session_id)

    return {
        player_id: PlayerTotals(
            player_id=player_id,
            total_buy_in=buy_ins[player_id],
            total_cash_out=cash_outs[player_id],
            sessions_played=len(session_ids),
        )
        for player_id, session_ids in sessions.items()
    }


def stored_totals(player: PlayerRecord) -> PlayerTotals:
    """Return the totals currently stored on a player record."""
    return PlayerTotals(
        player_id=player.id,
        total_buy_in=player.total_buy_in,
        total_cash_out=player.total_cash_out,
        sessions_played=player.sessions_played,
    )


def _empty_totals(player_id: str) -> PlayerTotals:
    return PlayerTotals(
        player_id=player_id, total_buy_in=0, total_cash_out=0, sessions_played=0
    )

"""Player management."""

import logging
from dataclasses import dataclass
from typing import Protocol

from poker_tracker.domain.errors import (
    NotFoundError,
    PlayerInActiveSessionError,
    ValidationError,
)
from poker_tracker.domain.players import PlayerRecord
from poker_tracker.domain.stats import PlayerTotals

_logger = logging.getLogger(__name__)


class PlayerRepository(Protocol):
    """Persistence interface for players."""

    def create_player(self, name: str) -> PlayerRecord:
        """Create a player with zero totals and return it."""

    def list_players(self) -> list[PlayerRecord]:
        """Return all players."""

    def get_player(self, player_id: str) -> PlayerRecord | None:
        """Return a player by id, if present."""

    def delete_player(self, player_id: str) -> bool:
        """Delete a player row; return False when nothing was deleted."""

    def update_totals(self, totals: PlayerTotals) -> None:
        """Overwrite a player's stored totals."""


class OpenSeatLookup(Protocol):
    """Answers whether a player still has an open seat somewhere."""

    def has_pending_cash_out(self, player_id: str) -> bool:
        """Return True when the player has a null cash-out in any session."""


@dataclass
class PlayerService:
    """Application service for player lifecycle actions."""

    repository: PlayerRepository
    seat_lookup: OpenSeatLookup

    def create_player(self, name: str) -> PlayerRecord:
        """Create a player after validating the name."""
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("Player name is required")
        player = self.repository.create_player(cleaned)
        _logger.info("Player created: id=%s", player.id)
        return player

    def list_players(self, search: str | None = None) -> list[PlayerRecord]:
        """Return players ordered by profit, best first."""
        return sorted(
            filter_players(self.repository.list_players(), search),
            key=lambda player: player.profit,
            reverse=True,
        )

    def get_player(self, player_id: str) -> PlayerRecord:
        """Return a player or raise NotFoundError."""
        player = self.repository.get_player(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    def delete_player(self, player_id: str) -> None:
        """Delete a player unless they are still seated in a game.

        Session history that references the player is left in place.
        """
        self.get_player(player_id)
        if self.seat_lookup.has_pending_cash_out(player_id):
            raise PlayerInActiveSessionError(
                "Cannot delete a player who is in an active session"
            )
        if not self.repository.delete_player(player_id):
            raise NotFoundError(f"Player {player_id} not found")
        _logger.info("Player deleted: id=%s", player_id)


def filter_players(
    players: list[PlayerRecord], search: str | None = None
) -> list[PlayerRecord]:
    """Keep players whose name contains the search text, ignoring case."""
    needle = (search or "").strip().casefold()
    if not needle:
        return list(players)
    return [player for player in players if needle in player.name.casefold()]
